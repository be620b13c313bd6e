import os

from flask import Flask, jsonify, render_template

from forecast.chain.reader import FacetChainReader
from forecast.config import (
    API_PORT,
    EXPLORER_URL,
    RPC_URL,
    REQUEST_TIMEOUT_SECONDS,
)
from forecast.report import report_sections
from forecast.service import ForecastService, Failure, Pending
from forecast.util.log import log_info

app = Flask(__name__)

PORT = int(os.environ.get('API_PORT', API_PORT))
explorer_url = os.environ.get('EXPLORER_URL', EXPLORER_URL)
rpc_url = os.environ.get('RPC_URL', RPC_URL)
request_timeout = float(os.environ.get('REQUEST_TIMEOUT', REQUEST_TIMEOUT_SECONDS))

log_info(f"[HTTP] API port={PORT} explorer={explorer_url} rpc={rpc_url}")

service = ForecastService(
    FacetChainReader(explorer_url=explorer_url, rpc_url=rpc_url, timeout=request_timeout),
    timeout=request_timeout * 2,
)


def _result_json(result):
    body = result.to_json()
    # Failures still carry the last good report so clients can keep showing it.
    if isinstance(result, Failure) and service.last_report is not None:
        body["report"] = service.last_report.to_json()
    body["refreshing"] = service.is_refreshing
    return body


@app.route("/")
def route_default():
    result = service.current()
    report = service.last_report
    return render_template(
        "index.html",
        sections=report_sections(report) if report else None,
        error=result.message if isinstance(result, Failure) else None,
        pending=isinstance(result, Pending) or service.is_refreshing,
    )


@app.route("/prediction")
def route_prediction():
    result = service.current()
    if isinstance(result, Pending):
        return jsonify(_result_json(result)), 202
    if isinstance(result, Failure) and service.last_report is None:
        return jsonify(_result_json(result)), 503
    return jsonify(_result_json(result))


@app.route("/prediction/refresh", methods=["POST"])
def route_prediction_refresh():
    result = service.refresh()
    log_info(f"[HTTP] Refresh generation={result.generation} status={result.status}")
    if isinstance(result, Failure):
        return jsonify(_result_json(result)), 502
    return jsonify(_result_json(result))


if __name__ == '__main__':
    app.run(port=PORT)
