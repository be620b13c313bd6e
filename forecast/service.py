import threading
from typing import NamedTuple, Optional

from forecast.adjustment.forecaster import DEFAULT_SETTINGS, ForecastReport, ForecastSettings, forecast
from forecast.chain.reader import ChainReader, read_snapshot
from forecast.config import REQUEST_TIMEOUT_SECONDS, UPSTREAM_ERROR_MESSAGE
from forecast.errors import ForecastError, UpstreamUnavailable
from forecast.util.log import log_error, log_info, log_success, log_warn


class Success(NamedTuple):
    generation: int
    report: ForecastReport
    status = "success"

    def to_json(self):
        return {"status": self.status, "generation": self.generation, "report": self.report.to_json()}


class Failure(NamedTuple):
    generation: int
    error_kind: str
    message: str
    status = "failure"

    def to_json(self):
        return {
            "status": self.status,
            "generation": self.generation,
            "error_kind": self.error_kind,
            "message": self.message,
        }


class Pending(NamedTuple):
    generation: int
    status = "pending"

    def to_json(self):
        return {"status": self.status, "generation": self.generation}


class ForecastService:
    """
    Runs forecasts against a chain reader and keeps the last good report.

    Every refresh takes a new generation number; a result is stored only if no
    newer refresh has started since, so a slow stale response never overwrites
    a fresher one. Failures leave the last good report untouched.
    """

    def __init__(self, reader: ChainReader, settings: ForecastSettings = DEFAULT_SETTINGS, timeout: float = REQUEST_TIMEOUT_SECONDS * 2):
        self.reader = reader
        self.settings = settings
        self.timeout = timeout
        self.generation = 0
        self.in_flight = 0
        self.last_result = None
        self.last_report: Optional[ForecastReport] = None
        self.lock = threading.Lock()
        self.refresh_thread = None

    @property
    def is_refreshing(self) -> bool:
        with self.lock:
            return self.in_flight > 0

    def refresh(self):
        with self.lock:
            self.generation += 1
            generation = self.generation
            self.in_flight += 1

        try:
            result = self._calculate(generation)
        finally:
            with self.lock:
                self.in_flight -= 1

        with self.lock:
            if generation != self.generation:
                log_warn(f"[FORECAST] Discarding stale result generation={generation} latest={self.generation}")
                return result
            self.last_result = result
            if isinstance(result, Success):
                self.last_report = result.report
        return result

    def _calculate(self, generation: int):
        try:
            snapshot = read_snapshot(self.reader, timeout=self.timeout)
            report = forecast(snapshot, self.settings)
        except UpstreamUnavailable as exc:
            log_error(f"[FORECAST] Chain data unavailable: {exc}")
            return Failure(generation, exc.kind, UPSTREAM_ERROR_MESSAGE)
        except ForecastError as exc:
            log_error(f"[FORECAST] Calculation aborted ({exc.kind}): {exc}")
            return Failure(generation, exc.kind, str(exc))
        except Exception as exc:
            log_error(f"[FORECAST] Unexpected error in calculation: {exc!r}")
            return Failure(generation, "unexpected", UPSTREAM_ERROR_MESSAGE)

        period = report.adjustment_period
        log_success(
            f"[FORECAST] period={period.period_index} height={period.block_height} "
            f"forecast={report.prediction.forecasted_issuance} new_rate={report.prediction.new_mint_rate_gwei}gwei"
        )
        return Success(generation, report)

    def current(self):
        """
        Latest stored result, or Pending while the first calculation has not finished.
        """
        with self.lock:
            if self.last_result is None:
                return Pending(self.generation)
            return self.last_result

    def start_background_refresh(self):
        if self.refresh_thread and self.refresh_thread.is_alive():
            return
        self.refresh_thread = threading.Thread(target=self.refresh, daemon=True)
        self.refresh_thread.start()
        log_info("[FORECAST] Background refresh started")
