from forecast.app import app, service, PORT
from forecast.util.log import log_info


if __name__ == "__main__":
    service.start_background_refresh()
    log_info(f"[HTTP] Flask server starting on port {PORT}")
    app.run(port=PORT)
