import logging
import time
import uuid

from flask import g, request

access_logger = logging.getLogger("locallens.access")


class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return "/health" not in msg


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    for logger_name in ["werkzeug", "locallens.access"]:
        logger = logging.getLogger(logger_name)
        logger.addFilter(HealthCheckFilter())


def register_request_logging(app):
    @app.before_request
    def _start_timer():
        g.t0 = time.time()
        g.request_id = request.headers.get("X-Request-Id", str(uuid.uuid4()))

    @app.after_request
    def _log_request(resp):
        ms = int((time.time() - g.get("t0", time.time())) * 1000)
        request_id = g.get("request_id", "-")
        resp.headers["X-Request-Id"] = request_id
        access_logger.info(
            "%s %s %s %dms rid=%s",
            request.method, request.path, resp.status_code, ms, request_id,
        )
        return resp
