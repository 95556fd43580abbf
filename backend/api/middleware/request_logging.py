"""
Request logging middleware - one sampled line per request.

Log format:
    api_request path=<path> method=<verb> status=<int> duration_ms=<float>
                endpoint=<contract key or -> stage=<dispatch stage or -> request_id=<id>

endpoint/stage are filled in by the contract view (flask.g) so a log line
shows which contract served the request and where dispatch stopped.
5xx responses are always logged, at warning level.

Settings (app.config, defaults in config.Config):
  - REQUEST_LOG_ENABLED      turn the middleware off entirely
  - REQUEST_LOG_SAMPLE_RATE  fraction of ordinary requests logged, clamped to [0, 1]
  - REQUEST_LOG_ENDPOINTS    path prefixes logged regardless of sampling
"""

import logging
import random
import time
from typing import Iterable, List

from flask import Flask, g, request


logger = logging.getLogger("api.request")


def _parse_sample_rate(raw) -> float:
    try:
        return min(max(float(raw), 0.0), 1.0)
    except (TypeError, ValueError):
        return 1.0


def _parse_watchlist(raw) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [p.strip() for p in raw if p.strip()]


def _sampled(path: str, watchlist: Iterable[str], sample_rate: float) -> bool:
    if any(path.startswith(prefix) for prefix in watchlist):
        return True
    if sample_rate >= 1:
        return True
    return sample_rate > 0 and random.random() < sample_rate


def setup_request_logging_middleware(app: Flask) -> None:
    """
    Set up request logging middleware on Flask app.

    Args:
        app: Flask application instance (settings read once, at setup)
    """
    if not app.config.get("REQUEST_LOG_ENABLED", True):
        return
    sample_rate = _parse_sample_rate(app.config.get("REQUEST_LOG_SAMPLE_RATE", 1.0))
    watchlist = _parse_watchlist(app.config.get("REQUEST_LOG_ENDPOINTS"))

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        failed = response.status_code >= 500
        if not failed and not _sampled(request.path, watchlist, sample_rate):
            return response

        duration_ms = None
        if hasattr(g, "request_start"):
            duration_ms = round((time.perf_counter() - g.request_start) * 1000, 2)

        logger.log(
            logging.WARNING if failed else logging.INFO,
            "api_request path=%s method=%s status=%s duration_ms=%s endpoint=%s stage=%s request_id=%s",
            request.path,
            request.method,
            response.status_code,
            duration_ms,
            getattr(g, "contract_endpoint", None) or "-",
            getattr(g, "dispatch_stage", None) or "-",
            getattr(g, "request_id", None),
        )
        return response
