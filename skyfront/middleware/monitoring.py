"""Monitoring and metrics middleware using Prometheus."""
import logging
import time

from flask import g, request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

logger = logging.getLogger(__name__)

# Prometheus metrics
page_requests_total = Counter(
    'skyfront_page_requests_total',
    'Total number of page requests served',
    ['method', 'endpoint', 'status']
)

page_request_duration = Histogram(
    'skyfront_page_request_duration_seconds',
    'Time spent rendering pages',
    ['endpoint']
)

backend_api_calls_total = Counter(
    'skyfront_backend_api_calls_total',
    'Total number of calls to the airline backend API',
    ['method', 'outcome']
)

backend_api_call_duration = Histogram(
    'skyfront_backend_api_call_duration_seconds',
    'Time spent waiting on the airline backend API',
    ['method'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    if not app.config.get("ENABLE_METRICS"):
        return

    @app.route('/metrics')
    def metrics():
        """Prometheus metrics endpoint."""
        return generate_latest(), 200, {'Content-Type': CONTENT_TYPE_LATEST}

    @app.before_request
    def _start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def _record_request(response):
        started = g.pop("request_started_at", None)
        endpoint = request.endpoint or "unknown"
        if endpoint != "metrics":
            page_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status=response.status_code
            ).inc()
            if started is not None:
                page_request_duration.labels(endpoint=endpoint).observe(time.perf_counter() - started)
        return response

    logger.info("Prometheus metrics enabled at /metrics")


def track_api_call(method: str, outcome: str, elapsed: float) -> None:
    """
    Track one backend API call.

    Args:
        method: HTTP method
        outcome: "success", "http_error" or "network_error"
        elapsed: Seconds spent on the call
    """
    try:
        backend_api_calls_total.labels(method=method, outcome=outcome).inc()
        backend_api_call_duration.labels(method=method).observe(elapsed)
    except Exception as e:
        # Don't fail if metrics tracking fails
        logger.debug(f"Failed to track backend call metrics: {e}")
