"""
Prometheus metrics blueprint for observability.

Exposes /metrics endpoint with HTTP request metrics and order workflow
counters. This endpoint should be restricted to internal network or
monitoring systems only.
"""
from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY
import logging
import time
import os

metrics_bp = Blueprint('metrics', __name__)
logger = logging.getLogger(__name__)

# Check if running in multi-process mode (Gunicorn)
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

# Use multiprocess registry in production with Gunicorn
if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

# HTTP Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'http_status'],
    registry=registry if not MULTIPROCESS_MODE else None
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    registry=registry if not MULTIPROCESS_MODE else None,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0)
)

http_requests_in_flight = Gauge(
    'http_requests_in_flight',
    'Number of HTTP requests currently being processed',
    registry=registry if not MULTIPROCESS_MODE else None
)


# Order workflow metrics
orders_submitted_total = Counter(
    'panel_orders_submitted_total',
    'Order submissions from the order wizard',
    ['outcome'],
    registry=registry if not MULTIPROCESS_MODE else None
)

catalog_loads_total = Counter(
    'panel_catalog_loads_total',
    'Order wizard catalog loads',
    ['outcome'],
    registry=registry if not MULTIPROCESS_MODE else None
)

order_deletions_total = Counter(
    'panel_order_deletions_total',
    'Order deletions requested from the order list',
    ['outcome'],
    registry=registry if not MULTIPROCESS_MODE else None
)


def record_outcome(counter: Counter, outcome: str) -> None:
    """Increment a workflow counter without ever breaking the request."""
    try:
        counter.labels(outcome=outcome).inc()
    except Exception as e:
        logger.warning(f"Failed to record metric {counter}: {e}")


def setup_metrics_instrumentation(app):
    """
    Register before_request/after_request hooks that time every request.

    Called from the app factory.
    """

    @app.before_request
    def before_request_metrics():
        g._metrics_start = time.time()
        http_requests_in_flight.inc()

    @app.after_request
    def after_request_metrics(response):
        try:
            started = g.pop('_metrics_start', None)
            if started is not None:
                endpoint = request.endpoint or 'unknown'
                http_request_duration_seconds.labels(
                    method=request.method,
                    endpoint=endpoint
                ).observe(time.time() - started)
                http_requests_total.labels(
                    method=request.method,
                    endpoint=endpoint,
                    http_status=response.status_code
                ).inc()
                http_requests_in_flight.dec()
        except Exception as e:
            # Don't break request flow if metrics fail
            app.logger.warning(f"Failed to record metrics: {e}")

        return response


@metrics_bp.route('/metrics')
def metrics():
    """
    Prometheus metrics endpoint (unauthenticated).

    Restrict it with network rules; only the Prometheus server should reach it.
    """
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
