"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    'trip_booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, conflict, not_found, invalid, error
)

booking_latency = Histogram(
    'trip_booking_latency_seconds',
    'Booking transaction latency',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

booking_cancellations = Counter(
    'trip_booking_cancellations_total',
    'Booking cancellation attempts',
    ['status']  # success, conflict, not_found, error
)

seats_released = Counter(
    'trip_seats_released_total',
    'Seats returned to trip inventory by cancellations'
)

# Auth metrics
login_attempts = Counter(
    'login_attempts_total',
    'Login attempts by result',
    ['result']  # success, invalid_credentials, suspended, deactivated
)

account_suspensions = Counter(
    'account_suspensions_total',
    'Accounts suspended after repeated failed logins'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, not_found, invalid, error"""
    booking_attempts.labels(status=status).inc()


def record_cancellation(status: str, seats: int = 0):
    booking_cancellations.labels(status=status).inc()
    if seats:
        seats_released.inc(seats)


def record_login(result: str):
    login_attempts.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
