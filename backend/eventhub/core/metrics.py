"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Account metrics
signup_attempts = Counter(
    'eventhub_signup_attempts_total',
    'Total signup attempts',
    ['status']  # success, invalid, duplicate
)

login_attempts = Counter(
    'eventhub_login_attempts_total',
    'Total login attempts',
    ['status']  # success, failed
)

# Event metrics
events_created = Counter(
    'eventhub_events_created_total',
    'Total events created'
)

# Registration metrics
registration_attempts = Counter(
    'eventhub_registration_attempts_total',
    'Total event registration attempts',
    ['status']  # success, full, duplicate, not_found
)

# Notification metrics
notification_outcomes = Counter(
    'eventhub_notification_outcomes_total',
    'Registration confirmation email outcomes',
    ['outcome']  # sent, skipped, failed
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_signup(status: str):
    signup_attempts.labels(status=status).inc()


def record_login(success: bool):
    login_attempts.labels(status="success" if success else "failed").inc()


def record_event_created():
    events_created.inc()


def record_registration_attempt(status: str):
    """Status: success, full, duplicate, not_found"""
    registration_attempts.labels(status=status).inc()


def record_notification(outcome: str):
    """Outcome: sent, skipped, failed"""
    notification_outcomes.labels(outcome=outcome).inc()
