"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Authentication metrics
auth_attempts = Counter(
    'auth_attempts_total',
    'Authentication attempts on login and protected requests',
    ['result']  # login_success, login_failed, token_rejected, user_unresolved, lookup_failed
)

# Authorization metrics
authorization_denials = Counter(
    'authorization_denials_total',
    'Requests rejected by the ownership check',
    ['action']
)

# Account deletion metrics
account_deletions = Counter(
    'account_deletions_total',
    'Cascading account deletions',
    ['result']  # deleted, not_found, rolled_back
)

# Database metrics
db_operation_timeouts = Counter(
    'db_operation_timeouts_total',
    'Database operations aborted by the per-operation timeout'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_auth_attempt(result: str):
    auth_attempts.labels(result=result).inc()


def record_authorization_denied(action: str):
    authorization_denials.labels(action=action).inc()


def record_account_deletion(result: str):
    """Record account deletion outcome. Result: deleted, not_found, rolled_back"""
    account_deletions.labels(result=result).inc()


def record_db_timeout():
    db_operation_timeouts.inc()
