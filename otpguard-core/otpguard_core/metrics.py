"""
Prometheus Metrics
==================
Counters for OTP requests, verifications and dispatch failures.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    generate_latest,
)

OTP_REGISTRY = CollectorRegistry()

OTP_REQUESTS_TOTAL = Counter(
    name="otp_requests_total",
    documentation="OTP request-code calls by outcome",
    labelnames=["outcome"],
    registry=OTP_REGISTRY,
)

OTP_VERIFICATIONS_TOTAL = Counter(
    name="otp_verifications_total",
    documentation="OTP verify-code calls by outcome",
    labelnames=["outcome"],
    registry=OTP_REGISTRY,
)

OTP_DISPATCH_FAILURES_TOTAL = Counter(
    name="otp_dispatch_failures_total",
    documentation="OTP notifications the dispatch gateway failed to deliver",
    labelnames=["template"],
    registry=OTP_REGISTRY,
)


def record_request(outcome: str) -> None:
    OTP_REQUESTS_TOTAL.labels(outcome=outcome).inc()


def record_verification(outcome: str) -> None:
    OTP_VERIFICATIONS_TOTAL.labels(outcome=outcome).inc()


def record_dispatch_failure(template: str) -> None:
    OTP_DISPATCH_FAILURES_TOTAL.labels(template=template).inc()


def get_metrics_text() -> tuple:
    """
    Render the OTP registry in Prometheus text format.

    Returns:
        Tuple of (body, content_type)
    """
    return generate_latest(OTP_REGISTRY), CONTENT_TYPE_LATEST
