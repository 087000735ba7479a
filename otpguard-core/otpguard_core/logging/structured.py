"""
Structured Logging
==================
structlog configuration for OTP services.

Usage:
    from otpguard_core.logging import setup_logging, mask_identifier

    setup_logging(service_name="otpguard-auth")
    logger = structlog.get_logger(__name__)
    logger.info("otp_issued", identifier=mask_identifier(email))
"""

import logging
import sys
from contextvars import ContextVar

import structlog

service_name_var: ContextVar[str] = ContextVar("service_name", default="unknown")


def _add_service_name(logger, method_name, event_dict):
    event_dict.setdefault("service", service_name_var.get())
    return event_dict


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        service_name: Name of the service (e.g., "otpguard-auth")
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines (production) instead of console output
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _add_service_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info("logging_configured", service=service_name)


def mask_identifier(identifier: str) -> str:
    """
    Mask an email or phone number for logs.

    "alice@example.com" -> "a***@example.com", "+14155551234" -> "+14*****1234"
    """
    identifier = identifier.strip()
    if "@" in identifier:
        local, _, domain = identifier.partition("@")
        return f"{local[:1]}***@{domain}"
    if len(identifier) <= 4:
        return "*" * len(identifier)
    visible = identifier[:3]
    tail = identifier[-4:]
    hidden = max(len(identifier) - 7, 1)
    return f"{visible}{'*' * hidden}{tail}"
