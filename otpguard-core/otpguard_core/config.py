"""
Service Configuration
=====================
Environment-driven settings for OTP services.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .policy import OTPPolicy


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServiceConfig:
    """Connection, logging and policy settings for an OTP service."""
    service_name: str = "otpguard"
    redis_url: str = "redis://localhost:6379/0"
    mail_gateway_url: Optional[str] = None  # None: log messages instead of sending
    mail_api_key: Optional[str] = None
    mail_timeout: float = 10.0
    log_level: str = "INFO"
    json_logs: bool = True
    key_prefix: str = ""
    policy: OTPPolicy = field(default_factory=OTPPolicy)


def load_policy(env: Optional[Mapping[str, str]] = None) -> OTPPolicy:
    """Build an OTPPolicy from OTP_* environment variables."""
    env = os.environ if env is None else env
    defaults = OTPPolicy()
    return OTPPolicy(
        code_length=int(env.get("OTP_CODE_LENGTH", defaults.code_length)),
        code_ttl=int(env.get("OTP_CODE_TTL", defaults.code_ttl)),
        cooldown_seconds=int(env.get("OTP_COOLDOWN_SECONDS", defaults.cooldown_seconds)),
        request_window_seconds=int(
            env.get("OTP_REQUEST_WINDOW_SECONDS", defaults.request_window_seconds)
        ),
        max_requests=int(env.get("OTP_MAX_REQUESTS", defaults.max_requests)),
        spam_lock_seconds=int(env.get("OTP_SPAM_LOCK_SECONDS", defaults.spam_lock_seconds)),
        max_failed_attempts=int(
            env.get("OTP_MAX_FAILED_ATTEMPTS", defaults.max_failed_attempts)
        ),
        lock_seconds=int(env.get("OTP_LOCK_SECONDS", defaults.lock_seconds)),
    )


def load_config(env: Optional[Mapping[str, str]] = None) -> ServiceConfig:
    """
    Build a ServiceConfig from the environment.

    Args:
        env: Mapping to read instead of os.environ (tests)
    """
    env = os.environ if env is None else env
    return ServiceConfig(
        service_name=env.get("SERVICE_NAME", "otpguard"),
        redis_url=env.get("REDIS_URL", "redis://localhost:6379/0"),
        mail_gateway_url=env.get("MAIL_GATEWAY_URL") or None,
        mail_api_key=env.get("MAIL_API_KEY") or None,
        mail_timeout=float(env.get("MAIL_TIMEOUT", "10.0")),
        log_level=env.get("LOG_LEVEL", "INFO"),
        json_logs=_env_bool(env.get("LOG_JSON", "true")),
        key_prefix=env.get("OTP_KEY_PREFIX", ""),
        policy=load_policy(env),
    )
