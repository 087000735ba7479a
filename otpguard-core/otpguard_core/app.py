"""
Application Factory
===================
Wires store, gateway, issuer and verifier into a FastAPI application.

Usage:
    uvicorn otpguard_core.app:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Response

from . import __version__
from .api import create_health_router, create_otp_router, store_unavailable_handler
from .config import ServiceConfig, load_config
from .dispatch import DispatchGateway, HttpMailGateway, LoggingGateway
from .logging import setup_logging
from .metrics import get_metrics_text
from .otp import OTPIssuer, OTPVerifier
from .policy import OTPKeys
from .rate_limit import OTPRateLimiter
from .store import EphemeralStore, RedisStore, StoreUnavailableError

logger = structlog.get_logger(__name__)


def build_gateway(config: ServiceConfig) -> DispatchGateway:
    """HTTP mail gateway when MAIL_GATEWAY_URL is set, logging gateway otherwise."""
    if config.mail_gateway_url:
        return HttpMailGateway(
            config.mail_gateway_url,
            api_key=config.mail_api_key,
            timeout=config.mail_timeout,
        )
    logger.warning("MAIL_GATEWAY_URL not set, OTP codes will only be logged")
    return LoggingGateway()


def create_app(
    config: Optional[ServiceConfig] = None,
    store: Optional[EphemeralStore] = None,
    gateway: Optional[DispatchGateway] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Create the OTP service application.

    Args:
        config: Service settings (defaults to load_config())
        store: Ephemeral store (defaults to RedisStore at config.redis_url)
        gateway: Dispatch gateway (defaults to build_gateway(config))
        configure_logging: Call setup_logging (disable in tests)
    """
    config = config or load_config()
    if configure_logging:
        setup_logging(config.service_name, config.log_level, config.json_logs)

    store = store or RedisStore.from_url(config.redis_url)
    gateway = gateway or build_gateway(config)

    limiter = OTPRateLimiter(store, config.policy, OTPKeys(config.key_prefix))
    issuer = OTPIssuer(store, gateway, limiter=limiter)
    verifier = OTPVerifier(store, limiter=limiter)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await gateway.initialize()
        logger.info("otp_service_started", service=config.service_name, store=store.name)
        try:
            yield
        finally:
            await gateway.close()
            if isinstance(store, RedisStore):
                await store.close()

    app = FastAPI(title=config.service_name, version=__version__, lifespan=lifespan)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.include_router(create_otp_router(issuer, verifier))
    app.include_router(create_health_router(config.service_name, store, version=__version__))

    @app.get("/metrics", include_in_schema=False)
    async def metrics_endpoint() -> Response:
        body, content_type = get_metrics_text()
        return Response(content=body, media_type=content_type)

    app.state.issuer = issuer
    app.state.verifier = verifier
    app.state.store = store
    return app
