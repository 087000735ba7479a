"""
User-Facing Error Responses
===========================
Friendly responses for infrastructure failures, with technical detail logged only.

Never expose store errors to end users.
"""

from typing import Optional

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from ..store import StoreUnavailableError

logger = structlog.get_logger(__name__)


USER_FRIENDLY_MESSAGE = "We are experiencing a temporary issue. Please try again in a few minutes."


def create_user_error_response(
    internal_code: str,
    log_message: Optional[str] = None,
    status_code: int = 503,
) -> JSONResponse:
    """
    Create a user-friendly JSONResponse.

    Args:
        internal_code: Internal code for debugging (logged and returned)
        log_message: Technical message for logs only
        status_code: HTTP status code (default 503 to indicate temporary issue)
    """
    if log_message:
        logger.warning("user_error", code=internal_code, detail=log_message)

    return JSONResponse(
        status_code=status_code,
        content={
            "error": "Service temporarily unavailable",
            "message": USER_FRIENDLY_MESSAGE,
            "code": internal_code,
        },
    )


async def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """Map StoreUnavailableError to a 503 without leaking backend details."""
    return create_user_error_response(
        "STORE_UNAVAILABLE",
        log_message=f"{exc.operation}: {exc.message}",
    )
