"""
OTP Router
==========
HTTP endpoints for requesting and verifying one-time codes.
"""

from typing import Any, Dict, Optional, Type

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, create_model

from ..otp import (
    DispatchContext,
    IssueResult,
    OTPIssuer,
    OTPPurpose,
    OTPVerifier,
    RequestOutcome,
    VerifyOutcome,
    VerifyResult,
)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class OTPRequestBody(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254)
    name: Optional[str] = Field(None, max_length=100)
    purpose: OTPPurpose = OTPPurpose.SIGNUP


def verify_body_model(code_length: int) -> Type[BaseModel]:
    """Verify body whose otp must be exactly `code_length` digits."""
    return create_model(
        "OTPVerifyBody",
        email=(str, Field(..., pattern=EMAIL_PATTERN, max_length=254)),
        otp=(str, Field(..., pattern=rf"^\d{{{code_length}}}$")),
    )


REQUEST_STATUS = {
    RequestOutcome.ISSUED: 200,
    RequestOutcome.COOLDOWN: 429,
    RequestOutcome.SPAM_LOCKED: 429,
    RequestOutcome.ACCOUNT_LOCKED: 429,
    RequestOutcome.DELIVERY_FAILED: 502,
}

VERIFY_STATUS = {
    VerifyOutcome.SUCCESS: 200,
    VerifyOutcome.INVALID_CODE: 400,
    VerifyOutcome.EXPIRED_OR_MISSING: 400,
    VerifyOutcome.LOCKED: 429,
    VerifyOutcome.ACCOUNT_LOCKED: 429,
}


def _respond(status_code: int, body: Dict[str, Any], retry_after: Optional[int]) -> JSONResponse:
    headers = {}
    if retry_after is not None:
        body["retry_after"] = retry_after
        if status_code == 429:
            headers["Retry-After"] = str(retry_after)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def issue_response(result: IssueResult) -> JSONResponse:
    body: Dict[str, Any] = {"status": result.outcome.value, "message": result.message}
    if result.kind is not None:
        body["error"] = result.kind.value
    return _respond(REQUEST_STATUS[result.outcome], body, result.retry_after)


def verify_response(result: VerifyResult) -> JSONResponse:
    body: Dict[str, Any] = {"status": result.outcome.value, "message": result.message}
    if result.kind is not None:
        body["error"] = result.kind.value
    if result.attempts_left is not None:
        body["attempts_left"] = result.attempts_left
    return _respond(VERIFY_STATUS[result.outcome], body, result.retry_after)


def create_otp_router(issuer: OTPIssuer, verifier: OTPVerifier) -> APIRouter:
    """
    Create /otp/request and /otp/verify endpoints.

    Malformed bodies are rejected with 422 before reaching the issuer or
    verifier.
    """
    router = APIRouter(prefix="/otp", tags=["OTP"])
    OTPVerifyBody = verify_body_model(verifier.policy.code_length)

    @router.post("/request")
    async def request_code(body: OTPRequestBody) -> JSONResponse:
        context = DispatchContext.for_purpose(body.purpose, name=body.name)
        result = await issuer.generate_and_store(body.email, context)
        return issue_response(result)

    @router.post("/verify")
    async def verify_code(body: OTPVerifyBody) -> JSONResponse:
        result = await verifier.verify(body.email, body.otp)
        return verify_response(result)

    return router
