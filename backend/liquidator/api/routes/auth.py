"""Auth Routes — registration, code resend, code verification, and login.

Invariants:
    - Every response uses the {success: true, ...} envelope; errors go through
      the global LiquidatorError handler
    - verificationCode appears in responses only when settings.expose_verification_code
    - Login returns the public user record only (never hash or code)

Design Decisions:
    - No mail channel: returning the code is a demo/test fixture, switchable off
    - No session or token is issued; the userId is the client's handle
"""

import logging

from fastapi import APIRouter, Depends

from liquidator.api.dependencies import get_verification_service
from liquidator.config import Settings, get_settings
from liquidator.schemas.auth import (
    LoginRequest, RegisterRequest, ResendRequest, VerifyRequest,
)
from liquidator.services.verification_service import VerificationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register")
async def register(
    body: RegisterRequest,
    service: VerificationService = Depends(get_verification_service),
    settings: Settings = Depends(get_settings),
):
    """Create a pending account and issue its first verification code."""
    issued = await service.register(body.email, body.password, body.full_name)
    response = {
        "success": True,
        "message": "Verification code issued",
        "userId": str(issued.user_id),
        "requiresVerification": True,
    }
    if settings.expose_verification_code:
        response["verificationCode"] = issued.code
    return response


@router.post("/resend")
async def resend_code(
    body: ResendRequest,
    service: VerificationService = Depends(get_verification_service),
    settings: Settings = Depends(get_settings),
):
    """Issue a new code; any earlier code stops working."""
    issued = await service.resend_code(body.email)
    response = {"success": True, "message": "A new verification code was issued"}
    if settings.expose_verification_code:
        response["verificationCode"] = issued.code
    return response


@router.post("/verify")
async def verify_code(
    body: VerifyRequest,
    service: VerificationService = Depends(get_verification_service),
):
    await service.verify_code(body.email, body.verification_code)
    return {"success": True, "message": "Email verified, you can now sign in"}


@router.post("/login")
async def login(
    body: LoginRequest,
    service: VerificationService = Depends(get_verification_service),
):
    user = await service.login(body.email, body.password)
    return {
        "success": True,
        "user": {
            "id": str(user.id),
            "email": user.email,
            "fullName": user.full_name,
            "emailVerified": user.email_verified,
            "createdAt": user.created_at.isoformat(),
        },
    }
