# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Sign-up, sign-in and password reset are handled by Supabase Auth
# client-side. These routes only read the token and the profile behind it.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, MeResponse
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> MeResponse:
    """
    Get the current user, their profile and where they should land.

    A user who signed up but never onboarded gets profile=None and
    landing=/onboarding.

    Raises:
        401: If not authenticated
    """
    profile = SupabaseClient.fetch_profile(user.id)
    if profile is None:
        logger.info(f"User {user.id} has no profile yet")

    return MeResponse(
        id=user.id,
        email=user.email,
        profile=profile,
        landing=ProfileService.resolve_landing(user.id),
        is_admin=user.is_admin,
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
