# =============================================================================
# app/routers/onboarding.py - Account Onboarding Endpoints
# =============================================================================
# Profile creation right after sign-up, and the "where do I go" lookup the
# client runs on every sign-in.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user, AuthUser
from core.models.profile import OnboardingResult, ProfileCreate
from core.services.profile_service import ProfileService

router = APIRouter()


@router.post("/profile", response_model=OnboardingResult, status_code=201)
async def create_profile(
    data: ProfileCreate,
    user: AuthUser = Depends(get_current_user),
    redirect: Annotated[str | None, Query(description="Page the user was heading to")] = None,
):
    """
    Create the caller's marketplace profile.

    Transporters also get an unapproved transporter profile and are sent
    to the transporter application. Pet owners continue to pet onboarding.
    """
    return ProfileService.create_profile(user.id, data, email=user.email, redirect=redirect)


@router.get("/profile")
async def get_profile(user: AuthUser = Depends(get_current_user)):
    """The caller's profile. 409 with redirect=/onboarding when there is none."""
    return ProfileService.get_profile(user.id)


@router.get("/landing")
async def get_landing(user: AuthUser = Depends(get_current_user)):
    """Page the signed-in user belongs on."""
    return {"redirect": ProfileService.resolve_landing(user.id)}
