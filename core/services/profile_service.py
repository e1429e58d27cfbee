# =============================================================================
# core/services/profile_service.py - Onboarding & Profile Logic
# =============================================================================
# Creates marketplace profiles after sign-up and decides where a signed-in
# user belongs (onboarding, owner dashboard, transporter dashboard).
# =============================================================================

import logging
from typing import Any
from urllib.parse import quote
from uuid import UUID

from lib.handoff import PENDING_QUOTE_REQUEST, HandoffBuffer
from lib.supabase_client import SupabaseClient
from lib.utils import blank_to_none, describe_database_error, normalize_uuid
from core.models.profile import ProfileCreate, UserType
from core.stores.auth_store import AuthStore, ClientUserType, UserProfile
from app.exceptions import (
    DatabaseOperationError,
    FormValidationError,
    OnboardingRequiredError,
    WrongUserTypeError,
)

logger = logging.getLogger(__name__)

PROFILE_ERROR_REWRITES = [
    (("duplicate key",), "An account with this information already exists. Please try signing in instead."),
    (("permission", "policy"), "Authentication error. Please sign out and try again."),
]


def _status_for_database_error(error: Exception) -> int:
    text = str(error)
    if "duplicate key" in text:
        return 409
    if "permission" in text or "policy" in text:
        return 403
    return 500


class ProfileService:
    """
    Service for profile creation and role checks.

    All writes go straight to Supabase; there is no transaction around the
    profile + transporter_profile pair.
    """

    @staticmethod
    def create_profile(
        user_id: UUID | str,
        data: ProfileCreate,
        email: str | None = None,
        redirect: str | None = None,
    ) -> dict[str, Any]:
        """
        Create the profile row (and a transporter row for transporters).

        Args:
            user_id: Authenticated user ID (becomes profiles.id)
            data: Onboarding form
            email: User email from the token, cached in the auth store
            redirect: Page the user was heading to before onboarding

        Returns:
            Dict with profile, transporter_profile (or None) and redirect

        Raises:
            FormValidationError: If first/last name are blank
            DatabaseOperationError: If either insert fails
        """
        if not data.first_name or not data.last_name:
            raise FormValidationError("Please fill in all required fields")

        user_id_str = normalize_uuid(user_id)
        is_transporter = data.user_type == UserType.TRANSPORTER
        client = SupabaseClient.get_client()

        row = {
            "id": user_id_str,
            "user_type": data.user_type.value,
            "first_name": data.first_name,
            "last_name": data.last_name,
            "phone": blank_to_none(data.phone),
            "company_name": blank_to_none(data.company_name) if is_transporter else None,
            "vehicle_type": blank_to_none(data.vehicle_type) if is_transporter else None,
        }

        logger.info(f"Creating profile for user: {user_id_str} with type: {data.user_type.value}")

        try:
            response = client.table("profiles").insert(row).execute()
            profile = response.data[0] if response.data else row
        except Exception as e:
            logger.error(f"Profile creation failed for {user_id_str}: {e}")
            raise DatabaseOperationError(
                message=describe_database_error(e, PROFILE_ERROR_REWRITES),
                operation="create_profile",
                error=str(e),
                status_code=_status_for_database_error(e),
            )

        transporter_profile = None
        if is_transporter:
            try:
                response = (
                    client.table("transporter_profiles")
                    .insert({"id": user_id_str, "is_approved": False})
                    .execute()
                )
                transporter_profile = response.data[0] if response.data else None
            except Exception as e:
                # The profiles row above stays in place
                logger.error(f"Transporter profile creation failed for {user_id_str}: {e}")
                raise DatabaseOperationError(
                    message=describe_database_error(e, PROFILE_ERROR_REWRITES),
                    operation="create_transporter_profile",
                    error=str(e),
                    status_code=_status_for_database_error(e),
                )

        ProfileService._cache_profile(user_id_str, profile, email)

        return {
            "profile": profile,
            "transporter_profile": transporter_profile,
            "redirect": ProfileService.next_after_onboarding(user_id_str, data.user_type, redirect),
        }

    @staticmethod
    def next_after_onboarding(
        user_id: str,
        user_type: UserType,
        redirect: str | None = None,
    ) -> str:
        """
        Where to send a freshly onboarded user.

        Transporters continue to their application. Pet owners go to pet
        onboarding, carrying along either their explicit redirect or the
        quote form when one is waiting in the hand-off buffer.
        """
        if user_type == UserType.TRANSPORTER:
            return "/transporters/onboard"

        if redirect:
            return f"/onboarding/pets?redirect={quote(redirect, safe='')}"

        if HandoffBuffer.exists(PENDING_QUOTE_REQUEST, user_id):
            return f"/onboarding/pets?redirect={quote('/request-quote', safe='')}"

        return "/onboarding/pets"

    @staticmethod
    def _cache_profile(user_id: str, profile: dict[str, Any], email: str | None) -> None:
        """Mirror the new profile into the persisted auth store."""
        store = AuthStore.load(user_id)
        is_owner = profile.get("user_type") == UserType.PET_OWNER.value
        store.set_user_profile(UserProfile(
            id=user_id,
            user_type=ClientUserType.CUSTOMER if is_owner else ClientUserType.TRANSPORTER,
            first_name=profile.get("first_name", ""),
            last_name=profile.get("last_name", ""),
            email=email or "",
            phone=profile.get("phone"),
            company_name=profile.get("company_name"),
            vehicle_type=profile.get("vehicle_type"),
            is_onboarded=True,
        ))
        store.save(user_id)

    @staticmethod
    def get_profile(user_id: UUID | str, message: str | None = None) -> dict[str, Any]:
        """
        Get a user's profile.

        Raises:
            OnboardingRequiredError: If the user has not onboarded yet
        """
        user_id_str = normalize_uuid(user_id)
        profile = SupabaseClient.fetch_profile(user_id_str)
        if not profile:
            raise OnboardingRequiredError(user_id_str, message=message)
        return profile

    @staticmethod
    def require_user_type(
        user_id: UUID | str,
        user_type: UserType,
        message: str,
        redirect: str,
        missing_message: str | None = None,
    ) -> dict[str, Any]:
        """
        Get a profile and check it belongs to the expected side of the marketplace.

        Raises:
            OnboardingRequiredError: If there is no profile
            WrongUserTypeError: If the profile has the other user type
        """
        profile = ProfileService.get_profile(user_id, message=missing_message)
        if profile.get("user_type") != user_type.value:
            raise WrongUserTypeError(message, redirect=redirect)
        return profile

    @staticmethod
    def resolve_landing(user_id: UUID | str) -> str:
        """
        Decide which page a signed-in user should land on.

        - No profile yet -> /onboarding
        - Transporter awaiting approval -> /transporters/onboard
        - Approved transporter -> /transporter-dashboard
        - Pet owner -> /dashboard
        """
        user_id_str = normalize_uuid(user_id)
        profile = SupabaseClient.fetch_profile(user_id_str)

        if not profile:
            logger.info(f"No profile found for {user_id_str}, redirecting to onboarding")
            return "/onboarding"

        if profile.get("user_type") == UserType.TRANSPORTER.value:
            transporter = SupabaseClient.fetch_transporter_profile(user_id_str)
            if not transporter or not transporter.get("is_approved"):
                return "/transporters/onboard"
            return "/transporter-dashboard"

        return "/dashboard"
