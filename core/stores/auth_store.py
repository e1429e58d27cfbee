# =============================================================================
# core/stores/auth_store.py - Auth State Container
# =============================================================================
# Per-user client state for the signed-in experience: the cached profile,
# a loading flag and the onboarding wizard step.
#
# Only the profile and the onboarding step are persisted (under the
# "ship-paws-auth" slot of the hand-off buffer); the loading flag always
# starts out False.
# =============================================================================

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from lib.handoff import AUTH_STATE, HandoffBuffer
from core.stores.errors import invalid_field

logger = logging.getLogger(__name__)


class ClientUserType(str, Enum):
    """Role names used by the client (profiles.user_type says pet_owner)."""
    CUSTOMER = "customer"
    TRANSPORTER = "transporter"


class UserProfile(BaseModel):
    """The profile as cached on the client."""

    id: str
    user_type: ClientUserType
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    company_name: str | None = None
    vehicle_type: str | None = None
    is_onboarded: bool = False


class AuthStore:
    """
    Auth state with the same actions the client store exposes.

    Example:
        store = AuthStore.load(user_id)
        store.set_onboarding_step(2)
        store.save(user_id)
    """

    PERSISTED_FIELDS = ("user_profile", "onboarding_step")

    def __init__(
        self,
        user_profile: UserProfile | None = None,
        onboarding_step: int = 0,
    ):
        self.user_profile = user_profile
        self.is_loading = False
        self.onboarding_step = onboarding_step

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def set_user_profile(self, profile: UserProfile | None) -> None:
        self.user_profile = profile

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def set_onboarding_step(self, step: int) -> None:
        self.onboarding_step = step

    def update_profile(self, **updates: Any) -> None:
        """
        Merge updates into the cached profile. Does nothing without one.

        Raises:
            FormValidationError: A merged value fails UserProfile validation
        """
        if self.user_profile is None:
            return
        merged = {**self.user_profile.model_dump(), **updates}
        try:
            self.user_profile = UserProfile(**merged)
        except ValidationError as e:
            raise invalid_field(e)

    def clear_auth(self) -> None:
        self.user_profile = None
        self.is_loading = False
        self.onboarding_step = 0

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Full state, including fields that are never persisted."""
        return {
            "user_profile": self.user_profile.model_dump(mode="json") if self.user_profile else None,
            "is_loading": self.is_loading,
            "onboarding_step": self.onboarding_step,
        }

    def to_persisted(self) -> dict[str, Any]:
        snapshot = self.snapshot()
        return {field: snapshot[field] for field in self.PERSISTED_FIELDS}

    @classmethod
    def from_persisted(cls, data: dict[str, Any] | None) -> "AuthStore":
        if not data:
            return cls()
        profile = data.get("user_profile")
        return cls(
            user_profile=UserProfile(**profile) if profile else None,
            onboarding_step=int(data.get("onboarding_step") or 0),
        )

    @classmethod
    def load(cls, user_id: str) -> "AuthStore":
        return cls.from_persisted(HandoffBuffer.get(AUTH_STATE, user_id))

    def save(self, user_id: str) -> None:
        HandoffBuffer.put(AUTH_STATE, user_id, self.to_persisted())
        logger.debug(f"Saved auth state for {user_id}")
