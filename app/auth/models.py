# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.config import settings


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. Whether the user is a pet owner or a
    transporter lives in their profile, not in the token.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        """Admins are configured by user id (ADMIN_USER_IDS)."""
        return str(self.id) in settings.admin_user_ids_list


class MeResponse(BaseModel):
    """
    The signed-in user plus their marketplace profile.

    `profile` is None until onboarding; `landing` is the page the client
    should send the user to.
    """
    id: UUID
    email: Optional[str] = None
    profile: Optional[dict[str, Any]] = None
    landing: str
    is_admin: bool = False
