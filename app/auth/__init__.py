# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Verifies Supabase Auth access tokens.
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/pets")
#   async def list_pets(user: AuthUser = Depends(get_current_user)):
#       return PetService.list_pets(user.id)
# =============================================================================

from app.auth.dependencies import get_admin_user, get_current_user, get_current_user_optional
from app.auth.models import AuthUser, MeResponse

__all__ = [
    "get_admin_user",
    "get_current_user",
    "get_current_user_optional",
    "AuthUser",
    "MeResponse",
]
