# =============================================================================
# core/stores/ - Client State Containers
# =============================================================================
# Plain state objects with the actions the web client uses, persisted to the
# hand-off buffer between requests.
# =============================================================================

from .auth_store import AuthStore, ClientUserType, UserProfile
from .marketplace_store import MarketplaceStore

__all__ = [
    "AuthStore",
    "ClientUserType",
    "UserProfile",
    "MarketplaceStore",
]
