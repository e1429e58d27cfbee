# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database lookups
# - handoff.py: Redis-backed buffer for forms that cross a sign-in redirect
# - utils.py: Shared utilities (UUID normalization, error rewriting)
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_no_rows_error
from lib.handoff import HandoffBuffer
from lib.utils import blank_to_none, describe_database_error, drop_none, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "is_no_rows_error",
    # Hand-off
    "HandoffBuffer",
    # Utils
    "blank_to_none",
    "describe_database_error",
    "drop_none",
    "normalize_uuid",
]
