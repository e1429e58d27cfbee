# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides lookup helpers for the marketplace tables:
# - profiles / transporter_profiles
# - transport_requests
# - bids
# - pets
#
# Queries go straight through to PostgREST; there is no caching or
# transaction handling here.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   profile = SupabaseClient.fetch_profile(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_no_rows_error(error: Exception) -> bool:
    """Check whether an exception is PostgREST's "no rows" for .single()."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        profile = SupabaseClient.fetch_profile("550e8400-...")
        if profile and profile["user_type"] == "transporter":
            ...
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Ownership checks are therefore done by the services.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    @classmethod
    def _fetch_one(
        cls,
        table: str,
        row_id: str | UUID,
        columns: str = "*",
        code: str = "FETCH_FAILED",
    ) -> dict[str, Any] | None:
        """Fetch a single row by primary key, or None when it doesn't exist."""
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq("id", row_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_no_rows_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code=code,
                suggestion=f"Check that the id exists in {table}",
                details={"table": table, "id": row_id_str},
            )

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a user's marketplace profile.

        Returns None when the user has signed up but not onboarded yet.
        """
        return cls._fetch_one("profiles", user_id, code="FETCH_PROFILE_FAILED")

    @classmethod
    def fetch_transporter_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch the transporter-specific profile (approval, vehicle, rates)."""
        return cls._fetch_one(
            "transporter_profiles", user_id, code="FETCH_TRANSPORTER_FAILED"
        )

    # -------------------------------------------------------------------------
    # Transport Requests & Bids
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_transport_request(cls, request_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a single transport request (without nested bids)."""
        return cls._fetch_one(
            "transport_requests", request_id, code="FETCH_REQUEST_FAILED"
        )

    @classmethod
    def fetch_bid(cls, bid_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a single bid."""
        return cls._fetch_one("bids", bid_id, code="FETCH_BID_FAILED")

    # -------------------------------------------------------------------------
    # Pets
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_pet(cls, pet_id: str | UUID) -> dict[str, Any] | None:
        """Fetch a single pet."""
        return cls._fetch_one("pets", pet_id, code="FETCH_PET_FAILED")
