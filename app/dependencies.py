# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from datetime import date
from typing import Annotated

from fastapi import Depends, Query

from lib.handoff import HandoffBuffer
from lib.supabase_client import SupabaseClient
from core.models.transport_request import BudgetBand, DateBand, RequestFilters


def get_supabase_client() -> type[SupabaseClient]:
    """Returns the singleton client wrapper."""
    return SupabaseClient


def get_handoff_buffer() -> type[HandoffBuffer]:
    return HandoffBuffer


def get_today() -> date:
    """Today's date, for the pickup date filter (overridable in tests)."""
    return date.today()


def get_request_filters(
    location: Annotated[str | None, Query(description="Substring of origin or destination")] = None,
    pet_type: Annotated[str | None, Query(description="Exact pet type; 'all' or empty for every type")] = None,
    budget: Annotated[BudgetBand, Query(description="Budget band")] = BudgetBand.ALL,
    pickup: Annotated[DateBand, Query(description="Pickup date band")] = DateBand.ALL,
    exclude_bid: Annotated[bool, Query(description="Hide requests already bid on")] = False,
) -> RequestFilters:
    """Transporter dashboard filters from query parameters."""
    return RequestFilters(
        location=location,
        pet_type=None if pet_type in (None, "", "all") else pet_type,
        budget=budget,
        pickup=pickup,
        exclude_bid=exclude_bid,
    )


# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
HandoffDep = Annotated[type[HandoffBuffer], Depends(get_handoff_buffer)]
TodayDep = Annotated[date, Depends(get_today)]
FiltersDep = Annotated[RequestFilters, Depends(get_request_filters)]
