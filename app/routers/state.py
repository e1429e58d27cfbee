# =============================================================================
# app/routers/state.py - Client State Endpoints
# =============================================================================
# Read and update the persisted client stores:
# - /state/auth: cached profile and onboarding step
# - /state/marketplace: quote draft, wizard step, bids on screen, UI flags
#
# PATCH bodies map one-to-one onto store actions; only the fields sent are
# applied.
# =============================================================================

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.auth import get_current_user, AuthUser
from core.models.transport_request import QuoteRequestForm
from core.stores.auth_store import AuthStore
from core.stores.marketplace_store import MarketplaceStore

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class AuthStatePatch(BaseModel):
    profile_updates: dict[str, Any] | None = Field(
        default=None,
        description="Merged into the cached profile (ignored when none is cached)"
    )
    onboarding_step: int | None = Field(default=None, ge=0)
    is_loading: bool | None = Field(default=None, description="Not persisted")


class MarketplaceStatePatch(BaseModel):
    current_request: QuoteRequestForm | None = Field(
        default=None,
        description="Replaces the draft"
    )
    current_request_updates: dict[str, Any] | None = Field(
        default=None,
        description="Merged into the draft (ignored when there is none)"
    )
    request_step: int | None = Field(default=None, ge=0)
    active_bids: list[dict[str, Any]] | None = None
    add_bid: dict[str, Any] | None = None
    bid_updates: dict[str, dict[str, Any]] | None = Field(
        default=None,
        description="bid id -> fields to merge into that bid"
    )
    show_bid_modal: bool | None = None
    selected_request_id: str | None = None


# =============================================================================
# Auth store
# =============================================================================

@router.get("/auth")
async def get_auth_state(user: AuthUser = Depends(get_current_user)):
    return AuthStore.load(str(user.id)).snapshot()


@router.patch("/auth")
async def update_auth_state(
    patch: AuthStatePatch,
    user: AuthUser = Depends(get_current_user),
):
    user_id = str(user.id)
    store = AuthStore.load(user_id)

    if patch.profile_updates:
        store.update_profile(**patch.profile_updates)
    if patch.onboarding_step is not None:
        store.set_onboarding_step(patch.onboarding_step)
    if patch.is_loading is not None:
        store.set_loading(patch.is_loading)

    store.save(user_id)
    return store.snapshot()


@router.delete("/auth")
async def clear_auth_state(user: AuthUser = Depends(get_current_user)):
    """Sign-out: forget the cached profile and onboarding step."""
    user_id = str(user.id)
    store = AuthStore.load(user_id)
    store.clear_auth()
    store.save(user_id)
    return store.snapshot()


# =============================================================================
# Marketplace store
# =============================================================================

@router.get("/marketplace")
async def get_marketplace_state(user: AuthUser = Depends(get_current_user)):
    return MarketplaceStore.load(str(user.id)).snapshot()


@router.patch("/marketplace")
async def update_marketplace_state(
    patch: MarketplaceStatePatch,
    user: AuthUser = Depends(get_current_user),
):
    user_id = str(user.id)
    store = MarketplaceStore.load(user_id)
    sent = patch.model_fields_set

    if "current_request" in sent:
        store.set_current_request(patch.current_request)
    if patch.current_request_updates:
        store.update_current_request(**patch.current_request_updates)
    if patch.request_step is not None:
        store.set_request_step(patch.request_step)
    if patch.active_bids is not None:
        store.set_active_bids(patch.active_bids)
    if patch.add_bid is not None:
        store.add_bid(patch.add_bid)
    for bid_id, updates in (patch.bid_updates or {}).items():
        store.update_bid(bid_id, **updates)
    if patch.show_bid_modal is not None:
        store.set_show_bid_modal(patch.show_bid_modal)
    if "selected_request_id" in sent:
        store.set_selected_request_id(patch.selected_request_id)

    store.save(user_id)
    return store.snapshot()


@router.delete("/marketplace/current-request")
async def clear_current_request(user: AuthUser = Depends(get_current_user)):
    """Drop the quote draft and reset the wizard step."""
    user_id = str(user.id)
    store = MarketplaceStore.load(user_id)
    store.clear_current_request()
    store.save(user_id)
    return store.snapshot()
