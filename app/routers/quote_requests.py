# =============================================================================
# app/routers/quote_requests.py - Quote Request Endpoints
# =============================================================================
# Pet owners post transport requests, either in one form or through the
# four-step wizard, and manage the requests they have posted.
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from app.auth import get_current_user, AuthUser
from app.exceptions import FormValidationError
from core.models.transport_request import QuoteRequestForm
from core.services.handoff_service import HandoffService
from core.services.request_service import RequestService, WIZARD_TOTAL_STEPS
from core.stores.marketplace_store import MarketplaceStore

router = APIRouter()


def _wizard_response(store: MarketplaceStore) -> dict[str, Any]:
    form = store.current_request
    return {
        "step": store.request_step,
        "total_steps": WIZARD_TOTAL_STEPS,
        "step_valid": RequestService.validate_step(store.request_step, form),
        "form": form.model_dump(mode="json") if form else None,
    }


# =============================================================================
# Single-form submission
# =============================================================================

@router.post("", status_code=201)
async def create_quote_request(
    form: QuoteRequestForm,
    user: AuthUser = Depends(get_current_user),
):
    """
    Submit a quote request.

    Requires origin, destination, pet type, pet size and pickup date.
    Returns the created request and the dashboard redirect.
    """
    return RequestService.create_quote_request(user.id, form)


@router.get("/mine")
async def list_my_requests(user: AuthUser = Depends(get_current_user)):
    """The caller's requests with bids and bidder names, newest first."""
    requests = RequestService.list_owner_requests(user.id)
    return {"requests": requests, "count": len(requests)}


@router.post("/{request_id}/cancel")
async def cancel_request(
    request_id: Annotated[UUID, Path(description="Transport request UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Cancel one of the caller's active requests."""
    return RequestService.cancel_request(user.id, request_id)


# =============================================================================
# Multi-step wizard
# =============================================================================

@router.get("/wizard")
async def get_wizard(user: AuthUser = Depends(get_current_user)):
    """Current wizard step and draft (opens a fresh draft if none)."""
    store = RequestService.wizard_state(str(user.id))
    return _wizard_response(store)


@router.patch("/wizard")
async def update_wizard(
    fields: QuoteRequestForm,
    user: AuthUser = Depends(get_current_user),
):
    """Merge the fields sent into the draft. Fields not sent are kept."""
    store = RequestService.wizard_update(user.id, fields.model_dump(exclude_unset=True))
    return _wizard_response(store)


@router.post("/wizard/next")
async def wizard_next(user: AuthUser = Depends(get_current_user)):
    """Advance one step. 400 while the current step is incomplete."""
    store, advanced = RequestService.wizard_next(user.id)
    if not advanced:
        raise FormValidationError("Please fill in all required fields", field=f"step_{store.request_step}")
    return _wizard_response(store)


@router.post("/wizard/back")
async def wizard_back(user: AuthUser = Depends(get_current_user)):
    store = RequestService.wizard_back(user.id)
    return _wizard_response(store)


@router.post("/wizard/submit", status_code=201)
async def wizard_submit(user: AuthUser = Depends(get_current_user)):
    """Submit the draft as a transport request and clear the wizard."""
    return RequestService.wizard_submit(user.id)


# =============================================================================
# Quote waiting from before sign-up
# =============================================================================

@router.get("/pending")
async def get_pending_quote(user: AuthUser = Depends(get_current_user)):
    """The quote waiting for the caller, if any (left in place)."""
    quote = HandoffService.peek_pending_quote(user.id)
    return {"pending": quote is not None, "quote": quote}


@router.post("/pending/resume")
async def resume_pending_quote(user: AuthUser = Depends(get_current_user)):
    """
    Move the waiting quote into the wizard draft.

    The waiting quote is removed; calling again returns resumed=false.
    """
    form = RequestService.resume_pending_quote(user.id)
    store = RequestService.wizard_state(str(user.id))
    return {"resumed": form is not None, **_wizard_response(store)}
