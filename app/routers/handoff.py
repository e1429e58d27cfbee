# =============================================================================
# app/routers/handoff.py - Pre-sign-up Hand-off Endpoints
# =============================================================================
# The landing page quote form and the get-started role picker work without
# an account. What the visitor entered is stashed here and claimed once the
# visitor has signed in.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from app.auth import get_current_user, AuthUser
from core.models.profile import UserType
from core.models.transport_request import HeroQuoteForm
from core.services.handoff_service import HandoffService

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class AnonymousStashRequest(BaseModel):
    """What a visitor entered before signing up."""
    quote: HeroQuoteForm | None = Field(default=None, description="Landing-page quick quote")
    selected_user_type: UserType | None = Field(default=None, description="Role picked on get-started")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "quote": {
                        "origin_location": "Austin, TX",
                        "destination_location": "Denver, CO",
                        "pickup_date": "2026-11-03",
                    }
                },
                {"selected_user_type": "transporter"},
            ]
        }
    }


class AnonymousStashResponse(BaseModel):
    handoff_id: str = Field(..., example="8d0f3c4e-5a52-4d8e-9a0e-6f1b2f1b9c11")
    redirect: str = Field(default="/auth/signup")


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/anonymous", response_model=AnonymousStashResponse, status_code=201)
async def stash_anonymous(request: AnonymousStashRequest):
    """
    Save a visitor's quote or role choice. No authentication.

    Keep the returned handoff_id across sign-up and claim it afterwards.
    """
    handoff_id = HandoffService.stash_anonymous(request.quote, request.selected_user_type)
    return AnonymousStashResponse(handoff_id=handoff_id)


@router.post("/{handoff_id}/claim")
async def claim_handoff(
    handoff_id: Annotated[str, Path(description="Id returned by POST /handoff/anonymous")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Attach a stash to the signed-in caller. Works once.

    A stashed quote becomes the caller's pending quote request.
    """
    return HandoffService.claim(handoff_id, user.id)
