# =============================================================================
# core/services/handoff_service.py - Anonymous Quote Hand-off
# =============================================================================
# A visitor can fill in the landing-page quote form before having an
# account. The form is stashed under a random hand-off id; once the visitor
# signs in, the id is claimed and the quote moves to the user's
# "pending-quote-request" slot, where the quote page picks it up.
# =============================================================================

import logging
import uuid
from typing import Any
from uuid import UUID

from lib.handoff import ANONYMOUS_STASH, PENDING_QUOTE_REQUEST, HandoffBuffer
from lib.utils import normalize_uuid
from core.models.profile import UserType
from core.models.transport_request import HeroQuoteForm
from app.exceptions import FormValidationError, HandoffNotFoundError

logger = logging.getLogger(__name__)


class HandoffService:
    """Stash and claim data that crosses the sign-up redirect."""

    @staticmethod
    def stash_anonymous(
        quote: HeroQuoteForm | None = None,
        selected_user_type: UserType | None = None,
    ) -> str:
        """
        Stash a landing-page quote and/or the role picked on get-started.

        Returns:
            The hand-off id to claim after sign-in

        Raises:
            FormValidationError: If a quote is given without both locations or a date
        """
        payload: dict[str, Any] = {}

        if quote is not None:
            if not quote.origin_location.strip() or not quote.destination_location.strip():
                raise FormValidationError("Please enter both pickup and destination locations")
            if quote.pickup_date is None:
                raise FormValidationError("Please select a pickup date", field="pickup_date")
            payload["quote"] = quote.model_dump(mode="json", exclude_none=True)

        if selected_user_type is not None:
            payload["selected_user_type"] = selected_user_type.value

        if not payload:
            raise FormValidationError("Nothing to save")

        handoff_id = str(uuid.uuid4())
        HandoffBuffer.put(ANONYMOUS_STASH, handoff_id, payload)
        logger.info(f"Stashed anonymous hand-off {handoff_id} ({', '.join(payload)})")
        return handoff_id

    @staticmethod
    def claim(handoff_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        Attach an anonymous stash to a signed-in user. Works once.

        A stashed quote becomes the user's pending quote request.

        Raises:
            HandoffNotFoundError: If the id is unknown, already claimed or expired
        """
        user_id_str = normalize_uuid(user_id)
        payload = HandoffBuffer.pop(ANONYMOUS_STASH, handoff_id)
        if not payload:
            raise HandoffNotFoundError(handoff_id)

        quote = payload.get("quote")
        if quote:
            HandoffBuffer.put(PENDING_QUOTE_REQUEST, user_id_str, quote)

        logger.info(f"Hand-off {handoff_id} claimed by {user_id_str}")
        return {
            "quote": quote,
            "selected_user_type": payload.get("selected_user_type"),
            "has_pending_quote": bool(quote),
        }

    @staticmethod
    def peek_pending_quote(user_id: UUID | str) -> dict[str, Any] | None:
        """The user's waiting quote, left in place."""
        return HandoffBuffer.get(PENDING_QUOTE_REQUEST, normalize_uuid(user_id))
