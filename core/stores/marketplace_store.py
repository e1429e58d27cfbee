# =============================================================================
# core/stores/marketplace_store.py - Marketplace State Container
# =============================================================================
# Per-user state for the quote wizard and the bid views: the request being
# drafted, the current wizard step, the bids on screen and which request
# is selected.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from core.models.transport_request import QuoteRequestForm
from core.stores.errors import invalid_field
from lib.handoff import MARKETPLACE_STATE, HandoffBuffer

logger = logging.getLogger(__name__)


class MarketplaceStore:
    """
    Marketplace UI state.

    Bids are kept as plain dicts (rows as returned by the database) so
    updates can merge arbitrary fields.
    """

    def __init__(self):
        self.current_request: QuoteRequestForm | None = None
        self.request_step = 0
        self.active_bids: list[dict[str, Any]] = []
        self.show_bid_modal = False
        self.selected_request_id: str | None = None

    # -------------------------------------------------------------------------
    # Transport request drafting
    # -------------------------------------------------------------------------

    def set_current_request(self, request: QuoteRequestForm | None) -> None:
        self.current_request = request

    def update_current_request(self, **updates: Any) -> None:
        """
        Merge fields into the draft. Does nothing when no draft is open.

        Raises:
            FormValidationError: A merged value fails QuoteRequestForm validation
        """
        if self.current_request is None:
            return
        merged = {**self.current_request.model_dump(), **updates}
        try:
            self.current_request = QuoteRequestForm(**merged)
        except ValidationError as e:
            raise invalid_field(e)

    def set_request_step(self, step: int) -> None:
        self.request_step = step

    def clear_current_request(self) -> None:
        self.current_request = None
        self.request_step = 0

    # -------------------------------------------------------------------------
    # Bids
    # -------------------------------------------------------------------------

    def set_active_bids(self, bids: list[dict[str, Any]]) -> None:
        self.active_bids = list(bids)

    def add_bid(self, bid: dict[str, Any]) -> None:
        self.active_bids = [*self.active_bids, bid]

    def update_bid(self, bid_id: str, **updates: Any) -> None:
        self.active_bids = [
            {**bid, **updates} if str(bid.get("id")) == str(bid_id) else bid
            for bid in self.active_bids
        ]

    # -------------------------------------------------------------------------
    # UI state
    # -------------------------------------------------------------------------

    def set_show_bid_modal(self, show: bool) -> None:
        self.show_bid_modal = show

    def set_selected_request_id(self, request_id: str | None) -> None:
        self.selected_request_id = request_id

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        return {
            "current_request": (
                self.current_request.model_dump(mode="json") if self.current_request else None
            ),
            "request_step": self.request_step,
            "active_bids": self.active_bids,
            "show_bid_modal": self.show_bid_modal,
            "selected_request_id": self.selected_request_id,
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any] | None) -> "MarketplaceStore":
        store = cls()
        if not data:
            return store
        if data.get("current_request"):
            store.current_request = QuoteRequestForm(**data["current_request"])
        store.request_step = int(data.get("request_step") or 0)
        store.active_bids = list(data.get("active_bids") or [])
        store.show_bid_modal = bool(data.get("show_bid_modal"))
        store.selected_request_id = data.get("selected_request_id")
        return store

    @classmethod
    def load(cls, user_id: str) -> "MarketplaceStore":
        return cls.from_snapshot(HandoffBuffer.get(MARKETPLACE_STATE, user_id))

    def save(self, user_id: str) -> None:
        HandoffBuffer.put(MARKETPLACE_STATE, user_id, self.snapshot())
        logger.debug(f"Saved marketplace state for {user_id}")
