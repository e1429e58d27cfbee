# =============================================================================
# core/services/bid_service.py - Bid Lifecycle
# =============================================================================
# Transporters place and withdraw bids; owners accept or decline them.
#
# Accepting a bid is three separate writes against the database:
#   1. the bid -> accepted
#   2. the request -> matched
#   3. every other bid on the request -> declined
# PostgREST gives us no transaction across them. If a later write fails the
# earlier ones stay applied, and the error lists what was completed.
# =============================================================================

import logging
from typing import Any, Callable
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import blank_to_none, normalize_uuid
from core.models.bid import BidCreate, BidStatus
from core.models.transport_request import RequestStatus
from core.services.request_service import RequestService
from core.services.transporter_service import TransporterService
from app.config import settings
from app.exceptions import (
    BidAcceptanceIncompleteError,
    BidNotFoundError,
    DatabaseOperationError,
    DuplicateBidError,
    FormValidationError,
    InvalidStatusTransitionError,
    RequestNotFoundError,
)

logger = logging.getLogger(__name__)

ACCEPTED_MESSAGE = "Bid accepted! The transporter will be notified and you can proceed with booking."

MY_BIDS_SELECT = """
    *,
    transport_request:transport_requests(
        *,
        customer_profile:profiles!transport_requests_user_id_fkey(
            first_name,
            last_name,
            phone
        )
    )
"""


class BidService:
    """Service for the bids table."""

    # -------------------------------------------------------------------------
    # Transporter side
    # -------------------------------------------------------------------------

    @staticmethod
    def submit_bid(transporter_id: UUID | str, data: BidCreate) -> dict[str, Any]:
        """
        Place a bid on an open request.

        Raises:
            TransporterNotApprovedError (and other access errors): via check_status
            FormValidationError: If price or either date is missing
            RequestNotFoundError: If the request doesn't exist
            InvalidStatusTransitionError: If the request is no longer active
            DuplicateBidError: If the transporter already has a live bid on it
            DatabaseOperationError: If the insert fails
        """
        transporter_id_str = normalize_uuid(transporter_id)
        TransporterService.check_status(transporter_id_str)

        if data.price is None or data.pickup_date is None or data.delivery_date is None:
            raise FormValidationError("Please fill in all required fields")
        if data.delivery_date < data.pickup_date:
            raise FormValidationError(
                "Delivery date cannot be before the pickup date", field="delivery_date"
            )

        request_id_str = normalize_uuid(data.request_id)
        request = SupabaseClient.fetch_transport_request(request_id_str)
        if not request:
            raise RequestNotFoundError(request_id_str)
        if request.get("status") != RequestStatus.ACTIVE.value:
            raise InvalidStatusTransitionError(
                "transport request", request_id_str, request.get("status"), "bid on"
            )

        client = SupabaseClient.get_client()
        existing = (
            client.table("bids")
            .select("id, status")
            .eq("request_id", request_id_str)
            .eq("transporter_id", transporter_id_str)
            .neq("status", BidStatus.WITHDRAWN.value)
            .execute()
        )
        if existing.data:
            raise DuplicateBidError(request_id_str, str(existing.data[0]["id"]))

        row = {
            "request_id": request_id_str,
            "transporter_id": transporter_id_str,
            "price": data.price,
            "pickup_date": data.pickup_date.isoformat(),
            "delivery_date": data.delivery_date.isoformat(),
            "message": blank_to_none(data.message),
            "status": BidStatus.PENDING.value,
        }

        try:
            response = client.table("bids").insert(row).execute()
        except Exception as e:
            logger.error(f"Error submitting bid: {e}")
            raise DatabaseOperationError(
                message="Error submitting bid. Please try again.",
                operation="submit_bid",
                error=str(e),
            )

        bid = response.data[0] if response.data else row
        logger.info(f"Bid {bid.get('id')} submitted on request {request_id_str} by {transporter_id_str}")
        return bid

    @staticmethod
    def list_my_bids(transporter_id: UUID | str) -> list[dict[str, Any]]:
        """The transporter's bids with a summary of each request, newest first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("bids")
                .select(MY_BIDS_SELECT)
                .eq("transporter_id", normalize_uuid(transporter_id))
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Error fetching bids: {e}")
            raise

    @staticmethod
    def compute_stats(bids: list[dict[str, Any]]) -> dict[str, int]:
        """Dashboard counters: totals and the accepted share as a rounded percent."""
        total = len(bids)
        accepted = sum(1 for b in bids if b.get("status") == BidStatus.ACCEPTED.value)
        pending = sum(1 for b in bids if b.get("status") == BidStatus.PENDING.value)
        return {
            "total_bids": total,
            "pending": pending,
            "accepted": accepted,
            "win_rate": round(accepted / total * 100) if total else 0,
        }

    @staticmethod
    def withdraw_bid(transporter_id: UUID | str, bid_id: UUID | str) -> dict[str, Any]:
        """
        Withdraw a pending bid.

        Raises:
            BidNotFoundError: If missing or placed by someone else
            InvalidStatusTransitionError: If the bid is no longer pending
        """
        bid_id_str = normalize_uuid(bid_id)
        bid = SupabaseClient.fetch_bid(bid_id_str)
        if not bid or str(bid.get("transporter_id")) != normalize_uuid(transporter_id):
            raise BidNotFoundError(bid_id_str)
        if bid.get("status") != BidStatus.PENDING.value:
            raise InvalidStatusTransitionError("bid", bid_id_str, bid.get("status"), "withdraw")

        return BidService._set_status(bid_id_str, BidStatus.WITHDRAWN, bid)

    # -------------------------------------------------------------------------
    # Owner side
    # -------------------------------------------------------------------------

    @staticmethod
    def _owned_pending_bid(
        owner_id: UUID | str,
        bid_id: str,
        request_id: str | None = None,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Load a pending bid and its request, checking the caller owns the request."""
        bid = SupabaseClient.fetch_bid(bid_id)
        if not bid:
            raise BidNotFoundError(bid_id)
        if request_id is not None and str(bid.get("request_id")) != request_id:
            raise BidNotFoundError(bid_id)

        try:
            request = RequestService.get_owned_request(owner_id, bid["request_id"])
        except RequestNotFoundError:
            # Hide bids on other people's requests
            raise BidNotFoundError(bid_id)

        if bid.get("status") != BidStatus.PENDING.value:
            raise InvalidStatusTransitionError("bid", bid_id, bid.get("status"), "update")
        return bid, request

    @staticmethod
    def accept_bid(
        owner_id: UUID | str,
        bid_id: UUID | str,
        request_id: UUID | str,
    ) -> dict[str, Any]:
        """
        Accept a bid: bid -> accepted, request -> matched, other bids -> declined.

        The three writes run in order with no rollback. A failure part way
        raises BidAcceptanceIncompleteError listing the steps already applied.

        Raises:
            BidNotFoundError: Bid missing, not on this request, or not the caller's
            InvalidStatusTransitionError: Bid not pending or request not active
            BidAcceptanceIncompleteError: A write failed
        """
        bid_id_str = normalize_uuid(bid_id)
        request_id_str = normalize_uuid(request_id)
        bid, request = BidService._owned_pending_bid(owner_id, bid_id_str, request_id_str)

        if request.get("status") != RequestStatus.ACTIVE.value:
            raise InvalidStatusTransitionError(
                "transport request", request_id_str, request.get("status"), "accept a bid on"
            )

        client = SupabaseClient.get_client()
        steps: list[tuple[str, Callable[[], Any]]] = [
            ("accept_bid", lambda: (
                client.table("bids")
                .update({"status": BidStatus.ACCEPTED.value})
                .eq("id", bid_id_str)
                .execute()
            )),
            ("match_request", lambda: (
                client.table("transport_requests")
                .update({"status": RequestStatus.MATCHED.value})
                .eq("id", request_id_str)
                .execute()
            )),
            ("decline_other_bids", lambda: (
                client.table("bids")
                .update({"status": BidStatus.DECLINED.value})
                .eq("request_id", request_id_str)
                .neq("id", bid_id_str)
                .execute()
            )),
        ]

        completed: list[str] = []
        for name, run in steps:
            try:
                run()
            except Exception as e:
                logger.error(
                    f"Error accepting bid {bid_id_str}: step {name} failed after {completed}: {e}"
                )
                raise BidAcceptanceIncompleteError(
                    bid_id=bid_id_str,
                    request_id=request_id_str,
                    completed_steps=completed,
                    failed_step=name,
                    error=str(e),
                )
            completed.append(name)

        logger.info(f"Bid {bid_id_str} accepted, request {request_id_str} matched")
        return {
            "bid_id": bid_id_str,
            "request_id": request_id_str,
            "bid_status": BidStatus.ACCEPTED.value,
            "request_status": RequestStatus.MATCHED.value,
            "message": ACCEPTED_MESSAGE,
        }

    @staticmethod
    def decline_bid(owner_id: UUID | str, bid_id: UUID | str) -> dict[str, Any]:
        """
        Decline a single pending bid.

        Raises:
            BidNotFoundError: Bid missing or not on one of the caller's requests
            InvalidStatusTransitionError: Bid not pending
        """
        bid_id_str = normalize_uuid(bid_id)
        bid, _ = BidService._owned_pending_bid(owner_id, bid_id_str)
        return BidService._set_status(bid_id_str, BidStatus.DECLINED, bid)

    @staticmethod
    def _set_status(bid_id: str, status: BidStatus, bid: dict[str, Any]) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("bids")
                .update({"status": status.value})
                .eq("id", bid_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error updating bid {bid_id} to {status.value}: {e}")
            raise DatabaseOperationError(
                message=f"Error updating bid. Please try again.",
                operation=f"{status.value}_bid",
                error=str(e),
            )

        logger.info(f"Bid {bid_id} is now {status.value}")
        return response.data[0] if response.data else {**bid, "status": status.value}

    # -------------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------------

    @staticmethod
    def payment_summary(owner_id: UUID | str, bid_id: UUID | str) -> dict[str, Any]:
        """
        Checkout breakdown for a bid on one of the caller's requests.

        platform_fee = price * PLATFORM_FEE_RATE, total = price + fee,
        both rounded to cents.
        """
        bid_id_str = normalize_uuid(bid_id)
        bid = SupabaseClient.fetch_bid(bid_id_str)
        if not bid:
            raise BidNotFoundError(bid_id_str)
        try:
            RequestService.get_owned_request(owner_id, bid["request_id"])
        except RequestNotFoundError:
            raise BidNotFoundError(bid_id_str)

        amount = float(bid["price"])
        fee = round(amount * settings.PLATFORM_FEE_RATE, 2)
        return {
            "bid_id": bid_id_str,
            "bid_amount": round(amount, 2),
            "platform_fee": fee,
            "total_amount": round(amount + fee, 2),
            "fee_rate": settings.PLATFORM_FEE_RATE,
        }
