# =============================================================================
# tests/test_bid_service.py - Bid Lifecycle Tests
# =============================================================================
# Submitting, withdrawing, accepting and declining bids, plus stats and
# the payment summary.
#
# Run with: pytest tests/test_bid_service.py -v
# =============================================================================

from uuid import UUID

import pytest

from app.exceptions import (
    BidAcceptanceIncompleteError,
    BidNotFoundError,
    DuplicateBidError,
    FormValidationError,
    InvalidStatusTransitionError,
    TransporterNotApprovedError,
)
from core.models.bid import BidCreate
from core.services.bid_service import BidService
from tests.conftest import (
    BID_ID,
    OTHER_BID_ID,
    OTHER_TRANSPORTER_ID,
    OWNER_ID,
    REQUEST_ID,
    TRANSPORTER_ID,
)


def bid_form(**overrides) -> BidCreate:
    data = {
        "request_id": REQUEST_ID,
        "price": 540.0,
        "pickup_date": "2026-11-03",
        "delivery_date": "2026-11-05",
        "message": "  Climate-controlled van  ",
    }
    data.update(overrides)
    return BidCreate(**data)


# =============================================================================
# Transporter side
# =============================================================================

class TestSubmitBid:

    def test_single_pending_insert(self, fake_supabase, approved_transporter, active_request):
        bid = BidService.submit_bid(TRANSPORTER_ID, bid_form())

        inserts = fake_supabase.calls("bids", "insert")
        assert len(inserts) == 1
        assert inserts[0].payload == {
            "request_id": REQUEST_ID,
            "transporter_id": TRANSPORTER_ID,
            "price": 540.0,
            "pickup_date": "2026-11-03",
            "delivery_date": "2026-11-05",
            "message": "Climate-controlled van",
            "status": "pending",
        }
        assert bid["status"] == "pending"

    def test_unapproved_transporter_refused(self, fake_supabase, transporter_profile, active_request):
        with pytest.raises(TransporterNotApprovedError) as exc_info:
            BidService.submit_bid(TRANSPORTER_ID, bid_form())

        assert exc_info.value.redirect == "/transporters/onboard"
        assert fake_supabase.writes() == []

    @pytest.mark.parametrize("missing", ["price", "pickup_date", "delivery_date"])
    def test_required_fields(self, approved_transporter, active_request, missing):
        with pytest.raises(FormValidationError) as exc_info:
            BidService.submit_bid(TRANSPORTER_ID, bid_form(**{missing: None}))

        assert exc_info.value.message == "Please fill in all required fields"

    def test_request_must_be_active(self, approved_transporter, active_request):
        active_request["status"] = "matched"

        with pytest.raises(InvalidStatusTransitionError):
            BidService.submit_bid(TRANSPORTER_ID, bid_form())

    def test_duplicate_bid(self, fake_supabase, approved_transporter, active_request):
        fake_supabase.queue("bids", "select", [{"id": BID_ID, "status": "pending"}])

        with pytest.raises(DuplicateBidError) as exc_info:
            BidService.submit_bid(TRANSPORTER_ID, bid_form())

        assert exc_info.value.details["existing_bid_id"] == BID_ID
        assert fake_supabase.calls("bids", "insert") == []


class TestWithdrawBid:

    def test_withdraw_pending(self, fake_supabase, pending_bid):
        result = BidService.withdraw_bid(TRANSPORTER_ID, BID_ID)

        update = fake_supabase.calls("bids", "update")[0]
        assert update.payload == {"status": "withdrawn"}
        assert update.filters() == {"id": BID_ID}
        assert result["status"] == "withdrawn"

    def test_only_own_bid(self, pending_bid):
        with pytest.raises(BidNotFoundError):
            BidService.withdraw_bid(OTHER_TRANSPORTER_ID, BID_ID)

    def test_only_while_pending(self, pending_bid):
        pending_bid["status"] = "accepted"

        with pytest.raises(InvalidStatusTransitionError):
            BidService.withdraw_bid(TRANSPORTER_ID, BID_ID)


class TestBidStats:

    def test_no_bids(self):
        assert BidService.compute_stats([]) == {"total_bids": 0, "pending": 0, "accepted": 0, "win_rate": 0}

    def test_win_rate_rounded(self):
        bids = [{"status": "accepted"}, {"status": "declined"}, {"status": "pending"}]

        stats = BidService.compute_stats(bids)

        assert stats == {"total_bids": 3, "pending": 1, "accepted": 1, "win_rate": 33}


# =============================================================================
# Owner side
# =============================================================================

class TestAcceptBid:
    """The three-step accept sequence."""

    def test_three_updates_in_order(self, fake_supabase, pending_bid):
        """bid -> accepted, request -> matched, other bids -> declined."""
        # Act
        result = BidService.accept_bid(OWNER_ID, BID_ID, REQUEST_ID)

        # Assert
        writes = fake_supabase.writes()
        assert [(w.table, w.payload) for w in writes] == [
            ("bids", {"status": "accepted"}),
            ("transport_requests", {"status": "matched"}),
            ("bids", {"status": "declined"}),
        ]
        assert writes[0].filters() == {"id": BID_ID}
        assert writes[1].filters() == {"id": REQUEST_ID}
        assert writes[2].filters() == {"request_id": REQUEST_ID}
        assert writes[2].filters("neq") == {"id": BID_ID}
        assert result["message"] == (
            "Bid accepted! The transporter will be notified and you can proceed with booking."
        )

    def test_second_step_failure_keeps_first(self, fake_supabase, pending_bid):
        """If matching the request fails, the accepted bid is not reverted."""
        fake_supabase.queue("transport_requests", "update", Exception("network down"))

        with pytest.raises(BidAcceptanceIncompleteError) as exc_info:
            BidService.accept_bid(OWNER_ID, BID_ID, REQUEST_ID)

        error = exc_info.value
        assert error.details["completed_steps"] == ["accept_bid"]
        assert error.details["failed_step"] == "match_request"
        assert error.message == "Error accepting bid. Please try again."

        # Only the two attempted writes, and nothing that undoes the first
        writes = fake_supabase.writes()
        assert [(w.table, w.payload) for w in writes] == [
            ("bids", {"status": "accepted"}),
            ("transport_requests", {"status": "matched"}),
        ]

    def test_third_step_failure(self, fake_supabase, pending_bid):
        fake_supabase.queue("bids", "update", [{"id": BID_ID, "status": "accepted"}])
        fake_supabase.queue("bids", "update", Exception("timeout"))

        with pytest.raises(BidAcceptanceIncompleteError) as exc_info:
            BidService.accept_bid(OWNER_ID, BID_ID, REQUEST_ID)

        assert exc_info.value.details["completed_steps"] == ["accept_bid", "match_request"]
        assert exc_info.value.details["failed_step"] == "decline_other_bids"

    def test_bid_on_another_request(self, fake_supabase, pending_bid):
        fake_supabase.add_row("transport_requests", {"id": OTHER_BID_ID, "user_id": OWNER_ID, "status": "active"})

        with pytest.raises(BidNotFoundError):
            BidService.accept_bid(OWNER_ID, BID_ID, OTHER_BID_ID)

        assert fake_supabase.writes() == []

    def test_not_the_owner(self, fake_supabase, pending_bid):
        with pytest.raises(BidNotFoundError):
            BidService.accept_bid(TRANSPORTER_ID, BID_ID, REQUEST_ID)

        assert fake_supabase.writes() == []

    def test_request_already_matched(self, fake_supabase, pending_bid, active_request):
        active_request["status"] = "matched"

        with pytest.raises(InvalidStatusTransitionError):
            BidService.accept_bid(OWNER_ID, BID_ID, REQUEST_ID)

        assert fake_supabase.writes() == []

    def test_bid_not_pending(self, fake_supabase, pending_bid):
        pending_bid["status"] = "withdrawn"

        with pytest.raises(InvalidStatusTransitionError):
            BidService.accept_bid(OWNER_ID, BID_ID, REQUEST_ID)

    def test_accepts_uuid_objects(self, fake_supabase, pending_bid):
        result = BidService.accept_bid(UUID(OWNER_ID), UUID(BID_ID), UUID(REQUEST_ID))
        assert result["bid_id"] == BID_ID


class TestDeclineBid:

    def test_single_update(self, fake_supabase, pending_bid):
        BidService.decline_bid(OWNER_ID, BID_ID)

        writes = fake_supabase.writes()
        assert len(writes) == 1
        assert writes[0].payload == {"status": "declined"}

    def test_not_the_owner(self, pending_bid):
        with pytest.raises(BidNotFoundError):
            BidService.decline_bid(TRANSPORTER_ID, BID_ID)


class TestPaymentSummary:

    def test_three_percent_fee(self, pending_bid):
        summary = BidService.payment_summary(OWNER_ID, BID_ID)

        assert summary["bid_amount"] == 540.0
        assert summary["platform_fee"] == 16.2
        assert summary["total_amount"] == 556.2
        assert summary["fee_rate"] == 0.03

    def test_rounded_to_cents(self, pending_bid):
        pending_bid["price"] = 333.33

        summary = BidService.payment_summary(OWNER_ID, BID_ID)

        assert summary["platform_fee"] == 10.0
        assert summary["total_amount"] == 343.33

    def test_hidden_from_other_users(self, pending_bid):
        with pytest.raises(BidNotFoundError):
            BidService.payment_summary(TRANSPORTER_ID, BID_ID)
