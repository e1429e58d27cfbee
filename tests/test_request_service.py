# =============================================================================
# tests/test_request_service.py - Quote Request Tests
# =============================================================================
# Quote submission, the quote wizard, resuming a quote entered before
# sign-up, and the transporter-side filters.
#
# Run with: pytest tests/test_request_service.py -v
# =============================================================================

from datetime import date

import pytest

from app.exceptions import (
    DatabaseOperationError,
    FormValidationError,
    InvalidStatusTransitionError,
    OnboardingRequiredError,
    RequestNotFoundError,
    WrongUserTypeError,
)
from core.models.transport_request import BudgetBand, DateBand, QuoteRequestForm, RequestFilters
from core.services.request_service import RequestService
from core.stores.marketplace_store import MarketplaceStore
from lib.handoff import PENDING_QUOTE_REQUEST, HandoffBuffer
from tests.conftest import OTHER_TRANSPORTER_ID, OWNER_ID, REQUEST_ID, TRANSPORTER_ID


def complete_form(**overrides) -> QuoteRequestForm:
    data = {
        "origin_location": "Austin, TX 78701",
        "destination_location": "Denver, CO 80202",
        "pickup_date": "2026-11-03",
        "pet_name": "Biscuit",
        "pet_type": "dog",
        "pet_size": "medium",
        "budget": 650,
    }
    data.update(overrides)
    return QuoteRequestForm(**data)


# =============================================================================
# Quote submission
# =============================================================================

class TestCreateQuoteRequest:
    """Tests for RequestService.create_quote_request."""

    def test_exactly_one_insert_with_entered_values(self, fake_supabase, owner_profile):
        """A complete form issues one insert carrying what was typed in."""
        # Act
        result = RequestService.create_quote_request(OWNER_ID, complete_form())

        # Assert
        writes = fake_supabase.writes()
        assert len(writes) == 1
        row = writes[0].payload
        assert writes[0].table == "transport_requests"
        assert row["user_id"] == OWNER_ID
        assert row["origin_location"] == "Austin, TX 78701"
        assert row["destination_location"] == "Denver, CO 80202"
        assert row["pickup_date"] == "2026-11-03"
        assert row["pet_type"] == "dog"
        assert row["pet_size"] == "medium"
        assert row["budget"] == 650
        assert row["status"] == "active"
        assert result["redirect"].startswith("/dashboard?success=quote-submitted&id=")

    def test_delivery_defaults_to_pickup_plus_two_days(self, fake_supabase, owner_profile):
        RequestService.create_quote_request(OWNER_ID, complete_form())
        assert fake_supabase.writes()[0].payload["delivery_date"] == "2026-11-05"

    def test_explicit_delivery_kept(self, fake_supabase, owner_profile):
        RequestService.create_quote_request(OWNER_ID, complete_form(delivery_date="2026-11-10"))
        assert fake_supabase.writes()[0].payload["delivery_date"] == "2026-11-10"

    def test_redirect_carries_created_id(self, fake_supabase, owner_profile):
        fake_supabase.queue("transport_requests", "insert", [{"id": REQUEST_ID, "status": "active"}])

        result = RequestService.create_quote_request(OWNER_ID, complete_form())

        assert result["redirect"] == f"/dashboard?success=quote-submitted&id={REQUEST_ID}"

    @pytest.mark.parametrize("missing", ["origin_location", "destination_location", "pet_type", "pet_size", "pickup_date"])
    def test_required_fields(self, fake_supabase, owner_profile, missing):
        with pytest.raises(FormValidationError) as exc_info:
            RequestService.create_quote_request(OWNER_ID, complete_form(**{missing: None}))

        assert exc_info.value.message == "Please fill in all required fields"
        assert fake_supabase.writes() == []

    def test_whitespace_location_is_missing(self, owner_profile):
        with pytest.raises(FormValidationError):
            RequestService.create_quote_request(OWNER_ID, complete_form(origin_location="   "))

    def test_no_profile(self, fake_supabase):
        with pytest.raises(OnboardingRequiredError) as exc_info:
            RequestService.create_quote_request(OWNER_ID, complete_form())

        assert exc_info.value.message == "Please complete your account setup first by visiting your profile."
        assert fake_supabase.writes() == []

    def test_transporter_refused(self, transporter_profile):
        with pytest.raises(WrongUserTypeError) as exc_info:
            RequestService.create_quote_request(TRANSPORTER_ID, complete_form())

        assert exc_info.value.message == "Only pet owners can submit transport requests."

    def test_policy_error_rewritten(self, fake_supabase, owner_profile):
        fake_supabase.queue("transport_requests", "insert", Exception("violates row-level security policy"))

        with pytest.raises(DatabaseOperationError) as exc_info:
            RequestService.create_quote_request(OWNER_ID, complete_form())

        assert exc_info.value.message == "Permission error. Please make sure you are signed in and try again."


# =============================================================================
# Wizard
# =============================================================================

class TestQuoteWizard:

    def test_step_validation(self):
        form = QuoteRequestForm(origin_location="Austin", destination_location="Denver")

        assert RequestService.validate_step(1, form) is False
        assert RequestService.validate_step(1, complete_form()) is True
        assert RequestService.validate_step(3, complete_form(budget=None)) is False
        assert RequestService.validate_step(4, None) is True
        assert RequestService.validate_step(5, complete_form()) is False

    def test_next_refused_while_step_incomplete(self):
        RequestService.wizard_update(OWNER_ID, {"origin_location": "Austin"})

        store, advanced = RequestService.wizard_next(OWNER_ID)

        assert advanced is False
        assert store.request_step == 1

    def test_walks_to_review_and_clamps(self):
        RequestService.wizard_update(OWNER_ID, complete_form().model_dump(exclude_unset=True))

        for _ in range(5):
            store, _ = RequestService.wizard_next(OWNER_ID)

        assert store.request_step == 4
        assert MarketplaceStore.load(OWNER_ID).request_step == 4

    def test_back_clamps_at_one(self):
        store = RequestService.wizard_back(OWNER_ID)
        assert store.request_step == 1

    def test_submit_clears_draft(self, fake_supabase, owner_profile):
        RequestService.wizard_update(OWNER_ID, complete_form().model_dump(exclude_unset=True))

        RequestService.wizard_submit(OWNER_ID)

        assert len(fake_supabase.calls("transport_requests", "insert")) == 1
        store = MarketplaceStore.load(OWNER_ID)
        assert store.current_request is None
        assert store.request_step == 0

    def test_resume_pending_quote_prefills_once(self):
        HandoffBuffer.put(PENDING_QUOTE_REQUEST, OWNER_ID, {
            "origin_location": "Austin",
            "destination_location": "Denver",
            "pickup_date": "2026-11-03",
            "unknown_field": "ignored",
        })

        form = RequestService.resume_pending_quote(OWNER_ID)

        assert form.origin_location == "Austin"
        assert form.pickup_date == date(2026, 11, 3)
        assert RequestService.resume_pending_quote(OWNER_ID) is None
        assert MarketplaceStore.load(OWNER_ID).current_request.destination_location == "Denver"


# =============================================================================
# Owner side
# =============================================================================

class TestCancelRequest:

    def test_cancel_active(self, fake_supabase, active_request):
        result = RequestService.cancel_request(OWNER_ID, REQUEST_ID)

        assert fake_supabase.calls("transport_requests", "update")[0].payload == {"status": "cancelled"}
        assert result["status"] == "cancelled"

    def test_cannot_cancel_matched(self, fake_supabase, active_request):
        active_request["status"] = "matched"

        with pytest.raises(InvalidStatusTransitionError):
            RequestService.cancel_request(OWNER_ID, REQUEST_ID)

    def test_other_users_request_hidden(self, active_request):
        with pytest.raises(RequestNotFoundError):
            RequestService.cancel_request(TRANSPORTER_ID, REQUEST_ID)


# =============================================================================
# Transporter side
# =============================================================================

TODAY = date(2026, 10, 19)


def make_request(request_id, **fields):
    base = {
        "id": request_id,
        "origin_location": "Austin, TX",
        "destination_location": "Denver, CO",
        "pet_type": "dog",
        "budget": 650,
        "pickup_date": "2026-10-22",
        "existing_bid": None,
    }
    base.update(fields)
    return base


class TestApplyFilters:

    def test_location_matches_origin_or_destination_case_insensitive(self):
        requests = [
            make_request("a", origin_location="Austin, TX"),
            make_request("b", origin_location="Boise, ID", destination_location="DENVER, CO"),
            make_request("c", origin_location="Boise, ID", destination_location="Reno, NV"),
        ]

        kept = RequestService.apply_filters(requests, RequestFilters(location="denver"), today=TODAY)

        assert [r["id"] for r in kept] == ["a", "b"]

    def test_budget_bands(self):
        requests = [
            make_request("cheap", budget=499),
            make_request("edge-low", budget=500),
            make_request("edge-high", budget=1000),
            make_request("pricey", budget=1001),
            make_request("none", budget=None),
        ]

        def ids(band):
            return [r["id"] for r in RequestService.apply_filters(requests, RequestFilters(budget=band), today=TODAY)]

        assert ids(BudgetBand.LOW) == ["cheap", "none"]
        assert ids(BudgetBand.MEDIUM) == ["edge-low", "edge-high"]
        assert ids(BudgetBand.HIGH) == ["pricey"]
        assert len(ids(BudgetBand.ALL)) == 5

    def test_date_bands(self):
        requests = [
            make_request("7d", pickup_date="2026-10-26"),
            make_request("8d", pickup_date="2026-10-27"),
            make_request("30d", pickup_date="2026-11-18"),
            make_request("31d", pickup_date="2026-11-19"),
        ]

        def ids(band):
            return [r["id"] for r in RequestService.apply_filters(requests, RequestFilters(pickup=band), today=TODAY)]

        assert ids(DateBand.WEEK) == ["7d"]
        assert ids(DateBand.MONTH) == ["7d", "8d", "30d"]
        assert ids(DateBand.LATER) == ["31d"]

    def test_unbudgeted_request_listed_as_low(self):
        requests = [make_request("open", budget=None), make_request("set", budget=700)]

        kept = RequestService.apply_filters(requests, RequestFilters(budget=BudgetBand.LOW), today=TODAY)

        assert [r["id"] for r in kept] == ["open"]

    def test_date_and_budget_filters_combine(self):
        requests = [
            make_request("soon-cheap", pickup_date="2026-10-20", budget=300),
            make_request("soon-pricey", pickup_date="2026-10-20", budget=1500),
            make_request("late-cheap", pickup_date="2027-01-01", budget=300),
        ]

        kept = RequestService.apply_filters(
            requests, RequestFilters(pickup=DateBand.WEEK, budget=BudgetBand.LOW), today=TODAY
        )

        assert [r["id"] for r in kept] == ["soon-cheap"]

    def test_pet_type_and_exclude_bid(self):
        requests = [
            make_request("dog"),
            make_request("cat", pet_type="cat"),
            make_request("bid-dog", existing_bid={"id": "x", "status": "pending"}),
        ]

        kept = RequestService.apply_filters(
            requests, RequestFilters(pet_type="dog", exclude_bid=True), today=TODAY
        )

        assert [r["id"] for r in kept] == ["dog"]


class TestListAvailableRequests:

    def test_annotates_existing_bid(self, fake_supabase):
        fake_supabase.queue("transport_requests", "select", [
            make_request("r1", bids=[{"id": "b1", "transporter_id": TRANSPORTER_ID, "status": "pending"}]),
            make_request("r2", bids=[{"id": "b2", "transporter_id": OTHER_TRANSPORTER_ID, "status": "pending"}]),
        ])

        requests = RequestService.list_available_requests(TRANSPORTER_ID, today=TODAY)

        query = fake_supabase.calls("transport_requests", "select")[0]
        assert query.filters() == {"status": "active"}
        assert requests[0]["existing_bid"]["id"] == "b1"
        assert requests[1]["existing_bid"] is None
