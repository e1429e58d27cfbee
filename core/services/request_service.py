# =============================================================================
# core/services/request_service.py - Transport Request Logic
# =============================================================================
# Quote submission (single form and multi-step wizard), hand-off of a quote
# typed in before sign-up, the owner's request list and the transporter's
# view of open requests.
# =============================================================================

import logging
from datetime import date, timedelta
from typing import Any
from uuid import UUID

from lib.handoff import PENDING_QUOTE_REQUEST, HandoffBuffer
from lib.supabase_client import SupabaseClient
from lib.utils import blank_to_none, describe_database_error, normalize_uuid
from core.models.profile import UserType
from core.models.transport_request import (
    BudgetBand,
    DateBand,
    QuoteRequestForm,
    RequestFilters,
    RequestStatus,
)
from core.services.profile_service import ProfileService
from core.stores.marketplace_store import MarketplaceStore
from app.config import settings
from app.exceptions import (
    DatabaseOperationError,
    FormValidationError,
    InvalidStatusTransitionError,
    RequestNotFoundError,
)

logger = logging.getLogger(__name__)

QUOTE_ERROR_REWRITES = [
    (("permission", "policy"), "Permission error. Please make sure you are signed in and try again."),
    (("foreign key",), "Account setup incomplete. Please complete your profile setup."),
]

# Fields the quote form marks as required
REQUIRED_QUOTE_FIELDS = (
    "origin_location",
    "destination_location",
    "pet_type",
    "pet_size",
    "pickup_date",
)

# Multi-step quote wizard: step number -> fields that must be filled in
WIZARD_STEP_FIELDS: dict[int, tuple[str, ...]] = {
    1: ("origin_location", "destination_location", "pickup_date"),
    2: ("pet_name", "pet_type", "pet_size"),
    3: ("budget",),
    4: (),
}
WIZARD_TOTAL_STEPS = len(WIZARD_STEP_FIELDS)

OWNER_REQUEST_SELECT = """
    *,
    bids(
        *,
        transporter_profile:profiles!bids_transporter_id_fkey(
            first_name,
            last_name,
            phone
        )
    )
"""

AVAILABLE_REQUEST_SELECT = """
    *,
    customer_profile:profiles!transport_requests_user_id_fkey(
        first_name,
        last_name
    ),
    bids(id, transporter_id, status)
"""


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _as_date(value: Any) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class RequestService:
    """Service for the transport_requests table."""

    # -------------------------------------------------------------------------
    # Quote submission
    # -------------------------------------------------------------------------

    @staticmethod
    def build_request_row(user_id: str, form: QuoteRequestForm) -> dict[str, Any]:
        """
        Map a completed quote form onto a transport_requests row.

        The delivery date defaults to the pickup date plus the standard
        transit time.
        """
        delivery_date = form.delivery_date or (
            form.pickup_date + timedelta(days=settings.DEFAULT_TRANSIT_DAYS)
        )
        return {
            "user_id": user_id,
            "origin_location": form.origin_location.strip(),
            "destination_location": form.destination_location.strip(),
            "pickup_date": form.pickup_date.isoformat(),
            "delivery_date": delivery_date.isoformat(),
            "pet_name": blank_to_none(form.pet_name),
            "pet_type": form.pet_type.strip(),
            "pet_size": form.pet_size.value,
            "pet_weight": form.pet_weight,
            "pet_age": form.pet_age,
            "special_needs": blank_to_none(form.special_needs),
            "special_requirements": blank_to_none(form.special_requirements),
            "special_instructions": blank_to_none(form.special_instructions),
            "budget": form.budget,
            "time_preference": form.time_preference.value,
            "flexible_dates": form.flexible_dates,
            "urgency": form.urgency.value,
            "status": RequestStatus.ACTIVE.value,
        }

    @staticmethod
    def create_quote_request(user_id: UUID | str, form: QuoteRequestForm) -> dict[str, Any]:
        """
        Submit a quote request.

        Checks the required fields and the caller's profile, then issues
        exactly one insert.

        Returns:
            Dict with the created request and the dashboard redirect

        Raises:
            FormValidationError: If a required field is missing
            OnboardingRequiredError: If the caller has no profile
            WrongUserTypeError: If the caller is a transporter
            DatabaseOperationError: If the insert fails
        """
        missing = [f for f in REQUIRED_QUOTE_FIELDS if not _is_filled(getattr(form, f))]
        if missing:
            raise FormValidationError("Please fill in all required fields", field=missing[0])

        user_id_str = normalize_uuid(user_id)
        ProfileService.require_user_type(
            user_id_str,
            UserType.PET_OWNER,
            message="Only pet owners can submit transport requests.",
            redirect="/dashboard",
        )

        row = RequestService.build_request_row(user_id_str, form)
        client = SupabaseClient.get_client()

        logger.info(f"Submitting transport request for user: {user_id_str}")

        try:
            response = client.table("transport_requests").insert(row).execute()
        except Exception as e:
            logger.error(f"Transport request submission failed: {e}")
            raise DatabaseOperationError(
                message=describe_database_error(e, QUOTE_ERROR_REWRITES),
                operation="create_transport_request",
                error=str(e),
            )

        created = response.data[0] if response.data else row
        logger.info(f"Transport request created: {created.get('id')}")

        return {
            "request": created,
            "redirect": f"/dashboard?success=quote-submitted&id={created.get('id')}",
        }

    # -------------------------------------------------------------------------
    # Multi-step wizard
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_step(step: int, form: QuoteRequestForm | None) -> bool:
        """Whether the given wizard step has everything it needs."""
        fields = WIZARD_STEP_FIELDS.get(step)
        if fields is None:
            return False
        if form is None:
            return not fields
        return all(_is_filled(getattr(form, f)) for f in fields)

    @staticmethod
    def wizard_state(user_id: str) -> MarketplaceStore:
        """Load the wizard, opening a fresh draft at step 1 if needed."""
        store = MarketplaceStore.load(user_id)
        if store.current_request is None:
            store.set_current_request(QuoteRequestForm())
        if store.request_step < 1:
            store.set_request_step(1)
        return store

    @staticmethod
    def wizard_update(user_id: UUID | str, fields: dict[str, Any]) -> MarketplaceStore:
        """Merge form fields into the draft."""
        user_id_str = normalize_uuid(user_id)
        store = RequestService.wizard_state(user_id_str)
        store.update_current_request(**fields)
        store.save(user_id_str)
        return store

    @staticmethod
    def wizard_next(user_id: UUID | str) -> tuple[MarketplaceStore, bool]:
        """
        Advance one step when the current step is valid.

        Returns:
            (store, advanced) - advanced is False when the step is incomplete
        """
        user_id_str = normalize_uuid(user_id)
        store = RequestService.wizard_state(user_id_str)
        if not RequestService.validate_step(store.request_step, store.current_request):
            return store, False
        store.set_request_step(min(store.request_step + 1, WIZARD_TOTAL_STEPS))
        store.save(user_id_str)
        return store, True

    @staticmethod
    def wizard_back(user_id: UUID | str) -> MarketplaceStore:
        user_id_str = normalize_uuid(user_id)
        store = RequestService.wizard_state(user_id_str)
        store.set_request_step(max(store.request_step - 1, 1))
        store.save(user_id_str)
        return store

    @staticmethod
    def wizard_submit(user_id: UUID | str) -> dict[str, Any]:
        """Submit the wizard draft, then clear it."""
        user_id_str = normalize_uuid(user_id)
        store = RequestService.wizard_state(user_id_str)
        result = RequestService.create_quote_request(user_id_str, store.current_request)
        store.clear_current_request()
        store.save(user_id_str)
        return result

    # -------------------------------------------------------------------------
    # Hand-off of a quote typed in before sign-up
    # -------------------------------------------------------------------------

    @staticmethod
    def resume_pending_quote(user_id: UUID | str) -> QuoteRequestForm | None:
        """
        Take the waiting quote out of the hand-off buffer.

        The values prefill the wizard draft. Returns None when nothing is
        waiting. The stored data is used as-is; unknown keys are ignored.
        """
        user_id_str = normalize_uuid(user_id)
        saved = HandoffBuffer.pop(PENDING_QUOTE_REQUEST, user_id_str)
        if not saved:
            return None

        known = {k: v for k, v in saved.items() if k in QuoteRequestForm.model_fields}
        form = QuoteRequestForm(**known)

        store = RequestService.wizard_state(user_id_str)
        store.update_current_request(**form.model_dump(exclude_unset=True))
        store.save(user_id_str)
        logger.info(f"Resumed pending quote for {user_id_str}")
        return store.current_request

    # -------------------------------------------------------------------------
    # Owner side
    # -------------------------------------------------------------------------

    @staticmethod
    def list_owner_requests(user_id: UUID | str) -> list[dict[str, Any]]:
        """The owner's requests with their bids and bidders, newest first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("transport_requests")
                .select(OWNER_REQUEST_SELECT)
                .eq("user_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Error fetching transport requests: {e}")
            raise

    @staticmethod
    def get_owned_request(user_id: UUID | str, request_id: UUID | str) -> dict[str, Any]:
        """
        Get a request and check the caller posted it.

        Raises:
            RequestNotFoundError: If missing or owned by someone else
        """
        request_id_str = normalize_uuid(request_id)
        request = SupabaseClient.fetch_transport_request(request_id_str)
        if not request or str(request.get("user_id")) != normalize_uuid(user_id):
            raise RequestNotFoundError(request_id_str)
        return request

    @staticmethod
    def cancel_request(user_id: UUID | str, request_id: UUID | str) -> dict[str, Any]:
        """
        Cancel an open request.

        Raises:
            RequestNotFoundError: If missing or not the caller's
            InvalidStatusTransitionError: If the request is no longer active
        """
        request = RequestService.get_owned_request(user_id, request_id)
        request_id_str = normalize_uuid(request_id)

        if request.get("status") != RequestStatus.ACTIVE.value:
            raise InvalidStatusTransitionError(
                "transport request", request_id_str, request.get("status"), "cancel"
            )

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("transport_requests")
                .update({"status": RequestStatus.CANCELLED.value})
                .eq("id", request_id_str)
                .execute()
            )
            logger.info(f"Cancelled transport request: {request_id_str}")
            return response.data[0] if response.data else {**request, "status": RequestStatus.CANCELLED.value}

        except Exception as e:
            logger.error(f"Failed to cancel transport request: {e}")
            raise

    # -------------------------------------------------------------------------
    # Transporter side
    # -------------------------------------------------------------------------

    @staticmethod
    def list_available_requests(
        transporter_id: UUID | str,
        filters: RequestFilters | None = None,
        today: date | None = None,
    ) -> list[dict[str, Any]]:
        """
        Open requests a transporter can bid on, newest first.

        Each request carries `existing_bid`: the caller's own bid on it, if any.
        """
        transporter_id_str = normalize_uuid(transporter_id)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("transport_requests")
                .select(AVAILABLE_REQUEST_SELECT)
                .eq("status", RequestStatus.ACTIVE.value)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching requests: {e}")
            raise

        requests = []
        for request in response.data or []:
            existing = next(
                (b for b in request.get("bids") or [] if str(b.get("transporter_id")) == transporter_id_str),
                None,
            )
            requests.append({**request, "existing_bid": existing})

        return RequestService.apply_filters(requests, filters or RequestFilters(), today=today)

    @staticmethod
    def apply_filters(
        requests: list[dict[str, Any]],
        filters: RequestFilters,
        today: date | None = None,
    ) -> list[dict[str, Any]]:
        """
        Apply the transporter dashboard filters.

        Budget bands: low < 500, medium 500-1000, high > 1000. Requests
        without a budget count as 0, so they fall in the low band. Date
        bands count whole days from today to the pickup date.
        """
        today = today or date.today()
        needle = (filters.location or "").strip().lower()

        def keep(request: dict[str, Any]) -> bool:
            if filters.exclude_bid and request.get("existing_bid"):
                return False

            if needle:
                origin = (request.get("origin_location") or "").lower()
                destination = (request.get("destination_location") or "").lower()
                if needle not in origin and needle not in destination:
                    return False

            if filters.pet_type and request.get("pet_type") != filters.pet_type:
                return False

            if filters.budget != BudgetBand.ALL:
                budget = request.get("budget") or 0
                if filters.budget == BudgetBand.LOW and not budget < 500:
                    return False
                if filters.budget == BudgetBand.MEDIUM and not 500 <= budget <= 1000:
                    return False
                if filters.budget == BudgetBand.HIGH and not budget > 1000:
                    return False

            if filters.pickup != DateBand.ALL:
                pickup = _as_date(request.get("pickup_date"))
                if pickup is None:
                    return False
                days = (pickup - today).days
                if filters.pickup == DateBand.WEEK and days > 7:
                    return False
                if filters.pickup == DateBand.MONTH and days > 30:
                    return False
                if filters.pickup == DateBand.LATER and days <= 30:
                    return False

            return True

        return [r for r in requests if keep(r)]
