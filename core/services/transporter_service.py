# =============================================================================
# core/services/transporter_service.py - Transporter Accounts
# =============================================================================
# Approval gate for the transporter dashboard, the four-step transporter
# application (with a draft kept in the hand-off buffer) and admin approval.
# =============================================================================

import logging
import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from lib.handoff import TRANSPORTER_ONBOARD_DATA, HandoffBuffer
from lib.supabase_client import SupabaseClient
from lib.utils import blank_to_none, normalize_uuid
from core.models.profile import UserType
from core.models.transporter_application import (
    APPLICATION_STEPS,
    REQUIRED_DOCUMENTS,
    TransporterApplication,
)
from core.services.profile_service import ProfileService
from core.services.storage_service import StorageService
from app.config import settings
from app.exceptions import (
    AdminRequiredError,
    FormValidationError,
    TransporterNotApprovedError,
    TransporterNotFoundError,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class TransporterService:
    """Service for transporter_profiles."""

    # -------------------------------------------------------------------------
    # Access checks
    # -------------------------------------------------------------------------

    @staticmethod
    def check_status(user_id: UUID | str) -> dict[str, Any]:
        """
        Make sure the caller is an approved transporter.

        Returns:
            The transporter profile row

        Raises:
            OnboardingRequiredError: No profile yet
            WrongUserTypeError: Caller is a pet owner
            TransporterNotApprovedError: Not approved (or no transporter row)
        """
        user_id_str = normalize_uuid(user_id)
        ProfileService.require_user_type(
            user_id_str,
            UserType.TRANSPORTER,
            message="Only transporters can use the transporter dashboard.",
            redirect="/dashboard",
        )

        transporter = SupabaseClient.fetch_transporter_profile(user_id_str)
        if not transporter or not transporter.get("is_approved"):
            logger.info(f"Transporter {user_id_str} is pending approval")
            raise TransporterNotApprovedError(user_id_str)

        return transporter

    @staticmethod
    def require_admin(user_id: UUID | str) -> None:
        user_id_str = normalize_uuid(user_id)
        if user_id_str not in settings.admin_user_ids_list:
            logger.warning(f"Non-admin {user_id_str} attempted an admin action")
            raise AdminRequiredError(user_id_str)

    # -------------------------------------------------------------------------
    # Application wizard
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_step(step: int, application: TransporterApplication) -> None:
        """
        Check one step of the application.

        Raises:
            FormValidationError: With the message the step's form shows
        """
        if step == 1:
            if not all([application.first_name, application.last_name,
                        application.email, application.phone]):
                raise FormValidationError("Please fill in all required fields")
            if not EMAIL_PATTERN.match(application.email):
                raise FormValidationError("Please enter a valid email address", field="email")

        elif step == 2:
            if not all([application.vehicle_type, application.vehicle_make,
                        application.vehicle_model, application.vehicle_year,
                        application.max_pet_capacity]):
                raise FormValidationError("Please fill in all required fields")

        elif step == 3:
            has_documents = all(kind in application.documents for kind in REQUIRED_DOCUMENTS)
            if not has_documents or not application.background_check_consent:
                raise FormValidationError(
                    "Please upload required documents and provide consent for background check"
                )

        elif step == 4:
            if not application.terms_accepted:
                raise FormValidationError(
                    "Please accept the terms and conditions to continue", field="terms_accepted"
                )

        else:
            raise FormValidationError(f"Unknown application step: {step}", field="step")

    @staticmethod
    def verify_documents(user_id: UUID | str, application: TransporterApplication) -> None:
        """
        Check every cited document is the applicant's own upload.

        Raises:
            FormValidationError: A path points elsewhere or the file is missing
        """
        user_id_str = normalize_uuid(user_id)
        for kind, path in application.documents.items():
            if not StorageService.is_uploaded_document(user_id_str, kind, path):
                logger.warning(f"Transporter {user_id_str} cited a document it did not upload: {path}")
                raise FormValidationError(
                    "Please upload required documents and provide consent for background check",
                    field=f"documents.{kind.value}",
                )

    @staticmethod
    def load_draft(user_id: UUID | str) -> TransporterApplication:
        """The saved draft, or an empty application. Documents are never in the draft."""
        saved = HandoffBuffer.get(TRANSPORTER_ONBOARD_DATA, normalize_uuid(user_id)) or {}
        saved.pop("documents", None)
        known = {k: v for k, v in saved.items() if k in TransporterApplication.model_fields}
        return TransporterApplication(**known)

    @staticmethod
    def save_draft(user_id: UUID | str, application: TransporterApplication) -> None:
        HandoffBuffer.put(
            TRANSPORTER_ONBOARD_DATA, normalize_uuid(user_id), application.draft_fields()
        )

    @staticmethod
    def complete_step(
        user_id: UUID | str,
        step: int,
        application: TransporterApplication,
    ) -> dict[str, Any]:
        """Validate a step, save the draft, and report the next step."""
        TransporterService.validate_step(step, application)
        if step == 3:
            TransporterService.verify_documents(user_id, application)
        TransporterService.save_draft(user_id, application)
        next_step = min(step + 1, len(APPLICATION_STEPS))
        return {
            "step": step,
            "step_name": APPLICATION_STEPS[step - 1],
            "next_step": next_step,
            "total_steps": len(APPLICATION_STEPS),
        }

    @staticmethod
    def submit_application(
        user_id: UUID | str,
        application: TransporterApplication,
    ) -> dict[str, Any]:
        """
        Validate every step, store the application on the transporter
        profile, and clear the draft.

        The row stays unapproved until an admin approves it.

        Raises:
            FormValidationError: If any step is incomplete
            TransporterNotFoundError: If onboarding never created the transporter row
        """
        user_id_str = normalize_uuid(user_id)
        for step in range(1, len(APPLICATION_STEPS) + 1):
            TransporterService.validate_step(step, application)
        TransporterService.verify_documents(user_id_str, application)

        if not SupabaseClient.fetch_transporter_profile(user_id_str):
            raise TransporterNotFoundError(user_id_str)

        update = {
            "business_name": blank_to_none(application.business_name),
            "vehicle_type": application.vehicle_type,
            "vehicle_capacity": application.max_pet_capacity,
            "vehicle_make": application.vehicle_make,
            "vehicle_model": application.vehicle_model,
            "vehicle_year": application.vehicle_year,
            "climate_control": application.climate_control,
            "service_areas": blank_to_none(application.service_areas),
            "experience_years": blank_to_none(application.experience_years),
            "special_accommodations": blank_to_none(application.special_accommodations),
            "documents": {kind.value: path for kind, path in application.documents.items()},
            "background_check_consent": application.background_check_consent,
            "application_submitted_at": datetime.now(timezone.utc).isoformat(),
        }

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("transporter_profiles")
                .update(update)
                .eq("id", user_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to submit transporter application: {e}")
            raise

        HandoffBuffer.delete(TRANSPORTER_ONBOARD_DATA, user_id_str)
        logger.info(f"Transporter application submitted: {user_id_str}")

        row = response.data[0] if response.data else update
        return {
            "transporter_id": user_id_str,
            "is_approved": bool(row.get("is_approved", False)),
            "message": (
                f"Application submitted successfully! Thank you {application.first_name}, "
                "we'll review your application and get back to you within 2-3 business days. "
                f"You'll receive a confirmation email at {application.email} shortly."
            ),
        }

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    @staticmethod
    def approve_transporter(admin_id: UUID | str, transporter_id: UUID | str) -> dict[str, Any]:
        """
        Approve a transporter so they can bid.

        Raises:
            AdminRequiredError: If the caller is not an admin
            TransporterNotFoundError: If there is no transporter row
        """
        TransporterService.require_admin(admin_id)
        transporter_id_str = normalize_uuid(transporter_id)

        transporter = SupabaseClient.fetch_transporter_profile(transporter_id_str)
        if not transporter:
            raise TransporterNotFoundError(transporter_id_str)

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("transporter_profiles")
                .update({"is_approved": True})
                .eq("id", transporter_id_str)
                .execute()
            )
            logger.info(f"Approved transporter: {transporter_id_str} by admin: {admin_id}")
            return response.data[0] if response.data else {**transporter, "is_approved": True}

        except Exception as e:
            logger.error(f"Failed to approve transporter: {e}")
            raise

    @staticmethod
    def list_pending(admin_id: UUID | str) -> list[dict[str, Any]]:
        """Transporters waiting for approval, oldest first."""
        TransporterService.require_admin(admin_id)
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("transporter_profiles")
                .select("*")
                .eq("is_approved", False)
                .order("created_at", desc=False)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list pending transporters: {e}")
            raise
