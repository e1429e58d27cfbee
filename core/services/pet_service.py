# =============================================================================
# core/services/pet_service.py - Pet Onboarding Logic
# =============================================================================
# Validates and stores an owner's pets, and works out where the owner goes
# once pet onboarding is done or skipped.
# =============================================================================

import logging
import math
from typing import Any
from uuid import UUID

from lib.handoff import PENDING_QUOTE_REQUEST, HandoffBuffer
from lib.supabase_client import SupabaseClient
from lib.utils import blank_to_none, normalize_uuid
from core.models.pet import PetInput
from core.models.profile import UserType
from core.services.profile_service import ProfileService
from app.exceptions import DatabaseOperationError, FormValidationError, PetNotFoundError

logger = logging.getLogger(__name__)


def _parse_weight(value: str | None) -> float | None:
    """A positive finite number, or None when left blank. ValueError otherwise."""
    if value is None or not str(value).strip():
        return None
    weight = float(value)
    if not math.isfinite(weight) or weight <= 0:
        raise ValueError(f"invalid weight: {value}")
    return weight


def _parse_int(value: str | None) -> int | None:
    if value is None or not str(value).strip():
        return None
    return int(value)


class PetService:
    """Service for the pets table."""

    @staticmethod
    def validate_pets(owner_id: str, pets: list[PetInput]) -> list[dict[str, Any]]:
        """
        Check every pet and build the rows to insert.

        Stops at the first invalid pet, with a message naming it.

        Raises:
            FormValidationError: Missing name/species, bad weight or bad age
        """
        rows = []
        for index, pet in enumerate(pets, start=1):
            name = pet.name.strip()
            if not name or pet.species is None:
                raise FormValidationError(
                    f"Please fill in the name and species for pet {index}", field="name"
                )

            try:
                weight = _parse_weight(pet.weight)
            except ValueError:
                raise FormValidationError(f"Please enter a valid weight for {name}", field="weight")

            try:
                age_years = _parse_int(pet.age_years)
            except ValueError:
                age_years = -1
            if age_years is not None and age_years < 0:
                raise FormValidationError(f"Please enter a valid age for {name}", field="age_years")

            try:
                age_months = _parse_int(pet.age_months)
            except ValueError:
                age_months = -1
            if age_months is not None and not 0 <= age_months <= 11:
                raise FormValidationError(
                    f"Age months must be between 0-11 for {name}", field="age_months"
                )

            rows.append({
                "owner_id": owner_id,
                "name": name,
                "species": pet.species.value,
                "age_years": age_years,
                "age_months": age_months,
                "weight": weight,
                "weight_unit": pet.weight_unit.value,
                "special_needs": blank_to_none(pet.special_needs),
                "is_active": True,
            })
        return rows

    @staticmethod
    def add_pets(
        owner_id: UUID | str,
        pets: list[PetInput],
        redirect: str | None = None,
    ) -> dict[str, Any]:
        """
        Validate and insert pets in a single bulk insert.

        Returns:
            Dict with the inserted pets and the next page

        Raises:
            OnboardingRequiredError / WrongUserTypeError: If not a pet owner
            FormValidationError: If any pet is invalid
            DatabaseOperationError: If the insert fails
        """
        owner_id_str = normalize_uuid(owner_id)
        ProfileService.require_user_type(
            owner_id_str,
            UserType.PET_OWNER,
            message="Only pet owners can add pets.",
            redirect="/dashboard",
        )

        rows = PetService.validate_pets(owner_id_str, pets)
        client = SupabaseClient.get_client()

        try:
            response = client.table("pets").insert(rows).execute()
        except Exception as e:
            logger.error(f"Pet creation failed for {owner_id_str}: {e}")
            raise DatabaseOperationError(
                message=f"Error adding your pets: {str(e) or 'Please try again.'}",
                operation="add_pets",
                error=str(e),
            )

        logger.info(f"Added {len(rows)} pets for owner: {owner_id_str}")
        return {
            "pets": response.data or [],
            "redirect": PetService.next_after_pets(
                owner_id_str, redirect, default="/dashboard?success=onboarding-complete"
            ),
        }

    @staticmethod
    def skip_pets(owner_id: UUID | str, redirect: str | None = None) -> dict[str, Any]:
        """Leave pet onboarding without adding anything."""
        owner_id_str = normalize_uuid(owner_id)
        logger.info(f"Pet onboarding skipped by {owner_id_str}")
        return {"pets": [], "redirect": PetService.next_after_pets(owner_id_str, redirect)}

    @staticmethod
    def next_after_pets(owner_id: str, redirect: str | None, default: str = "/dashboard") -> str:
        """
        Where an owner goes after pet onboarding (saved or skipped).

        An explicit redirect wins; otherwise a waiting quote form sends
        the owner back to the quote page, which resumes it.
        """
        if redirect:
            return redirect
        if HandoffBuffer.exists(PENDING_QUOTE_REQUEST, owner_id):
            return "/request-quote"
        return default

    @staticmethod
    def list_pets(owner_id: UUID | str) -> list[dict[str, Any]]:
        """Active pets for an owner, newest first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("pets")
                .select("*")
                .eq("owner_id", normalize_uuid(owner_id))
                .eq("is_active", True)
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list pets: {e}")
            raise

    @staticmethod
    def deactivate_pet(owner_id: UUID | str, pet_id: UUID | str) -> dict[str, Any]:
        """
        Soft delete a pet (is_active = false).

        Raises:
            PetNotFoundError: If the pet doesn't exist or belongs to someone else
        """
        owner_id_str = normalize_uuid(owner_id)
        pet_id_str = normalize_uuid(pet_id)

        pet = SupabaseClient.fetch_pet(pet_id_str)
        if not pet or str(pet.get("owner_id")) != owner_id_str:
            raise PetNotFoundError(pet_id_str)

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("pets")
                .update({"is_active": False})
                .eq("id", pet_id_str)
                .execute()
            )
            logger.info(f"Deactivated pet: {pet_id_str}")
            return response.data[0] if response.data else {**pet, "is_active": False}

        except Exception as e:
            logger.error(f"Failed to deactivate pet: {e}")
            raise
