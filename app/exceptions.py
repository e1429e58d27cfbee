# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a human message, a machine code, and where possible a
# suggestion (and a redirect) telling the client what to do next.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class ShipPawsException(Exception):
    """
    Base exception for the Ship Paws API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SHIPPAWS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    @property
    def redirect(self) -> str | None:
        """Page the client should navigate to, if any."""
        return self.details.get("redirect")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Input Exceptions
# =============================================================================

class FormValidationError(ShipPawsException):
    """Raised when submitted form data is incomplete or malformed."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else None
        super().__init__(
            message=message,
            code="FORM_VALIDATION_FAILED",
            status_code=400,
            details=details,
        )


class DatabaseOperationError(ShipPawsException):
    """
    Raised when a write to the hosted database fails.

    The message has already been rewritten for end users; the raw
    database error is kept in details for debugging.
    """

    def __init__(self, message: str, operation: str, error: str, status_code: int = 500):
        super().__init__(
            message=message,
            code="DATABASE_OPERATION_FAILED",
            status_code=status_code,
            details={"operation": operation, "error": error},
        )


# =============================================================================
# Account Exceptions
# =============================================================================

class OnboardingRequiredError(ShipPawsException):
    """Raised when a signed-in user has no profile yet."""

    def __init__(self, user_id: str, message: str | None = None):
        super().__init__(
            message=message or "Please complete your account setup first by visiting your profile.",
            code="ONBOARDING_REQUIRED",
            status_code=409,
            suggestion="Create a profile using POST /api/v1/onboarding/profile",
            details={"user_id": user_id, "redirect": "/onboarding"},
        )


class WrongUserTypeError(ShipPawsException):
    """Raised when an operation is reserved for the other side of the marketplace."""

    def __init__(self, message: str, redirect: str):
        super().__init__(
            message=message,
            code="WRONG_USER_TYPE",
            status_code=403,
            details={"redirect": redirect},
        )


class TransporterNotApprovedError(ShipPawsException):
    """Raised when an unapproved transporter tries to use the marketplace."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Your transporter account is pending approval. Please wait for admin approval.",
            code="TRANSPORTER_NOT_APPROVED",
            status_code=403,
            suggestion="Finish the transporter application if you have not submitted it yet",
            details={"user_id": user_id, "redirect": "/transporters/onboard"},
        )


class AdminRequiredError(ShipPawsException):
    """Raised when a non-admin calls an admin endpoint."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Admin privileges required",
            code="ADMIN_REQUIRED",
            status_code=403,
            details={"user_id": user_id},
        )


# =============================================================================
# Marketplace Exceptions
# =============================================================================

class RequestNotFoundError(ShipPawsException):
    """Raised when a transport request ID doesn't exist or isn't visible to the caller."""

    def __init__(self, request_id: str):
        super().__init__(
            message=f"Transport request not found: {request_id}",
            code="REQUEST_NOT_FOUND",
            status_code=404,
            suggestion="Check that the request_id is correct",
            details={"request_id": request_id},
        )


class BidNotFoundError(ShipPawsException):
    """Raised when a bid ID doesn't exist or isn't visible to the caller."""

    def __init__(self, bid_id: str):
        super().__init__(
            message=f"Bid not found: {bid_id}",
            code="BID_NOT_FOUND",
            status_code=404,
            suggestion="Check that the bid_id is correct",
            details={"bid_id": bid_id},
        )


class PetNotFoundError(ShipPawsException):
    """Raised when a pet ID doesn't exist or belongs to someone else."""

    def __init__(self, pet_id: str):
        super().__init__(
            message=f"Pet not found: {pet_id}",
            code="PET_NOT_FOUND",
            status_code=404,
            details={"pet_id": pet_id},
        )


class TransporterNotFoundError(ShipPawsException):
    """Raised when a transporter profile doesn't exist."""

    def __init__(self, transporter_id: str):
        super().__init__(
            message=f"Transporter not found: {transporter_id}",
            code="TRANSPORTER_NOT_FOUND",
            status_code=404,
            details={"transporter_id": transporter_id},
        )


class InvalidStatusTransitionError(ShipPawsException):
    """Raised when a request or bid is not in a state that allows the action."""

    def __init__(self, entity: str, entity_id: str, current: str, action: str):
        super().__init__(
            message=f"Cannot {action} {entity} {entity_id} while it is {current}",
            code="INVALID_STATUS_TRANSITION",
            status_code=409,
            suggestion=f"Refresh the {entity} to see its latest status",
            details={"entity": entity, "id": entity_id, "status": current, "action": action},
        )


class DuplicateBidError(ShipPawsException):
    """Raised when a transporter bids twice on the same request."""

    def __init__(self, request_id: str, existing_bid_id: str):
        super().__init__(
            message="You have already placed a bid on this request.",
            code="DUPLICATE_BID",
            status_code=409,
            suggestion="Withdraw the existing bid first if you want to change your offer",
            details={"request_id": request_id, "existing_bid_id": existing_bid_id},
        )


class BidAcceptanceIncompleteError(ShipPawsException):
    """
    Raised when accepting a bid fails part way through.

    Steps that already succeeded are NOT rolled back; details list them
    so the inconsistency can be repaired by hand.
    """

    def __init__(self, bid_id: str, request_id: str, completed_steps: list[str], failed_step: str, error: str):
        super().__init__(
            message="Error accepting bid. Please try again.",
            code="BID_ACCEPTANCE_INCOMPLETE",
            status_code=500,
            suggestion="Earlier steps were applied and not reverted; check the request and its bids",
            details={
                "bid_id": bid_id,
                "request_id": request_id,
                "completed_steps": completed_steps,
                "failed_step": failed_step,
                "error": error,
            },
        )


class HandoffNotFoundError(ShipPawsException):
    """Raised when stashed form data is missing or has expired."""

    def __init__(self, key: str):
        super().__init__(
            message=f"No saved form data found: {key}",
            code="HANDOFF_NOT_FOUND",
            status_code=404,
            suggestion="The saved form may have expired; fill it in again",
            details={"key": key},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(ShipPawsException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class FileTooLargeError(ShipPawsException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(ShipPawsException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def shippaws_exception_handler(
    request: Request,
    exc: ShipPawsException
) -> JSONResponse:
    """
    Convert ShipPawsException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context (including redirect)
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
