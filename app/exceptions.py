# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a hint
# on how to fix it.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CadastroException(Exception):
    """
    Base exception for the Cadastro API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "CADASTRO_ERROR",
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

class ValidationFailedError(CadastroException):
    """Raised when client/contact input fails validation."""

    def __init__(self, message: str, alerts: list[dict] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=422,
            suggestion="Fix the highlighted field and submit again",
            details={"alerts": alerts} if alerts else None,
        )


class InvalidImageError(CadastroException):
    """Raised when an uploaded photo has the wrong type or size."""

    def __init__(self, message: str, content_type: str | None, size: int):
        super().__init__(
            message=message,
            code="INVALID_IMAGE",
            status_code=400,
            suggestion="Upload a jpeg, jpg, png or svg image up to 2MB",
            details={"content_type": content_type, "size": size},
        )


class ConfirmationDeclinedError(CadastroException):
    """Raised when the caller declined the confirmation step."""

    def __init__(self, action: str, entity: str):
        super().__init__(
            message=f"Confirmation declined: {action} {entity}",
            code="CONFIRMATION_DECLINED",
            status_code=409,
            suggestion="Send confirm=true to carry out the operation",
            details={"action": action, "entity": entity},
        )


# =============================================================================
# Record Exceptions
# =============================================================================

class ClientNotFoundError(CadastroException):
    """Raised when a client ID doesn't exist for the current user."""

    def __init__(self, client_id: str):
        super().__init__(
            message=f"Client not found: {client_id}",
            code="CLIENT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the client_id is correct and belongs to you",
            details={"client_id": client_id},
        )


class ContactNotFoundError(CadastroException):
    """Raised when a contact ID doesn't exist for the current user."""

    def __init__(self, contact_id: str):
        super().__init__(
            message=f"Contact not found: {contact_id}",
            code="CONTACT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the contact_id is correct and belongs to you",
            details={"contact_id": contact_id},
        )


class PersistenceError(CadastroException):
    """Raised when the save/delete call to the database fails."""

    def __init__(self, message: str, alerts: list[dict] | None = None):
        super().__init__(
            message=message,
            code="PERSISTENCE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"alerts": alerts} if alerts else None,
        )


# =============================================================================
# Storage Exceptions
# =============================================================================

class StorageUploadError(CadastroException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(CadastroException):
    """Raised when sign-in or sign-up is rejected by Supabase Auth."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Authentication failed: {error}",
            code="AUTHENTICATION_FAILED",
            status_code=401,
            suggestion="Check the email and password",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def cadastro_exception_handler(
    request: Request,
    exc: CadastroException
) -> JSONResponse:
    """
    Convert CadastroException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
