# =============================================================================
# lib/validation.py - Input Validation and Normalization
# =============================================================================
# Pure functions shared by the client and contact flows:
# - e-mail / phone checks and list normalization
# - the record validator used before anything is saved
# - photo type/size checks
# - filename sanitizing for storage keys and exported documents
#
# Messages are the user-facing texts (pt-BR) shown by the prompts.
# =============================================================================

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable

from lib.phone import is_valid_phone

MAX_NAME_LENGTH = 80
MAX_EMAIL_LENGTH = 80
MAX_FILENAME_BASE = 120

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/jpg", "image/svg+xml")
MAX_IMAGE_SIZE = 2 * 1024 * 1024  # 2MB

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_EXTENSION_RE = re.compile(r"\.([^.]+)$")
_BASE_RE = re.compile(r"\.[^/.]+$")
_UNSAFE_STORAGE_CHARS = re.compile(r"[^a-zA-Z0-9\-_.]")
_UNSAFE_EXPORT_CHARS = re.compile(r"[^A-Za-z0-9_\-.]")
_UNDERSCORE_RUNS = re.compile(r"_+")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation: ok, or not ok with the message to show."""

    ok: bool
    message: str | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> ValidationResult:
        return cls(ok=False, message=message)


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email or ""))


def normalize_array_strings(items: Iterable[str | None] | None) -> list[str]:
    """Trim every entry and drop the blank ones, keeping order."""
    return [s.strip() for s in (items or []) if s and s.strip()]


def clamp_length(value: str | None, limit: int = MAX_NAME_LENGTH) -> str:
    """Truncate input the way the form fields do (maxLength)."""
    return (value or "")[:limit]


def validate_client_input(
    full_name: str | None,
    emails: Iterable[str | None] | None,
    phones: Iterable[str | None] | None,
) -> ValidationResult:
    """
    Validate the fields of a client record.

    Checks run in order and stop at the first failure:
    name, at least one e-mail, every e-mail, at least one phone, every phone.
    """
    if not full_name or not full_name.strip():
        return ValidationResult.failure("O nome é obrigatório.")

    email_list = normalize_array_strings(emails)
    if not email_list:
        return ValidationResult.failure("Informe ao menos um e-mail.")
    invalid_email = next((e for e in email_list if not is_valid_email(e)), None)
    if invalid_email is not None:
        return ValidationResult.failure(f"E-mail inválido: {invalid_email}")

    phone_list = normalize_array_strings(phones)
    if not phone_list:
        return ValidationResult.failure("Informe ao menos um telefone.")
    invalid_phone = next((p for p in phone_list if not is_valid_phone(p)), None)
    if invalid_phone is not None:
        return ValidationResult.failure(f"Telefone inválido: {invalid_phone}")

    return ValidationResult.success()


def validate_contact_input(
    full_name: str | None,
    emails: Iterable[str | None] | None,
    phones: Iterable[str | None] | None,
) -> ValidationResult:
    """Contacts follow exactly the client rules."""
    return validate_client_input(full_name, emails, phones)


def validate_image_file(
    content_type: str | None,
    size: int,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
    max_size: int = MAX_IMAGE_SIZE,
) -> ValidationResult:
    """
    Check a photo before upload.

    The type check runs first, so a text file is rejected whatever its size.
    """
    if (content_type or "").lower() not in tuple(allowed_types):
        return ValidationResult.failure("O arquivo deve ser jpeg, jpg, png ou svg.")
    if size > max_size:
        return ValidationResult.failure(
            f"A imagem deve ter no máximo {max_size // (1024 * 1024)}MB."
        )
    return ValidationResult.success()


def strip_diacritics(value: str) -> str:
    """Remove accents, e.g. "Relatório" -> "Relatorio"."""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not "\u0300" <= ch <= "\u036f")


def safe_file_name(name: str) -> str:
    """
    Make an uploaded filename safe to use in a storage key.

    Diacritics are removed, anything outside [A-Za-z0-9-_.] becomes "_",
    runs of "_" collapse, the base is cut to 120 chars and the original
    extension is re-appended in lower case.

    Example:
        safe_file_name("Relatório Final?.PDF")  # "Relatorio_Final_.pdf"
    """
    match = _EXTENSION_RE.search(name)
    ext = f".{match.group(1).lower()}" if match else ""
    base = _BASE_RE.sub("", name)

    safe_base = _UNSAFE_STORAGE_CHARS.sub("_", strip_diacritics(base))
    safe_base = _UNDERSCORE_RUNS.sub("_", safe_base)[:MAX_FILENAME_BASE]
    return f"{safe_base}{ext}"


def safe_filename_for_export(value: str | None) -> str:
    """
    Filename for a generated document.

    Each char outside [A-Za-z0-9_-.] is replaced one for one;
    empty input gives "document".
    """
    return _UNSAFE_EXPORT_CHARS.sub("_", value or "document")
