# =============================================================================
# core/forms.py - Client and Contact Form Orchestration
# =============================================================================
# A form instance collects input, then submit() runs:
#
#   idle -> validating -> confirming -> submitting -> closed
#                |             |              |
#                +-------------+--------------+--> idle (validation failed,
#                                                  declined, or save error)
#
# The persistence step is an injected callback (on_submit), so the same form
# serves both create and update. Prompts go through a Prompter.
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable

from app.config import settings
from core.models.client import Client, ClientData
from core.models.contact import Contact, ContactData
from core.models.session import UserSession
from core.services.alerts import Prompter
from core.services.storage_service import StorageService, extract_storage_path, BUCKET_CLIENTS
from lib.phone import mask_for
from lib.validation import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    clamp_length,
    normalize_array_strings,
    validate_client_input,
    validate_contact_input,
    validate_image_file,
)

logger = logging.getLogger(__name__)


class FormState(str, Enum):
    """Where a form is in its submit cycle."""
    IDLE = "idle"
    VALIDATING = "validating"
    CONFIRMING = "confirming"
    SUBMITTING = "submitting"
    CLOSED = "closed"


@dataclass
class PendingImage:
    """A photo picked in the form but not uploaded yet."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)

    def validate(self):
        return validate_image_file(
            self.content_type,
            self.size,
            allowed_types=settings.allowed_image_types_list,
            max_size=settings.max_image_size_bytes,
        )


def _error_message(exc: Exception, fallback: str) -> str:
    return getattr(exc, "message", None) or str(exc) or fallback


class _RecordForm(ABC):
    """Shared field editing for the client and contact forms."""

    ENTITY = ""

    def __init__(
        self,
        session: UserSession,
        prompter: Prompter,
        on_submit: Callable[[Any], Any],
        full_name: str = "",
        emails: list[str] | None = None,
        phones: list[str] | None = None,
    ):
        self.session = session
        self.prompter = prompter
        self.on_submit = on_submit
        self.full_name = clamp_length(full_name, MAX_NAME_LENGTH)
        self.emails = list(emails) if emails else [""]
        self.phones = list(phones) if phones else [""]
        self.state = FormState.IDLE
        self.result: Any = None
        self.error: Exception | None = None

    # -------------------------------------------------------------------------
    # Field editing
    # -------------------------------------------------------------------------

    def set_full_name(self, value: str) -> None:
        self.full_name = clamp_length(value, MAX_NAME_LENGTH)

    def fill(self, full_name: str, emails: list[str] | None, phones: list[str] | None) -> None:
        """Replace every text field at once, as a submitted request does."""
        self.set_full_name(full_name)
        self.emails = [clamp_length(e, MAX_EMAIL_LENGTH) for e in emails] if emails else [""]
        self.phones = list(phones) if phones else [""]

    def add_email(self) -> None:
        self.emails.append("")

    def update_email(self, index: int, value: str) -> None:
        self.emails[index] = clamp_length(value, MAX_EMAIL_LENGTH)

    def remove_email(self, index: int) -> None:
        # The last field stays
        if len(self.emails) > 1:
            del self.emails[index]

    def add_phone(self) -> None:
        self.phones.append("")

    def update_phone(self, index: int, value: str) -> None:
        self.phones[index] = value

    def remove_phone(self, index: int) -> None:
        if len(self.phones) > 1:
            del self.phones[index]

    # -------------------------------------------------------------------------
    # Submit steps
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def is_edit(self) -> bool:
        """True when the form edits an existing record."""

    @abstractmethod
    def _validate(self):
        """Check the current fields and return a ValidationResult."""

    def _abort(self, message: str | None = None) -> FormState:
        if message:
            self.prompter.validation(message)
        self.state = FormState.IDLE
        return self.state

    def _confirm(self) -> bool:
        self.state = FormState.CONFIRMING
        return self.prompter.confirm_save(self.is_edit, self.ENTITY)

    def _fail(self, exc: Exception, fallback: str) -> FormState:
        logger.exception(f"Failed to save {self.ENTITY}: {exc}")
        self.error = exc
        self.prompter.error("Erro", _error_message(exc, fallback))
        self.state = FormState.IDLE
        return self.state


class ClientForm(_RecordForm):
    """
    Create/edit form for a client, including its photo.

    Example:
        form = ClientForm(session, prompter, on_submit=view.handle_create)
        form.set_full_name("Ana Silva")
        form.update_email(0, "ana@ex.com")
        form.update_phone(0, "(11) 99999-0000")
        form.submit()  # FormState.CLOSED
    """

    ENTITY = "cliente"

    def __init__(
        self,
        session: UserSession,
        prompter: Prompter,
        on_submit: Callable[[ClientData], Any],
        client: Client | None = None,
        storage: type[StorageService] = StorageService,
    ):
        super().__init__(
            session,
            prompter,
            on_submit,
            full_name=client.full_name if client else "",
            emails=client.emails if client else None,
            phones=client.phones if client else None,
        )
        self.client = client
        self.storage = storage
        # New clients are registered today; existing ones keep their date
        self.registration_date: date = client.registration_date if client else date.today()
        self.foto_url: str = (client.foto_url or "") if client else ""
        self.local_file: PendingImage | None = None
        self.delete_existing = False

    @property
    def is_edit(self) -> bool:
        return self.client is not None

    # -------------------------------------------------------------------------
    # Photo
    # -------------------------------------------------------------------------

    def set_image(self, filename: str, content: bytes, content_type: str | None) -> bool:
        """
        Pick a new photo. Invalid files are rejected right away.

        Returns:
            True if the photo was accepted
        """
        image = PendingImage(filename=filename, content=content, content_type=content_type)
        check = image.validate()
        if not check.ok:
            self.local_file = None
            self.prompter.validation(check.message)
            return False

        self.local_file = image
        self.delete_existing = False
        return True

    def remove_image(self) -> None:
        """Drop the picked photo and mark the stored one for deletion."""
        self.local_file = None
        self.foto_url = ""
        self.delete_existing = bool(self.client and self.client.foto_url)

    def _remove_quietly(self, path: str) -> None:
        try:
            self.storage.remove_file(path)
        except Exception as e:
            logger.warning(f"Could not remove superseded image {path}: {e}")

    def _resolve_photo(self) -> str | None:
        """Upload the new photo / drop the old one; return the reference to store."""
        final_foto: str | None = self.foto_url or None
        original = (self.client.foto_url or "") if self.client else ""
        uploaded: str | None = None

        if self.local_file:
            uploaded = self.storage.upload_client_image(
                self.session.user_id,
                self.local_file.filename,
                self.local_file.content,
                self.local_file.content_type,
                prefix=self.client.id if self.client else None,
            )
            final_foto = uploaded

            old_path = extract_storage_path(original, BUCKET_CLIENTS)
            if old_path and old_path != uploaded:
                self._remove_quietly(old_path)

        if self.delete_existing and not uploaded and original:
            old_path = extract_storage_path(original, BUCKET_CLIENTS)
            if old_path:
                self._remove_quietly(old_path)
            final_foto = None

        return final_foto

    # -------------------------------------------------------------------------
    # Submit
    # -------------------------------------------------------------------------

    def _validate(self):
        return validate_client_input(self.full_name, self.emails, self.phones)

    def submit(self) -> FormState:
        """
        Validate, confirm, upload, save.

        Returns:
            CLOSED on success, IDLE otherwise (the reason is in the prompts)
        """
        self.error = None
        self.state = FormState.VALIDATING

        check = self._validate()
        if not check.ok:
            return self._abort(check.message)

        if self.local_file:
            image_check = self.local_file.validate()
            if not image_check.ok:
                return self._abort(image_check.message)

        if not self._confirm():
            return self._abort()

        self.state = FormState.SUBMITTING
        try:
            data = ClientData(
                full_name=self.full_name,
                emails=normalize_array_strings(self.emails),
                phones=normalize_array_strings(self.phones),
                registration_date=self.registration_date,
                foto_url=self._resolve_photo(),
            )
            self.result = self.on_submit(data)
        except Exception as e:
            return self._fail(e, "Falha ao salvar cliente")

        self.prompter.success(
            "Cliente atualizado com sucesso." if self.is_edit else "Cliente criado com sucesso."
        )
        self.delete_existing = False
        self.state = FormState.CLOSED
        return self.state


class ContactForm(_RecordForm):
    """
    Create/edit form for a contact of a given client.

    Phone fields carry an input mask each; the mask is the fixed
    "(99) 99999-9999" pattern.
    """

    ENTITY = "contato"

    def __init__(
        self,
        session: UserSession,
        prompter: Prompter,
        on_submit: Callable[[ContactData], Any],
        client_id: str,
        contact: Contact | None = None,
    ):
        super().__init__(
            session,
            prompter,
            on_submit,
            full_name=contact.full_name if contact else "",
            emails=contact.emails if contact else None,
            phones=contact.phones if contact else None,
        )
        self.contact = contact
        self.client_id = client_id
        self.masks = [mask_for("") for _ in self.phones]

    @property
    def is_edit(self) -> bool:
        return self.contact is not None

    def add_phone(self) -> None:
        super().add_phone()
        self.masks.append(mask_for(""))

    def update_phone(self, index: int, value: str) -> None:
        super().update_phone(index, value)
        self.masks[index] = mask_for(value)

    def remove_phone(self, index: int) -> None:
        if len(self.phones) > 1:
            del self.phones[index]
            del self.masks[index]

    def fill(self, full_name: str, emails: list[str] | None, phones: list[str] | None) -> None:
        super().fill(full_name, emails, phones)
        self.masks = [mask_for(p) for p in self.phones]

    def _validate(self):
        return validate_contact_input(self.full_name, self.emails, self.phones)

    def submit(self) -> FormState:
        """Validate, confirm, save. Returns CLOSED on success, IDLE otherwise."""
        self.error = None
        self.state = FormState.VALIDATING

        check = self._validate()
        if not check.ok:
            return self._abort(check.message)

        if not self._confirm():
            return self._abort()

        self.state = FormState.SUBMITTING
        try:
            self.result = self.on_submit(
                ContactData(
                    full_name=self.full_name,
                    emails=normalize_array_strings(self.emails),
                    phones=normalize_array_strings(self.phones),
                    client_id=self.client_id,
                )
            )
        except Exception as e:
            return self._fail(e, "Falha ao salvar contato")

        self.prompter.success(
            "Contato atualizado com sucesso." if self.is_edit else "Contato criado com sucesso."
        )
        self.state = FormState.CLOSED
        return self.state
