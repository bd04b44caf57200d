# =============================================================================
# core/services/export_service.py - Document Rendering and PDF Export
# =============================================================================
# Documents are Jinja2 templates (core/templates) rendered to HTML, then to
# PDF with WeasyPrint. Client photos are inlined as data: URLs so the
# renderer never needs network access.
#
# - export_contact_pdf: one contact with its client's header
# - export_client_pdf: a client and a table of its contacts
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import settings
from app.exceptions import ClientNotFoundError
from core.models.client import Client
from core.models.contact import Contact
from core.models.session import UserSession
from core.services.client_service import ClientService
from core.services.contact_service import ContactService
from core.services.storage_service import FALLBACK_AVATAR_FILE, StorageService
from lib.images import image_url_to_data_url
from lib.validation import safe_filename_for_export

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

PDF_MEDIA_TYPE = "application/pdf"


# =============================================================================
# Rendering
# =============================================================================

def br_date(value: date | datetime | str | None) -> str:
    """dd/mm/yyyy, as the pt-BR locale prints dates."""
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value.strftime("%d/%m/%Y")


def br_time(value: datetime | None) -> str:
    return value.strftime("%H:%M:%S") if value else ""


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["br_date"] = br_date
    env.filters["br_time"] = br_time
    return env


_env = _build_environment()


def render_template(name: str, **context) -> str:
    return _env.get_template(name).render(**context)


def html_to_pdf(html: str) -> bytes:
    """Render HTML to PDF bytes."""
    # Imported here: WeasyPrint loads native libraries (pango) on import
    from weasyprint import HTML

    return HTML(string=html, base_url=str(TEMPLATES_DIR)).write_pdf()


@dataclass
class ExportedDocument:
    """A generated file, ready to be sent as a download."""

    filename: str
    content: bytes
    media_type: str = PDF_MEDIA_TYPE

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def embedded_avatar(foto_url: str | None) -> str:
    """Client photo as a data: URL, or the placeholder."""
    url = StorageService.resolve_client_image_url(
        foto_url, expires_in=settings.REPORT_SIGNED_URL_TTL_SECONDS
    )
    return image_url_to_data_url(
        url, FALLBACK_AVATAR_FILE, timeout=settings.IMAGE_FETCH_TIMEOUT_SECONDS
    )


# =============================================================================
# Export Service
# =============================================================================

class ExportService:
    """Per-contact and per-client PDF exports."""

    @staticmethod
    def _find_client(session: UserSession, client_id: str) -> Client | None:
        try:
            return ClientService.get_client(session, client_id)
        except ClientNotFoundError:
            return None

    @staticmethod
    def render_contact_html(contact: Contact, client: Client | None, avatar: str) -> str:
        return render_template("contact.html", contact=contact, client=client, avatar=avatar)

    @staticmethod
    def render_client_html(client: Client, contacts: list[Contact], avatar: str) -> str:
        return render_template(
            "client_contacts.html", client=client, contacts=contacts, avatar=avatar
        )

    @staticmethod
    def export_contact_pdf(session: UserSession, contact_id: str) -> ExportedDocument:
        """
        One contact, headed by its client's photo, name and registration date.

        Raises:
            ContactNotFoundError: If the contact isn't the user's
        """
        contact = ContactService.get_contact(session, contact_id)
        client = ExportService._find_client(session, contact.client_id)

        html = ExportService.render_contact_html(
            contact, client, embedded_avatar(client.foto_url if client else None)
        )

        filename = f"{safe_filename_for_export(contact.full_name or 'contact')}.pdf"
        logger.info(f"Exporting contact {contact_id} as {filename}")
        return ExportedDocument(filename=filename, content=html_to_pdf(html))

    @staticmethod
    def export_client_pdf(session: UserSession, client_id: str) -> ExportedDocument:
        """
        A client and all its contacts as a table.

        Raises:
            ClientNotFoundError: If the client isn't the user's
        """
        client = ClientService.get_client(session, client_id)
        contacts = ContactService.list_contacts_for_client(session, client_id)

        html = ExportService.render_client_html(client, contacts, embedded_avatar(client.foto_url))

        filename = f"{safe_filename_for_export(client.full_name or 'client')}_contacts.pdf"
        logger.info(f"Exporting client {client_id} as {filename}")
        return ExportedDocument(filename=filename, content=html_to_pdf(html))
