# =============================================================================
# core/services/report_service.py - Clients and Contacts Report
# =============================================================================
# The report lists every client of the user, alphabetically, each with its
# contacts. It is served three ways:
# - JSON (build_report)
# - printable HTML (render_report_html)
# - PDF download (export_report_pdf)
# =============================================================================

import asyncio
import logging
from datetime import datetime

from app.config import settings
from core.models.client import ClientOrder
from core.models.contact import ClientWithContacts
from core.models.report import Report
from core.models.session import UserSession
from core.services.client_service import ClientService
from core.services.contact_service import ContactService
from core.services.export_service import ExportedDocument, html_to_pdf, render_template
from core.services.storage_service import (
    FALLBACK_AVATAR,
    FALLBACK_AVATAR_FILE,
    resolve_avatars,
)
from lib.images import image_url_to_data_url

logger = logging.getLogger(__name__)

REPORT_FILENAME = "relatorio_clientes_contatos.pdf"


class ReportService:
    """Builds and renders the clients/contacts report."""

    @staticmethod
    def build_report(session: UserSession) -> Report:
        """
        Fetch all clients, then each client's contacts.

        Contacts are fetched one client at a time, in client order.
        """
        clients = ClientService.list_clients(session, ClientOrder.ALPHABETICAL)

        entries: list[ClientWithContacts] = []
        for client in clients:
            contacts = ContactService.list_contacts_for_client(session, client.id)
            entries.append(ClientWithContacts(**client.model_dump(), contacts=contacts))

        logger.info(
            f"Built report for user {session.user_id}: "
            f"{len(entries)} clients, {sum(len(e.contacts) for e in entries)} contacts"
        )
        return Report(clients=entries, generated_at=datetime.now())

    @staticmethod
    def render_report_html(report: Report, avatars: dict[str, str] | None = None) -> str:
        """
        Printable HTML of the report.

        Args:
            report: Built report
            avatars: {client_id: image src}; missing entries use the placeholder
        """
        return render_template(
            "report.html",
            report=report,
            avatars=avatars or {},
            fallback_avatar=FALLBACK_AVATAR,
        )

    @staticmethod
    async def embed_avatars(report: Report, concurrency: int | None = None) -> dict[str, str]:
        """
        Resolve every client photo and inline it as a data: URL.

        At most AVATAR_CONCURRENCY downloads run at once.
        """
        limit = concurrency or settings.AVATAR_CONCURRENCY
        urls = await resolve_avatars(
            report.clients,
            expires_in=settings.REPORT_SIGNED_URL_TTL_SECONDS,
            concurrency=limit,
        )
        semaphore = asyncio.Semaphore(limit)

        async def embed(client_id: str, url: str) -> tuple[str, str]:
            async with semaphore:
                data_url = await asyncio.to_thread(
                    image_url_to_data_url,
                    url,
                    FALLBACK_AVATAR_FILE,
                    settings.IMAGE_FETCH_TIMEOUT_SECONDS,
                )
            return client_id, data_url

        pairs = await asyncio.gather(*(embed(cid, url) for cid, url in urls.items()))
        return dict(pairs)

    @staticmethod
    async def export_report_pdf(report: Report) -> ExportedDocument:
        """Render the report as a PDF with photos embedded."""
        avatars = await ReportService.embed_avatars(report)
        html = ReportService.render_report_html(report, avatars)
        content = await asyncio.to_thread(html_to_pdf, html)

        logger.info(f"Exported report ({report.total_clients} clients, {len(content)} bytes)")
        return ExportedDocument(filename=REPORT_FILENAME, content=content)
