# =============================================================================
# tests/test_export.py - Report and PDF Export Tests
# =============================================================================
# The HTML side is rendered for real (Jinja2); the PDF step and every
# network/storage call are patched.
# =============================================================================

import asyncio
import threading
import time
from datetime import date, datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from core.models import ClientWithContacts, Report
from core.services.export_service import (
    ExportService,
    br_date,
    br_time,
    render_template,
)
from core.services.report_service import REPORT_FILENAME, ReportService
from lib.images import image_url_to_data_url, to_data_url
from tests.conftest import make_client, make_contact


def build_report(clients, contacts) -> Report:
    entries = [
        ClientWithContacts(
            **c.model_dump(),
            contacts=[ct for ct in contacts if ct.client_id == c.id],
        )
        for c in clients
    ]
    return Report(clients=entries, generated_at=datetime(2024, 3, 5, 14, 7, 9))


class TestFilters:

    def test_br_date(self):
        assert br_date(date(2024, 1, 5)) == "05/01/2024"
        assert br_date("2024-01-15T10:30:00Z") == "15/01/2024"
        assert br_date(None) == ""

    def test_br_time(self):
        assert br_time(datetime(2024, 1, 5, 9, 3, 0)) == "09:03:00"


# =============================================================================
# Report
# =============================================================================

class TestBuildReport:

    def test_contacts_fetched_per_client_in_order(self, session, clients, contacts):
        with patch("core.services.report_service.ClientService") as client_service, \
                patch("core.services.report_service.ContactService") as contact_service:
            client_service.list_clients.return_value = clients
            contact_service.list_contacts_for_client.side_effect = (
                lambda s, client_id: [ct for ct in contacts if ct.client_id == client_id]
            )

            report = ReportService.build_report(session)

        assert [c.id for c in report.clients] == ["c1", "c2", "c3"]
        assert report.total_clients == 3
        assert report.total_contacts == 3
        assert [c.args[1] for c in contact_service.list_contacts_for_client.call_args_list] == [
            "c1", "c2", "c3"
        ]


class TestReportHtml:

    def test_header_and_totals(self, clients, contacts):
        html = ReportService.render_report_html(build_report(clients, contacts))

        assert "Relatório de Clientes e Contatos" in html
        assert "Gerado em: 05/03/2024 às 14:07:09" in html
        assert "Contatos (2)" in html
        assert "Nenhum contato cadastrado" in html
        assert "Cadastrado em: 15/01/2024" in html

    def test_missing_avatar_uses_placeholder(self, clients):
        html = ReportService.render_report_html(
            build_report(clients[:1], []), avatars={}
        )

        assert 'src="/assets/avatar.svg"' in html

    def test_empty_report(self):
        html = ReportService.render_report_html(build_report([], []))

        assert "Nenhum dado para exibir" in html

    def test_names_are_escaped(self):
        report = build_report([make_client("c1", "<b>Ana</b>")], [])

        html = ReportService.render_report_html(report)

        assert "&lt;b&gt;Ana&lt;/b&gt;" in html

    def test_export_pdf_embeds_avatars(self, clients, contacts):
        report = build_report(clients, contacts)

        with patch("core.services.report_service.resolve_avatars") as resolve, \
                patch("core.services.report_service.image_url_to_data_url") as embed, \
                patch("core.services.report_service.html_to_pdf") as to_pdf:
            async def fake_resolve(*args, **kwargs):
                return {"c1": "https://signed/a.png", "c2": "/assets/avatar.svg"}

            resolve.side_effect = fake_resolve
            embed.side_effect = lambda url, fallback, timeout: f"data:{url}"
            to_pdf.return_value = b"%PDF-1.7"

            document = asyncio.run(ReportService.export_report_pdf(report))

        assert document.filename == REPORT_FILENAME
        assert document.content == b"%PDF-1.7"
        html = to_pdf.call_args.args[0]
        assert 'src="data:https://signed/a.png"' in html

    def test_embed_avatars_is_bounded(self):
        report = build_report([make_client(f"c{i}", f"Ana {i}") for i in range(6)], [])
        lock = threading.Lock()
        running = []
        peak = []

        def slow_embed(url, fallback, timeout):
            with lock:
                running.append(url)
                peak.append(len(running))
            time.sleep(0.01)
            with lock:
                running.remove(url)
            return f"data:{url}"

        with patch("core.services.report_service.resolve_avatars") as resolve, \
                patch("core.services.report_service.image_url_to_data_url", side_effect=slow_embed):
            async def fake_resolve(clients, **kwargs):
                return {c.id: f"https://signed/{c.id}.png" for c in clients}

            resolve.side_effect = fake_resolve
            avatars = asyncio.run(ReportService.embed_avatars(report, concurrency=2))

        assert len(avatars) == 6
        assert max(peak) <= 2
        assert resolve.call_args.kwargs["concurrency"] == 2


# =============================================================================
# Per-record Export
# =============================================================================

@pytest.fixture
def pdf():
    with patch("core.services.export_service.html_to_pdf", return_value=b"%PDF") as to_pdf, \
            patch("core.services.export_service.embedded_avatar", return_value="data:image/svg+xml;base64,AA"):
        yield to_pdf


class TestExportService:

    def test_contact_pdf(self, session, pdf):
        contact = make_contact("k1", "c1", "Carla Dias")
        client = make_client("c1", "Ana Silva")

        with patch("core.services.export_service.ContactService") as contact_service, \
                patch("core.services.export_service.ClientService") as client_service:
            contact_service.get_contact.return_value = contact
            client_service.get_client.return_value = client

            document = ExportService.export_contact_pdf(session, "k1")

        assert document.filename == "Carla_Dias.pdf"
        assert document.media_type == "application/pdf"
        assert document.content_disposition == 'attachment; filename="Carla_Dias.pdf"'
        html = pdf.call_args.args[0]
        assert "Ana Silva" in html
        assert "Registro: 15/01/2024" in html
        assert "k1@ex.com" in html

    def test_non_ascii_name_gives_latin1_safe_header(self, session, pdf):
        with patch("core.services.export_service.ContactService") as contact_service, \
                patch("core.services.export_service.ClientService") as client_service:
            contact_service.get_contact.return_value = make_contact("k1", "c1", "Aydın")
            client_service.get_client.return_value = make_client("c1", "Ana Silva")

            document = ExportService.export_contact_pdf(session, "k1")

        assert document.filename == "Ayd_n.pdf"
        document.content_disposition.encode("latin-1")

    def test_client_pdf(self, session, pdf):
        with patch("core.services.export_service.ContactService") as contact_service, \
                patch("core.services.export_service.ClientService") as client_service:
            client_service.get_client.return_value = make_client("c1", "Ana Silva")
            contact_service.list_contacts_for_client.return_value = [
                make_contact("k1", "c1", "Carla Dias"),
                make_contact("k2", "c1", "Diego Lima"),
            ]

            document = ExportService.export_client_pdf(session, "c1")

        assert document.filename == "Ana_Silva_contacts.pdf"
        html = pdf.call_args.args[0]
        assert "<th>Nome</th><th>E-mails</th><th>Telefones</th><th>Cadastro</th>" in html
        assert "Diego Lima" in html

    def test_render_contact_without_client(self):
        html = ExportService.render_contact_html(make_contact("k1", "c1", "Carla"), None, "")

        assert "Carla" in html

    def test_unknown_template(self):
        from jinja2 import TemplateNotFound

        with pytest.raises(TemplateNotFound):
            render_template("missing.html")


# =============================================================================
# Image Embedding
# =============================================================================

class TestImageEmbedding:

    @pytest.fixture
    def fallback(self, tmp_path: Path) -> Path:
        path = tmp_path / "avatar.svg"
        path.write_text("<svg/>")
        return path

    def test_to_data_url(self):
        assert to_data_url(b"abc", "image/png") == "data:image/png;base64,YWJj"

    def test_relative_source_uses_fallback(self, fallback):
        url = image_url_to_data_url("/assets/avatar.svg", fallback)

        assert url == to_data_url(b"<svg/>", "image/svg+xml")

    def test_download(self, fallback):
        with patch("lib.images.httpx.get") as get:
            get.return_value.content = b"png"
            get.return_value.headers = {"content-type": "image/png"}

            url = image_url_to_data_url("https://signed/a.png?token=t", fallback)

        assert url == "data:image/png;base64,cG5n"

    def test_download_failure_uses_fallback(self, fallback):
        with patch("lib.images.httpx.get", side_effect=RuntimeError("timeout")):
            url = image_url_to_data_url("https://signed/a.png", fallback)

        assert url.startswith("data:image/svg+xml;base64,")

    def test_unreadable_fallback(self, tmp_path):
        assert image_url_to_data_url(None, tmp_path / "nope.svg") == ""
