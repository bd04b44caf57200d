# =============================================================================
# app/routers/reports.py - Clients and Contacts Report
# =============================================================================
# The same report three ways: JSON, printable HTML, PDF download.
# =============================================================================

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from app.config import settings
from app.dependencies import SessionDep
from app.routers.outcomes import download
from core.models.report import Report
from core.services.report_service import ReportService
from core.services.storage_service import resolve_avatars

router = APIRouter()


@router.get("", response_model=Report)
async def get_report(session: SessionDep):
    """Every client of the user, alphabetically, with its contacts and totals."""
    return ReportService.build_report(session)


@router.get("/print", response_class=HTMLResponse)
async def print_report(session: SessionDep):
    """
    Printable HTML of the report.

    Photos are signed URLs valid for REPORT_SIGNED_URL_TTL_SECONDS.
    """
    report = ReportService.build_report(session)
    avatars = await resolve_avatars(
        report.clients, expires_in=settings.REPORT_SIGNED_URL_TTL_SECONDS
    )
    return HTMLResponse(ReportService.render_report_html(report, avatars))


@router.get("/export.pdf")
async def export_report(session: SessionDep):
    """The printable report as a PDF download, photos embedded."""
    report = ReportService.build_report(session)
    document = await ReportService.export_report_pdf(report)
    return download(document)
