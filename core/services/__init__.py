# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService
from .client_service import ClientService
from .contact_service import ContactService
from .alerts import HeadlessPrompter, Prompter
from .export_service import ExportedDocument, ExportService
from .report_service import ReportService

__all__ = [
    "StorageService",
    "ClientService",
    "ContactService",
    "HeadlessPrompter",
    "Prompter",
    "ExportedDocument",
    "ExportService",
    "ReportService",
]
