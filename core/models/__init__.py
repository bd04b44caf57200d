# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - session.py: UserSession (explicit auth context)
# - client.py: Client record, form input and persistence payload
# - contact.py: Contact record, form input, ClientWithContacts aggregate
# - report.py: Report aggregate
# - common.py: Page, Alert, OperationResult
#
# These models define the "contract" between API and clients.
# =============================================================================

from .session import UserSession

from .client import (
    Client,
    ClientData,
    ClientInput,
    ClientListResponse,
    ClientOrder,
)

from .contact import (
    ClientWithContacts,
    Contact,
    ContactData,
    ContactDirectory,
    ContactInput,
)

from .report import Report

from .common import Alert, OperationResult, Page

__all__ = [
    # Session
    "UserSession",
    # Client
    "Client",
    "ClientData",
    "ClientInput",
    "ClientListResponse",
    "ClientOrder",
    # Contact
    "ClientWithContacts",
    "Contact",
    "ContactData",
    "ContactDirectory",
    "ContactInput",
    # Report
    "Report",
    # Common
    "Alert",
    "OperationResult",
    "Page",
]
