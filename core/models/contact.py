# =============================================================================
# core/models/contact.py - Contact Schemas
# =============================================================================
# A contact is a person attached to exactly one client.
# - Contact: a row of the `contacts` table
# - ContactInput: contact form fields (including the owning client)
# - ContactData: normalized payload handed to persistence
# - ClientWithContacts: read-only aggregate used by the report
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .client import Client


class Contact(BaseModel):
    """
    Schema for a stored contact.

    Example:
        {
            "id": "770e8400-...",
            "client_id": "550e8400-...",
            "user_id": "0f6a...",
            "full_name": "Bruno Costa",
            "emails": ["bruno@ex.com"],
            "phones": ["(21) 98888-7777"]
        }
    """

    id: str = Field(..., description="Unique contact identifier")
    client_id: str = Field(..., description="Client this contact belongs to")
    user_id: str = Field(..., description="Owner of the record")
    full_name: str = Field(..., description="Contact full name")
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ContactInput(BaseModel):
    """Raw contact form fields."""

    client_id: str = Field(..., description="Client the contact is attached to")
    full_name: str = ""
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    confirm: bool = Field(
        default=True,
        description="Answer to the save confirmation prompt"
    )


class ContactData(BaseModel):
    """Normalized contact payload."""

    full_name: str
    emails: list[str]
    phones: list[str]
    client_id: str

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ClientWithContacts(Client):
    """A client with its contacts. Never persisted."""

    contacts: list[Contact] = Field(default_factory=list)


class ContactDirectory(BaseModel):
    """
    Contacts screen payload.

    Clients are grouped by the first letter of their name (A-Z, then "#"),
    only letters with visible clients are listed.
    """

    groups: dict[str, list[Client]] = Field(default_factory=dict)
    contacts: dict[str, list[Contact]] = Field(default_factory=dict)
    selected_contact_id: str | None = None
    search: str = ""
