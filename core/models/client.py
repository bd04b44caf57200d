# =============================================================================
# core/models/client.py - Client Schemas
# =============================================================================
# These models define the API contract for client records:
# - Client: a row of the `clients` table
# - ClientInput: what the user typed into the client form
# - ClientData: the normalized payload handed to persistence
# - ClientOrder: list ordering options
#
# A client owns zero or more contacts. Its registration date is set once,
# on creation, and never changes afterwards.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ClientOrder(str, Enum):
    """
    Ordering of the client list.

    - alphabetical: full_name ascending (default)
    - registration: registration_date descending (newest first)
    """
    ALPHABETICAL = "alphabetical"
    REGISTRATION = "registration"


class Client(BaseModel):
    """
    Schema for a stored client.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "user_id": "0f6a...",
            "full_name": "Ana Silva",
            "emails": ["ana@ex.com"],
            "phones": ["(11) 99999-0000"],
            "registration_date": "2024-01-15",
            "foto_url": "0f6a.../1705312200000_ana.png"
        }
    """

    id: str = Field(..., description="Unique client identifier")

    user_id: str = Field(..., description="Owner of the record")

    full_name: str = Field(..., description="Client full name")

    emails: list[str] = Field(default_factory=list, description="E-mails, in input order")

    phones: list[str] = Field(default_factory=list, description="Phones, as typed")

    registration_date: date = Field(..., description="Day the client was registered")

    # Either an absolute URL (legacy public links) or a bucket-relative key
    foto_url: str | None = Field(
        default=None,
        description="Photo reference: absolute URL or storage key"
    )

    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ClientInput(BaseModel):
    """Raw client form fields. Validation happens in lib.validation."""

    full_name: str = ""
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "full_name": "Ana Silva",
                "emails": ["ana@ex.com"],
                "phones": ["(11) 99999-0000"],
            }
        }
    }


class ClientData(BaseModel):
    """Normalized client payload, ready to insert or update."""

    full_name: str
    emails: list[str]
    phones: list[str]
    registration_date: date = Field(default_factory=date.today)
    foto_url: str | None = None

    def to_row(self) -> dict[str, Any]:
        """Convert to a JSON-safe dict for Supabase."""
        return self.model_dump(mode="json")


class ClientListResponse(BaseModel):
    """One page of the client list plus avatar URLs for the rows shown."""

    clients: list[Client] = Field(default_factory=list)
    avatars: dict[str, str] = Field(default_factory=dict)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    total_pages: int = Field(default=1, ge=1)
    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)
    order: ClientOrder = ClientOrder.ALPHABETICAL
    search: str = ""
