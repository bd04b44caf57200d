# =============================================================================
# core/models/report.py - Report Schemas
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from .contact import ClientWithContacts


class Report(BaseModel):
    """
    Every client of the user with its contacts.

    Built on demand for the printable report; never stored.
    """

    clients: list[ClientWithContacts] = Field(default_factory=list)
    generated_at: datetime = Field(..., description="When the report was assembled")

    @computed_field
    @property
    def total_clients(self) -> int:
        return len(self.clients)

    @computed_field
    @property
    def total_contacts(self) -> int:
        return sum(len(c.contacts) for c in self.clients)
