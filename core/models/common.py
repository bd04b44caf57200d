# =============================================================================
# core/models/common.py - Shared Schemas
# =============================================================================

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """
    A slice of a locally filtered list.

    `start` and `end` are the 1-indexed positions shown as
    "Mostrando start - end de total"; both are 0 for an empty list.
    """

    items: list[T] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    total: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=1)
    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class Alert(BaseModel):
    """A prompt shown to the user (confirmation, success, error, validation)."""

    kind: str = Field(..., description="question | warning | success | error | validation")
    title: str
    text: str


class OperationResult(BaseModel):
    """Response of a mutating endpoint: the record (if any) plus the prompts shown."""

    ok: bool = True
    state: str = Field(..., description="Final form state")
    message: str | None = None
    alerts: list[Alert] = Field(default_factory=list)
