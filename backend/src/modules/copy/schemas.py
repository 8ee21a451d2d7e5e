"""Pydantic schemas for book copy entities."""

from datetime import date
from typing import Annotated, Any, Dict, Mapping, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..book.schemas import BookOption
from .models import IMPRINT_MAX_LENGTH, CopyStatus, copy_url


class CopyBase(BaseModel):
    """Base schema for book copy data."""

    model_config = ConfigDict(use_enum_values=True)

    book_id: int
    imprint: Annotated[str, Field(min_length=1, max_length=IMPRINT_MAX_LENGTH, description="Sanitized imprint text")]
    status: CopyStatus = Field(default=CopyStatus.MAINTENANCE, validate_default=True)
    due_back: Optional[date] = None

    @classmethod
    def from_form_values(cls, values: Mapping[str, Any]) -> Self:
        """Build the schema from the values a passing rule table produced."""
        return cls(
            book_id=values["book"],
            imprint=values["imprint"],
            status=values["status"],
            due_back=values.get("due_back"),
        )


class CopyCreate(CopyBase):
    """Schema for creating a new book copy."""

    pass


class CopyUpdate(CopyBase):
    """Schema for replacing the mutable fields of an existing book copy."""

    pass


class CopyRead(BaseModel):
    """Schema for reading a book copy with its book resolved."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int
    imprint: str
    status: str
    due_back: Optional[date] = None
    book: Optional[BookOption] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def url(self) -> str:
        return copy_url(self.id)

    @property
    def due_back_formatted(self) -> str:
        """Due date for display, e.g. ``Oct 19, 2026``."""
        if self.due_back is None:
            return ""
        return f"{self.due_back:%b} {self.due_back.day}, {self.due_back.year}"

    @property
    def due_back_iso(self) -> str:
        return self.due_back.isoformat() if self.due_back else ""

    def to_form_values(self) -> Dict[str, str]:
        """Current values in the shape the copy form is filled with."""
        return {
            "book": str(self.book_id),
            "imprint": self.imprint,
            "status": self.status,
            "due_back": self.due_back_iso,
        }
