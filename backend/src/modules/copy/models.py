"""SQLAlchemy models for book copy entities."""

from datetime import date
from enum import Enum
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.session import Base

COPY_URL_PREFIX = "/catalog/copies"
IMPRINT_MAX_LENGTH = 500


class CopyStatus(str, Enum):
    """Loan status of a physical copy."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


class Copy(Base):
    """One physical, loanable copy of a book.

    ``imprint`` and ``status`` are stored exactly as the form rules left
    them, i.e. trimmed and HTML-escaped.
    """

    __tablename__ = "copies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), index=True)
    imprint: Mapped[str] = mapped_column(String(IMPRINT_MAX_LENGTH))
    status: Mapped[str] = mapped_column(String(20), default=CopyStatus.MAINTENANCE.value)
    due_back: Mapped[Optional[date]] = mapped_column(Date, default=None)


def copy_url(copy_id: int) -> str:
    return f"{COPY_URL_PREFIX}/{copy_id}"
