"""Pydantic schemas for book entities."""

from pydantic import BaseModel, ConfigDict


class BookOption(BaseModel):
    """A book as offered in the copy form's selection list."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
