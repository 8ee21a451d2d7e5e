"""Common constants used across the application."""

from typing import Callable, Dict, Type

from fastapi import HTTPException, status

from .exceptions import DomainError, ResourceNotFoundError

EXCEPTION_MAPPING: Dict[Type[DomainError], Callable[[str], HTTPException]] = {
    ResourceNotFoundError: lambda message: HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message),
}

INTERNAL_ERROR_MESSAGE = "Internal server error"

# Largest value a 32-bit signed INTEGER primary key column can hold.
MAX_RECORD_ID = 2**31 - 1


def is_storable_id(identifier: int) -> bool:
    return 1 <= identifier <= MAX_RECORD_ID
