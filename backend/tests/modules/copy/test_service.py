"""Tests for book copy service."""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.copy.schemas import CopyCreate, CopyUpdate
from src.modules.copy.services import CopyService


@pytest.fixture
def copy_service():
    """Create copy service instance."""
    return CopyService()


@pytest.mark.asyncio
async def test_create_copy(copy_service: CopyService, db_session: AsyncSession, test_book: dict):
    """Test creating a new copy."""
    copy_data = CopyCreate(book_id=test_book["id"], imprint="Gollancz, 2011.", status="Available")

    result = await copy_service.create_copy(copy_data=copy_data, db=db_session)

    assert result.id is not None
    assert result.book_id == test_book["id"]
    assert result.imprint == "Gollancz, 2011."
    assert result.status == "Available"
    assert result.due_back is None
    assert result.url == f"/catalog/copies/{result.id}"


@pytest.mark.asyncio
async def test_create_copy_defaults_to_maintenance(copy_service: CopyService, db_session: AsyncSession, test_book: dict):
    copy_data = CopyCreate(book_id=test_book["id"], imprint="DAW, 2007.")

    result = await copy_service.create_copy(copy_data=copy_data, db=db_session)

    assert result.status == "Maintenance"


@pytest.mark.asyncio
async def test_create_copy_keeps_due_back_date(copy_service: CopyService, db_session: AsyncSession, test_book: dict):
    """Test a due date is stored as the same calendar date."""
    copy_data = CopyCreate(book_id=test_book["id"], imprint="DAW, 2007.", status="Loaned", due_back=date(2026, 12, 24))

    created = await copy_service.create_copy(copy_data=copy_data, db=db_session)
    result = await copy_service.get_copy(copy_id=created.id, db=db_session)

    assert result.due_back == date(2026, 12, 24)
    assert result.due_back_formatted == "Dec 24, 2026"
    assert result.due_back_iso == "2026-12-24"


@pytest.mark.asyncio
async def test_get_copy_resolves_book(copy_service: CopyService, db_session: AsyncSession, test_copy: dict, test_book: dict):
    """Test getting a specific copy with its book."""
    result = await copy_service.get_copy(copy_id=test_copy["id"], db=db_session)

    assert result.id == test_copy["id"]
    assert result.imprint == test_copy["imprint"]
    assert result.status == "Loaned"
    assert result.due_back == date(2026, 11, 2)
    assert result.book is not None
    assert result.book.id == test_book["id"]
    assert result.book.title == test_book["title"]


@pytest.mark.asyncio
async def test_get_copy_not_found(copy_service: CopyService, db_session: AsyncSession):
    """Test getting non-existent copy."""
    result = await copy_service.get_copy(copy_id=99999, db=db_session)
    assert result is None


@pytest.mark.asyncio
async def test_get_copies(
    copy_service: CopyService, db_session: AsyncSession, test_copy: dict, test_book: dict, test_book_2: dict
):
    """Test listing copies resolves every book."""
    await copy_service.create_copy(CopyCreate(book_id=test_book_2["id"], imprint="Tor, 2010."), db_session)

    result = await copy_service.get_copies(db=db_session)

    assert [copy.id for copy in result] == sorted(copy.id for copy in result)
    assert [copy.book.title for copy in result] == [test_book["title"], test_book_2["title"]]


@pytest.mark.asyncio
async def test_get_copies_empty(copy_service: CopyService, db_session: AsyncSession):
    result = await copy_service.get_copies(db=db_session)
    assert result == []


@pytest.mark.asyncio
async def test_update_copy_keeps_id(
    copy_service: CopyService, db_session: AsyncSession, test_copy: dict, test_book_2: dict
):
    """Test updating replaces the fields but keeps the identity."""
    update_data = CopyUpdate(book_id=test_book_2["id"], imprint="Tor, 2010.", status="Available", due_back=None)

    updated = await copy_service.update_copy(copy_id=test_copy["id"], update_data=update_data, db=db_session)
    result = await copy_service.get_copy(copy_id=test_copy["id"], db=db_session)

    assert updated is True
    assert result.id == test_copy["id"]
    assert result.url == f"/catalog/copies/{test_copy['id']}"
    assert result.imprint == "Tor, 2010."
    assert result.status == "Available"
    assert result.due_back is None
    assert result.book.title == test_book_2["title"]


@pytest.mark.asyncio
async def test_update_missing_copy_is_not_an_error(copy_service: CopyService, db_session: AsyncSession, test_book: dict):
    """Test updating a copy that was deleted in the meantime."""
    update_data = CopyUpdate(book_id=test_book["id"], imprint="Tor, 2010.")

    updated = await copy_service.update_copy(copy_id=99999, update_data=update_data, db=db_session)

    assert updated is False
    assert await copy_service.get_copy(copy_id=99999, db=db_session) is None


@pytest.mark.asyncio
async def test_delete_copy(copy_service: CopyService, db_session: AsyncSession, test_copy: dict):
    """Test deleting a copy."""
    deleted = await copy_service.delete_copy(copy_id=test_copy["id"], db=db_session)

    assert deleted is True
    assert await copy_service.get_copy(copy_id=test_copy["id"], db=db_session) is None


@pytest.mark.asyncio
async def test_delete_missing_copy_is_a_no_op(copy_service: CopyService, db_session: AsyncSession, test_copy: dict):
    """Test deleting an unknown id leaves everything else alone."""
    deleted = await copy_service.delete_copy(copy_id=99999, db=db_session)

    assert deleted is False
    assert len(await copy_service.get_copies(db=db_session)) == 1


@pytest.mark.asyncio
async def test_out_of_range_ids_are_missing(
    copy_service: CopyService, db_session: AsyncSession, test_copy: dict, test_book: dict
):
    """Test ids too large for an INTEGER column behave like unknown ids."""
    huge_id = 99999999999999999999
    update_data = CopyUpdate(book_id=test_book["id"], imprint="Tor, 2010.")

    assert await copy_service.get_copy(copy_id=huge_id, db=db_session) is None
    assert await copy_service.update_copy(copy_id=huge_id, update_data=update_data, db=db_session) is False
    assert await copy_service.delete_copy(copy_id=huge_id, db=db_session) is False
    assert len(await copy_service.get_copies(db=db_session)) == 1


def test_copy_read_form_values():
    from src.modules.copy.schemas import CopyRead

    copy = CopyRead(id=4, book_id=2, imprint="Tor, 2010.", status="Loaned", due_back=date(2026, 3, 5))

    assert copy.to_form_values() == {"book": "2", "imprint": "Tor, 2010.", "status": "Loaned", "due_back": "2026-03-05"}
    assert copy.due_back_formatted == "Mar 5, 2026"
    assert copy.model_dump()["url"] == "/catalog/copies/4"


def test_copy_create_from_form_values():
    copy_data = CopyCreate.from_form_values({"book": "7", "imprint": "Ace", "status": "Reserved", "due_back": None})

    assert copy_data.book_id == 7
    assert copy_data.model_dump() == {"book_id": 7, "imprint": "Ace", "status": "Reserved", "due_back": None}
