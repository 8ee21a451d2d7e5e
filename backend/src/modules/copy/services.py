"""Book copy management service."""

from typing import Any, List, Optional, cast

from sqlalchemy import Select
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..book.models import Book
from ..book.schemas import BookOption
from ..common.constants import is_storable_id
from .crud import copy_crud
from .models import Copy
from .schemas import CopyCreate, CopyRead, CopyUpdate

logger = get_logger(__name__)


class CopyService:
    """Service for managing the physical copies of catalogued books.

    Every read resolves the copy's book in the same statement through an
    outer join on ``books``, so a failing lookup fails the whole operation.
    Writes are single statements; there is no locking and the last write
    wins.
    """

    async def _select_copies(self, **filters: Any) -> Select:
        stmt = await copy_crud.select(sort_columns="id", sort_orders="asc", **filters)
        return stmt.add_columns(Book.title.label("book_title")).outerjoin(Book, Copy.book_id == Book.id)

    @staticmethod
    def _row_to_copy(row: Any) -> CopyRead:
        book = None
        if row.book_title is not None:
            book = BookOption(id=row.book_id, title=row.book_title)

        return CopyRead(
            id=row.id,
            book_id=row.book_id,
            imprint=row.imprint,
            status=row.status,
            due_back=row.due_back,
            book=book,
        )

    async def get_copies(self, db: AsyncSession) -> List[CopyRead]:
        """Get every copy with its book resolved.

        Args:
            db: Database session

        Returns:
            All copies, oldest first
        """
        stmt = await self._select_copies()
        result = await db.execute(stmt)
        return [self._row_to_copy(row) for row in result.fetchall()]

    async def get_copy(self, copy_id: int, db: AsyncSession) -> Optional[CopyRead]:
        """Get a specific copy with its book resolved.

        Args:
            copy_id: Copy ID to retrieve
            db: Database session

        Returns:
            The copy, or None when no copy has that id or the id cannot be stored
        """
        if not is_storable_id(copy_id):
            return None

        stmt = await self._select_copies(id=copy_id)
        result = await db.execute(stmt)
        row = result.first()

        if not row:
            return None

        return self._row_to_copy(row)

    async def create_copy(self, copy_data: CopyCreate, db: AsyncSession) -> CopyRead:
        """Persist a new copy.

        Args:
            copy_data: Sanitized copy fields
            db: Database session

        Returns:
            The stored copy; its book is not resolved
        """
        created_copy = cast(Any, await copy_crud.create(db=db, object=copy_data))

        logger.info(f"Created book copy {created_copy.id}", extra={"copy_id": created_copy.id, "book_id": copy_data.book_id})

        return CopyRead(
            id=created_copy.id,
            book_id=created_copy.book_id,
            imprint=created_copy.imprint,
            status=created_copy.status,
            due_back=created_copy.due_back,
        )

    async def update_copy(self, copy_id: int, update_data: CopyUpdate, db: AsyncSession) -> bool:
        """Replace the mutable fields of a copy, keeping its id.

        A copy deleted in the meantime is not an error here; the write
        is skipped and the next read reports it missing.

        Args:
            copy_id: Copy ID to update
            update_data: Sanitized copy fields
            db: Database session

        Returns:
            True if a row was updated
        """
        if not is_storable_id(copy_id):
            logger.warning(f"Book copy {copy_id} cannot exist; update skipped", extra={"copy_id": copy_id})
            return False

        try:
            await copy_crud.update(db=db, object=update_data.model_dump(), id=copy_id)
        except NoResultFound:
            logger.warning(f"Book copy {copy_id} vanished before its update", extra={"copy_id": copy_id})
            return False

        logger.info(f"Updated book copy {copy_id}", extra={"copy_id": copy_id})
        return True

    async def delete_copy(self, copy_id: int, db: AsyncSession) -> bool:
        """Delete a copy; deleting a missing copy is a no-op.

        Args:
            copy_id: Copy ID to delete
            db: Database session

        Returns:
            True if a row was deleted
        """
        if not is_storable_id(copy_id):
            logger.info(f"Book copy {copy_id} cannot exist; delete skipped", extra={"copy_id": copy_id})
            return False

        try:
            await copy_crud.delete(db=db, id=copy_id)
        except NoResultFound:
            logger.info(f"Book copy {copy_id} was already gone", extra={"copy_id": copy_id})
            return False

        logger.info(f"Deleted book copy {copy_id}", extra={"copy_id": copy_id})
        return True
