"""Read-only book lookups used by the copy pages."""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from .crud import book_crud
from .schemas import BookOption


class BookService:
    """Service for the book data the copy pages need."""

    async def get_book_options(self, db: AsyncSession) -> List[BookOption]:
        """Get every book (id and title only), ordered by title.

        Args:
            db: Database session

        Returns:
            Books for the selection list of the copy form
        """
        result = await book_crud.get_multi(
            db=db,
            offset=0,
            limit=None,
            schema_to_select=BookOption,
            return_as_model=True,
            sort_columns="title",
            sort_orders="asc",
        )
        return list(result["data"])
