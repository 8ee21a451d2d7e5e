"""HTML pages for listing, showing, creating, updating and deleting book copies."""

from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database.session import async_session
from ...modules.book.schemas import BookOption
from ...modules.book.services import BookService
from ...modules.common.exceptions import CopyNotFoundError
from ...modules.copy.models import COPY_URL_PREFIX, CopyStatus, copy_url
from ...modules.copy.schemas import CopyCreate, CopyUpdate
from ...modules.copy.services import CopyService
from ...modules.copy.validation import FormResult, apply_rules
from .templating import templates

router = APIRouter(prefix=COPY_URL_PREFIX, tags=["Book copies"])

CREATE_TITLE = "Create BookInstance"
UPDATE_TITLE = "Update BookInstance"


def get_copy_service() -> CopyService:
    """Dependency to get copy service instance."""
    return CopyService()


def get_book_service() -> BookService:
    """Dependency to get book service instance."""
    return BookService()


def redirect_to(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


def render_copy_form(
    request: Request,
    title: str,
    books: List[BookOption],
    values: Optional[Dict[str, str]] = None,
    errors: Optional[Dict[str, str]] = None,
) -> HTMLResponse:
    values = values or {}
    return templates.TemplateResponse(
        request,
        "copy_form.html",
        {
            "title": title,
            "book_list": books,
            "selected_book": values.get("book", ""),
            "form": values,
            "errors": errors or {},
            "statuses": [copy_status.value for copy_status in CopyStatus],
        },
    )


def copy_form_data(
    book: str = Form(""),
    imprint: str = Form(""),
    status: str = Form(""),
    due_back: str = Form(""),
) -> FormResult:
    """Dependency running the form rule table over the submitted fields."""
    return apply_rules({"book": book, "imprint": imprint, "status": status, "due_back": due_back})


@router.get("", response_class=HTMLResponse)
async def list_copies(
    request: Request,
    copy_service: CopyService = Depends(get_copy_service),
    db: AsyncSession = Depends(async_session),
):
    """Display the list of all book copies."""
    copies = await copy_service.get_copies(db)
    return templates.TemplateResponse(
        request,
        "copy_list.html",
        {"title": "Book Instance List", "copy_list": copies},
    )


@router.get("/create", response_class=HTMLResponse)
async def create_copy_form(
    request: Request,
    book_service: BookService = Depends(get_book_service),
    db: AsyncSession = Depends(async_session),
):
    """Display the empty copy form."""
    books = await book_service.get_book_options(db)
    return render_copy_form(request, CREATE_TITLE, books)


@router.post("/create")
async def create_copy(
    request: Request,
    form: FormResult = Depends(copy_form_data),
    copy_service: CopyService = Depends(get_copy_service),
    book_service: BookService = Depends(get_book_service),
    db: AsyncSession = Depends(async_session),
) -> Response:
    """Create a copy, or show the form again with the sanitized values and errors."""
    if not form.is_valid:
        books = await book_service.get_book_options(db)
        return render_copy_form(request, CREATE_TITLE, books, form.form_values(), form.errors)

    copy = await copy_service.create_copy(CopyCreate.from_form_values(form.values), db)
    return redirect_to(copy.url)


@router.get("/{copy_id}", response_class=HTMLResponse)
async def get_copy(
    request: Request,
    copy_id: int,
    copy_service: CopyService = Depends(get_copy_service),
    db: AsyncSession = Depends(async_session),
):
    """Display the detail page of a copy."""
    copy = await copy_service.get_copy(copy_id, db)
    if copy is None:
        raise CopyNotFoundError()

    book_title = copy.book.title if copy.book else ""
    return templates.TemplateResponse(
        request,
        "copy_detail.html",
        {"title": f"Copy: {book_title}", "copy": copy},
    )


@router.get("/{copy_id}/delete", response_class=HTMLResponse)
async def delete_copy_form(
    request: Request,
    copy_id: int,
    copy_service: CopyService = Depends(get_copy_service),
    db: AsyncSession = Depends(async_session),
) -> Response:
    """Ask for confirmation before deleting a copy; a missing copy goes back to the list."""
    copy = await copy_service.get_copy(copy_id, db)
    if copy is None:
        return redirect_to(COPY_URL_PREFIX)

    return templates.TemplateResponse(
        request,
        "copy_delete.html",
        {"title": "Delete BookInstance", "copy": copy},
    )


@router.post("/{copy_id}/delete")
async def delete_copy(
    body_id: Optional[int] = Form(None, alias="id"),
    copy_service: CopyService = Depends(get_copy_service),
    db: AsyncSession = Depends(async_session),
) -> Response:
    """Delete the copy named in the form body; a body without an id deletes nothing."""
    if body_id is not None:
        await copy_service.delete_copy(body_id, db)
    return redirect_to(COPY_URL_PREFIX)


@router.get("/{copy_id}/update", response_class=HTMLResponse)
async def update_copy_form(
    request: Request,
    copy_id: int,
    copy_service: CopyService = Depends(get_copy_service),
    book_service: BookService = Depends(get_book_service),
    db: AsyncSession = Depends(async_session),
):
    """Display the copy form filled with the current values."""
    copy = await copy_service.get_copy(copy_id, db)
    books = await book_service.get_book_options(db)
    if copy is None:
        raise CopyNotFoundError()

    return render_copy_form(request, UPDATE_TITLE, books, copy.to_form_values())


@router.post("/{copy_id}/update")
async def update_copy(
    request: Request,
    copy_id: int,
    form: FormResult = Depends(copy_form_data),
    copy_service: CopyService = Depends(get_copy_service),
    book_service: BookService = Depends(get_book_service),
    db: AsyncSession = Depends(async_session),
) -> Response:
    """Replace a copy's fields, or show the form again with the sanitized values and errors."""
    if not form.is_valid:
        books = await book_service.get_book_options(db)
        return render_copy_form(request, UPDATE_TITLE, books, form.form_values(), form.errors)

    await copy_service.update_copy(copy_id, CopyUpdate.from_form_values(form.values), db)
    return redirect_to(copy_url(copy_id))
