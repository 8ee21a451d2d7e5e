"""CRUD operations for book copy entities using FastCRUD."""

from fastcrud import FastCRUD

from .models import Copy

copy_crud: FastCRUD = FastCRUD(Copy)
