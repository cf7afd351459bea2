"""Catalogue operations: submit, delete, open and list books.

Submitting and deleting a book each touch two stores (blob, then row)
without a shared transaction. The ordering is chosen so that a failure
halfway leaves an orphaned blob rather than a row pointing at nothing:

- submit: store the blob, insert the row; if the insert fails, try to
  remove the blob again.
- delete: remove the blob, delete the row; if blob removal fails the
  row is kept.

Whenever the two halves end up out of step, `PartialFailure` is raised
and the leftover path is logged at error level.
"""
from __future__ import annotations

import logging
from pathlib import Path

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.db.models import Q

from policy.actor import Actor
from policy.engine import BOOK_FILES, BOOKS, DELETE, INSERT, SELECT, authorize, visible
from policy.exceptions import AuthenticationRequired, PartialFailure
from . import storage
from .models import Book
from .validators import validate_upload

logger = logging.getLogger(__name__)


def submit_book(
    actor: Actor,
    upload,
    *,
    title: str,
    author: str = "",
    description: str = "",
    category: str = "",
    isbn: str = "",
    edition: str = "",
) -> Book:
    """Upload a book file and record its metadata under the actor's name."""
    if not actor.is_authenticated:
        raise AuthenticationRequired("You must be logged in to upload books.")
    title = (title or "").strip()
    if not title:
        raise ValidationError({"title": "Title is required."})
    if upload is None:
        raise ValidationError({"file": "A book file is required."})
    validate_upload(upload)

    description = (description or "").strip()
    edition = (edition or "").strip()
    if edition:
        description = f"{description} (Edition: {edition})".strip()

    key = storage.blob_key(actor.id, upload.name)
    book = Book(
        title=title,
        author=(author or "").strip(),
        description=description,
        category=(category or "").strip(),
        isbn=(isbn or "").strip(),
        file_name=Path(upload.name).name,
        file_path=key,
        file_size=getattr(upload, "size", None),
        uploaded_by_id=actor.id,
    )
    book.full_clean(exclude=["uploaded_by"])
    authorize(actor, INSERT, BOOK_FILES, key)
    authorize(actor, INSERT, BOOKS, book)

    book.file_path = storage.upload(key, upload)
    try:
        book.save()
    except DatabaseError:
        logger.warning("book row insert failed; removing blob %s", book.file_path)
        try:
            storage.remove(book.file_path)
        except OSError as exc:
            logger.error("orphaned book blob left in storage: %s", book.file_path)
            raise PartialFailure(
                "The file was stored but the book could not be recorded.",
                blob_path=book.file_path,
            ) from exc
        raise
    logger.info("actor %s uploaded book %s (%s)", actor.id, book.pk, book.file_path)
    return book


def delete_book(actor: Actor, book: Book) -> None:
    """Remove the blob, then the row; keep the row if the blob stays."""
    authorize(actor, DELETE, BOOKS, book)
    authorize(actor, DELETE, BOOK_FILES, book.file_path)
    try:
        storage.remove(book.file_path)
    except OSError:
        logger.error("could not remove blob %s; book %s kept", book.file_path, book.pk)
        raise
    pk = book.pk
    try:
        book.delete()
    except DatabaseError as exc:
        logger.error("blob %s removed but book row %s could not be deleted", book.file_path, pk)
        raise PartialFailure(
            "The file was removed but the book record could not be deleted.",
            blob_path=book.file_path,
        ) from exc
    logger.info("actor %s deleted book %s", actor.id, pk)


def open_book(actor: Actor, book: Book):
    """Open the stored file for reading after the download check."""
    authorize(actor, SELECT, BOOK_FILES, book.file_path)
    return storage.download(book.file_path)


def list_books(actor: Actor, q: str = "", category: str = ""):
    """Catalogue listing, newest first, filtered by title/author text and category."""
    qs = visible(actor, BOOKS, Book.objects.select_related("uploaded_by"))
    q = (q or "").strip()
    if q:
        qs = qs.filter(Q(title__icontains=q) | Q(author__icontains=q))
    category = (category or "").strip()
    if category:
        qs = qs.filter(category__iexact=category)
    return qs.order_by("-upload_date", "-id")


def categories() -> list[str]:
    return list(
        Book.objects.exclude(category="").order_by("category").values_list("category", flat=True).distinct()
    )
