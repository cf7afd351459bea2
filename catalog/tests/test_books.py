from __future__ import annotations

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from accounts.models import Role
from catalog import storage
from catalog.models import Book
from catalog.services import delete_book, list_books, open_book, submit_book
from policy.exceptions import AuthenticationRequired, AuthorizationDenied, PartialFailure
from policy.actor import ANONYMOUS


@pytest.mark.django_db
def test_submit_stores_blob_and_row(make_user, actor_of, pdf_upload):
    u = make_user(Role.STUDENT)
    book = submit_book(
        actor_of(u), pdf_upload(), title="  Algebra I ", author="Euler",
        description="Intro", edition="2nd",
    )
    assert book.pk is not None
    assert book.title == "Algebra I"
    assert book.description == "Intro (Edition: 2nd)"
    assert book.file_path.startswith(f"{u.id}/")
    assert book.file_name == "algebra.pdf"
    assert storage.exists(book.file_path)


@pytest.mark.django_db
def test_submit_requires_title_and_sign_in(make_user, actor_of, pdf_upload):
    u = make_user()
    with pytest.raises(ValidationError):
        submit_book(actor_of(u), pdf_upload(), title="   ")
    with pytest.raises(AuthenticationRequired):
        submit_book(ANONYMOUS, pdf_upload(), title="Nope")
    assert Book.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.security
def test_algebra_scenario(make_user, actor_of, pdf_upload):
    u1 = make_user(Role.STUDENT)
    u2 = make_user(Role.STUDENT)
    book = submit_book(actor_of(u1), pdf_upload(), title="Algebra I")
    path = book.file_path

    with pytest.raises(AuthorizationDenied):
        delete_book(actor_of(u2), book)
    assert Book.objects.filter(pk=book.pk).exists()
    assert storage.exists(path)

    delete_book(actor_of(u1), book)
    assert not Book.objects.filter(pk=book.pk).exists()
    assert not storage.exists(path)
    assert "Algebra I" not in [b.title for b in list_books(actor_of(u1))]


@pytest.mark.django_db
def test_admin_may_delete_any_book(make_user, actor_of, pdf_upload):
    owner = make_user(Role.TEACHER)
    admin = make_user(Role.ADMIN)
    book = submit_book(actor_of(owner), pdf_upload(), title="Physics")
    delete_book(actor_of(admin), book)
    assert not Book.objects.exists()


@pytest.mark.django_db
def test_failed_insert_removes_the_blob_again(make_user, actor_of, pdf_upload, monkeypatch):
    u = make_user()
    stored = []
    real_upload = storage.upload

    def tracking_upload(key, content):
        stored.append(real_upload(key, content))
        return stored[-1]

    def failing_save(self, *args, **kwargs):
        raise DatabaseError("insert failed")

    monkeypatch.setattr(storage, "upload", tracking_upload)
    monkeypatch.setattr(Book, "save", failing_save)
    with pytest.raises(DatabaseError):
        submit_book(actor_of(u), pdf_upload(), title="Lost")
    assert stored and not storage.exists(stored[0])


@pytest.mark.django_db
def test_orphaned_blob_is_reported_as_partial_failure(make_user, actor_of, pdf_upload, monkeypatch):
    u = make_user()

    def failing_save(self, *args, **kwargs):
        raise DatabaseError("insert failed")

    def failing_remove(path):
        raise OSError("storage unavailable")

    monkeypatch.setattr(Book, "save", failing_save)
    monkeypatch.setattr(storage, "remove", failing_remove)
    with pytest.raises(PartialFailure) as excinfo:
        submit_book(actor_of(u), pdf_upload(), title="Orphan")
    assert excinfo.value.blob_path.startswith(f"{u.id}/")
    assert storage.exists(excinfo.value.blob_path)


@pytest.mark.django_db
def test_blob_removal_failure_keeps_the_row(make_user, actor_of, pdf_upload, monkeypatch):
    u = make_user()
    book = submit_book(actor_of(u), pdf_upload(), title="Sticky")

    def failing_remove(path):
        raise OSError("storage unavailable")

    monkeypatch.setattr(storage, "remove", failing_remove)
    with pytest.raises(OSError):
        delete_book(actor_of(u), book)
    assert Book.objects.filter(pk=book.pk).exists()


@pytest.mark.django_db
def test_row_delete_failure_after_blob_removal_is_partial(make_user, actor_of, pdf_upload, monkeypatch):
    u = make_user()
    book = submit_book(actor_of(u), pdf_upload(), title="Half")

    def failing_delete(self, *args, **kwargs):
        raise DatabaseError("delete failed")

    monkeypatch.setattr(Book, "delete", failing_delete)
    with pytest.raises(PartialFailure) as excinfo:
        delete_book(actor_of(u), book)
    assert excinfo.value.blob_path == book.file_path
    assert not storage.exists(book.file_path)


@pytest.mark.django_db
def test_open_book_needs_an_account(make_user, actor_of, pdf_upload):
    u = make_user()
    reader = make_user()
    book = submit_book(actor_of(u), pdf_upload(content=b"%PDF-1.4 body"), title="Readable")
    with open_book(actor_of(reader), book) as fh:
        assert fh.read() == b"%PDF-1.4 body"
    with pytest.raises(AuthenticationRequired):
        open_book(ANONYMOUS, book)


@pytest.mark.django_db
def test_list_filters_by_text_and_category(make_user, actor_of, pdf_upload):
    u = make_user()
    a = actor_of(u)
    submit_book(a, pdf_upload(), title="Linear Algebra", author="Strang", category="Mathematics")
    submit_book(a, pdf_upload(), title="Organic Chemistry", author="Clayden", category="Science")
    assert [b.title for b in list_books(a, q="strang")] == ["Linear Algebra"]
    assert [b.title for b in list_books(a, category="science")] == ["Organic Chemistry"]
    assert [b.title for b in list_books(a)] == ["Organic Chemistry", "Linear Algebra"]
