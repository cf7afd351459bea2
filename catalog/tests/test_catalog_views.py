from __future__ import annotations

import pytest
from freezegun import freeze_time
from django.test import Client

from accounts.models import Role
from catalog.models import Book
from catalog.services import submit_book


@pytest.mark.django_db
def test_catalog_requires_sign_in():
    r = Client().get("/books/")
    assert r.status_code == 302
    assert "/accounts/login/" in r.headers["Location"]


@pytest.mark.django_db
def test_submit_form_uploads_a_book(make_user, client_for, pdf_upload):
    u = make_user()
    c = client_for(u)
    r = c.post("/books/submit/", {
        "title": "Calculus",
        "author": "Spivak",
        "category": "Mathematics",
        "edition": "4th",
        "file": pdf_upload("calculus.pdf"),
    })
    assert r.status_code == 302
    book = Book.objects.get(title="Calculus")
    assert book.uploaded_by_id == u.id
    assert book.description == "(Edition: 4th)"
    assert "Calculus" in c.get("/books/").content.decode()


@pytest.mark.django_db
def test_submit_form_rejects_unsupported_file(make_user, client_for, pdf_upload):
    c = client_for(make_user())
    r = c.post("/books/submit/", {"title": "Bad", "file": pdf_upload("bad.exe")})
    assert r.status_code == 200
    assert not Book.objects.exists()


@pytest.mark.django_db
def test_upload_throttle_per_session(make_user, client_for, pdf_upload):
    c = client_for(make_user())
    for i in range(5):
        c.post("/books/submit/", {"title": f"B{i}", "file": pdf_upload(f"b{i}.pdf")})
    r = c.post("/books/submit/", {"title": "B5", "file": pdf_upload("b5.pdf")}, follow=True)
    assert "Too many uploads" in r.content.decode()
    assert Book.objects.count() == 5


@pytest.mark.django_db
@pytest.mark.security
def test_delete_by_someone_else_is_refused_with_a_message(make_user, actor_of, client_for, pdf_upload):
    owner = make_user()
    other = make_user()
    book = submit_book(actor_of(owner), pdf_upload(), title="Algebra I")
    r = client_for(other).post(f"/books/{book.pk}/delete/", follow=True)
    assert "You are not allowed to delete this book." in r.content.decode()
    assert Book.objects.filter(pk=book.pk).exists()

    r = client_for(owner).post(f"/books/{book.pk}/delete/")
    assert r.status_code == 302
    assert not Book.objects.filter(pk=book.pk).exists()


@pytest.mark.django_db
def test_delete_requires_post(make_user, actor_of, client_for, pdf_upload):
    owner = make_user()
    book = submit_book(actor_of(owner), pdf_upload(), title="Keep")
    assert client_for(owner).get(f"/books/{book.pk}/delete/").status_code == 405
    assert Book.objects.filter(pk=book.pk).exists()


@pytest.mark.django_db
def test_download_streams_the_stored_file(make_user, actor_of, client_for, pdf_upload):
    owner = make_user()
    book = submit_book(actor_of(owner), pdf_upload("notes.pdf", b"%PDF-1.4 notes"), title="Notes")
    r = client_for(make_user()).get(f"/books/{book.pk}/download/")
    assert r.status_code == 200
    assert b"".join(r.streaming_content) == b"%PDF-1.4 notes"
    assert 'filename="notes.pdf"' in r.headers["Content-Disposition"]


@pytest.mark.django_db
def test_detail_shows_reviews_and_average(make_user, actor_of, client_for, pdf_upload):
    from reviews.services import create_review

    owner = make_user()
    reader = make_user()
    book = submit_book(actor_of(owner), pdf_upload(), title="Rated")
    create_review(actor_of(reader), book, 4, "Solid")
    create_review(actor_of(owner), book, 5, "")
    body = client_for(reader).get(f"/books/{book.pk}/").content.decode()
    assert "4.5 / 5" in body
    assert "Solid" in body


@pytest.mark.django_db
@pytest.mark.security
def test_admin_book_list_is_admin_only(make_user, actor_of, client_for, pdf_upload):
    teacher = make_user(Role.TEACHER, full_name="Uploader Person")
    submit_book(actor_of(teacher), pdf_upload(), title="Shared")
    assert client_for(teacher).get("/books/admin/").status_code == 403
    r = client_for(make_user(Role.ADMIN)).get("/books/admin/")
    assert r.status_code == 200
    assert "Uploader Person" in r.content.decode()


@pytest.mark.django_db
def test_upload_throttle_window_expires(make_user, client_for, pdf_upload):
    c = client_for(make_user())
    with freeze_time("2026-03-02 10:00:00") as frozen:
        for i in range(5):
            c.post("/books/submit/", {"title": f"W{i}", "file": pdf_upload(f"w{i}.pdf")})
        c.post("/books/submit/", {"title": "Blocked", "file": pdf_upload("blocked.pdf")})
        assert not Book.objects.filter(title="Blocked").exists()
        frozen.tick(61)
        c.post("/books/submit/", {"title": "Later", "file": pdf_upload("later.pdf")})
    assert Book.objects.filter(title="Later").exists()
