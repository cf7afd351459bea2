from __future__ import annotations

import pytest
from django.test import Client

from catalog.models import Book
from catalog.services import submit_book


@pytest.mark.django_db
@pytest.mark.security
def test_post_without_csrf_is_rejected_on_html_view(make_user, actor_of, pdf_upload):
    u = make_user()
    book = submit_book(actor_of(u), pdf_upload(), title="Guarded")
    c = Client(enforce_csrf_checks=True)
    c.force_login(u)
    r = c.post(f"/books/{book.pk}/delete/")
    assert r.status_code == 403
    assert Book.objects.filter(pk=book.pk).exists()


@pytest.mark.django_db
@pytest.mark.security
def test_api_write_without_csrf_is_rejected_for_session_users(make_user):
    u = make_user()
    c = Client(enforce_csrf_checks=True)
    c.force_login(u)
    r = c.post("/api/v1/reviews/", {"book": 1, "rating": 5}, content_type="application/json")
    assert r.status_code == 403
