from __future__ import annotations

import itertools
import logging

import pytest
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import Client

from accounts.models import Role, UserRole
from accounts.services import register_user
from policy.actor import actor_for

PASSWORD = "Correct-Horse-42"


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 403/404 paths. Django logs these at
    WARNING via 'django.request'; lower that logger to ERROR meanwhile.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


@pytest.fixture
def make_user(db):
    """Register a user through the normal sign-up path.

    Admins cannot sign up, so they are registered as students and then
    promoted the way the `promote_admin` command does it.
    """
    seq = itertools.count(1)

    def _make(role: str = Role.STUDENT, email: str | None = None, full_name: str | None = None):
        n = next(seq)
        user = register_user(
            email=email or f"{role}{n}@example.com",
            password=PASSWORD,
            full_name=full_name or f"{role.title()} {n}",
            role=Role.STUDENT if role == Role.ADMIN else role,
        )
        if role == Role.ADMIN:
            UserRole.objects.filter(user=user).delete()
            UserRole.objects.create(user=user, role=Role.ADMIN)
        return user

    return _make


@pytest.fixture
def actor_of():
    return actor_for


@pytest.fixture
def client_for():
    def _client(user) -> Client:
        c = Client()
        c.force_login(user)
        return c

    return _client


@pytest.fixture
def pdf_upload():
    def _upload(name: str = "algebra.pdf", content: bytes = b"%PDF-1.4\n% test book\n"):
        return SimpleUploadedFile(name, content, content_type="application/pdf")

    return _upload


@pytest.fixture
def password() -> str:
    return PASSWORD


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    """API throttles count in the default cache; start every test at zero."""
    cache.clear()
    yield
