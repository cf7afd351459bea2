"""Blob store for book files.

Thin wrapper over the `books` storage backend (see `STORAGES`). Keys are
namespaced by the uploader: `{user_id}/{epoch_ms}.{ext}`.
"""
from __future__ import annotations

import time
from pathlib import Path

from django.core.files.storage import Storage, storages


def book_storage() -> Storage:
    return storages["books"]


def blob_key(user_id: int, filename: str, now: float | None = None) -> str:
    ext = Path(filename or "").suffix.lstrip(".").lower() or "bin"
    ts = int((time.time() if now is None else now) * 1000)
    return f"{user_id}/{ts}.{ext}"


def upload(key: str, content) -> str:
    """Store `content` under `key`; returns the path actually used."""
    return book_storage().save(key, content)


def download(path: str):
    return book_storage().open(path, "rb")


def remove(path: str) -> None:
    book_storage().delete(path)


def exists(path: str) -> bool:
    return book_storage().exists(path)
