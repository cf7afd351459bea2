"""Test settings: development defaults with fast hashing and a scratch book store."""
from .dev import *  # noqa
import tempfile
from pathlib import Path


PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

BOOK_STORAGE_ROOT = Path(tempfile.mkdtemp(prefix="textassess-books-"))
STORAGES["books"]["OPTIONS"]["location"] = BOOK_STORAGE_ROOT  # noqa: F405

CHANNEL_LAYERS = {"default": {"BACKEND": "channels.layers.InMemoryChannelLayer"}}
