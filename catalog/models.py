"""Catalogue models.

A `Book` is a metadata row pointing at an opaque blob in the `books`
storage backend (`file_path`). The blob and the row are written and
removed by `catalog.services`, never through a FileField, so the two
steps and their ordering stay explicit.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Book(models.Model):
    title = models.CharField(max_length=300)
    author = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    isbn = models.CharField(max_length=32, blank=True)

    file_name = models.CharField(max_length=255)
    file_path = models.CharField(max_length=500)
    file_size = models.PositiveBigIntegerField(null=True, blank=True)

    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="books")
    upload_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-upload_date", "-id"]

    def __str__(self) -> str:  # pragma: no cover
        return self.title

    @property
    def size_display(self) -> str:
        if not self.file_size:
            return "Unknown"
        mb = self.file_size / (1024 * 1024)
        return f"{self.file_size / 1024:.1f} KB" if mb < 1 else f"{mb:.1f} MB"
