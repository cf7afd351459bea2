from __future__ import annotations

from django.conf import settings
from django.db import models

from catalog.models import Book


class Message(models.Model):
    """Direct message between two users, optionally about a book."""

    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_messages")
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="received_messages")
    book = models.ForeignKey(Book, null=True, blank=True, on_delete=models.CASCADE, related_name="messages")
    subject = models.CharField(max_length=200)
    content = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["recipient", "is_read"], name="messaging_recipient_unread"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.sender_id}->{self.recipient_id}: {self.subject[:30]}"
