from __future__ import annotations

from django.conf import settings


def inbox(request) -> dict:
    """Poll interval for the unread badge script."""
    return {"unread_poll_seconds": getattr(settings, "MESSAGES_UNREAD_POLL_SECONDS", 30)}
