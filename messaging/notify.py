"""Push the recipient's unread count to their open inbox sockets."""
from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Message

logger = logging.getLogger(__name__)


def inbox_group(user_id: int) -> str:
    return f"inbox_{user_id}"


def push_unread(user_id: int) -> None:
    layer = get_channel_layer()
    if layer is None:
        return
    count = Message.objects.filter(recipient_id=user_id, is_read=False).count()
    try:
        async_to_sync(layer.group_send)(inbox_group(user_id), {"type": "inbox.unread", "unread": count})
    except Exception:
        # The row is already committed; sockets fall back to polling.
        logger.warning("could not push unread count to user %s", user_id, exc_info=True)
        return
    logger.debug("pushed unread=%s to user %s", count, user_id)


@receiver(post_save, sender=Message)
def message_saved(sender, instance: Message, created: bool, **kwargs):
    recipient_id = instance.recipient_id
    transaction.on_commit(lambda: push_unread(recipient_id))
