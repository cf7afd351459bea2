from __future__ import annotations

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .models import Message
from .notify import inbox_group


@database_sync_to_async
def _unread(user_id: int) -> int:
    return Message.objects.filter(recipient_id=user_id, is_read=False).count()


class InboxConsumer(AsyncJsonWebsocketConsumer):
    """Server-push channel for the signed-in user's unread count.

    Read-only: clients never send anything meaningful, they only receive
    `{"type": "inbox.unread", "unread": n}` frames.
    """

    async def connect(self):
        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            await self.close(code=4001)
            return
        self.group_name = inbox_group(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        await self.send_json({"type": "inbox.unread", "unread": await _unread(user.id)})

    async def receive_json(self, content, **kwargs):
        # Only a ping is understood; answer with the current count.
        if (content or {}).get("type") == "ping":
            await self.send_json({"type": "inbox.unread", "unread": await _unread(self.scope["user"].id)})

    async def inbox_unread(self, event):
        await self.send_json({"type": "inbox.unread", "unread": event["unread"]})

    async def disconnect(self, code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
