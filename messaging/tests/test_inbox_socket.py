from __future__ import annotations

import pytest
from channels.db import database_sync_to_async
from channels.testing import WebsocketCommunicator
from django.conf import settings
from django.test import Client

from accounts.services import register_user
from config.asgi import application
from messaging.services import send_message
from policy.actor import actor_for

PASSWORD = "Correct-Horse-42"


@database_sync_to_async
def _users():
    a = register_user(email="ws-sender@example.com", password=PASSWORD, full_name="Sender")
    b = register_user(email="ws-reader@example.com", password=PASSWORD, full_name="Reader")
    return a, b


@database_sync_to_async
def _session_for(email: str) -> str:
    c = Client()
    assert c.login(username=email, password=PASSWORD)
    return c.cookies.get(settings.SESSION_COOKIE_NAME).value


@database_sync_to_async
def _send(sender, recipient):
    return send_message(actor_for(sender), recipient.email, "Live", "Update")


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
@pytest.mark.ws
async def test_anonymous_socket_is_refused():
    comm = WebsocketCommunicator(application, "/ws/inbox/")
    connected, _ = await comm.connect()
    assert not connected


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
@pytest.mark.ws
async def test_socket_receives_unread_count_on_new_message():
    sender, reader = await _users()
    sessionid = await _session_for(reader.email)
    comm = WebsocketCommunicator(application, "/ws/inbox/", headers=[(b"cookie", f"sessionid={sessionid}".encode())])
    connected, _ = await comm.connect()
    assert connected
    assert await comm.receive_json_from() == {"type": "inbox.unread", "unread": 0}

    # Autocommit: the on-commit push fires as soon as the row is saved
    await _send(sender, reader)
    assert await comm.receive_json_from(timeout=2) == {"type": "inbox.unread", "unread": 1}

    await comm.send_json_to({"type": "ping"})
    assert await comm.receive_json_from(timeout=2) == {"type": "inbox.unread", "unread": 1}
    assert await comm.receive_nothing(timeout=0.2)
    await comm.disconnect()
