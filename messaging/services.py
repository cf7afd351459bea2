"""Direct messaging between users.

Recipients are resolved by e-mail through the identity store rather than
through profiles, so a student can write to anyone without being able to
read their contact card.
"""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.http import Http404

from accounts.services import find_user_by_email
from catalog.models import Book
from policy.actor import Actor
from policy.engine import INSERT, MESSAGES, UPDATE, authorize, get_visible, visible
from policy.exceptions import AuthenticationRequired
from .models import Message

logger = logging.getLogger(__name__)

BOXES = ("all", "sent", "received")


def send_message(
    actor: Actor,
    recipient_email: str,
    subject: str,
    content: str,
    book: Book | None = None,
) -> Message:
    if not actor.is_authenticated:
        raise AuthenticationRequired("You must be logged in to send messages.")
    recipient_email = (recipient_email or "").strip()
    subject = (subject or "").strip()
    content = (content or "").strip()
    errors = {}
    if not recipient_email:
        errors["recipient_email"] = "Recipient e-mail is required."
    if not subject:
        errors["subject"] = "Subject is required."
    if not content:
        errors["content"] = "Message content is required."
    if errors:
        raise ValidationError(errors)

    recipient = find_user_by_email(recipient_email)
    if recipient is None:
        raise Http404("No user with that e-mail address.")
    if recipient.pk == actor.id:
        raise ValidationError({"recipient_email": "You cannot send a message to yourself."})

    message = Message(
        sender_id=actor.id,
        recipient=recipient,
        book=book,
        subject=subject,
        content=content,
    )
    authorize(actor, INSERT, MESSAGES, message)
    message.full_clean(exclude=["sender", "recipient", "book"])
    message.save()
    logger.info("actor %s sent message %s to user %s", actor.id, message.pk, recipient.pk)
    return message


def mark_read(actor: Actor, message: Message) -> Message:
    """Flip the read flag; nothing else on the message changes."""
    authorize(actor, UPDATE, MESSAGES, message)
    if not message.is_read:
        message.is_read = True
        message.save(update_fields=["is_read"])
    return message


def mailbox(actor: Actor, box: str = "all", q: str = ""):
    """The actor's own messages, newest first.

    Admins can read any message but their mailbox still only shows their
    own conversation partners.
    """
    if box not in BOXES:
        raise ValidationError({"box": f"Unknown mailbox: {box}."})
    qs = visible(actor, MESSAGES, Message.objects.select_related("sender", "recipient", "book"))
    if box == "sent":
        qs = qs.filter(sender_id=actor.id)
    elif box == "received":
        qs = qs.filter(recipient_id=actor.id)
    else:
        qs = qs.filter(Q(sender_id=actor.id) | Q(recipient_id=actor.id))
    q = (q or "").strip()
    if q:
        qs = qs.filter(Q(subject__icontains=q) | Q(content__icontains=q) | Q(sender__email__icontains=q))
    return qs.order_by("-created_at", "-id")


def unread_count(actor: Actor) -> int:
    if not actor.is_authenticated:
        return 0
    return visible(actor, MESSAGES, Message.objects).filter(recipient_id=actor.id, is_read=False).count()


def open_message(actor: Actor, pk: int) -> Message:
    """Fetch one message and mark it read when the actor is its recipient."""
    message = get_visible(actor, MESSAGES, Message.objects.select_related("sender", "recipient", "book"), pk=pk)
    if message.recipient_id == actor.id and not message.is_read:
        mark_read(actor, message)
    return message
