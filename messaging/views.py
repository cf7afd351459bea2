"""Inbox, compose and message detail pages plus the unread-count poll."""
from __future__ import annotations

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from policy.engine import MESSAGES, get_visible
from policy.exceptions import AuthorizationDenied
from policy.middleware import get_actor
from .forms import ComposeForm
from .models import Message
from .services import BOXES, mailbox, mark_read, open_message, send_message, unread_count


@login_required
def inbox(request: HttpRequest) -> HttpResponse:
    actor = get_actor(request)
    box = request.GET.get("box") or "all"
    if box not in BOXES:
        box = "all"
    q = (request.GET.get("q") or "").strip()
    ctx = {
        "messages_list": mailbox(actor, box, q),
        "box": box,
        "boxes": BOXES,
        "q": q,
        "unread": unread_count(actor),
        "poll_seconds": settings.MESSAGES_UNREAD_POLL_SECONDS,
    }
    return render(request, "messaging/inbox.html", ctx)


@login_required
def compose(request: HttpRequest) -> HttpResponse:
    if request.method == "POST":
        form = ComposeForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                send_message(
                    get_actor(request),
                    data["recipient_email"],
                    data["subject"],
                    data["content"],
                    book=data["book"],
                )
            except Http404:
                messages.error(request, "Recipient not found. Please check the e-mail address.")
            except ValidationError as exc:
                messages.error(request, "; ".join(exc.messages))
            except AuthorizationDenied as exc:
                messages.error(request, f"Error sending message: {exc}")
            else:
                messages.success(request, "Message sent successfully!")
                return redirect("messaging:inbox")
    else:
        form = ComposeForm(initial={"recipient_email": request.GET.get("to", ""), "book": request.GET.get("book")})
    return render(request, "messaging/compose.html", {"form": form})


@login_required
def message_detail(request: HttpRequest, pk: int) -> HttpResponse:
    """Show one message; opening a received message marks it read."""
    message = open_message(get_actor(request), pk)
    return render(request, "messaging/detail.html", {"message": message})


@require_POST
@login_required
def message_mark_read(request: HttpRequest, pk: int) -> HttpResponse:
    actor = get_actor(request)
    message = get_visible(actor, MESSAGES, Message.objects.all(), pk=pk)
    try:
        mark_read(actor, message)
    except AuthorizationDenied:
        messages.error(request, "Only the recipient can mark a message as read.")
    return redirect("messaging:inbox")


@login_required
def unread(request: HttpRequest) -> JsonResponse:
    """Unread count for the badge poll."""
    return JsonResponse({"unread": unread_count(get_actor(request))})
