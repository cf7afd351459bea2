"""Catalogue views: browse, submit, download and delete books."""
from __future__ import annotations

import time

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Avg
from django.http import FileResponse, HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from accounts.decorators import role_required
from accounts.models import Profile, Role
from policy.engine import PROFILES, visible
from policy.exceptions import AuthorizationDenied, PartialFailure
from policy.middleware import get_actor
from reviews.forms import ReviewForm
from .forms import BookSubmitForm
from .models import Book
from .services import categories, delete_book, list_books, open_book, submit_book


@login_required
def book_list(request: HttpRequest) -> HttpResponse:
    """Shared catalogue, newest first, with a title/author filter."""
    q = (request.GET.get("q") or "").strip()
    category = (request.GET.get("category") or "").strip()
    ctx = {
        "books": list_books(get_actor(request), q, category),
        "q": q,
        "category": category,
        "categories": categories(),
    }
    return render(request, "catalog/list.html", ctx)


@login_required
def book_detail(request: HttpRequest, pk: int) -> HttpResponse:
    book = get_object_or_404(Book.objects.select_related("uploaded_by"), pk=pk)
    reviews = book.reviews.select_related("user").order_by("-created_at")
    ctx = {
        "book": book,
        "reviews": reviews,
        "average": reviews.aggregate(avg=Avg("rating"))["avg"],
        "review_form": ReviewForm(initial={"book": book.pk}),
    }
    return render(request, "catalog/detail.html", ctx)


@login_required
def book_submit(request: HttpRequest) -> HttpResponse:
    actor = get_actor(request)
    if request.method == "POST":
        # Naive per-session upload throttle: max 5 uploads per minute
        now = time.time()
        ts = [t for t in request.session.get("upload_ts", []) if now - t < 60]
        if len(ts) >= 5:
            messages.error(request, "Too many uploads, please wait a minute and try again.")
            return redirect("catalog:submit")
        form = BookSubmitForm(request.POST, request.FILES)
        if form.is_valid():
            data = form.cleaned_data
            try:
                submit_book(
                    actor,
                    data["file"],
                    title=data["title"],
                    author=data["author"],
                    description=data["description"],
                    category=data["category"],
                    isbn=data["isbn"],
                    edition=data["edition"],
                )
            except ValidationError as exc:
                messages.error(request, "; ".join(exc.messages))
            except (AuthorizationDenied, PartialFailure, OSError) as exc:
                messages.error(request, f"Error submitting book: {exc}")
            else:
                ts.append(now)
                request.session["upload_ts"] = ts
                messages.success(request, "Book submitted successfully!")
                return redirect("catalog:list")
        else:
            messages.error(request, "Please provide at least a title and a supported file.")
    else:
        form = BookSubmitForm()
    return render(request, "catalog/submit.html", {"form": form})


@require_POST
@login_required
def book_delete(request: HttpRequest, pk: int) -> HttpResponse:
    book = get_object_or_404(Book, pk=pk)
    try:
        delete_book(get_actor(request), book)
    except AuthorizationDenied:
        messages.error(request, "You are not allowed to delete this book.")
    except PartialFailure as exc:
        messages.error(request, f"{exc} Please contact an administrator.")
    except OSError:
        messages.error(request, "Error deleting book file; nothing was removed.")
    else:
        messages.success(request, "Book deleted successfully.")
    nxt = request.POST.get("next") or ""
    if nxt and url_has_allowed_host_and_scheme(nxt, allowed_hosts={request.get_host()}):
        return redirect(nxt)
    return redirect("catalog:list")


@login_required
def book_download(request: HttpRequest, pk: int) -> HttpResponse:
    book = get_object_or_404(Book, pk=pk)
    try:
        fh = open_book(get_actor(request), book)
    except FileNotFoundError:
        messages.error(request, "Error downloading book: the file is missing.")
        return redirect("catalog:detail", pk=book.pk)
    return FileResponse(fh, as_attachment=True, filename=book.file_name)


@login_required
@role_required(Role.ADMIN)
def admin_books(request: HttpRequest) -> HttpResponse:
    """Every book with its uploader's contact details."""
    actor = get_actor(request)
    books = list(list_books(actor))
    uploader_ids = {b.uploaded_by_id for b in books}
    profiles = {
        p.user_id: p
        for p in visible(actor, PROFILES, Profile.objects.filter(user_id__in=uploader_ids))
    }
    for b in books:
        b.uploader_profile = profiles.get(b.uploaded_by_id)
    return render(request, "catalog/admin_list.html", {"books": books})
