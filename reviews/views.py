from __future__ import annotations

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from policy.exceptions import AuthorizationDenied
from policy.middleware import get_actor
from .forms import ReviewForm
from .models import Review
from .services import create_review, delete_review, my_reviews


@login_required
def review_list(request: HttpRequest) -> HttpResponse:
    """The actor's own reviews, with a form to review any book."""
    actor = get_actor(request)
    if request.method == "POST":
        form = ReviewForm(request.POST)
        if form.is_valid():
            data = form.cleaned_data
            try:
                create_review(actor, data["book"], data["rating"], data["review_text"])
            except ValidationError as exc:
                messages.error(request, f"Error submitting review: {'; '.join(exc.messages)}")
            except AuthorizationDenied as exc:
                messages.error(request, f"Error submitting review: {exc}")
            else:
                messages.success(request, "Review submitted successfully!")
                return redirect("reviews:list")
        else:
            messages.error(request, "Please choose a book and a rating between 1 and 5.")
    else:
        form = ReviewForm(initial={"book": request.GET.get("book")})
    return render(request, "reviews/list.html", {"form": form, "reviews": my_reviews(actor)})


@require_POST
@login_required
def review_create(request: HttpRequest) -> HttpResponse:
    """Review posted from a book's detail page; returns there."""
    form = ReviewForm(request.POST)
    book_id = request.POST.get("book") or ""
    if form.is_valid():
        data = form.cleaned_data
        try:
            create_review(get_actor(request), data["book"], data["rating"], data["review_text"])
        except ValidationError as exc:
            messages.error(request, "; ".join(exc.messages))
        else:
            messages.success(request, "Review submitted successfully!")
    else:
        messages.error(request, "Please choose a rating between 1 and 5.")
    if book_id.isdigit():
        return redirect("catalog:detail", pk=int(book_id))
    return redirect("reviews:list")


@require_POST
@login_required
def review_delete(request: HttpRequest, pk: int) -> HttpResponse:
    review = get_object_or_404(Review, pk=pk)
    try:
        delete_review(get_actor(request), review)
    except AuthorizationDenied:
        messages.error(request, "You can only delete your own reviews.")
    else:
        messages.success(request, "Review deleted.")
    return redirect("reviews:list")
