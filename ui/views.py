from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render

from catalog.models import Book


def index(request: HttpRequest) -> HttpResponse:
    """Landing page; signed-in users go straight to their dashboard."""
    if request.user.is_authenticated:
        return redirect("accounts:dashboard")
    ctx = {
        "app_name": "TextAssess",
        "tagline": "Share textbooks, rate them, and talk about them.",
        "recent_books": Book.objects.order_by("-upload_date", "-id")[:5],
    }
    return render(request, "index.html", ctx)
