"""Accounts views: sign-up, sign-in, dashboard, profile and the role panel."""
from __future__ import annotations

import time

from django.contrib import messages
from django.contrib.auth import login
from django.contrib.auth.decorators import login_required
from django.contrib.auth.views import LoginView, LogoutView
from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from catalog.models import Book
from policy.engine import PROFILES, get_visible
from policy.exceptions import AuthorizationDenied
from policy.middleware import get_actor
from reviews.models import Review
from .decorators import role_required
from .forms import EmailAuthenticationForm, ProfileForm, RoleAssignForm, SignUpForm
from .models import Profile, Role
from .services import directory, reassign_role, role_counts, save_profile


class TextAssessLoginView(LoginView):
    template_name = "registration/login.html"
    form_class = EmailAuthenticationForm

    def post(self, request: HttpRequest, *args, **kwargs):
        # Per-session login throttle: max 10 attempts/min
        now = time.time()
        ts = [t for t in request.session.get("login_ts", []) if now - t < 60]
        if len(ts) >= 10:
            messages.error(request, "Too many login attempts. Please wait a minute and try again.")
            return self.get(request, *args, **kwargs)
        ts.append(now)
        request.session["login_ts"] = ts
        return super().post(request, *args, **kwargs)


class TextAssessLogoutView(LogoutView):
    next_page = "/"


def signup(request: HttpRequest) -> HttpResponse:
    """Create an account, pick a role, and sign straight in."""
    if request.method == "POST":
        form = SignUpForm(request.POST)
        if form.is_valid():
            user = form.save()
            login(request, user, backend="django.contrib.auth.backends.ModelBackend")
            messages.success(request, "Account created successfully!")
            return redirect("accounts:dashboard")
    else:
        form = SignUpForm()
    return render(request, "accounts/signup.html", {"form": form})


@login_required
def dashboard(request: HttpRequest) -> HttpResponse:
    """The actor's profile, role and own uploads."""
    actor = get_actor(request)
    profile = Profile.objects.filter(user_id=actor.id).first()
    if profile is None:
        messages.info(request, "Please complete your profile.")
        return redirect("accounts:profile")
    ctx = {
        "profile": profile,
        "role": actor.role,
        "books": Book.objects.filter(uploaded_by_id=actor.id).order_by("-upload_date"),
        "review_count": Review.objects.filter(user_id=actor.id).count(),
    }
    return render(request, "accounts/dashboard.html", ctx)


@login_required
def profile_edit(request: HttpRequest) -> HttpResponse:
    """Create the actor's profile if missing, otherwise update it."""
    actor = get_actor(request)
    profile = Profile.objects.filter(user_id=actor.id).first()
    if profile is None:
        profile = Profile(user_id=actor.id, email=request.user.email)
    if request.method == "POST":
        form = ProfileForm(request.POST, instance=profile)
        if form.is_valid():
            try:
                save_profile(actor, form.save(commit=False))
            except (AuthorizationDenied, ValidationError) as exc:
                messages.error(request, f"Could not save profile: {exc}")
            else:
                messages.success(request, "Profile updated.")
                return redirect("accounts:dashboard")
    else:
        form = ProfileForm(instance=profile)
    return render(request, "accounts/profile.html", {"form": form})


@login_required
def profile_detail(request: HttpRequest, user_id: int) -> HttpResponse:
    """Contact card of another user (self, teachers and admins only)."""
    actor = get_actor(request)
    profile = get_visible(actor, PROFILES, Profile.objects.select_related("user"), user_id=user_id)
    return render(request, "accounts/profile_detail.html", {"profile": profile})


@login_required
@role_required(Role.ADMIN)
def admin_roles(request: HttpRequest) -> HttpResponse:
    """Admin panel: every user with their role, searchable."""
    actor = get_actor(request)
    q = (request.GET.get("q") or "").strip()
    users = directory(actor, q)
    ctx = {
        "q": q,
        "users": users,
        "counts": role_counts(actor),
        "total": len(directory(actor)) if q else len(users),
        "roles": Role.choices,
    }
    return render(request, "accounts/admin_roles.html", ctx)


@require_POST
@login_required
@role_required(Role.ADMIN)
def admin_role_assign(request: HttpRequest, user_id: int) -> HttpResponse:
    actor = get_actor(request)
    form = RoleAssignForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Choose a valid role.")
        return redirect("accounts:admin-roles")
    try:
        row = reassign_role(actor, user_id, form.cleaned_data["role"])
    except AuthorizationDenied as exc:
        messages.error(request, str(exc))
    except ValidationError as exc:
        messages.error(request, "; ".join(exc.messages))
    else:
        messages.success(request, f"User role updated to {row.role}.")
    return redirect("accounts:admin-roles")
