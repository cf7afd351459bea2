"""Account operations: registration, profile writes and role changes."""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, OuterRef, Q, Subquery

from policy.actor import Actor
from policy.engine import DELETE, INSERT, PROFILES, UPDATE, USER_ROLES, authorize, visible
from policy.exceptions import SelfRoleChange
from .models import Profile, Role, UserRole

logger = logging.getLogger(__name__)

User = get_user_model()


def register_user(
    *,
    email: str,
    password: str,
    full_name: str,
    role: str = Role.STUDENT,
    phone: str = "",
    institution: str = "",
):
    """Create the identity and its profile; the profile signal adds the role.

    The e-mail (lower-cased) doubles as the login name.
    """
    email = (email or "").strip().lower()
    with transaction.atomic():
        user = User.objects.create_user(username=email, email=email, password=password)
        profile = Profile(
            user=user,
            full_name=full_name.strip(),
            email=email,
            phone=(phone or "").strip(),
            institution=(institution or "").strip(),
        )
        profile.signup_role = role
        profile.save()
    logger.info("registered user %s as %s", user.pk, role)
    return user


def assign_initial_role(user_id: int, role: str) -> UserRole | None:
    """Move a user from "no role" to `role`; a no-op once any role exists."""
    if UserRole.objects.filter(user_id=user_id).exists():
        return None
    try:
        with transaction.atomic():
            return UserRole.objects.create(user_id=user_id, role=role)
    except IntegrityError:
        # Same (user, role) pair written concurrently; keep the existing row.
        return UserRole.objects.filter(user_id=user_id, role=role).first()


def reassign_role(actor: Actor, user_id: int, role: str) -> UserRole:
    """Replace every role row of `user_id` with a single `role` row.

    Self-reassignment is rejected before the database is touched. The
    delete and the insert share a transaction, so readers never observe
    the user without a role.
    """
    if actor.id is not None and actor.id == user_id:
        raise SelfRoleChange()
    new_row = UserRole(user_id=user_id, role=role)
    authorize(actor, DELETE, USER_ROLES, new_row)
    authorize(actor, INSERT, USER_ROLES, new_row)
    if role not in Role.values:
        raise ValidationError({"role": f"Unknown role: {role}."})
    if not User.objects.filter(pk=user_id).exists():
        raise ValidationError({"user": "No such user."})
    with transaction.atomic():
        UserRole.objects.filter(user_id=user_id).delete()
        new_row.save()
    logger.info("actor %s set role of user %s to %s", actor.id, user_id, role)
    return new_row


def save_profile(actor: Actor, profile: Profile) -> Profile:
    """Insert or update a profile, subject to the owner-only write rules."""
    op = UPDATE if profile.pk else INSERT
    authorize(actor, op, PROFILES, profile)
    profile.full_clean()
    profile.save()
    return profile


def first_role_subquery():
    return Subquery(
        UserRole.objects.filter(user_id=OuterRef("user_id")).order_by("created_at", "id").values("role")[:1]
    )


def directory(actor: Actor, q: str = ""):
    """Profiles the actor may read, each annotated with its display role.

    Users without a role row show as students. `q` matches name, e-mail
    or role, case-insensitively.
    """
    qs = visible(actor, PROFILES, Profile.objects.select_related("user")).annotate(role=first_role_subquery())
    rows = list(qs.order_by("-created_at"))
    for p in rows:
        p.role = p.role or Role.STUDENT
    q = (q or "").strip().lower()
    if q:
        rows = [
            p for p in rows
            if q in p.full_name.lower() or q in p.email.lower() or q in p.role
        ]
    return rows


def role_counts(actor: Actor) -> dict[str, int]:
    """Number of users per role among the role rows the actor may read."""
    counts = {r: 0 for r in Role.values}
    for row in visible(actor, USER_ROLES, UserRole.objects.all()).values("role").annotate(n=Count("id")):
        counts[row["role"]] = row["n"]
    return counts


def find_user_by_email(email: str):
    """Resolve an e-mail address through the identity store (not profiles)."""
    email = (email or "").strip()
    if not email:
        return None
    return User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).first()
