"""Accounts models: contact profiles and role rows.

A `Profile` holds one user's contact details. Roles live in their own
table (`UserRole`) so that a role can be reassigned without touching the
profile; the first role row is written automatically when the profile is
created (see `signals.py`).
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    """Closed set of platform roles.

    Students and teachers pick their role at sign-up; admin is only ever
    granted by another admin or the `promote_admin` command.
    """

    STUDENT = "student", "Student"
    TEACHER = "teacher", "Teacher"
    ADMIN = "admin", "Admin"


SIGNUP_ROLES = (Role.STUDENT, Role.TEACHER)


class Profile(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    full_name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=50, blank=True)
    institution = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover (string repr convenience)
        return f"Profile<{self.email}>"


class UserRole(models.Model):
    """One (user, role) pair.

    Uniqueness is per pair, not per user: nothing at the storage layer
    stops a user from holding two different roles. The application reads
    the first row as the user's role.
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="role_rows")
    role = models.CharField(max_length=16, choices=Role.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="accounts_userrole_unique_user_role"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user_id}:{self.role}"
