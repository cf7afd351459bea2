"""Signals for automatic role assignment.

Creating a profile assigns the user's first role, once. The role chosen
on the sign-up form travels on the unsaved profile as `signup_role`;
anything outside the self-service roles falls back to student.
"""
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Profile, Role, SIGNUP_ROLES
from .services import assign_initial_role


@receiver(post_save, sender=Profile)
def assign_role_on_profile_created(sender, instance: Profile, created: bool, **kwargs):  # noqa: D401
    """Give a brand-new profile its sign-up role (default: student)."""
    if not created:
        return
    role = getattr(instance, "signup_role", None) or Role.STUDENT
    if role not in SIGNUP_ROLES:
        role = Role.STUDENT
    assign_initial_role(instance.user_id, role)
