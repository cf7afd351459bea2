"""The authenticated identity attached to a request.

An `Actor` is resolved once per request and handed to every operation
that needs an authorization decision; nothing below the view layer asks
"who is the current user" on its own.
"""
from __future__ import annotations

from dataclasses import dataclass

from accounts.models import Role, UserRole


@dataclass(frozen=True)
class Actor:
    id: int | None = None
    # Role rows in creation order; usually exactly one.
    roles: tuple[str, ...] = ()

    @property
    def is_authenticated(self) -> bool:
        return self.id is not None

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)

    @property
    def role(self) -> str:
        """Display role: the first role row, or student when there is none.

        A user caught between the two steps of a role reassignment (or one
        that never had a row) is shown, and treated, as a student.
        """
        return self.roles[0] if self.roles else Role.STUDENT


ANONYMOUS = Actor()


def actor_for(user) -> Actor:
    """Build an actor from a Django user (anonymous users map to `ANONYMOUS`)."""
    if not getattr(user, "is_authenticated", False):
        return ANONYMOUS
    roles = tuple(
        UserRole.objects.filter(user_id=user.pk)
        .order_by("created_at", "id")
        .values_list("role", flat=True)
    )
    return Actor(id=user.pk, roles=roles)
