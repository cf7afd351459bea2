"""Row-level authorization rules.

Each `(table, operation)` pair maps to a predicate over the actor and the
row being read or written. A pair with no rule is denied: an operation
that has no path in the application (updating a book, deleting a profile)
simply has no entry here. Select rules also carry a queryset scope so
that lists are filtered by the same rule that guards single rows.

The same table drives enforcement (`authorize`) and advisory gating in
templates and serializers (`permits`), so the UI cannot offer an action
the enforcement layer would refuse.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from django.db.models import Q, QuerySet
from django.http import Http404

from accounts.models import Role
from .actor import Actor
from .exceptions import AuthenticationRequired, AuthorizationDenied

logger = logging.getLogger(__name__)

SELECT = "select"
INSERT = "insert"
UPDATE = "update"
DELETE = "delete"

BOOKS = "books"
BOOK_FILES = "book_files"
PROFILES = "profiles"
USER_ROLES = "user_roles"
REVIEWS = "reviews"
MESSAGES = "messages"

Check = Callable[[Actor, Any], bool]
Scope = Callable[[Actor], Q]


@dataclass(frozen=True)
class Rule:
    check: Check
    # Select rules only: queryset filter equivalent to `check`.
    scope: Scope | None = None
    # Public rules are evaluated for anonymous actors too.
    public: bool = False


def _always(actor: Actor, row: Any) -> bool:
    return True


def _authenticated(actor: Actor, row: Any) -> bool:
    return actor.is_authenticated


def _admin(actor: Actor, row: Any) -> bool:
    return actor.is_admin


def _owner(field: str) -> Check:
    def check(actor: Actor, row: Any) -> bool:
        return actor.is_authenticated and getattr(row, field, None) == actor.id

    return check


def _not_owner(field: str) -> Check:
    def check(actor: Actor, row: Any) -> bool:
        return getattr(row, field, None) != actor.id

    return check


def _any_role(*roles: str) -> Check:
    def check(actor: Actor, row: Any) -> bool:
        return any(actor.has_role(r) for r in roles)

    return check


def _key_owner(actor: Actor, key: Any) -> bool:
    # Blob keys are "{user_id}/{timestamp}.{ext}"
    folder = str(key or "").split("/", 1)[0]
    return actor.is_authenticated and folder == str(actor.id)


def _either(*checks: Check) -> Check:
    def check(actor: Actor, row: Any) -> bool:
        return any(c(actor, row) for c in checks)

    return check


def _both(*checks: Check) -> Check:
    def check(actor: Actor, row: Any) -> bool:
        return all(c(actor, row) for c in checks)

    return check


def _everything(actor: Actor) -> Q:
    return Q()


def _own_or(field: str, *roles: str) -> Scope:
    def scope(actor: Actor) -> Q:
        if any(actor.has_role(r) for r in roles):
            return Q()
        return Q(**{field: actor.id})

    return scope


def _message_scope(actor: Actor) -> Q:
    if actor.is_admin:
        return Q()
    return Q(sender_id=actor.id) | Q(recipient_id=actor.id)


RULES: dict[tuple[str, str], Rule] = {
    (BOOKS, SELECT): Rule(_always, scope=_everything, public=True),
    (BOOKS, INSERT): Rule(_owner("uploaded_by_id")),
    (BOOKS, DELETE): Rule(_either(_owner("uploaded_by_id"), _admin)),
    (BOOK_FILES, SELECT): Rule(_authenticated),
    (BOOK_FILES, INSERT): Rule(_key_owner),
    (BOOK_FILES, DELETE): Rule(_either(_key_owner, _admin)),
    (PROFILES, SELECT): Rule(
        _either(_owner("user_id"), _any_role(Role.ADMIN, Role.TEACHER)),
        scope=_own_or("user_id", Role.ADMIN, Role.TEACHER),
    ),
    (PROFILES, INSERT): Rule(_owner("user_id")),
    (PROFILES, UPDATE): Rule(_owner("user_id")),
    (USER_ROLES, SELECT): Rule(
        _either(_owner("user_id"), _admin),
        scope=_own_or("user_id", Role.ADMIN),
    ),
    (USER_ROLES, INSERT): Rule(_both(_admin, _not_owner("user_id"))),
    (USER_ROLES, DELETE): Rule(_both(_admin, _not_owner("user_id"))),
    (REVIEWS, SELECT): Rule(_always, scope=_everything, public=True),
    (REVIEWS, INSERT): Rule(_owner("user_id")),
    (REVIEWS, DELETE): Rule(_owner("user_id")),
    (MESSAGES, SELECT): Rule(
        _either(_owner("sender_id"), _owner("recipient_id"), _admin),
        scope=_message_scope,
    ),
    (MESSAGES, INSERT): Rule(_owner("sender_id")),
    (MESSAGES, UPDATE): Rule(_owner("recipient_id")),
}


def authorize(actor: Actor, op: str, table: str, row: Any = None) -> None:
    """Raise unless `actor` may perform `op` on `row` of `table`."""
    rule = RULES.get((table, op))
    if rule is None:
        logger.info("no %s path on %s (actor=%s)", op, table, actor.id)
        raise AuthorizationDenied(f"{op.capitalize()} is not available for {table}.", op=op, table=table)
    if not rule.public and not actor.is_authenticated:
        raise AuthenticationRequired()
    if not rule.check(actor, row):
        logger.info("denied %s on %s (actor=%s, row=%s)", op, table, actor.id, getattr(row, "pk", row))
        raise AuthorizationDenied(op=op, table=table)


def permits(actor: Actor, op: str, table: str, row: Any = None) -> bool:
    """Non-raising form of `authorize` for display decisions."""
    try:
        authorize(actor, op, table, row)
    except (AuthenticationRequired, AuthorizationDenied):
        return False
    return True


def visible(actor: Actor, table: str, queryset: QuerySet) -> QuerySet:
    """Restrict `queryset` to the rows the select rule lets `actor` read."""
    rule = RULES.get((table, SELECT))
    if rule is None or rule.scope is None:
        return queryset.none()
    if not rule.public and not actor.is_authenticated:
        return queryset.none()
    return queryset.filter(rule.scope(actor))


def get_visible(actor: Actor, table: str, queryset: QuerySet, **lookup):
    """Fetch one row, distinguishing "missing" from "not yours".

    A row that exists but is hidden from the actor raises
    `AuthorizationDenied`, never a not-found.
    """
    try:
        obj = queryset.get(**lookup)
    except (queryset.model.DoesNotExist, ValueError, TypeError) as exc:
        raise Http404(f"No such record in {table}.") from exc
    authorize(actor, SELECT, table, obj)
    return obj
