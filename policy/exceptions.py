"""Failure taxonomy for authorization-checked operations.

Both permission errors subclass Django's `PermissionDenied`, so an
unhandled denial answers 403 in HTML views and in DRF alike. Not-found
uses `Http404` and validation uses Django's `ValidationError`.
"""
from __future__ import annotations

from django.core.exceptions import PermissionDenied


class AuthenticationRequired(PermissionDenied):
    """The operation needs a signed-in actor."""

    def __init__(self, message: str = "Please sign in to continue."):
        super().__init__(message)


class AuthorizationDenied(PermissionDenied):
    """The actor is signed in but the rule for this row evaluated false."""

    def __init__(self, message: str = "You are not allowed to do that.", *, op: str = "", table: str = ""):
        super().__init__(message)
        self.op = op
        self.table = table


class SelfRoleChange(AuthorizationDenied):
    def __init__(self):
        super().__init__("You cannot change your own role.", op="delete", table="user_roles")


class PartialFailure(Exception):
    """One half of a blob + row operation succeeded and the other did not.

    `blob_path` names the object left behind so an operator can clean up.
    """

    def __init__(self, message: str, *, blob_path: str = ""):
        super().__init__(message)
        self.blob_path = blob_path
