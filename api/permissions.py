"""Coarse permissions for REST API v1.

Row-level decisions stay in the policy engine; these only gate whole
endpoints before a service is called.
"""
from __future__ import annotations

from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAuthenticatedOrReadOnly(BasePermission):
    def has_permission(self, request, view):  # noqa: D401
        return bool(request.method in SAFE_METHODS or (request.user and request.user.is_authenticated))
