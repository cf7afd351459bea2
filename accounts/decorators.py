"""Role-based access decorators."""
from __future__ import annotations

from functools import wraps
from django.http import HttpRequest

from policy.exceptions import AuthenticationRequired, AuthorizationDenied
from policy.middleware import get_actor


def role_required(*roles: str):
    """Require the request actor to hold one of the given roles.

    This gates navigation only; every operation behind the view still goes
    through `policy.engine.authorize`.
    """

    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request: HttpRequest, *args, **kwargs):
            actor = get_actor(request)
            if not actor.is_authenticated:
                raise AuthenticationRequired()
            if not any(actor.has_role(r) for r in roles):
                raise AuthorizationDenied()
            return view_func(request, *args, **kwargs)

        return _wrapped

    return decorator
