"""Attach the request's actor once, after authentication has run."""
from __future__ import annotations

from django.utils.functional import SimpleLazyObject

from .actor import Actor, actor_for


def get_actor(request) -> Actor:
    if not hasattr(request, "_cached_actor"):
        request._cached_actor = actor_for(request.user)
    return request._cached_actor


class ActorMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.actor = SimpleLazyObject(lambda: get_actor(request))
        return self.get_response(request)
