from __future__ import annotations

from .actor import ANONYMOUS


def actor(request) -> dict:
    """Expose the request actor to templates for advisory gating."""
    return {"actor": getattr(request, "actor", ANONYMOUS)}
