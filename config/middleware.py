from __future__ import annotations

from django.utils.deprecation import MiddlewareMixin


class ContentSecurityPolicyMiddleware(MiddlewareMixin):
    """Add a basic Content-Security-Policy header.

    Templates carry no inline scripts or styles; the unread badge script
    is served from /static/ and talks to the inbox socket, hence ws:/wss:.
    """

    def process_response(self, request, response):  # noqa: D401
        style_src = "'self'"

        # Swagger UI injects one small inline <style> block; allow it on /docs/ only.
        if request.path == "/docs/":
            style_src = "'self' 'unsafe-inline'"

        csp = (
            "default-src 'self'; "
            "img-src 'self' data:; "
            "script-src 'self' https://cdn.jsdelivr.net; "
            f"style-src {style_src} https://cdn.jsdelivr.net; "
            "connect-src 'self' ws: wss:; "
            "frame-ancestors 'none'"
        )
        response["Content-Security-Policy"] = csp
        return response
