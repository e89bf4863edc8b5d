"""Security headers middleware.

Learn: The services have no auth, but the upload broadcaster serves
whatever anyone uploaded from /uploads/, on the same origin as the chat
page. Two headers carry the weight there:
- X-Content-Type-Options: nosniff, so a .png that is really HTML is not
  rendered as HTML
- Content-Security-Policy: sandbox, so an uploaded .html or .svg that
  the browser does render gets an opaque origin and cannot run script
  against the app

Every response also gets the usual frame / referrer headers, and HSTS
when the request came in over https.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

UPLOADS_PREFIX = "/uploads/"
UPLOADS_CSP = "sandbox"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all HTTP responses, sandbox served uploads."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if request.url.path.startswith(UPLOADS_PREFIX):
            response.headers["Content-Security-Policy"] = UPLOADS_CSP
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response
