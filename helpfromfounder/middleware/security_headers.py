"""Security headers middleware.

Adds security-related response headers. Image responses are meant to be
embedded by the web app's origin, so they are marked cross-origin
embeddable and carry a CSP that still blocks scripts.
Uses raw ASGI (no BaseHTTPMiddleware).
"""

from typing import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Path prefix -> headers replacing the defaults for matching requests
PATH_OVERRIDES: dict[str, dict[str, str]] = {
    "/api/images/": {
        "Content-Security-Policy": "default-src 'none'; img-src 'self'; style-src 'unsafe-inline'",
        "Cross-Origin-Resource-Policy": "cross-origin",
    },
    # Swagger UI loads its scripts and styles from a CDN
    "/docs": {
        "Content-Security-Policy": "default-src 'self' https://cdn.jsdelivr.net 'unsafe-inline'; img-src 'self' data: https:",
    },
}


def _encode(headers: dict[str, str]) -> list[tuple[bytes, bytes]]:
    return [(k.lower().encode(), v.encode()) for k, v in headers.items()]


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None
) -> Callable:
    """Set security headers on HTTP responses, never overriding ones the app set. Raw ASGI."""
    base = headers if headers is not None else DEFAULT_HEADERS
    default_list = _encode(base)
    override_lists = {
        prefix: _encode({**base, **extra}) for prefix, extra in PATH_OVERRIDES.items()
    }

    def headers_for(path: str) -> list[tuple[bytes, bytes]]:
        for prefix, header_list in override_lists.items():
            if path.startswith(prefix):
                return header_list
        return default_list

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = headers_for(scope.get("path", ""))

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                seen = {name.lower() for name, _ in current}
                current.extend(h for h in extra if h[0] not in seen)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
