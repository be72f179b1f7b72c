"""Request body size limit middleware.

Rejects request bodies larger than max_bytes (MAX_UPLOAD_SIZE) with 413.
A declared Content-Length is checked up front; otherwise bytes are counted
as the application reads them, so nothing is buffered here. Image and
dispatcher routes answer in their own {success, error} envelope.
Uses raw ASGI (no BaseHTTPMiddleware).
"""

import json
from typing import Callable

from helpfromfounder.middleware.request_id import get_header

_ENVELOPE_PREFIXES = ("/api/images", "/api/send-email")


def _payload_too_large(path: str, max_bytes: int) -> bytes:
    message = f"Request body must be at most {max_bytes} bytes"
    if path.startswith(_ENVELOPE_PREFIXES):
        return json.dumps({"success": False, "error": message}).encode()
    return json.dumps({
        "error": "PAYLOAD_TOO_LARGE",
        "message": message,
        "details": {"max_bytes": max_bytes},
    }).encode()


async def _send_413(send: Callable, path: str, max_bytes: int) -> None:
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [(b"content-type", b"application/json")],
    })
    await send({
        "type": "http.response.body",
        "body": _payload_too_large(path, max_bytes),
        "more_body": False,
    })


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject bodies over max_bytes (declared or streamed). Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or scope.get("method") in ("GET", "HEAD", "OPTIONS"):
            await app(scope, receive, send)
            return
        path = scope.get("path", "")
        declared = get_header(scope, "content-length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            await _send_413(send, path, max_bytes)
            return

        received = 0
        rejected = False
        response_started = False

        async def limited_receive() -> dict:
            nonlocal received, rejected
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes and not rejected:
                    rejected = True
                    if not response_started:
                        await _send_413(send, path, max_bytes)
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: dict) -> None:
            nonlocal response_started
            if rejected:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await app(scope, limited_receive, guarded_send)
        except Exception:
            # The app fails on the synthetic disconnect; the 413 is already sent
            if not rejected:
                raise

    return asgi_app
