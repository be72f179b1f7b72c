"""Cookie-backed KeyValueStore holding an anonymous visitor's identity."""

from fastapi import Request, Response


class CookieKeyValueStore:
    """Reads request cookies; writes go to the outgoing response.

    Values set during the request are visible to later get() calls in the
    same request.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        max_age: int,
        secure: bool = False,
    ) -> None:
        self._values = dict(request.cookies)
        self._response = response
        self._max_age = max_age
        self._secure = secure

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._response.set_cookie(
            key,
            value,
            max_age=self._max_age,
            httponly=True,
            samesite="lax",
            secure=self._secure,
        )

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
        self._response.delete_cookie(key, httponly=True, samesite="lax", secure=self._secure)
