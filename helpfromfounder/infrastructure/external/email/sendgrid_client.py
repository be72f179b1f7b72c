"""SendGrid v3 mail/send client over httpx (implements IEmailSender)."""

from __future__ import annotations

import logging

import httpx

from helpfromfounder.application.dtos.notification import EmailMessage

logger = logging.getLogger(__name__)


class EmailSendError(Exception):
    """SendGrid rejected the message or could not be reached."""


class SendGridEmailSender:
    """Sends one message per call; each recipient gets an individual email."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str,
        *,
        api_url: str = "https://api.sendgrid.com/v3/mail/send",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._from = {"email": from_email, "name": from_name}
        self._api_url = api_url
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=15.0)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def send(self, message: EmailMessage) -> None:
        payload = {
            "personalizations": [
                {"to": [{"email": message.to_email, "name": message.to_name}]}
            ],
            "from": self._from,
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text},
                {"type": "text/html", "value": message.html},
            ],
        }
        try:
            resp = await self._http.post(
                self._api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.HTTPError as e:
            raise EmailSendError(f"SendGrid request failed: {e}") from e
        if resp.status_code >= 400:
            raise EmailSendError(_error_message(resp))
        logger.info("Email sent via SendGrid to %s", message.to_email)


def _error_message(resp: httpx.Response) -> str:
    try:
        errors = resp.json().get("errors") or []
    except ValueError:
        errors = []
    if errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return str(errors[0]["message"])
    return f"SendGrid returned HTTP {resp.status_code}"
