"""Notification email templates (Jinja): HTML and plain text per notification type."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from jinja2 import DictLoader, Environment, Template

from helpfromfounder.shared.utils.datetime import parse_datetime, utc_now

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #3b82f6; color: white; padding: 10px 20px; border-radius: 4px 4px 0 0; }
    .content { border: 1px solid #ddd; border-top: none; padding: 20px; border-radius: 0 0 4px 4px; }
    .footer { margin-top: 20px; font-size: 12px; color: #666; text-align: center; }
    pre { background: #f7f7f7; padding: 10px; border-radius: 4px; overflow: auto; white-space: pre-wrap; }
"""

_HTML_LAYOUT = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <style>{{ style|safe }}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h2>{{ heading }}</h2>
    </div>
    <div class="content">
      <p>Hello,</p>
      {% block body %}{% endblock %}
      {% if n.issueUrl %}
      <p><a href="{{ n.issueUrl }}" style="color: #3b82f6; text-decoration: underline;">{{ link_label }}</a></p>
      {% endif %}
      <p>Thank you for using Help From Founder!</p>
    </div>
    <div class="footer">
      <p>This is an automated message. Please do not reply to this email.</p>
    </div>
  </div>
</body>
</html>
"""

_HTML_TEMPLATES: dict[str, str] = {
    "new_issue": """{% extends "layout.html" %}{% block body %}
      <p>A new issue has been submitted to your project <strong>{{ n.projectName }}</strong> by {{ user_name }} on {{ date }}.</p>
      <h3>Issue Details:</h3>
      <p><strong>Title:</strong> {{ n.issueTitle }}</p>
      <p><strong>Content:</strong></p>
      <pre>{{ n.issueContent }}</pre>
{% endblock %}""",
    "new_response": """{% extends "layout.html" %}{% block body %}
      <p>A new response has been posted to an issue in your project <strong>{{ n.projectName }}</strong> by {{ n.responseAuthor }} on {{ date }}.</p>
      <h3>Response Details:</h3>
      <p><strong>Issue:</strong> {{ n.issueTitle }}</p>
      <p><strong>Response:</strong></p>
      <pre>{{ n.responseContent }}</pre>
{% endblock %}""",
}

_TEXT_TEMPLATES: dict[str, str] = {
    "new_issue": """New Issue: {{ n.issueTitle }}

Hello,

A new issue has been submitted to your project "{{ n.projectName }}" by {{ user_name }} on {{ date }}.

Issue Details:
Title: {{ n.issueTitle }}
Content:
{{ n.issueContent }}
{% if n.issueUrl %}
View Issue: {{ n.issueUrl }}
{% endif %}
Thank you for using Help From Founder!

---
This is an automated message. Please do not reply to this email.
""",
    "new_response": """New Response on Issue: {{ n.issueTitle }}

Hello,

A new response has been posted to an issue in your project "{{ n.projectName }}" by {{ n.responseAuthor }} on {{ date }}.

Response Details:
Issue: {{ n.issueTitle }}
Response:
{{ n.responseContent }}
{% if n.issueUrl %}
View Response: {{ n.issueUrl }}
{% endif %}
Thank you for using Help From Founder!

---
This is an automated message. Please do not reply to this email.
""",
}

_SUBJECTS: dict[str, str] = {
    "new_issue": "New Issue: {{ n.issueTitle }} - {{ n.projectName }}",
    "new_response": "New Response on Issue: {{ n.issueTitle }} - {{ n.projectName }}",
}

_HEADINGS: dict[str, tuple[str, str, str]] = {
    # type -> (page title, heading, link label)
    "new_issue": ("New Issue on {{ n.projectName }}", "New Issue: {{ n.issueTitle }}", "View Issue"),
    "new_response": (
        "New Response on {{ n.issueTitle }}",
        "New Response on Issue: {{ n.issueTitle }}",
        "View Response",
    ),
}


def _format_date(created_at: str | None) -> str:
    when: datetime | None = parse_datetime(created_at) if created_at else None
    return (when or utc_now()).strftime("%Y-%m-%d %H:%M UTC")


class NotificationTemplateRenderer:
    """Renders (subject, html, text) for a notification payload.

    HTML output is autoescaped; user-supplied titles and content cannot
    inject markup. Subjects and text bodies are not escaped.
    """

    def __init__(self) -> None:
        html_sources = {"layout.html": _HTML_LAYOUT}
        html_sources.update({f"{k}.html": v for k, v in _HTML_TEMPLATES.items()})
        self._html_env = Environment(loader=DictLoader(html_sources), autoescape=True)
        self._text_env = Environment(autoescape=False, keep_trailing_newline=True)
        self._text: dict[str, Template] = {
            k: self._text_env.from_string(v) for k, v in _TEXT_TEMPLATES.items()
        }
        self._subjects: dict[str, Template] = {
            k: self._text_env.from_string(v) for k, v in _SUBJECTS.items()
        }
        self._headings: dict[str, tuple[Template, Template, str]] = {
            k: (self._text_env.from_string(t), self._text_env.from_string(h), label)
            for k, (t, h, label) in _HEADINGS.items()
        }

    def render(self, notification: dict[str, Any]) -> tuple[str, str, str]:
        """Return (subject, html, text). Raises KeyError for an unknown type."""
        kind = notification["type"]
        ctx = {
            "n": notification,
            "date": _format_date(notification.get("createdAt")),
            "user_name": notification.get("userName") or "Anonymous user",
        }
        title_tpl, heading_tpl, link_label = self._headings[kind]
        html = self._html_env.get_template(f"{kind}.html").render(
            style=_STYLE,
            page_title=title_tpl.render(**ctx),
            heading=heading_tpl.render(**ctx),
            link_label=link_label,
            **ctx,
        )
        subject = self._subjects[kind].render(**ctx)
        text = self._text[kind].render(**ctx)
        return subject, html, text
