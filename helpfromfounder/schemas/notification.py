"""Notification dispatcher request schemas (wire format is camelCase)."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class NotificationRecipient(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(..., min_length=1)
    name: str | None = None


class _BaseNotificationRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    projectId: str
    projectName: str
    issueId: str
    issueTitle: str
    recipients: list[NotificationRecipient] = Field(..., min_length=1)
    userName: str | None = None
    createdAt: str | None = None
    issueUrl: str | None = None


class IssueNotificationRequest(_BaseNotificationRequest):
    type: Literal["new_issue"]
    issueContent: str


class ResponseNotificationRequest(_BaseNotificationRequest):
    type: Literal["new_response"]
    responseContent: str
    responseAuthor: str


NotificationRequest = Annotated[
    IssueNotificationRequest | ResponseNotificationRequest,
    Field(discriminator="type"),
]
