"""API tests for the notification dispatcher and thread notifications."""

from httpx import AsyncClient

from tests.conftest import sign_up

ISSUE_PAYLOAD = {
    "type": "new_issue",
    "projectId": "p1",
    "projectName": "Acme",
    "issueId": "t1",
    "issueTitle": "Login broken",
    "issueContent": "Cannot log in",
    "recipients": [
        {"email": "owner@example.com", "name": "Owner"},
        {"email": "helper@example.com", "name": "Helper"},
    ],
}


async def test_send_email_fans_out(client: AsyncClient, email_sender) -> None:
    response = await client.post("/api/send-email", json=ISSUE_PAYLOAD)
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert [m.to_email for m in email_sender.messages] == ["owner@example.com", "helper@example.com"]


async def test_send_email_partial_failure(client: AsyncClient, email_sender) -> None:
    email_sender.fail_for.add("helper@example.com")
    response = await client.post("/api/send-email", json=ISSUE_PAYLOAD)
    assert response.status_code == 207
    assert response.json()["message"] == "Sent 1 of 2 notifications"


async def test_send_email_rejects_invalid_payload(client: AsyncClient, email_sender) -> None:
    response = await client.post("/api/send-email", json={"type": "digest"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid notification type: digest"}

    broken = await client.post(
        "/api/send-email", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert broken.status_code == 400
    assert email_sender.messages == []


async def test_legacy_path_serves_dispatcher(client: AsyncClient, email_sender) -> None:
    response = await client.post("/legacy/send-email", json=ISSUE_PAYLOAD)
    assert response.status_code == 200
    assert len(email_sender.messages) == 2


async def test_new_thread_emails_founder(app, client: AsyncClient, email_sender, project: dict) -> None:
    created = await client.post(
        f"/api/v1/projects/{project['id']}/threads",
        json={"content": "The export button does nothing", "title": "Export"},
    )
    assert created.status_code == 201

    await app.state.task_runner.drain()
    assert [m.to_email for m in email_sender.messages] == ["founder@example.com"]


async def test_founder_reply_emails_thread_author(
    app, client: AsyncClient, email_sender, founder: dict, project: dict
) -> None:
    author = await sign_up(client, "author@example.com", "Ann Author")
    thread = await client.post(
        f"/api/v1/projects/{project['id']}/threads",
        json={"content": "Dark mode please", "tag": "feature"},
        headers=author["headers"],
    )
    await app.state.task_runner.drain()
    email_sender.messages.clear()

    await client.post(
        f"/api/v1/threads/{thread.json()['id']}/responses",
        json={"content": "On the roadmap"},
        headers=founder["headers"],
    )
    await app.state.task_runner.drain()
    assert [m.to_email for m in email_sender.messages] == ["author@example.com"]
