"""API tests for projects, threads, and responses."""

from httpx import AsyncClient

from tests.conftest import sign_up


async def _open_thread(client: AsyncClient, project_id: str, content: str = "It crashes on start", **extra) -> dict:
    response = await client.post(
        f"/api/v1/projects/{project_id}/threads", json={"content": content, **extra}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_project_requires_sign_in(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/projects", json={"name": "Nope", "description": "Anonymous project"}
    )
    assert response.status_code == 401


async def test_project_created_with_slug_and_owner(client: AsyncClient, founder: dict, project: dict) -> None:
    assert project["slug"] == "acme-widgets"
    assert project["ownerId"] == founder["uid"]
    assert project["totalIssues"] == 0
    assert project["solvedPercentage"] == 0

    by_slug = await client.get("/api/v1/projects/acme-widgets")
    assert by_slug.json()["id"] == project["id"]

    mine = await client.get("/api/v1/projects/mine", headers=founder["headers"])
    assert [p["id"] for p in mine.json()] == [project["id"]]

    assert (await client.get("/api/v1/projects/no-such-project")).status_code == 404


async def test_duplicate_project_name_gets_distinct_slug(client: AsyncClient, founder: dict, project: dict) -> None:
    again = await client.post(
        "/api/v1/projects",
        json={"name": "Acme Widgets", "description": "Second try"},
        headers=founder["headers"],
    )
    assert again.status_code == 201
    assert again.json()["slug"] != project["slug"]
    assert again.json()["slug"].startswith("acme-widgets")


async def test_thread_close_updates_counters(client: AsyncClient, founder: dict, project: dict) -> None:
    first = await _open_thread(client, project["id"], title="Crash", tag="bug")
    await _open_thread(client, project["id"], content="How do I export?")
    assert first["tag"] == "bug"
    assert first["status"] == "open"

    closed = await client.patch(
        f"/api/v1/threads/{first['id']}/status",
        json={"status": "closed", "closingReason": "solved", "closingNote": "Fixed in 1.2"},
        headers=founder["headers"],
    )
    assert closed.status_code == 200
    assert closed.json()["closingReason"] == "solved"
    assert closed.json()["closedBy"] == "Fiona Founder"

    counts = (await client.get("/api/v1/projects/acme-widgets")).json()
    assert counts["totalIssues"] == 2
    assert counts["closedIssues"] == 1
    assert counts["solvedPercentage"] == 50

    reopened = await client.patch(
        f"/api/v1/threads/{first['id']}/status",
        json={"status": "open"},
        headers=founder["headers"],
    )
    assert reopened.json()["closedAt"] is None
    assert (await client.get("/api/v1/projects/acme-widgets")).json()["closedIssues"] == 0


async def test_only_owner_changes_status(client: AsyncClient, project: dict) -> None:
    thread = await _open_thread(client, project["id"])

    anonymous = await client.patch(
        f"/api/v1/threads/{thread['id']}/status", json={"status": "closed", "closingReason": "solved"}
    )
    assert anonymous.status_code == 403

    stranger = await sign_up(client, "stranger@example.com", "Sam Stranger")
    other = await client.patch(
        f"/api/v1/threads/{thread['id']}/status",
        json={"status": "closed", "closingReason": "solved"},
        headers=stranger["headers"],
    )
    assert other.status_code == 403
    assert other.json()["error"] == "PERMISSION_DENIED"


async def test_closing_needs_a_known_reason(client: AsyncClient, founder: dict, project: dict) -> None:
    thread = await _open_thread(client, project["id"])
    response = await client.patch(
        f"/api/v1/threads/{thread['id']}/status",
        json={"status": "closed", "closingReason": "bored"},
        headers=founder["headers"],
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_invalid_tag_rejected(client: AsyncClient, project: dict) -> None:
    response = await client.post(
        f"/api/v1/projects/{project['id']}/threads", json={"content": "Hi", "tag": "rant"}
    )
    assert response.status_code == 400


async def test_responses_flag_founder_and_count(client: AsyncClient, founder: dict, project: dict) -> None:
    thread = await _open_thread(client, project["id"])

    reply = await client.post(
        f"/api/v1/threads/{thread['id']}/responses",
        json={"content": "Looking into it"},
        headers=founder["headers"],
    )
    assert reply.status_code == 201
    assert reply.json()["isFounder"] is True

    follow_up = await client.post(
        f"/api/v1/threads/{thread['id']}/responses", json={"content": "Thanks!"}
    )
    assert follow_up.json()["isFounder"] is False

    listed = await client.get(f"/api/v1/threads/{thread['id']}/responses")
    assert [r["content"] for r in listed.json()] == ["Looking into it", "Thanks!"]
    assert (await client.get(f"/api/v1/threads/{thread['id']}")).json()["responseCount"] == 2

    deleted = await client.delete(f"/api/v1/responses/{follow_up.json()['id']}")
    assert deleted.status_code == 204
    assert (await client.get(f"/api/v1/threads/{thread['id']}")).json()["responseCount"] == 1


async def test_delete_thread_by_owner(client: AsyncClient, founder: dict, project: dict) -> None:
    thread = await _open_thread(client, project["id"])
    await client.post(f"/api/v1/threads/{thread['id']}/responses", json={"content": "Me too"})

    deleted = await client.delete(f"/api/v1/threads/{thread['id']}", headers=founder["headers"])
    assert deleted.status_code == 204
    assert (await client.get(f"/api/v1/threads/{thread['id']}")).status_code == 404
    assert (await client.get("/api/v1/projects/acme-widgets")).json()["totalIssues"] == 0


async def test_list_threads_filters(client: AsyncClient, founder: dict, project: dict) -> None:
    bug = await _open_thread(client, project["id"], tag="bug")
    await _open_thread(client, project["id"], tag="feature")
    await client.patch(
        f"/api/v1/threads/{bug['id']}/status",
        json={"status": "closed", "closingReason": "solved"},
        headers=founder["headers"],
    )

    closed = await client.get(f"/api/v1/projects/{project['id']}/threads", params={"status": "closed"})
    assert [t["id"] for t in closed.json()] == [bug["id"]]

    features = await client.get(f"/api/v1/projects/{project['id']}/threads", params={"tag": "feature"})
    assert [t["tag"] for t in features.json()] == ["feature"]


async def test_project_edit_and_delete_owner_only(client: AsyncClient, founder: dict, project: dict) -> None:
    stranger = await sign_up(client, "stranger@example.com", "Sam Stranger")
    payload = {"name": "Acme Gadgets", "description": "Now with gadgets"}

    forbidden = await client.patch(f"/api/v1/projects/{project['id']}", json=payload, headers=stranger["headers"])
    assert forbidden.status_code == 403

    updated = await client.patch(f"/api/v1/projects/{project['id']}", json=payload, headers=founder["headers"])
    assert updated.status_code == 200
    assert updated.json()["name"] == "Acme Gadgets"

    await _open_thread(client, project["id"])
    deleted = await client.delete(f"/api/v1/projects/{project['id']}", headers=founder["headers"])
    assert deleted.status_code == 204
    assert (await client.get(f"/api/v1/projects/{project['id']}/threads")).json() == []


async def test_reconcile_reports_no_change_for_consistent_project(
    client: AsyncClient, founder: dict, project: dict
) -> None:
    await _open_thread(client, project["id"])
    response = await client.post(f"/api/v1/projects/{project['id']}/reconcile", headers=founder["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["totalIssuesAfter"] == 1
    assert body["changed"] is False

    anonymous = await client.post(f"/api/v1/projects/{project['id']}/reconcile")
    assert anonymous.status_code == 403


async def test_founder_presence_defaults_to_offline(client: AsyncClient, founder: dict, project: dict) -> None:
    response = await client.get("/api/v1/projects/acme-widgets/founder-presence")
    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == founder["uid"]
    assert body["state"] == "offline"

    direct = await client.get(f"/api/v1/presence/{founder['uid']}")
    assert direct.json()["state"] == "offline"


async def test_participants_exclude_caller(client: AsyncClient, founder: dict, project: dict) -> None:
    helper = await sign_up(client, "helper@example.com", "Hal Helper")
    thread = await _open_thread(client, project["id"])
    await client.post(
        f"/api/v1/threads/{thread['id']}/responses", json={"content": "Try again"}, headers=helper["headers"]
    )

    response = await client.get(f"/api/v1/threads/{thread['id']}/participants", headers=helper["headers"])
    emails = {p["email"] for p in response.json()}
    assert "helper@example.com" not in emails
    assert "founder@example.com" in emails
