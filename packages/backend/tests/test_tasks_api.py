"""Task API tests — CRUD, server-stamped fields, partial updates.

Learn: Uses the `client` fixture (identity overridden to the seeded
"Tester" in "Test Team"), so every request is already authenticated.
"""

import uuid

import pytest


async def _create_task(client, **fields) -> dict:
    body = {"title": "Write report", **fields}
    r = await client.post("/api/tasks", json=body)
    assert r.status_code == 201, r.text
    return r.json()


# ═══════════════════════════════════════════════════════════
# Create
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_task_defaults(client):
    task = await _create_task(client)
    assert task["title"] == "Write report"
    assert task["status"] == "pending"
    assert task["priority"] == "medium"
    assert task["assignee"] == "Tester"
    assert task["description"] == ""
    assert task["dueDate"] is None
    assert task["teamName"] == "Test Team"
    assert task["createdBy"] == "Tester"
    assert task["createdAt"]
    assert task["updatedAt"]
    uuid.UUID(task["id"])


@pytest.mark.asyncio
async def test_create_task_with_all_fields(client):
    task = await _create_task(
        client,
        description="Quarterly numbers",
        status="in_progress",
        priority="urgent",
        assignee="Someone Else",
        dueDate="2026-12-01T09:00:00Z",
    )
    assert task["description"] == "Quarterly numbers"
    assert task["status"] == "in_progress"
    assert task["priority"] == "urgent"
    assert task["assignee"] == "Someone Else"
    assert task["dueDate"].startswith("2026-12-01T09:00:00")


@pytest.mark.asyncio
async def test_create_task_ignores_client_team_and_creator(client):
    """teamName / createdBy in the body never override the token's identity."""
    task = await _create_task(client, teamName="Other Team", createdBy="Mallory")
    assert task["teamName"] == "Test Team"
    assert task["createdBy"] == "Tester"


@pytest.mark.asyncio
async def test_create_task_without_title(client):
    r = await client.post("/api/tasks", json={"description": "no title"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"]["code"] == "validation_error"
    assert any(f["field"] == "title" for f in body["error"]["fields"])


@pytest.mark.asyncio
async def test_create_task_invalid_priority(client):
    r = await client.post("/api/tasks", json={"title": "x", "priority": "whenever"})
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Read
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_tasks_empty(client):
    r = await client.get("/api/tasks")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_list_tasks_newest_first(client):
    first = await _create_task(client, title="first")
    second = await _create_task(client, title="second")
    third = await _create_task(client, title="third")

    r = await client.get("/api/tasks")
    assert [t["id"] for t in r.json()] == [third["id"], second["id"], first["id"]]


@pytest.mark.asyncio
async def test_get_task(client):
    task = await _create_task(client)
    r = await client.get(f"/api/tasks/{task['id']}")
    assert r.status_code == 200
    assert r.json() == task


@pytest.mark.asyncio
async def test_get_task_not_found(client):
    r = await client.get(f"/api/tasks/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json() == {"error": {"code": "not_found", "message": "Task not found"}}


@pytest.mark.asyncio
async def test_get_task_malformed_id(client):
    r = await client.get("/api/tasks/not-a-uuid")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


# ═══════════════════════════════════════════════════════════
# Update
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_update_task_partial(client):
    """Only the sent fields change; the rest are preserved."""
    task = await _create_task(client, description="keep me", priority="high")

    r = await client.put(f"/api/tasks/{task['id']}", json={"status": "completed"})
    assert r.status_code == 200
    updated = r.json()
    assert updated["status"] == "completed"
    assert updated["description"] == "keep me"
    assert updated["priority"] == "high"
    assert updated["title"] == task["title"]
    assert updated["createdAt"] == task["createdAt"]


@pytest.mark.asyncio
async def test_update_task_persists(client):
    task = await _create_task(client)
    await client.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"})

    r = await client.get(f"/api/tasks/{task['id']}")
    assert r.json()["title"] == "Renamed"


@pytest.mark.asyncio
async def test_update_task_cannot_change_server_fields(client):
    task = await _create_task(client)
    r = await client.put(
        f"/api/tasks/{task['id']}",
        json={
            "teamName": "Other Team",
            "createdBy": "Mallory",
            "id": str(uuid.uuid4()),
            "priority": "low",
        },
    )
    assert r.status_code == 200
    updated = r.json()
    assert updated["id"] == task["id"]
    assert updated["teamName"] == "Test Team"
    assert updated["createdBy"] == "Tester"
    assert updated["priority"] == "low"


@pytest.mark.asyncio
async def test_update_task_clears_due_date(client):
    task = await _create_task(client, dueDate="2026-12-01T09:00:00Z")
    r = await client.put(f"/api/tasks/{task['id']}", json={"dueDate": None})
    assert r.status_code == 200
    assert r.json()["dueDate"] is None


@pytest.mark.asyncio
async def test_update_task_not_found(client):
    r = await client.put(f"/api/tasks/{uuid.uuid4()}", json={"status": "completed"})
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


# ═══════════════════════════════════════════════════════════
# Delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_delete_task(client):
    task = await _create_task(client)

    r = await client.delete(f"/api/tasks/{task['id']}")
    assert r.status_code == 204

    r = await client.get(f"/api/tasks/{task['id']}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_task_twice(client):
    task = await _create_task(client)
    await client.delete(f"/api/tasks/{task['id']}")

    r = await client.delete(f"/api/tasks/{task['id']}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_update_after_delete_is_not_found(client):
    """A deleted record can't be resurrected by a late update."""
    task = await _create_task(client)
    await client.delete(f"/api/tasks/{task['id']}")

    r = await client.put(f"/api/tasks/{task['id']}", json={"title": "zombie"})
    assert r.status_code == 404

    r = await client.get("/api/tasks")
    assert r.json() == []
