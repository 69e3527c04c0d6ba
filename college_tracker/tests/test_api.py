"""
API endpoint tests for all routes.
Uses a per-test SQLite file + dependency-overridden FastAPI test client.
"""
from datetime import date, timedelta
from unittest.mock import patch

from college_tracker.models.task import Task


# ===================== HEALTH / ROOT =====================


async def test_root(client):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


# ===================== IDENTITY =====================


async def test_missing_identity_rejected(anon_client):
    for path in ("/api/colleges/", "/api/essays/", "/api/tasks/", "/api/dashboard/"):
        r = await anon_client.get(path)
        assert r.status_code == 401, path


# ===================== COLLEGES =====================


async def test_list_colleges(client, seed_data):
    r = await client.get("/api/colleges/")
    assert r.status_code == 200
    data = r.json()
    assert [c["name"] for c in data] == ["Stanford University", "State University"]
    assert data[0]["progress"] == 0
    assert data[0]["progress_status"] == "Not Started"


async def test_catalog_names(client):
    r = await client.get("/api/colleges/catalog")
    assert r.status_code == 200
    assert "Massachusetts Institute of Technology" in r.json()


async def test_add_custom_college(client):
    r = await client.post("/api/colleges/", json={
        "name": "Small Liberal Arts College",
        "deadline": "2026-01-15",
        "lors_required": 1,
    })
    assert r.status_code == 200
    body = r.json()
    assert body["college"]["name"] == "Small Liberal Arts College"
    assert body["college"]["deadline"] == "2026-01-15"
    assert body["essays_created"] == 0
    assert body["already_listed"] is False


async def test_add_college_from_catalog_creates_essays(client):
    r = await client.post("/api/colleges/", json={"name": "mit", "from_catalog": True})
    assert r.status_code == 200
    body = r.json()
    assert body["college"]["name"] == "Massachusetts Institute of Technology"
    assert body["college"]["test_policy"] == "Required"
    assert body["essays_created"] == 4

    r = await client.get("/api/essays/", params={"college_id": body["college"]["id"]})
    titles = {e["title"] for e in r.json()}
    assert "Massachusetts Institute of Technology - Community Essay" in titles
    assert len(titles) == 4


async def test_add_college_twice_returns_existing(client):
    first = (await client.post("/api/colleges/", json={"name": "MIT", "from_catalog": True})).json()
    second = (await client.post("/api/colleges/", json={"name": "MIT", "from_catalog": True})).json()

    assert second["already_listed"] is True
    assert second["essays_created"] == 0
    assert second["college"]["id"] == first["college"]["id"]
    assert len((await client.get("/api/colleges/")).json()) == 1


async def test_add_unknown_catalog_college(client):
    r = await client.post("/api/colleges/", json={"name": "Hogwarts", "from_catalog": True})
    assert r.status_code == 400


async def test_add_college_negative_lors(client):
    r = await client.post("/api/colleges/", json={"name": "Somewhere", "lors_required": -1})
    assert r.status_code == 400


async def test_update_college(client, seed_data):
    college_id = seed_data["state_u"].id
    r = await client.put(f"/api/colleges/{college_id}", json={
        "deadline": "2026-03-01",
        "status": "In Progress",
    })
    assert r.status_code == 200
    assert r.json()["deadline"] == "2026-03-01"
    assert r.json()["status"] == "In Progress"


async def test_update_college_null_keeps_required_fields(client, seed_data):
    college_id = seed_data["stanford"].id
    r = await client.put(f"/api/colleges/{college_id}", json={
        "lors_required": None,
        "name": None,
        "status": None,
        "deadline": None,
    })
    assert r.status_code == 200
    body = r.json()
    assert body["lors_required"] == 2
    assert body["name"] == "Stanford University"
    assert body["status"] == "Not Started"
    # deadline is nullable, so null clears it
    assert body["deadline"] is None


async def test_other_users_college_is_hidden(client, seed_data):
    foreign_id = seed_data["foreign"].id
    assert (await client.get(f"/api/colleges/{foreign_id}")).status_code == 404
    assert (await client.put(f"/api/colleges/{foreign_id}", json={"status": "x"})).status_code == 404
    assert (await client.delete(f"/api/colleges/{foreign_id}")).status_code == 404


async def test_delete_college_removes_its_work(client, seed_data, db_session):
    college_id = seed_data["stanford"].id
    db_session.add(Task(user_id="user-123", college_id=college_id, title="Visit", due_date=date(2025, 12, 1)))
    await db_session.commit()

    r = await client.delete(f"/api/colleges/{college_id}")
    assert r.status_code == 200

    assert [c["name"] for c in (await client.get("/api/colleges/")).json()] == ["State University"]
    assert [e["title"] for e in (await client.get("/api/essays/")).json()] == ["Personal Statement"]
    assert (await client.get("/api/tasks/")).json() == []


async def test_progress_reflects_completed_work(client, seed_data):
    college_id = seed_data["stanford"].id
    await client.put(f"/api/essays/{seed_data['essay'].id}/complete")
    await client.post("/api/tasks/", json={"title": "Send scores", "college_id": college_id})

    r = await client.get(f"/api/colleges/{college_id}")
    # essay 1.0 * 0.4 + tasks 0/1 * 0.6
    assert r.json()["progress"] == 40
    assert r.json()["progress_status"] == "In Progress"


# ===================== ESSAYS =====================


async def test_create_essay_counts_words(client, seed_data):
    r = await client.post("/api/essays/", json={
        "title": "Community",
        "college_id": seed_data["stanford"].id,
        "word_limit": 100,
        "content": "I volunteer   at the\nlocal library",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["word_count"] == 6
    assert body["word_progress"] == 6
    assert body["version"] == 1
    assert body["is_completed"] is False


async def test_create_essay_for_foreign_college(client, seed_data):
    r = await client.post("/api/essays/", json={"title": "Nope", "college_id": seed_data["foreign"].id})
    assert r.status_code == 404


async def test_update_essay_content_bumps_version(client, seed_data):
    essay_id = seed_data["essay"].id

    r = await client.put(f"/api/essays/{essay_id}", json={"content": "one two three"})
    assert r.json()["word_count"] == 3
    assert r.json()["version"] == 2

    r = await client.put(f"/api/essays/{essay_id}", json={"content": "one two three"})
    assert r.json()["version"] == 2

    r = await client.put(f"/api/essays/{essay_id}", json={"title": "Why Stanford (final)"})
    assert r.json()["title"] == "Why Stanford (final)"
    assert r.json()["version"] == 2


async def test_essay_completion_is_one_way(client, seed_data):
    essay_id = seed_data["essay"].id

    r = await client.put(f"/api/essays/{essay_id}", json={"is_completed": True})
    assert r.json()["is_completed"] is True

    r = await client.put(f"/api/essays/{essay_id}", json={"is_completed": False})
    assert r.json()["is_completed"] is True


async def test_complete_essay_endpoint(client, seed_data):
    r = await client.put(f"/api/essays/{seed_data['personal'].id}/complete")
    assert r.status_code == 200
    assert r.json()["is_completed"] is True


async def test_essay_not_found(client, seed_data):
    assert (await client.get("/api/essays/99999")).status_code == 404


async def test_sync_catalog_essays(client, seed_data):
    r = await client.post("/api/essays/sync")
    assert r.status_code == 200
    # Stanford's six catalog essays; State University is not in the catalog
    assert r.json() == {"success": True, "count": 6}

    r = await client.post("/api/essays/sync")
    assert r.json()["count"] == 0


async def test_delete_essay(client, seed_data):
    essay_id = seed_data["personal"].id
    assert (await client.delete(f"/api/essays/{essay_id}")).status_code == 200
    assert (await client.get(f"/api/essays/{essay_id}")).status_code == 404


# ===================== TASKS =====================


async def test_create_task_defaults(client):
    r = await client.post("/api/tasks/", json={"title": "Book campus tour"})
    assert r.status_code == 200
    body = r.json()
    assert body["category"] == "General"
    assert body["priority"] == "Medium"
    assert body["completed"] is False


async def test_create_task_invalid_labels(client):
    r = await client.post("/api/tasks/", json={"title": "x", "category": "Party"})
    assert r.status_code == 400
    r = await client.post("/api/tasks/", json={"title": "x", "priority": "Urgent"})
    assert r.status_code == 400


async def test_task_overdue_flag(client):
    yesterday = (date.today() - timedelta(days=2)).isoformat()
    r = await client.post("/api/tasks/", json={"title": "Late", "due_date": yesterday})
    assert r.json()["is_overdue"] is True


async def test_task_overdue_uses_configured_timezone(client):
    with patch("college_tracker.api.tasks.today_in", return_value=date(2030, 1, 1)):
        late = (await client.post("/api/tasks/", json={"title": "Late", "due_date": "2029-12-31"})).json()
        due_today = (await client.post("/api/tasks/", json={"title": "Today", "due_date": "2030-01-01"})).json()

    assert late["is_overdue"] is True
    assert due_today["is_overdue"] is False


async def test_update_task_null_keeps_required_fields(client):
    created = (await client.post("/api/tasks/", json={
        "title": "Keep me",
        "description": "notes",
        "due_date": "2026-12-01",
        "priority": "High",
    })).json()

    r = await client.put(f"/api/tasks/{created['id']}", json={
        "title": None,
        "category": None,
        "priority": None,
        "description": None,
        "due_date": None,
    })
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "Keep me"
    assert body["category"] == "General"
    assert body["priority"] == "High"
    # nullable columns are cleared
    assert body["description"] is None
    assert body["due_date"] is None


async def test_complete_task_is_final(client):
    task_id = (await client.post("/api/tasks/", json={"title": "Send transcript"})).json()["id"]

    first = await client.put(f"/api/tasks/{task_id}/complete")
    assert first.json()["completed"] is True
    assert first.json()["completed_at"] is not None
    assert first.json()["is_overdue"] is False

    second = await client.put(f"/api/tasks/{task_id}/complete")
    assert second.json()["completed_at"] == first.json()["completed_at"]


async def test_list_tasks_filters(client, seed_data):
    college_id = seed_data["stanford"].id
    await client.post("/api/tasks/", json={"title": "A", "category": "LOR", "college_id": college_id})
    done = (await client.post("/api/tasks/", json={"title": "B"})).json()
    await client.put(f"/api/tasks/{done['id']}/complete")

    assert [t["title"] for t in (await client.get("/api/tasks/", params={"completed": True})).json()] == ["B"]
    assert [t["title"] for t in (await client.get("/api/tasks/", params={"category": "LOR"})).json()] == ["A"]
    assert [t["title"] for t in (await client.get("/api/tasks/", params={"college_id": college_id})).json()] == ["A"]


async def test_update_and_delete_task(client):
    task_id = (await client.post("/api/tasks/", json={"title": "Old"})).json()["id"]

    r = await client.put(f"/api/tasks/{task_id}", json={"title": "New", "priority": "High"})
    assert r.json()["title"] == "New"
    assert r.json()["priority"] == "High"

    assert (await client.put(f"/api/tasks/{task_id}", json={"category": "Nope"})).status_code == 400
    assert (await client.delete(f"/api/tasks/{task_id}")).status_code == 200
    assert (await client.delete(f"/api/tasks/{task_id}")).status_code == 404


# ===================== SCHEDULE =====================


async def test_schedule_sync_is_idempotent(client, seed_data):
    r = await client.post("/api/schedule/sync")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    # transcripts, fafsa, recommenders, Stanford LOR, draft + polish
    assert body["count"] == 6

    r = await client.post("/api/schedule/sync")
    assert r.json()["count"] == 0

    titles = {t["title"] for t in (await client.get("/api/tasks/")).json()}
    assert "Assign Recommenders for Stanford University" in titles
    assert "Draft: Why Stanford" in titles


async def test_calendar(client, seed_data):
    r = await client.get("/api/schedule/calendar")
    assert r.status_code == 200
    events = r.json()
    assert [(e["type"], e["date"]) for e in events] == [
        ("deadline", "2026-01-05"),
        ("essay", "2026-01-05"),
    ]
    assert events[0]["title"] == "Stanford University - RD"


async def test_calendar_after_sync_and_completion(client, seed_data):
    await client.put(f"/api/essays/{seed_data['essay'].id}/complete")
    await client.post("/api/schedule/sync")

    events = (await client.get("/api/schedule/calendar")).json()
    assert "essay" not in {e["type"] for e in events}
    tasks = [e for e in events if e["type"] == "task"]
    assert len(tasks) == 6
    assert {e["college"] for e in tasks} == {"General", "Stanford University"}
    assert [e["date"] for e in events] == sorted(e["date"] for e in events)

    open_only = (await client.get("/api/schedule/calendar", params={"include_completed": False})).json()
    assert len(open_only) == len(events)


async def test_calendar_filters(client, seed_data):
    r = await client.get("/api/schedule/calendar", params={"college_id": seed_data["state_u"].id})
    assert r.json() == []

    r = await client.get("/api/schedule/calendar", params={"start": "2026-02-01"})
    assert r.json() == []

    r = await client.get("/api/schedule/calendar", params={"start": "2026-02-01", "end": "2026-01-01"})
    assert r.status_code == 400


# ===================== DASHBOARD =====================


async def test_dashboard_summary(client, seed_data):
    await client.put(f"/api/essays/{seed_data['personal'].id}/complete")
    await client.post("/api/tasks/", json={"title": "Open"})

    r = await client.get("/api/dashboard/")
    assert r.status_code == 200
    data = r.json()
    assert data["colleges"] == 2
    assert data["essays_total"] == 2
    assert data["essays_completed"] == 1
    assert data["tasks_total"] == 1
    assert data["tasks_pending"] == 1
    assert data["overall_progress"] == 0
    assert data["status_breakdown"] == {"Not Started": 2, "In Progress": 0, "Completed": 0}
    assert [c["name"] for c in data["college_progress"]] == ["Stanford University", "State University"]


async def test_dashboard_empty(client):
    data = (await client.get("/api/dashboard/")).json()
    assert data["colleges"] == 0
    assert data["overall_progress"] == 0
    assert data["days_to_next_deadline"] is None
    assert data["upcoming_tasks"] == []
