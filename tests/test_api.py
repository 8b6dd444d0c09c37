import base64

import pytest

from voice_planner.actions import handlers
from voice_planner.api.deps import int_env
from voice_planner.tools.models import Priority, TaskStatus, WorkItem


def _user(client, email="ada@example.com"):
    resp = client.post("/users", json={"email": email, "name": "Ada"})
    assert resp.status_code == 200
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_user_endpoints(client):
    user = _user(client)
    assert client.get(f"/users/{user['id']}").json()["email"] == "ada@example.com"
    assert client.get("/users/999").status_code == 404
    assert client.post("/users", json={"email": "ada@example.com", "name": "Again"}).status_code == 409
    assert client.post("/users", json={"email": "not-an-email", "name": "X"}).status_code == 422


def test_task_lifecycle(client):
    user = _user(client)
    resp = client.post("/tasks", json={"user_id": user["id"], "title": "Plan sprint", "estimated_duration": 30})
    assert resp.status_code == 200
    task = resp.json()
    assert task["priority"] == "medium"
    assert task["status"] == "pending"

    resp = client.patch(f"/tasks/{task['id']}", json={"status": "completed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert resp.json()["title"] == "Plan sprint"

    assert client.patch(f"/tasks/{task['id']}", json={"title": None}).status_code == 400
    assert client.patch("/tasks/999", json={"title": "x"}).status_code == 404

    listed = client.get(f"/users/{user['id']}/tasks", params={"status": "completed"}).json()
    assert [t["id"] for t in listed] == [task["id"]]

    assert client.delete(f"/tasks/{task['id']}").json()["id"] == task["id"]
    assert client.delete(f"/tasks/{task['id']}").status_code == 404


def test_task_for_unknown_user(client):
    assert client.post("/tasks", json={"user_id": 5, "title": "x"}).status_code == 404


def test_conversation(client):
    user = _user(client)
    resp = client.post(
        "/conversation",
        json={"user_id": user["id"], "message": "Please update my task status", "message_type": "text"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["intent"] == "update_task"
    assert body["response_type"] == "text"
    assert "task" in body["response"]

    history = client.get(f"/users/{user['id']}/conversations").json()
    assert [c["id"] for c in history] == [body["id"]]

    assert client.post(
        "/conversation", json={"user_id": 999, "message": "hi", "message_type": "text"}
    ).status_code == 404
    assert client.post(
        "/conversation", json={"user_id": user["id"], "message": "hi", "message_type": "fax"}
    ).status_code == 422


def test_voice(client):
    user = _user(client)
    audio = base64.b64encode(b"fake audio").decode()
    resp = client.post("/voice", json={"user_id": user["id"], "audio_data": audio})
    assert resp.status_code == 200
    assert resp.json()["message"].startswith("Processed voice input: ")
    assert resp.json()["intent"] is None

    resp = client.post(
        "/voice",
        json={"user_id": user["id"], "audio_data": audio, "transcript": "schedule my morning", "voice_preference": "x"},
    )
    assert resp.json()["intent"] == "schedule_time"
    assert resp.json()["response_type"] == "voice"

    assert client.post("/voice", json={"user_id": user["id"], "audio_data": "%%%"}).status_code == 400


def test_generate_time_blocks(client):
    user = _user(client)
    for title, priority, duration in [
        ("Urgent Task", "urgent", 60),
        ("High Task", "high", 30),
        ("Medium Task", "medium", 45),
    ]:
        client.post(
            "/tasks",
            json={"user_id": user["id"], "title": title, "priority": priority, "estimated_duration": duration},
        )

    resp = client.post(
        "/time-blocks/generate",
        json={"user_id": user["id"], "date": "2024-01-15", "working_hours_start": "09:00", "working_hours_end": "17:00"},
    )
    assert resp.status_code == 200
    blocks = resp.json()
    assert [(b["title"], b["start_time"], b["end_time"]) for b in blocks] == [
        ("Urgent Task", "2024-01-15T09:00:00", "2024-01-15T10:00:00"),
        ("High Task", "2024-01-15T10:15:00", "2024-01-15T10:45:00"),
        ("Medium Task", "2024-01-15T11:00:00", "2024-01-15T11:45:00"),
    ]
    assert all(b["is_ai_suggested"] for b in blocks)

    listed = client.get(f"/users/{user['id']}/time-blocks", params={"date": "2024-01-15"}).json()
    assert [b["id"] for b in listed] == [b["id"] for b in blocks]


def test_generate_time_blocks_errors(client):
    user = _user(client)
    bad_hours = client.post(
        "/time-blocks/generate",
        json={"user_id": user["id"], "date": "2024-01-15", "working_hours_start": "9am"},
    )
    assert bad_hours.status_code == 400
    unknown_user = client.post("/time-blocks/generate", json={"user_id": 999, "date": "2024-01-15"})
    assert unknown_user.status_code == 404


def test_generate_time_blocks_conflict(client, monkeypatch):
    user = _user(client)
    ghost = WorkItem(404, "Deleted meanwhile", Priority.HIGH, TaskStatus.PENDING, 30)
    monkeypatch.setattr(handlers, "list_eligible_items", lambda db, user_id: [ghost])

    resp = client.post("/time-blocks/generate", json={"user_id": user["id"], "date": "2024-01-15"})
    assert resp.status_code == 409
    assert client.get(f"/users/{user['id']}/time-blocks").json() == []


def test_manual_time_block(client):
    user = _user(client)
    resp = client.post(
        "/time-blocks",
        json={
            "user_id": user["id"],
            "title": "Lunch",
            "start_time": "2024-01-15T12:00:00",
            "end_time": "2024-01-15T13:00:00",
        },
    )
    assert resp.status_code == 200
    assert resp.json()["is_ai_suggested"] is False
    assert resp.json()["task_id"] is None

    inverted = client.post(
        "/time-blocks",
        json={
            "user_id": user["id"],
            "title": "Backwards",
            "start_time": "2024-01-15T13:00:00",
            "end_time": "2024-01-15T12:00:00",
        },
    )
    assert inverted.status_code == 422


def test_reminders(client):
    user = _user(client)
    due = client.post(
        "/reminders",
        json={
            "user_id": user["id"],
            "message": "Call the bank",
            "reminder_time": "2020-01-01T09:00:00",
            "reminder_type": "custom",
        },
    ).json()
    client.post(
        "/reminders",
        json={
            "user_id": user["id"],
            "message": "Far future",
            "reminder_time": "2099-01-01T09:00:00",
            "reminder_type": "custom",
        },
    )

    pending = client.get("/reminders/pending", params={"user_id": user["id"]}).json()
    assert [r["id"] for r in pending] == [due["id"]]

    sent = client.post(f"/reminders/{due['id']}/sent")
    assert sent.status_code == 200
    assert sent.json()["is_sent"] is True
    assert client.get("/reminders/pending").json() == []
    assert client.post("/reminders/999/sent").status_code == 404


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 50),
        ("20", 20),
        ("fifty", 50),
        ("0", 1),
        ("1000", 500),
    ],
)
def test_int_env_falls_back_and_clamps(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("HISTORY_DEFAULT_LIMIT", raising=False)
    else:
        monkeypatch.setenv("HISTORY_DEFAULT_LIMIT", raw)
    assert int_env("HISTORY_DEFAULT_LIMIT", 50, minimum=1, maximum=500) == expected
