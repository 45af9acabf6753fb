from datetime import datetime, timedelta

from server.models import Notification


def test_create_task_emits_created_notification(api_client, create_task):
    due = (datetime.utcnow() + timedelta(days=2)).replace(microsecond=0)
    task = create_task(user_id=3, title="Quarterly report", description="Numbers", due_date=due.isoformat())

    assert task["title"] == "Quarterly report"
    assert task["completed"] is False

    response = api_client.get("/notifications/", params={"user_id": 3})
    assert response.status_code == 200
    [notification] = response.json()
    assert notification["type"] == "created"
    assert notification["task_id"] == task["id"]
    assert notification["read"] is False
    assert "Quarterly report" in notification["message"]
    assert due.strftime("%Y-%m-%d") in notification["message"]
    assert "Description: Numbers" in notification["message"]


def test_create_task_stores_due_date_as_utc(api_client, create_task):
    task = create_task(title="Offset", due_date="2026-03-10T17:30:00+05:30")
    assert task["due_date"].startswith("2026-03-10T12:00:00")


def test_create_task_validation(api_client):
    response = api_client.post("/tasks/", params={"user_id": 1}, json={"title": ""})
    assert response.status_code == 422

    response = api_client.post("/tasks/", json={"title": "No owner"})
    assert response.status_code == 422


def test_get_tasks_scoped_to_user(api_client, create_task):
    create_task(user_id=1, title="Mine")
    create_task(user_id=2, title="Theirs")

    response = api_client.get("/tasks/", params={"user_id": 1})
    assert response.status_code == 200
    assert [t["title"] for t in response.json()] == ["Mine"]


def test_toggle_task(api_client, create_task):
    task = create_task()

    response = api_client.patch(f"/tasks/{task['id']}/toggle", params={"user_id": 1})
    assert response.status_code == 200
    assert response.json()["completed"] is True

    response = api_client.patch(f"/tasks/{task['id']}/toggle", params={"user_id": 1})
    assert response.json()["completed"] is False


def test_toggle_foreign_task_is_404(api_client, create_task):
    task = create_task(user_id=1)
    response = api_client.patch(f"/tasks/{task['id']}/toggle", params={"user_id": 2})
    assert response.status_code == 404


def test_delete_task_removes_its_notifications(api_client, create_task, db):
    task = create_task()
    other = create_task(title="Keep me")

    response = api_client.delete(f"/tasks/{task['id']}", params={"user_id": 1})
    assert response.status_code == 200
    assert response.json()["message"] == "Task deleted"

    remaining = db.query(Notification).all()
    assert [n.task_id for n in remaining] == [other["id"]]


def test_create_succeeds_when_notification_write_fails(api_client, monkeypatch):
    def _broken_emit(*args, **kwargs):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr("server.routes.tasks.emit", _broken_emit)

    response = api_client.post("/tasks/", params={"user_id": 1}, json={"title": "Resilient"})
    assert response.status_code == 201
    assert response.json()["title"] == "Resilient"
