import pytest
from fastapi.testclient import TestClient

from server.main import app, get_db


@pytest.fixture
def api_client(session_factory):
    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    # Not used as a context manager: startup hooks (table creation, scheduler) stay off
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def create_task(api_client):
    def _create_task(user_id=1, **payload):
        payload.setdefault("title", "API Test Task")
        response = api_client.post("/tasks/", params={"user_id": user_id}, json=payload)
        assert response.status_code == 201
        return response.json()
    return _create_task
