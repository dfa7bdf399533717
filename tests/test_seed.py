from fastapi.testclient import TestClient

from api.core.config import Settings
from api.main import create_app
from api.models import AssignmentStatus, UserRole
from api.services.seed import DEMO_PASSWORD, seed_demo_data


def test_seed_populates_empty_store(store):
    assert seed_demo_data(store) is True
    assert store.counts() == {
        "users": 5,
        "courses": 4,
        "enrollments": 5,
        "assignments": 4,
        "submissions": 2,
        "announcements": 2,
    }
    assert len(store.users.by_role(UserRole.faculty)) == 2
    assert len(store.assignments.scan(status=AssignmentStatus.closed)) == 1
    assert len(store.announcements.scan(is_global=True)) == 1


def test_seed_skips_populated_store(store):
    seed_demo_data(store)
    assert seed_demo_data(store) is False
    assert store.counts()["users"] == 5


def test_app_starts_with_demo_accounts():
    app = create_app(Settings(database_url="sqlite://", seed_demo_data=True, _env_file=None))
    with TestClient(app) as client:
        response = client.post("/api/auth/login", json={"username": "faculty1", "password": DEMO_PASSWORD})
        assert response.status_code == 200
        assert response.json()["role"] == "faculty"

        courses = client.get("/api/courses/", params={"facultyId": response.json()["id"]})
        assert len(courses.json()) == 3
