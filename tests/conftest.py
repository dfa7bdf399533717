import itertools
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from api.core.auth import create_session_token, hash_password
from api.core.config import Settings
from api.core.database import Database
from api.main import create_app
from api.models import UserRole
from api.services.store import Store

PASSWORD = "secret-pass"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        seed_demo_data=False,
        secret_key="test-secret-key-for-session-tokens",
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # The context manager runs the lifespan, so every test gets a fresh database
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def store():
    """A store on its own in-memory database, for tests below the HTTP layer."""
    database = Database("sqlite://")
    database.create_all()
    db = database.session()
    yield Store(db)
    db.close()
    database.dispose()


@pytest.fixture
def make_user(client, app, settings):
    """Create a user directly in the app's store and return an authenticated handle."""
    counter = itertools.count(1)

    def _make_user(role=UserRole.student, username=None, **fields):
        n = next(counter)
        username = username or f"{role.value}{n}"
        with app.state.database.scoped_session() as db:
            user = Store(db).users.create(
                username=username,
                password=hash_password(PASSWORD),
                email=f"{username}@school.edu",
                first_name=role.value.title(),
                last_name=str(n),
                role=role,
                **fields,
            )
        token = create_session_token(user.id, settings)
        return SimpleNamespace(
            id=user.id,
            username=username,
            role=role,
            password=PASSWORD,
            headers={"Authorization": f"Bearer {token}"},
        )

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.admin, username="admin")


@pytest.fixture
def faculty(make_user):
    return make_user(UserRole.faculty, username="faculty1")


@pytest.fixture
def other_faculty(make_user):
    return make_user(UserRole.faculty, username="faculty2")


@pytest.fixture
def student(make_user):
    return make_user(UserRole.student, username="student1")


@pytest.fixture
def other_student(make_user):
    return make_user(UserRole.student, username="student2")


@pytest.fixture
def course(client, faculty):
    response = client.post("/api/courses/", json={"title": "Databases", "code": "CS310"}, headers=faculty.headers)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def enrolled(client, admin, student, course):
    response = client.post(
        "/api/enrollments/",
        json={"studentId": student.id, "courseId": course["id"]},
        headers=admin.headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def assignment(client, faculty, course):
    response = client.post(
        "/api/assignments/",
        json={
            "courseId": course["id"],
            "title": "ER diagram",
            "dueDate": "2099-01-01T00:00:00Z",
            "maxScore": 50,
        },
        headers=faculty.headers,
    )
    assert response.status_code == 201
    return response.json()
