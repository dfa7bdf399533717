def test_login_sets_session_cookie(client, student, settings):
    response = client.post("/api/auth/login", json={"username": student.username, "password": student.password})
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == student.username
    assert body["firstName"] == "Student"
    assert "password" not in body
    assert settings.session_cookie_name in response.cookies

    # The cookie alone is enough for follow-up requests
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == student.id


def test_login_with_wrong_password(client, student):
    response = client.post("/api/auth/login", json={"username": student.username, "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"message": "Incorrect username or password"}


def test_login_unknown_user(client):
    response = client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})
    assert response.status_code == 401


def test_login_validation_error(client):
    response = client.post("/api/auth/login", json={"username": "someone"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request data"
    assert "password" in body["errors"]


def test_session_requires_identity(client):
    assert client.get("/api/auth/session").status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_session_with_bearer_token(client, faculty):
    response = client.get("/api/auth/session", headers=faculty.headers)
    assert response.status_code == 200
    assert response.json()["role"] == "faculty"


def test_invalid_token_is_anonymous(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_logout_clears_session(client, student):
    client.post("/api/auth/login", json={"username": student.username, "password": student.password})
    assert client.get("/api/auth/me").status_code == 200

    response = client.post("/api/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert client.get("/api/auth/me").status_code == 401


def test_register_creates_student_and_logs_in(client):
    payload = {
        "username": "newbie",
        "password": "pw12345",
        "email": "newbie@school.edu",
        "firstName": "New",
        "lastName": "Bie",
        "role": "admin",
    }
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "student"
    assert "password" not in body

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["username"] == "newbie"

    login = client.post("/api/auth/login", json={"username": "newbie", "password": "pw12345"})
    assert login.status_code == 200


def test_register_duplicate_username(client, student):
    payload = {
        "username": student.username,
        "password": "pw",
        "email": "other@school.edu",
        "firstName": "A",
        "lastName": "B",
    }
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 409
    assert response.json()["message"] == "Username already exists"


def test_register_rejects_bad_email(client):
    payload = {"username": "x", "password": "pw", "email": "not-an-email", "firstName": "A", "lastName": "B"}
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 400
    assert "email" in response.json()["errors"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
