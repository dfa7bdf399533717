def _announce(client, user, course_id=None, title="Heads up", **extra):
    payload = {"title": title, "content": "Read chapter 3", **extra}
    if course_id is not None:
        payload["courseId"] = course_id
    return client.post("/api/announcements/", json=payload, headers=user.headers)


def test_course_owner_posts_but_never_global(client, faculty, course):
    response = _announce(client, faculty, course["id"], isGlobal=True)
    assert response.status_code == 201
    body = response.json()
    assert body["isGlobal"] is False
    assert body["authorId"] == faculty.id
    assert body["courseId"] == course["id"]


def test_faculty_cannot_post_platform_wide(client, faculty):
    assert _announce(client, faculty).status_code == 403


def test_other_faculty_and_students_cannot_post(client, other_faculty, student, course):
    assert _announce(client, other_faculty, course["id"]).status_code == 403
    assert _announce(client, student, course["id"]).status_code == 403


def test_admin_posts_global(client, admin):
    response = _announce(client, admin, title="Maintenance")
    assert response.status_code == 201
    assert response.json()["isGlobal"] is True
    assert response.json()["courseId"] is None


def test_missing_course(client, admin):
    assert _announce(client, admin, 999).status_code == 404


def test_course_listing_includes_global_newest_first(client, admin, faculty, student, course):
    first = _announce(client, faculty, course["id"], title="First").json()
    global_one = _announce(client, admin, title="Everyone").json()
    other_course = client.post("/api/courses/", json={"title": "Other"}, headers=faculty.headers).json()
    _announce(client, faculty, other_course["id"], title="Elsewhere")

    rows = client.get("/api/announcements/", params={"courseId": course["id"]}, headers=student.headers).json()
    assert [a["id"] for a in rows] == [global_one["id"], first["id"]]

    everything = client.get("/api/announcements/", headers=student.headers).json()
    assert [a["title"] for a in everything] == ["Elsewhere", "Everyone", "First"]


def test_get_announcement(client, faculty, student, course):
    created = _announce(client, faculty, course["id"]).json()
    response = client.get(f"/api/announcements/{created['id']}", headers=student.headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Heads up"


def test_author_updates_own(client, faculty, course):
    created = _announce(client, faculty, course["id"]).json()
    response = client.put(
        f"/api/announcements/{created['id']}",
        json={"title": "Updated", "isGlobal": True},
        headers=faculty.headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Updated"
    assert body["isGlobal"] is False


def test_non_author_cannot_change(client, admin, faculty, other_faculty, student, course):
    created = _announce(client, faculty, course["id"]).json()
    path = f"/api/announcements/{created['id']}"
    assert client.put(path, json={"title": "x"}, headers=other_faculty.headers).status_code == 403
    assert client.delete(path, headers=other_faculty.headers).status_code == 403
    assert client.delete(path, headers=student.headers).status_code == 403

    admin_edit = client.put(path, json={"title": "Edited by admin"}, headers=admin.headers)
    assert admin_edit.status_code == 200


def test_author_deletes(client, faculty, student, course):
    created = _announce(client, faculty, course["id"]).json()
    response = client.delete(f"/api/announcements/{created['id']}", headers=faculty.headers)
    assert response.status_code == 200
    assert client.get(f"/api/announcements/{created['id']}", headers=student.headers).status_code == 404


def test_student_rejected_before_course_lookup(client, student):
    assert _announce(client, student, 999).status_code == 403


def test_detaching_from_course_makes_it_global(client, admin, faculty, student, course):
    created = _announce(client, faculty, course["id"]).json()
    other = client.post("/api/courses/", json={"title": "Networks"}, headers=faculty.headers).json()

    response = client.put(f"/api/announcements/{created['id']}", json={"courseId": None}, headers=admin.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["courseId"] is None
    assert body["isGlobal"] is True

    feed = client.get("/api/announcements/", params={"courseId": other["id"]}, headers=student.headers).json()
    assert [a["id"] for a in feed] == [created["id"]]
