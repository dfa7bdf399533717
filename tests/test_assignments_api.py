def test_owner_creates_assignment(client, assignment, course):
    assert assignment["courseId"] == course["id"]
    assert assignment["maxScore"] == 50
    assert assignment["status"] == "published"
    assert assignment["type"] == "assignment"


def test_admin_creates_in_any_course(client, admin, course):
    response = client.post(
        "/api/assignments/",
        json={"courseId": course["id"], "title": "Quiz 1", "type": "quiz"},
        headers=admin.headers,
    )
    assert response.status_code == 201
    assert response.json()["type"] == "quiz"


def test_other_faculty_and_students_cannot_create(client, other_faculty, student, course):
    payload = {"courseId": course["id"], "title": "Sneaky"}
    assert client.post("/api/assignments/", json=payload, headers=other_faculty.headers).status_code == 403
    assert client.post("/api/assignments/", json=payload, headers=student.headers).status_code == 403


def test_create_for_missing_course(client, admin):
    response = client.post("/api/assignments/", json={"courseId": 999, "title": "Orphan"}, headers=admin.headers)
    assert response.status_code == 404


def test_max_score_must_be_positive(client, faculty, course):
    response = client.post(
        "/api/assignments/",
        json={"courseId": course["id"], "title": "Zero", "maxScore": 0},
        headers=faculty.headers,
    )
    assert response.status_code == 400
    assert "maxScore" in response.json()["errors"]


def test_list_by_course(client, admin, faculty, other_faculty, student, assignment):
    other_course = client.post("/api/courses/", json={"title": "Other"}, headers=other_faculty.headers).json()
    client.post("/api/assignments/", json={"courseId": other_course["id"], "title": "Elsewhere"}, headers=admin.headers)

    everything = client.get("/api/assignments/", headers=student.headers).json()
    assert len(everything) == 2

    scoped = client.get("/api/assignments/", params={"courseId": assignment["courseId"]}, headers=student.headers).json()
    assert [a["id"] for a in scoped] == [assignment["id"]]


def test_get_assignment(client, student, assignment):
    response = client.get(f"/api/assignments/{assignment['id']}", headers=student.headers)
    assert response.status_code == 200
    assert response.json()["title"] == "ER diagram"
    assert client.get("/api/assignments/999", headers=student.headers).status_code == 404


def test_owner_updates_but_cannot_move(client, faculty, other_faculty, assignment):
    other_course = client.post("/api/courses/", json={"title": "Other"}, headers=other_faculty.headers).json()
    response = client.put(
        f"/api/assignments/{assignment['id']}",
        json={"status": "closed", "courseId": other_course["id"]},
        headers=faculty.headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "closed"
    assert body["courseId"] == assignment["courseId"]


def test_admin_moves_assignment(client, admin, other_faculty, assignment):
    other_course = client.post("/api/courses/", json={"title": "Other"}, headers=other_faculty.headers).json()
    response = client.put(
        f"/api/assignments/{assignment['id']}", json={"courseId": other_course["id"]}, headers=admin.headers
    )
    assert response.status_code == 200
    assert response.json()["courseId"] == other_course["id"]

    missing = client.put(f"/api/assignments/{assignment['id']}", json={"courseId": 999}, headers=admin.headers)
    assert missing.status_code == 404


def test_other_faculty_cannot_update_or_delete(client, other_faculty, assignment):
    assert (
        client.put(f"/api/assignments/{assignment['id']}", json={"title": "x"}, headers=other_faculty.headers).status_code
        == 403
    )
    assert client.delete(f"/api/assignments/{assignment['id']}", headers=other_faculty.headers).status_code == 403


def test_delete_removes_submissions(client, admin, faculty, student, enrolled, assignment):
    submitted = client.post(
        "/api/submissions/",
        json={"assignmentId": assignment["id"], "studentId": student.id, "content": "answer"},
        headers=student.headers,
    ).json()

    response = client.delete(f"/api/assignments/{assignment['id']}", headers=faculty.headers)
    assert response.status_code == 200
    assert client.get(f"/api/submissions/{submitted['id']}", headers=admin.headers).status_code == 404


def test_student_rejected_before_course_lookup(client, student):
    response = client.post("/api/assignments/", json={"courseId": 9999, "title": "Nope"}, headers=student.headers)
    assert response.status_code == 403
