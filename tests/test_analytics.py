from api.models import AssignmentStatus, EnrollmentStatus, SubmissionStatus, UserRole
from api.services import analytics


def _populate(store):
    def user(username, role):
        return store.users.create(
            username=username, password="hash", email=f"{username}@school.edu",
            first_name="T", last_name=username, role=role,
        )

    prof = user("prof", UserRole.faculty)
    ann = user("ann", UserRole.student)
    bob = user("bob", UserRole.student)
    user("root", UserRole.admin)

    algebra = store.courses.create(title="Algebra", faculty_id=prof.id)
    geometry = store.courses.create(title="Geometry", faculty_id=prof.id)
    store.enrollments.create(student_id=ann.id, course_id=algebra.id, progress=50)
    store.enrollments.create(student_id=bob.id, course_id=algebra.id, progress=100, status=EnrollmentStatus.completed)
    store.enrollments.create(student_id=ann.id, course_id=geometry.id, progress=20)

    hw1 = store.assignments.create(course_id=algebra.id, title="HW1")
    store.assignments.create(course_id=algebra.id, title="HW2", status=AssignmentStatus.closed)
    store.assignments.create(course_id=geometry.id, title="HW3")

    store.submissions.create(assignment_id=hw1.id, student_id=ann.id, content="x")
    store.submissions.create(assignment_id=hw1.id, student_id=bob.id, content="y", grade=90, status=SubmissionStatus.graded)
    return prof, ann, bob, algebra, geometry


def test_user_distribution(store):
    _populate(store)
    report = analytics.user_distribution(store)
    assert report.total == 4
    assert report.by_role == {"admin": 1, "faculty": 1, "student": 2}


def test_course_and_assignment_counts(store):
    _populate(store)
    courses = analytics.course_status_counts(store)
    assert courses.total == 2
    assert courses.by_status == {"active": 2, "inactive": 0, "archived": 0}

    assignments = analytics.assignment_counts(store)
    assert assignments.total == 3
    assert assignments.by_status == {"draft": 0, "published": 2, "closed": 1}
    assert assignments.by_type["assignment"] == 3


def test_enrollment_stats(store):
    _populate(store)
    stats = analytics.enrollment_stats(store)
    assert stats.total == 3
    assert stats.completed == 1
    assert stats.completion_rate == 33.33
    assert stats.average_progress == 56.67


def test_popular_courses(store):
    _, _, _, algebra, geometry = _populate(store)
    ranked = analytics.popular_courses(store, limit=3)
    assert [(c.course_id, c.enrollment_count) for c in ranked] == [(algebra.id, 2), (geometry.id, 1)]
    assert len(analytics.popular_courses(store, limit=1)) == 1


def test_faculty_summary(store):
    prof = _populate(store)[0]
    summary = analytics.faculty_summary(store, prof.id)
    assert summary.course_count == 2
    assert summary.student_count == 2
    assert summary.assignment_count == 3
    assert summary.pending_submissions == 1
    assert summary.graded_submissions == 1


def test_student_summary(store):
    _, ann, _, _, _ = _populate(store)
    summary = analytics.student_summary(store, ann.id)
    assert summary.course_count == 2
    assert summary.assignment_count == 3
    assert summary.completed_assignments == 1
    assert summary.pending_assignments == 2
    assert summary.average_progress == 35.0


def test_empty_store_reports_zeroes(store):
    assert analytics.enrollment_stats(store).completion_rate == 0.0
    assert analytics.student_summary(store, 1).average_progress == 0.0
    assert analytics.popular_courses(store) == []


def test_global_reports_open_to_every_role(client, admin, faculty, student):
    for path in ("users", "courses", "assignments", "enrollments", "popular-courses", "activity"):
        assert client.get(f"/api/analytics/{path}", headers=admin.headers).status_code == 200
        assert client.get(f"/api/analytics/{path}", headers=faculty.headers).status_code == 200
        assert client.get(f"/api/analytics/{path}", headers=student.headers).status_code == 200


def test_reports_require_authentication(client):
    assert client.get("/api/analytics/users").status_code == 401


def test_user_distribution_endpoint(client, admin, faculty, student):
    body = client.get("/api/analytics/users", headers=admin.headers).json()
    assert body == {"total": 3, "byRole": {"admin": 1, "faculty": 1, "student": 1}}


def test_student_report_is_own_scoped(client, admin, student, other_student, enrolled):
    own = client.get(f"/api/analytics/student/{student.id}", headers=student.headers)
    assert own.status_code == 200
    assert own.json()["courseCount"] == 1

    assert client.get(f"/api/analytics/student/{other_student.id}", headers=student.headers).status_code == 403
    assert client.get(f"/api/analytics/student/{student.id}", headers=admin.headers).status_code == 200


def test_faculty_report_is_own_scoped(client, admin, faculty, other_faculty, student, course):
    own = client.get(f"/api/analytics/faculty/{faculty.id}", headers=faculty.headers)
    assert own.status_code == 200
    assert own.json()["courseCount"] == 1

    assert client.get(f"/api/analytics/faculty/{other_faculty.id}", headers=faculty.headers).status_code == 403
    assert client.get(f"/api/analytics/faculty/{faculty.id}", headers=student.headers).status_code == 403


def test_report_subject_must_have_the_role(client, admin, faculty, student):
    assert client.get(f"/api/analytics/faculty/{student.id}", headers=admin.headers).status_code == 404
    assert client.get(f"/api/analytics/student/{faculty.id}", headers=admin.headers).status_code == 404
    assert client.get("/api/analytics/student/999", headers=admin.headers).status_code == 404


def test_activity_feed_records_actions(client, admin, faculty, course):
    rows = client.get("/api/analytics/activity", params={"limit": 5}, headers=admin.headers).json()
    assert rows[0]["action"] == "Course Created"
    assert rows[0]["userId"] == faculty.id
