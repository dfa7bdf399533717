"""Demo data for an empty store.

Creates an admin, two faculty members and two students (all with the
password ``password123``) plus a small set of courses and coursework so the
API has something to show right after startup.
"""

import logging
from datetime import datetime, timezone

from api.core.auth import hash_password
from api.models import AssignmentStatus, AssignmentType, EnrollmentStatus, SubmissionStatus, UserRole
from api.services.store import Store

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    {"username": "admin", "first_name": "Admin", "last_name": "User", "role": UserRole.admin},
    {"username": "faculty1", "first_name": "Faculty", "last_name": "One", "role": UserRole.faculty,
     "department": "Computer Science"},
    {"username": "faculty2", "first_name": "Faculty", "last_name": "Two", "role": UserRole.faculty,
     "department": "Mathematics"},
    {"username": "student1", "first_name": "Student", "last_name": "One", "role": UserRole.student,
     "department": "Computer Science"},
    {"username": "student2", "first_name": "Student", "last_name": "Two", "role": UserRole.student,
     "department": "Mathematics"},
]


def _date(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def seed_demo_data(store: Store) -> bool:
    """Populate the store unless it already has users. Returns True if seeded."""
    if store.users.scan():
        logger.info("Store already has users, skipping demo data")
        return False

    logger.info("Seeding demo data...")
    password = hash_password(DEMO_PASSWORD)
    users = {
        profile["username"]: store.users.create(
            password=password, email=f"{profile['username']}@edulearn.com", **profile
        )
        for profile in DEMO_USERS
    }
    faculty1, faculty2 = users["faculty1"], users["faculty2"]
    student1, student2 = users["student1"], users["student2"]

    term = {"semester": "Fall", "year": 2024, "start_date": _date(2024, 9, 1), "end_date": _date(2024, 12, 15)}
    intro = store.courses.create(
        code="CS101", title="Introduction to Programming", category="Computer Science",
        description="An introductory course to programming concepts", faculty_id=faculty1.id, **term,
    )
    web = store.courses.create(
        code="CS332", title="Advanced Web Development", category="Computer Science",
        description="Web development techniques with modern frameworks", faculty_id=faculty1.id, **term,
    )
    databases = store.courses.create(
        code="CS310", title="Database Systems", category="Computer Science",
        description="Introduction to database design and implementation", faculty_id=faculty1.id, **term,
    )
    calculus = store.courses.create(
        code="MATH201", title="Calculus II", category="Mathematics",
        description="Integral calculus and its applications", faculty_id=faculty2.id, **term,
    )

    store.enrollments.create(student_id=student1.id, course_id=intro.id, progress=40)
    store.enrollments.create(student_id=student1.id, course_id=web.id, progress=10)
    store.enrollments.create(
        student_id=student1.id, course_id=databases.id, progress=100, grade="A", status=EnrollmentStatus.completed
    )
    store.enrollments.create(student_id=student2.id, course_id=web.id, progress=25)
    store.enrollments.create(student_id=student2.id, course_id=calculus.id, progress=60)

    portfolio = store.assignments.create(
        course_id=intro.id, title="Basic HTML/CSS Project", type=AssignmentType.project,
        description="Create a simple webpage using HTML and CSS",
        instructions="Create a personal portfolio webpage with at least 3 sections.",
        due_date=_date(2030, 10, 15), max_score=100,
    )
    store.assignments.create(
        course_id=web.id, title="Component Library", type=AssignmentType.project,
        description="Build a reusable component library",
        instructions="Create a library with at least 5 reusable components.",
        due_date=_date(2030, 10, 22), max_score=150,
    )
    schema_design = store.assignments.create(
        course_id=databases.id, title="Database Design Exercise", type=AssignmentType.assignment,
        description="Design a relational database for an e-commerce system",
        instructions="Create an ER diagram and implement it using SQL.",
        due_date=_date(2024, 10, 5), max_score=80, status=AssignmentStatus.closed,
    )
    store.assignments.create(
        course_id=calculus.id, title="Integration Techniques", type=AssignmentType.quiz,
        description="Solve problems using various integration techniques",
        due_date=_date(2030, 10, 10), max_score=100,
    )

    store.submissions.create(
        assignment_id=portfolio.id, student_id=student1.id, content="https://example.com/portfolio",
        grade=92, feedback="Clean layout, good use of semantic tags.", status=SubmissionStatus.graded,
    )
    store.submissions.create(
        assignment_id=schema_design.id, student_id=student1.id, content="ER diagram and DDL attached.",
        grade=70, feedback="Normalize the orders table.", status=SubmissionStatus.graded,
    )

    store.announcements.create(
        course_id=intro.id, author_id=faculty1.id, title="Welcome to Introduction to Programming",
        content="Please review the syllabus and prepare for our first class.",
    )
    store.announcements.create(
        course_id=None, author_id=users["admin"].id, title="Platform maintenance",
        content="EduLearn will be unavailable on Saturday between 02:00 and 04:00 UTC.", is_global=True,
    )

    logger.info(f"Demo data seeded: {store.counts()}")
    return True
