"""Aggregate reporters.

Each function scans the store and recomputes its statistic from scratch;
nothing is cached or persisted.
"""

from collections import Counter
from typing import List

from api.models import AssignmentStatus, AssignmentType, CourseStatus, EnrollmentStatus, SubmissionStatus, UserRole
from api.schemas.analytics import (
    ActivityResponse,
    AssignmentCounts,
    CourseStatusCounts,
    EnrollmentStats,
    FacultySummary,
    PopularCourse,
    StudentSummary,
    UserDistribution,
)
from api.services.store import Store

PENDING_SUBMISSION_STATUSES = {
    SubmissionStatus.submitted,
    SubmissionStatus.late,
    SubmissionStatus.resubmitted,
}


def _tally(values, choices) -> dict:
    counts = Counter(values)
    return {choice.value: counts.get(choice, 0) for choice in choices}


def _average(values: List[float]) -> float:
    return round(sum(values) / len(values), 2) if values else 0.0


def user_distribution(store: Store) -> UserDistribution:
    users = store.users.scan()
    return UserDistribution(total=len(users), by_role=_tally((u.role for u in users), UserRole))


def course_status_counts(store: Store) -> CourseStatusCounts:
    courses = store.courses.scan()
    return CourseStatusCounts(total=len(courses), by_status=_tally((c.status for c in courses), CourseStatus))


def assignment_counts(store: Store) -> AssignmentCounts:
    assignments = store.assignments.scan()
    return AssignmentCounts(
        total=len(assignments),
        by_status=_tally((a.status for a in assignments), AssignmentStatus),
        by_type=_tally((a.type for a in assignments), AssignmentType),
    )


def enrollment_stats(store: Store) -> EnrollmentStats:
    enrollments = store.enrollments.scan()
    completed = sum(1 for e in enrollments if e.status == EnrollmentStatus.completed)
    rate = round(completed * 100 / len(enrollments), 2) if enrollments else 0.0
    return EnrollmentStats(
        total=len(enrollments),
        completed=completed,
        completion_rate=rate,
        average_progress=_average([e.progress for e in enrollments]),
    )


def popular_courses(store: Store, limit: int = 3) -> List[PopularCourse]:
    """Courses with the most enrollments; ties go to the older course."""
    counts = Counter(e.course_id for e in store.enrollments.scan())
    ranked = sorted(store.courses.scan(), key=lambda c: (-counts.get(c.id, 0), c.id))
    return [
        PopularCourse(course_id=course.id, title=course.title, enrollment_count=counts.get(course.id, 0))
        for course in ranked[:limit]
    ]


def recent_activity(store: Store, limit: int = 10) -> List[ActivityResponse]:
    return [ActivityResponse.model_validate(activity) for activity in store.activities.recent(limit)]


def faculty_summary(store: Store, faculty_id: int) -> FacultySummary:
    course_ids = {course.id for course in store.courses.by_faculty(faculty_id)}
    students = {e.student_id for e in store.enrollments.scan() if e.course_id in course_ids}
    assignment_ids = {a.id for a in store.assignments.scan() if a.course_id in course_ids}
    submissions = [s for s in store.submissions.scan() if s.assignment_id in assignment_ids]
    return FacultySummary(
        faculty_id=faculty_id,
        course_count=len(course_ids),
        student_count=len(students),
        assignment_count=len(assignment_ids),
        pending_submissions=sum(1 for s in submissions if s.status in PENDING_SUBMISSION_STATUSES),
        graded_submissions=sum(1 for s in submissions if s.status == SubmissionStatus.graded),
    )


def student_summary(store: Store, student_id: int) -> StudentSummary:
    enrollments = store.enrollments.by_student(student_id)
    course_ids = {e.course_id for e in enrollments}
    assignment_ids = {a.id for a in store.assignments.scan() if a.course_id in course_ids}
    submitted = {s.assignment_id for s in store.submissions.by_student(student_id)}
    completed = len(assignment_ids & submitted)
    return StudentSummary(
        student_id=student_id,
        course_count=len(course_ids),
        assignment_count=len(assignment_ids),
        completed_assignments=completed,
        pending_assignments=len(assignment_ids) - completed,
        average_progress=_average([e.progress for e in enrollments]),
    )
