from typing import List

from fastapi import APIRouter, Depends, Query

from api.api.deps import authorize, get_store, require_actor
from api.core.errors import NotFound
from api.core.policy import Action, Actor, Resource, Target
from api.models.user import UserRole
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
from api.services import analytics
from api.services.store import Store

router = APIRouter()


def _require_role(store: Store, user_id: int, role: UserRole, kind: str) -> None:
    user = store.users.get(user_id)
    if not user or user.role != role:
        raise NotFound(f"{kind} not found")


@router.get("/users", response_model=UserDistribution)
def user_distribution(actor: Actor = Depends(require_actor), store: Store = Depends(get_store)):
    """Number of users per role."""
    authorize(actor, Action.read, Resource.analytics)
    return analytics.user_distribution(store)


@router.get("/courses", response_model=CourseStatusCounts)
def course_status_counts(actor: Actor = Depends(require_actor), store: Store = Depends(get_store)):
    authorize(actor, Action.read, Resource.analytics)
    return analytics.course_status_counts(store)


@router.get("/assignments", response_model=AssignmentCounts)
def assignment_counts(actor: Actor = Depends(require_actor), store: Store = Depends(get_store)):
    authorize(actor, Action.read, Resource.analytics)
    return analytics.assignment_counts(store)


@router.get("/enrollments", response_model=EnrollmentStats)
def enrollment_stats(actor: Actor = Depends(require_actor), store: Store = Depends(get_store)):
    """Enrollment totals, completion rate and average progress."""
    authorize(actor, Action.read, Resource.analytics)
    return analytics.enrollment_stats(store)


@router.get("/popular-courses", response_model=List[PopularCourse])
def popular_courses(
    limit: int = Query(default=3, ge=1, le=100),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    authorize(actor, Action.read, Resource.analytics)
    return analytics.popular_courses(store, limit)


@router.get("/activity", response_model=List[ActivityResponse])
def recent_activity(
    limit: int = Query(default=10, ge=1, le=100),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Most recent entries of the activity log."""
    authorize(actor, Action.read, Resource.analytics)
    return analytics.recent_activity(store, limit)


@router.get("/faculty/{faculty_id}", response_model=FacultySummary)
def faculty_summary(
    faculty_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Course, student, assignment and grading counts for one faculty member."""
    # Policy runs before the lookup so other ids give 403 whether or not they exist
    authorize(actor, Action.read, Resource.faculty_report, Target(owner_id=faculty_id))
    _require_role(store, faculty_id, UserRole.faculty, "Faculty member")
    return analytics.faculty_summary(store, faculty_id)


@router.get("/student/{student_id}", response_model=StudentSummary)
def student_summary(
    student_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Course, assignment and progress figures for one student."""
    authorize(actor, Action.read, Resource.student_report, Target(owner_id=student_id))
    _require_role(store, student_id, UserRole.student, "Student")
    return analytics.student_summary(store, student_id)
