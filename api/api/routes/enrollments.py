import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.api.deps import (
    authorize,
    enrollment_target,
    get_store,
    is_allowed,
    require,
    require_actor,
    shape,
)
from api.core.errors import Conflict, ValidationFailed
from api.core.policy import Action, Actor, Resource, Target
from api.models.enrollment import EnrollmentStatus
from api.models.user import UserRole
from api.schemas.enrollment import EnrollmentCreate, EnrollmentResponse, EnrollmentUpdate
from api.schemas.user import MessageResponse
from api.services.store import Store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[EnrollmentResponse])
def list_enrollments(
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    student_id: Optional[int] = Query(default=None, alias="studentId"),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """List enrollments by course and/or student, limited to those the caller may see."""
    decision = authorize(actor, Action.list, Resource.enrollment)
    filters = {}
    if course_id is not None:
        filters["course_id"] = course_id
    if student_id is not None:
        filters["student_id"] = student_id

    return [
        shape(EnrollmentResponse, enrollment, decision)
        for enrollment in store.enrollments.scan(**filters)
        if is_allowed(actor, Action.read, Resource.enrollment, enrollment_target(store, enrollment))
    ]


@router.post("/", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
def enroll_student(
    enrollment: EnrollmentCreate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Enroll a student in a course. Students may only enroll themselves."""
    decision = authorize(actor, Action.create, Resource.enrollment, Target(owner_id=enrollment.student_id))

    student = require(store.users.get(enrollment.student_id), "Student")
    if student.role != UserRole.student:
        raise ValidationFailed.for_field("studentId", "User is not a student", "Invalid enrollment data")
    course = require(store.courses.get(enrollment.course_id), "Course")

    if store.enrollments.find(student.id, course.id):
        raise Conflict("Student is already enrolled in this course")

    db_enrollment = store.enrollments.create(**decision.apply(enrollment.model_dump()))
    store.activities.record(actor.id, "Course Enrollment", f"Enrolled in course ID: {course.id}")
    return shape(EnrollmentResponse, db_enrollment, decision)


@router.get("/{enrollment_id}", response_model=EnrollmentResponse)
def get_enrollment(
    enrollment_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    enrollment = require(store.enrollments.get(enrollment_id), "Enrollment")
    decision = authorize(actor, Action.read, Resource.enrollment, enrollment_target(store, enrollment))
    return shape(EnrollmentResponse, enrollment, decision)


@router.put("/{enrollment_id}", response_model=EnrollmentResponse)
def update_enrollment(
    enrollment_id: int,
    enrollment_update: EnrollmentUpdate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Update progress, grade or status. (Admin, or the faculty teaching the course)"""
    enrollment = require(store.enrollments.get(enrollment_id), "Enrollment")
    decision = authorize(actor, Action.update, Resource.enrollment, enrollment_target(store, enrollment))

    changes = decision.apply(enrollment_update.changes())
    if changes.get("status") == EnrollmentStatus.completed and "progress" not in changes:
        changes["progress"] = 100

    updated = store.enrollments.update(enrollment_id, changes)
    return shape(EnrollmentResponse, updated, decision)


@router.delete("/{enrollment_id}", response_model=MessageResponse)
def unenroll_student(
    enrollment_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Remove a student from a course. (Admin only)"""
    enrollment = require(store.enrollments.get(enrollment_id), "Enrollment")
    authorize(actor, Action.delete, Resource.enrollment, enrollment_target(store, enrollment))

    course_id = enrollment.course_id
    store.enrollments.delete(enrollment_id)
    store.activities.record(actor.id, "Course Unenrollment", f"Unenrolled from course ID: {course_id}")
    return {"message": "Enrollment deleted successfully"}
