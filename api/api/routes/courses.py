import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status

from api.api.deps import authorize, course_target, get_store, require, require_actor, shape
from api.core.errors import ValidationFailed
from api.core.policy import Action, Actor, Resource, Target
from api.models.course import CourseStatus
from api.models.user import UserRole
from api.schemas.course import CourseCreate, CourseResponse, CourseUpdate, StudentCourseResponse
from api.schemas.user import MessageResponse
from api.services.store import Store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=Union[List[StudentCourseResponse], List[CourseResponse]])
def list_courses(
    faculty_id: Optional[int] = Query(default=None, alias="facultyId"),
    student_id: Optional[int] = Query(default=None, alias="studentId"),
    course_status: Optional[CourseStatus] = Query(default=None, alias="status"),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    List courses.
    - ?facultyId=: courses taught by a faculty member
    - ?studentId=: a student's courses with their progress (admin or the student)
    - ?status=: filter by course status
    """
    decision = authorize(actor, Action.list, Resource.course)

    if student_id is not None:
        # Progress is enrollment data, so it follows the enrollment read rule
        authorize(actor, Action.read, Resource.enrollment, Target(owner_id=student_id))
        rows = store.courses.by_student(student_id)
        return [
            StudentCourseResponse(**shape(CourseResponse, course, decision), progress=progress)
            for course, progress in rows
            if (course_status is None or course.status == course_status)
            and (faculty_id is None or course.faculty_id == faculty_id)
        ]

    filters = {}
    if faculty_id is not None:
        filters["faculty_id"] = faculty_id
    if course_status is not None:
        filters["status"] = course_status
    return [shape(CourseResponse, course, decision) for course in store.courses.scan(**filters)]


@router.post("/", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    course: CourseCreate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Create a course. Faculty always become the owner of courses they create."""
    decision = authorize(actor, Action.create, Resource.course)
    fields = decision.apply(course.model_dump())

    faculty_id = fields.get("faculty_id")
    if faculty_id is None:
        raise ValidationFailed.for_field("facultyId", "Field required", "Invalid course data")
    faculty = store.users.get(faculty_id)
    if not faculty or faculty.role != UserRole.faculty:
        raise ValidationFailed.for_field(
            "facultyId", "Must reference an existing faculty member", "Invalid course data"
        )

    db_course = store.courses.create(**fields)
    store.activities.record(actor.id, "Course Created", f"Created course: {db_course.title}")
    return shape(CourseResponse, db_course, decision)


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(
    course_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Get a course by ID."""
    course = require(store.courses.get(course_id), "Course")
    decision = authorize(actor, Action.read, Resource.course, course_target(course))
    return shape(CourseResponse, course, decision)


@router.put("/{course_id}", response_model=CourseResponse)
def update_course(
    course_id: int,
    course_update: CourseUpdate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    Update a course.
    - Admin: Can update any course
    - Faculty: Can only update courses they own, and cannot hand them over
    """
    course = require(store.courses.get(course_id), "Course")
    decision = authorize(actor, Action.update, Resource.course, course_target(course))

    changes = decision.apply(course_update.changes())
    updated = store.courses.update(course_id, changes)
    store.activities.record(actor.id, "Course Updated", f"Updated course: {updated.title}")
    return shape(CourseResponse, updated, decision)


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(
    course_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Delete a course and its enrollments, assignments, submissions and announcements. (Admin only)"""
    course = require(store.courses.get(course_id), "Course")
    authorize(actor, Action.delete, Resource.course, course_target(course))

    store.courses.delete(course_id)
    store.activities.record(actor.id, "Course Deleted", f"Deleted course ID: {course_id}")
    return {"message": "Course deleted successfully"}
