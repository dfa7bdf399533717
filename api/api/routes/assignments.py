from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.api.deps import (
    assignment_target,
    authorize,
    authorize_role,
    course_target,
    get_store,
    require,
    require_actor,
    shape,
)
from api.core.policy import Action, Actor, Resource
from api.schemas.assignment import AssignmentCreate, AssignmentResponse, AssignmentUpdate
from api.schemas.user import MessageResponse
from api.services.store import Store

router = APIRouter()


@router.get("/", response_model=List[AssignmentResponse])
def list_assignments(
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """List assignments, optionally for one course."""
    decision = authorize(actor, Action.list, Resource.assignment)
    assignments = store.assignments.by_course(course_id) if course_id is not None else store.assignments.scan()
    return [shape(AssignmentResponse, assignment, decision) for assignment in assignments]


@router.post("/", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(
    assignment: AssignmentCreate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Create an assignment. (Admin, or the faculty teaching the course)"""
    authorize_role(actor, Action.create, Resource.assignment)
    course = require(store.courses.get(assignment.course_id), "Course")
    decision = authorize(actor, Action.create, Resource.assignment, course_target(course))

    db_assignment = store.assignments.create(**decision.apply(assignment.model_dump()))
    store.activities.record(actor.id, "Assignment Created", f"Created assignment: {db_assignment.title}")
    return shape(AssignmentResponse, db_assignment, decision)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Get an assignment by ID."""
    assignment = require(store.assignments.get(assignment_id), "Assignment")
    decision = authorize(actor, Action.read, Resource.assignment, assignment_target(store, assignment))
    return shape(AssignmentResponse, assignment, decision)


@router.put("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: int,
    assignment_update: AssignmentUpdate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Update an assignment. Only admins may move it to another course."""
    assignment = require(store.assignments.get(assignment_id), "Assignment")
    decision = authorize(actor, Action.update, Resource.assignment, assignment_target(store, assignment))

    changes = decision.apply(assignment_update.changes())
    if "course_id" in changes:
        require(store.courses.get(changes["course_id"]), "Course")

    updated = store.assignments.update(assignment_id, changes)
    store.activities.record(actor.id, "Assignment Updated", f"Updated assignment: {updated.title}")
    return shape(AssignmentResponse, updated, decision)


@router.delete("/{assignment_id}", response_model=MessageResponse)
def delete_assignment(
    assignment_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Delete an assignment and its submissions."""
    assignment = require(store.assignments.get(assignment_id), "Assignment")
    authorize(actor, Action.delete, Resource.assignment, assignment_target(store, assignment))

    store.assignments.delete(assignment_id)
    store.activities.record(actor.id, "Assignment Deleted", f"Deleted assignment ID: {assignment_id}")
    return {"message": "Assignment deleted successfully"}
