"""Shared dependencies and helpers for route handlers."""

import logging
from typing import Any, Dict, Optional, Type

from fastapi import Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.core.auth import decode_session_token, read_session_token
from api.core.config import Settings
from api.core.database import get_db
from api.core.errors import AuthenticationRequired, AuthorizationDenied, NotFound
from api.core.policy import Action, Actor, Decision, Resource, Target, evaluate, role_may
from api.models import Announcement, Assignment, AssignmentStatus, Course, Enrollment, Submission, User
from api.services.store import Store

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


def get_actor(
    request: Request,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Optional[Actor]:
    """Resolve the session identity, or None for anonymous requests."""
    token = read_session_token(request, settings)
    if not token:
        return None
    user_id = decode_session_token(token, settings)
    if user_id is None:
        return None
    user = store.users.get(user_id)
    if user is None:
        return None
    return Actor(id=user.id, role=user.role)


def require_actor(actor: Optional[Actor] = Depends(get_actor)) -> Actor:
    if actor is None:
        raise AuthenticationRequired()
    return actor


def authorize(actor: Actor, action: Action, resource: Resource, target: Target = Target()) -> Decision:
    """Evaluate policy and raise a uniform 403 on deny."""
    decision = evaluate(actor, action, resource, target)
    if not decision.allow:
        logger.info(f"Denied {action.value} on {resource.value} for user {actor.id}")
        raise AuthorizationDenied()
    return decision


def authorize_role(actor: Actor, action: Action, resource: Resource) -> None:
    """Reject roles that can never perform action, before any record lookup."""
    if not role_may(actor, action, resource):
        logger.info(f"Denied {action.value} on {resource.value} for role {actor.role.value}")
        raise AuthorizationDenied()


def is_allowed(actor: Actor, action: Action, resource: Resource, target: Target) -> bool:
    return evaluate(actor, action, resource, target).allow


def shape(schema: Type[BaseModel], obj: Any, decision: Decision) -> Dict[str, Any]:
    """Serialize obj through schema and drop the fields the decision redacts."""
    data = schema.model_validate(obj).model_dump(by_alias=False)
    return decision.redact(data)


def require(entity: Any, kind: str) -> Any:
    if entity is None:
        raise NotFound(f"{kind} not found")
    return entity


# Target builders: resolve the facts policy rules need from the store

def user_target(user: User) -> Target:
    return Target(owner_id=user.id)


def course_target(course: Optional[Course]) -> Target:
    return Target(course_owner_id=course.faculty_id if course else None)


def enrollment_target(store: Store, enrollment: Enrollment) -> Target:
    course = store.courses.get(enrollment.course_id)
    return Target(owner_id=enrollment.student_id, course_owner_id=course.faculty_id if course else None)


def assignment_target(store: Store, assignment: Assignment) -> Target:
    return course_target(store.courses.get(assignment.course_id))


def submission_target(store: Store, assignment: Optional[Assignment], student_id: int) -> Target:
    course = store.courses.get(assignment.course_id) if assignment else None
    enrolled = bool(course and store.enrollments.find(student_id, course.id))
    return Target(
        owner_id=student_id,
        course_owner_id=course.faculty_id if course else None,
        closed=bool(assignment and assignment.status == AssignmentStatus.closed),
        enrolled=enrolled,
    )


def announcement_target(store: Store, announcement: Announcement) -> Target:
    course = store.courses.get(announcement.course_id) if announcement.course_id else None
    return Target(owner_id=announcement.author_id, course_owner_id=course.faculty_id if course else None)


def existing_submission_target(store: Store, submission: Submission) -> Target:
    return submission_target(store, store.assignments.get(submission.assignment_id), submission.student_id)
