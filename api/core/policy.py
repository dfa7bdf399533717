"""Access-control and data-shaping policy.

``evaluate`` is a pure function of (actor, action, resource, target). Route
handlers resolve the facts a rule needs (who owns the record, who teaches the
course, whether the assignment is closed) into a ``Target`` and apply the
returned ``Decision`` to payloads and responses. Every rule lives in the
``RULES`` table below; handlers never branch on roles themselves.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple

from api.models.user import UserRole


class Action(str, enum.Enum):
    read = "read"
    list = "list"
    create = "create"
    update = "update"
    delete = "delete"


class Resource(str, enum.Enum):
    user = "user"
    course = "course"
    enrollment = "enrollment"
    assignment = "assignment"
    submission = "submission"
    announcement = "announcement"
    analytics = "analytics"
    faculty_report = "faculty_report"
    student_report = "student_report"


@dataclass(frozen=True)
class Actor:
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


@dataclass(frozen=True)
class Target:
    owner_id: Optional[int] = None  # user the record belongs to (self, student, author, report subject)
    course_owner_id: Optional[int] = None  # faculty of the course involved
    closed: bool = False  # parent assignment is closed
    enrolled: bool = False  # owner is enrolled in the course involved


@dataclass(frozen=True)
class Decision:
    allow: bool
    only: Optional[FrozenSet[str]] = None  # None: every field may be set
    strip: FrozenSet[str] = frozenset()
    forced: Mapping[str, Any] = field(default_factory=dict)
    redacted: FrozenSet[str] = frozenset()

    def apply(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a new payload holding only the fields this actor may set."""
        kept = {
            key: value
            for key, value in payload.items()
            if (self.only is None or key in self.only) and key not in self.strip
        }
        kept.update(self.forced)
        return kept

    def redact(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in data.items() if key not in self.redacted}


ALLOW = Decision(allow=True)
DENY = Decision(allow=False)

# Never returned to any role, including the user themself
REDACTED_FIELDS: Dict[Resource, FrozenSet[str]] = {
    Resource.user: frozenset({"password"}),
}

ENROLLMENT_GRADING_FIELDS = frozenset({"progress", "grade", "status"})
SUBMISSION_GRADING_FIELDS = frozenset({"grade", "feedback", "status"})
SUBMISSION_STUDENT_STRIP = frozenset({"grade", "feedback"})

Rule = Callable[[Actor, Target], Decision]


def _owns_course(actor: Actor, target: Target) -> bool:
    return (
        actor.role == UserRole.faculty
        and target.course_owner_id is not None
        and target.course_owner_id == actor.id
    )


def _is_owner(actor: Actor, target: Target) -> bool:
    return target.owner_id is not None and target.owner_id == actor.id


def _any_actor(actor: Actor, target: Target) -> Decision:
    return ALLOW


def _admin_only(actor: Actor, target: Target) -> Decision:
    return ALLOW if actor.is_admin else DENY


def _admin_or_self(actor: Actor, target: Target) -> Decision:
    return ALLOW if actor.is_admin or _is_owner(actor, target) else DENY


def _admin_or_course_owner(actor: Actor, target: Target) -> Decision:
    return ALLOW if actor.is_admin or _owns_course(actor, target) else DENY


def _admin_course_owner_or_student(actor: Actor, target: Target) -> Decision:
    if actor.is_admin or _owns_course(actor, target):
        return ALLOW
    if actor.role == UserRole.student and _is_owner(actor, target):
        return ALLOW
    return DENY


def _update_user(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _is_owner(actor, target):
        return Decision(allow=True, strip=frozenset({"role"}))
    return DENY


def _create_course(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if actor.role == UserRole.faculty:
        return Decision(allow=True, forced={"faculty_id": actor.id})
    return DENY


def _update_course(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _owns_course(actor, target):
        return Decision(allow=True, strip=frozenset({"faculty_id"}))
    return DENY


def _create_enrollment(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if actor.role == UserRole.student and _is_owner(actor, target):
        return ALLOW
    return DENY


def _update_enrollment(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _owns_course(actor, target):
        return Decision(allow=True, only=ENROLLMENT_GRADING_FIELDS)
    return DENY


def _update_assignment(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _owns_course(actor, target):
        return Decision(allow=True, strip=frozenset({"course_id"}))
    return DENY


def _create_submission(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if actor.role == UserRole.student and _is_owner(actor, target):
        if target.enrolled and not target.closed:
            return ALLOW
    return DENY


def _update_submission(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _owns_course(actor, target):
        return Decision(allow=True, only=SUBMISSION_GRADING_FIELDS)
    if actor.role == UserRole.student and _is_owner(actor, target):
        # A closed assignment accepts the request but changes nothing
        if target.closed:
            return Decision(allow=True, only=frozenset())
        return Decision(allow=True, strip=SUBMISSION_STUDENT_STRIP)
    return DENY


def _create_announcement(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if _owns_course(actor, target):
        return Decision(allow=True, forced={"is_global": False})
    return DENY


def _change_announcement(actor: Actor, target: Target) -> Decision:
    if actor.is_admin:
        return ALLOW
    if actor.role == UserRole.faculty and _is_owner(actor, target):
        return Decision(allow=True, strip=frozenset({"is_global", "course_id", "author_id"}))
    return DENY


def _own_report(role: UserRole) -> Rule:
    def rule(actor: Actor, target: Target) -> Decision:
        if actor.is_admin:
            return ALLOW
        if actor.role == role and _is_owner(actor, target):
            return ALLOW
        return DENY

    return rule


# Role capability matrix. Lists are open to any actor; handlers then keep the
# rows that pass the matching read rule.
RULES: Dict[Tuple[Resource, Action], Rule] = {
    (Resource.user, Action.list): _any_actor,
    (Resource.user, Action.read): _admin_or_self,
    (Resource.user, Action.create): _admin_only,
    (Resource.user, Action.update): _update_user,
    (Resource.user, Action.delete): _admin_only,

    (Resource.course, Action.list): _any_actor,
    (Resource.course, Action.read): _any_actor,
    (Resource.course, Action.create): _create_course,
    (Resource.course, Action.update): _update_course,
    (Resource.course, Action.delete): _admin_only,

    (Resource.enrollment, Action.list): _any_actor,
    (Resource.enrollment, Action.read): _admin_course_owner_or_student,
    (Resource.enrollment, Action.create): _create_enrollment,
    (Resource.enrollment, Action.update): _update_enrollment,
    (Resource.enrollment, Action.delete): _admin_only,

    (Resource.assignment, Action.list): _any_actor,
    (Resource.assignment, Action.read): _any_actor,
    (Resource.assignment, Action.create): _admin_or_course_owner,
    (Resource.assignment, Action.update): _update_assignment,
    (Resource.assignment, Action.delete): _admin_or_course_owner,

    (Resource.submission, Action.list): _any_actor,
    (Resource.submission, Action.read): _admin_course_owner_or_student,
    (Resource.submission, Action.create): _create_submission,
    (Resource.submission, Action.update): _update_submission,
    (Resource.submission, Action.delete): _admin_only,

    (Resource.announcement, Action.list): _any_actor,
    (Resource.announcement, Action.read): _any_actor,
    (Resource.announcement, Action.create): _create_announcement,
    (Resource.announcement, Action.update): _change_announcement,
    (Resource.announcement, Action.delete): _change_announcement,

    (Resource.analytics, Action.read): _any_actor,
    (Resource.faculty_report, Action.read): _own_report(UserRole.faculty),
    (Resource.student_report, Action.read): _own_report(UserRole.student),
}


# Roles that may ever perform an action whatever the target. Handlers check
# this before looking up parent records so missing ids are not revealed.
CAPABLE_ROLES: Dict[Tuple[Resource, Action], FrozenSet[UserRole]] = {
    (Resource.assignment, Action.create): frozenset({UserRole.admin, UserRole.faculty}),
    (Resource.submission, Action.create): frozenset({UserRole.admin, UserRole.student}),
    (Resource.announcement, Action.create): frozenset({UserRole.admin, UserRole.faculty}),
}


def role_may(actor: Actor, action: Action, resource: Resource) -> bool:
    roles = CAPABLE_ROLES.get((resource, action))
    return roles is None or actor.role in roles


def evaluate(actor: Actor, action: Action, resource: Resource, target: Target = Target()) -> Decision:
    """Decide whether actor may perform action on resource, and how to shape data."""
    rule = RULES.get((resource, action))
    decision = rule(actor, target) if rule else DENY
    redacted = REDACTED_FIELDS.get(resource)
    if redacted:
        decision = replace(decision, redacted=redacted)
    return decision
