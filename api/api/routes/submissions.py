import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.api.deps import (
    authorize,
    authorize_role,
    existing_submission_target,
    get_store,
    is_allowed,
    require,
    require_actor,
    shape,
    submission_target,
)
from api.core.database import as_utc, utcnow
from api.core.errors import ValidationFailed
from api.core.policy import Action, Actor, Resource
from api.models.submission import SubmissionStatus
from api.schemas.submission import SubmissionCreate, SubmissionResponse, SubmissionUpdate
from api.services.store import Store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[SubmissionResponse])
def list_submissions(
    assignment_id: Optional[int] = Query(default=None, alias="assignmentId"),
    student_id: Optional[int] = Query(default=None, alias="studentId"),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    List submissions by assignment and/or student.
    - Students only see their own
    - Faculty only see submissions for courses they teach
    """
    decision = authorize(actor, Action.list, Resource.submission)
    filters = {}
    if assignment_id is not None:
        filters["assignment_id"] = assignment_id
    if student_id is not None:
        filters["student_id"] = student_id

    return [
        shape(SubmissionResponse, submission, decision)
        for submission in store.submissions.scan(**filters)
        if is_allowed(actor, Action.read, Resource.submission, existing_submission_target(store, submission))
    ]


@router.post("/", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_assignment(
    submission: SubmissionCreate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    Submit an assignment. A second submission for the same assignment and
    student replaces the content of the first and marks it resubmitted.
    """
    authorize_role(actor, Action.create, Resource.submission)
    assignment = require(store.assignments.get(submission.assignment_id), "Assignment")
    target = submission_target(store, assignment, submission.student_id)
    decision = authorize(actor, Action.create, Resource.submission, target)
    require(store.users.get(submission.student_id), "Student")

    fields = decision.apply(submission.model_dump())
    now = utcnow()
    existing = store.submissions.find(assignment.id, submission.student_id)
    if existing:
        resubmitted = store.submissions.update(
            existing.id,
            {
                "content": fields["content"],
                "file_url": fields.get("file_url"),
                "status": SubmissionStatus.resubmitted,
                "submission_date": now,
            },
        )
        store.activities.record(actor.id, "Assignment Resubmission", f"Resubmitted assignment: {assignment.title}")
        return shape(SubmissionResponse, resubmitted, decision)

    due_date = as_utc(assignment.due_date)
    fields["status"] = SubmissionStatus.late if due_date and now > due_date else SubmissionStatus.submitted
    fields["submission_date"] = now
    db_submission = store.submissions.create(**fields)
    store.activities.record(actor.id, "Assignment Submission", f"Submitted assignment: {assignment.title}")
    return shape(SubmissionResponse, db_submission, decision)


@router.get("/{submission_id}", response_model=SubmissionResponse)
def get_submission(
    submission_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    submission = require(store.submissions.get(submission_id), "Submission")
    decision = authorize(actor, Action.read, Resource.submission, existing_submission_target(store, submission))
    return shape(SubmissionResponse, submission, decision)


@router.put("/{submission_id}", response_model=SubmissionResponse)
def update_submission(
    submission_id: int,
    submission_update: SubmissionUpdate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    Update a submission.
    - Admin: any field
    - Faculty of the course: grade, feedback and status
    - The student: content and file only; grading fields are ignored
    """
    submission = require(store.submissions.get(submission_id), "Submission")
    decision = authorize(actor, Action.update, Resource.submission, existing_submission_target(store, submission))

    changes = decision.apply(submission_update.changes())
    if changes.get("grade") is not None:
        assignment = store.assignments.get(submission.assignment_id)
        if assignment and changes["grade"] > assignment.max_score:
            raise ValidationFailed.for_field(
                "grade", f"Must not exceed the assignment's maxScore ({assignment.max_score})", "Invalid submission data"
            )
        changes.setdefault("status", SubmissionStatus.graded)

    updated = store.submissions.update(submission_id, changes)
    if changes.get("grade") is not None:
        store.activities.record(
            actor.id, "Submission Graded", f"Graded submission ID: {submission_id} with score: {changes['grade']}"
        )
    return shape(SubmissionResponse, updated, decision)
