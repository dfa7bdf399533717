from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.api.deps import (
    announcement_target,
    authorize,
    authorize_role,
    course_target,
    get_store,
    require,
    require_actor,
    shape,
)
from api.core.database import as_utc
from api.core.policy import Action, Actor, Resource, Target
from api.schemas.announcement import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate
from api.schemas.user import MessageResponse
from api.services.store import Store

router = APIRouter()


@router.get("/", response_model=List[AnnouncementResponse])
def list_announcements(
    course_id: Optional[int] = Query(default=None, alias="courseId"),
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """List announcements, newest first. ?courseId= adds the platform-wide ones."""
    decision = authorize(actor, Action.list, Resource.announcement)
    if course_id is not None:
        announcements = store.announcements.for_course(course_id)
    else:
        announcements = store.announcements.scan()
    announcements.sort(key=lambda a: (as_utc(a.date_posted), a.id), reverse=True)
    return [shape(AnnouncementResponse, announcement, decision) for announcement in announcements]


@router.post("/", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
def create_announcement(
    announcement: AnnouncementCreate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    Post an announcement.
    - Admin: for a course or platform-wide
    - Faculty: only for courses they teach, never platform-wide
    """
    authorize_role(actor, Action.create, Resource.announcement)
    course = None
    if announcement.course_id is not None:
        course = require(store.courses.get(announcement.course_id), "Course")
    target = course_target(course) if course else Target()
    decision = authorize(actor, Action.create, Resource.announcement, target)

    fields = decision.apply(announcement.model_dump())
    if fields.get("course_id") is None:
        fields["is_global"] = True
    fields["author_id"] = actor.id

    db_announcement = store.announcements.create(**fields)
    store.activities.record(actor.id, "Announcement Posted", f"Posted announcement: {db_announcement.title}")
    return shape(AnnouncementResponse, db_announcement, decision)


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
def get_announcement(
    announcement_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    announcement = require(store.announcements.get(announcement_id), "Announcement")
    decision = authorize(actor, Action.read, Resource.announcement, announcement_target(store, announcement))
    return shape(AnnouncementResponse, announcement, decision)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
def update_announcement(
    announcement_id: int,
    announcement_update: AnnouncementUpdate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Update an announcement. (Admin, or its author)"""
    announcement = require(store.announcements.get(announcement_id), "Announcement")
    decision = authorize(actor, Action.update, Resource.announcement, announcement_target(store, announcement))

    changes = decision.apply(announcement_update.changes())
    if changes.get("course_id") is not None:
        require(store.courses.get(changes["course_id"]), "Course")
    if "course_id" in changes and changes["course_id"] is None:
        # Detached from its course, so it must reach everyone
        changes["is_global"] = True

    updated = store.announcements.update(announcement_id, changes)
    return shape(AnnouncementResponse, updated, decision)


@router.delete("/{announcement_id}", response_model=MessageResponse)
def delete_announcement(
    announcement_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Delete an announcement. (Admin, or its author)"""
    announcement = require(store.announcements.get(announcement_id), "Announcement")
    authorize(actor, Action.delete, Resource.announcement, announcement_target(store, announcement))

    store.announcements.delete(announcement_id)
    return {"message": "Announcement deleted successfully"}
