import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from api.api.deps import authorize, is_allowed, require, require_actor, shape, get_store, user_target
from api.core.auth import hash_password
from api.core.errors import Conflict
from api.core.policy import Action, Actor, Resource
from api.models.user import UserRole
from api.schemas.user import MessageResponse, UserCreate, UserResponse, UserUpdate
from api.services.store import Store

logger = logging.getLogger(__name__)
router = APIRouter()


def _check_unique(store: Store, username: Optional[str], email: Optional[str], user_id: Optional[int] = None):
    if username is not None:
        existing = store.users.get_by_username(username)
        if existing and existing.id != user_id:
            raise Conflict("Username already exists")
    if email is not None:
        existing = store.users.get_by_email(email)
        if existing and existing.id != user_id:
            raise Conflict("Email already exists")


@router.get("/", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = None,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """List users with optional role filter. Non-admins only see themselves."""
    decision = authorize(actor, Action.list, Resource.user)
    users = store.users.by_role(role) if role else store.users.scan()
    return [
        shape(UserResponse, user, decision)
        for user in users
        if is_allowed(actor, Action.read, Resource.user, user_target(user))
    ]


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user: UserCreate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Create a user with any role. (Admin only)"""
    decision = authorize(actor, Action.create, Resource.user)
    _check_unique(store, user.username, user.email)

    fields = decision.apply(user.model_dump())
    fields["password"] = hash_password(fields["password"])
    db_user = store.users.create(**fields)
    store.activities.record(actor.id, "User Created", f"Created user: {db_user.username}")
    return shape(UserResponse, db_user, decision)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Get a user by ID."""
    user = require(store.users.get(user_id), "User")
    decision = authorize(actor, Action.read, Resource.user, user_target(user))
    return shape(UserResponse, user, decision)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """
    Update a user.
    - Admin: any field of any user
    - Others: their own profile only; role changes are ignored
    """
    user = require(store.users.get(user_id), "User")
    decision = authorize(actor, Action.update, Resource.user, user_target(user))

    changes = decision.apply(user_update.changes())
    _check_unique(store, changes.get("username"), changes.get("email"), user_id=user.id)
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    updated = store.users.update(user_id, changes)
    return shape(UserResponse, updated, decision)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    actor: Actor = Depends(require_actor),
    store: Store = Depends(get_store),
):
    """Delete a user with their enrollments, submissions and announcements. (Admin only)"""
    authorize(actor, Action.delete, Resource.user)
    user = require(store.users.get(user_id), "User")

    if store.courses.by_faculty(user.id):
        raise Conflict("User still teaches courses; reassign or delete them first")

    store.users.delete(user_id)
    store.activities.record(actor.id, "User Deleted", f"Deleted user ID: {user_id}")
    logger.info(f"User {user_id} deleted by {actor.id}")
    return {"message": "User deleted successfully"}
