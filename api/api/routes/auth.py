import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from api.api.deps import get_actor, get_app_settings, get_store, require, shape
from api.core.auth import (
    clear_session_cookie,
    create_session_token,
    hash_password,
    set_session_cookie,
    verify_password,
)
from api.core.config import Settings
from api.core.errors import AuthenticationRequired, Conflict
from api.core.policy import Action, Actor, Resource, Target, evaluate
from api.models.user import User, UserRole
from api.schemas.user import LoginRequest, MessageResponse, UserCreate, UserResponse
from api.services.store import Store

logger = logging.getLogger(__name__)
router = APIRouter()


def _self_view(user: User) -> dict:
    actor = Actor(id=user.id, role=user.role)
    decision = evaluate(actor, Action.read, Resource.user, Target(owner_id=user.id))
    return shape(UserResponse, user, decision)


def _start_session(response: Response, user: User, settings: Settings) -> None:
    set_session_cookie(response, create_session_token(user.id, settings), settings)


@router.post("/login", response_model=UserResponse)
def login(
    credentials: LoginRequest,
    response: Response,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Check credentials and start a session."""
    user = store.users.get_by_username(credentials.username)
    if not user or not verify_password(credentials.password, user.password):
        logger.info(f"Failed login for username {credentials.username!r}")
        raise AuthenticationRequired("Incorrect username or password")

    _start_session(response, user, settings)
    store.activities.record(user.id, "Login", f"User {user.username} logged in")
    return _self_view(user)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    response: Response,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """Self-registration. New accounts are always students and are logged in."""
    if store.users.get_by_username(user_data.username):
        raise Conflict("Username already exists")
    if store.users.get_by_email(user_data.email):
        raise Conflict("Email already exists")

    fields = user_data.model_dump()
    fields["role"] = UserRole.student
    fields["password"] = hash_password(user_data.password)
    user = store.users.create(**fields)

    _start_session(response, user, settings)
    store.activities.record(user.id, "Registration", f"New user registered: {user.username}")
    return _self_view(user)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, settings: Settings = Depends(get_app_settings)):
    clear_session_cookie(response, settings)
    return {"message": "Logged out successfully"}


@router.get("/session", response_model=UserResponse)
@router.get("/me", response_model=UserResponse)
def current_session(
    actor: Optional[Actor] = Depends(get_actor),
    store: Store = Depends(get_store),
):
    """Return the logged-in user."""
    if actor is None:
        raise AuthenticationRequired()
    return _self_view(require(store.users.get(actor.id), "User"))
