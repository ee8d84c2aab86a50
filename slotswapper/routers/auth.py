"""Authentication router: signup, password login and session lookup."""

from fastapi import APIRouter, Depends, Response, status

from slotswapper.core.config import settings
from slotswapper.core.deps import COOKIE_NAME, get_current_session, get_store
from slotswapper.core.security import create_session_token
from slotswapper.db.models import User
from slotswapper.db.repository import RecordStore
from slotswapper.schemas.auth import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserRead,
    UserSession,
)
from slotswapper.services import auth_service

router = APIRouter()


def _issue_session(response: Response, user: User, message: str) -> AuthResponse:
    """Mint a token, mirror it into the session cookie and build the body."""
    token = create_session_token(user.id)
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.ENV != "dev",
        samesite="lax",
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
    )
    return AuthResponse(message=message, token=token, user=UserRead.model_validate(user))


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    data: SignupRequest,
    response: Response,
    store: RecordStore = Depends(get_store),
):
    """Register a new account and start a session."""
    user = auth_service.register_user(store, data.name, data.email, data.password)
    return _issue_session(response, user, "User created successfully")


@router.post("/login", response_model=AuthResponse)
def login(
    data: LoginRequest,
    response: Response,
    store: RecordStore = Depends(get_store),
):
    """Exchange email and password for a session token."""
    user = auth_service.authenticate(store, data.email, data.password)
    return _issue_session(response, user, "Login successful")


@router.get("/me", response_model=UserRead)
def me(
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Get current user info."""
    return store.get_user(session.user_id)
