"""FastAPI dependencies for authentication and database access."""

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from slotswapper.core.errors import UnauthenticatedError
from slotswapper.core.security import decode_session_token
from slotswapper.db.repository import RecordStore
from slotswapper.db.session import SessionLocal
from slotswapper.schemas.auth import TokenPayload, UserSession


# Cookie name for browser sessions; API clients send a bearer token
COOKIE_NAME = "slotswapper_session"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store bound to the request's session."""
    return RecordStore(db)


def _extract_token(request: Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(COOKIE_NAME)


def get_current_session(
    request: Request,
    store: RecordStore = Depends(get_store),
) -> UserSession:
    """
    Resolve the caller's identity.

    Validates:
    - A bearer token (or session cookie) is present
    - JWT is valid and not expired
    - User still exists

    Raises:
        UnauthenticatedError: Authentication failed
    """
    token = _extract_token(request)
    if not token:
        raise UnauthenticatedError("Access token required")

    try:
        payload = TokenPayload.model_validate(decode_session_token(token))
    except Exception:
        raise UnauthenticatedError("Invalid or expired token")

    user = store.get_user(payload.sub)
    if not user:
        raise UnauthenticatedError("User not found")

    return UserSession(user_id=user.id, name=user.name, email=user.email)
