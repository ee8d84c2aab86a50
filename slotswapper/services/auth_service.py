"""Account registration and password login."""

import logging

from slotswapper.core.errors import UnauthenticatedError, ValidationError
from slotswapper.core.security import hash_password, verify_password
from slotswapper.core.structured_logging import build_log_context
from slotswapper.db.models import User
from slotswapper.db.repository import RecordStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(store: RecordStore, name: str, email: str, password: str) -> User:
    """
    Create a user account.

    Raises:
        ValidationError: email already registered
    """
    email = normalize_email(email)
    name = name.strip()
    if not name:
        raise ValidationError("Name is required")

    with store.transaction():
        if store.get_user_by_email(email):
            raise ValidationError("User already exists")
        user = store.add_user(
            User(name=name, email=email, password_hash=hash_password(password))
        )

    logger.info("User registered", extra=build_log_context(user_id=str(user.id)))
    return user


def authenticate(store: RecordStore, email: str, password: str) -> User:
    """
    Verify email and password.

    Unknown email and wrong password fail the same way.

    Raises:
        UnauthenticatedError: credentials rejected
    """
    user = store.get_user_by_email(normalize_email(email))
    if not user or not verify_password(password, user.password_hash):
        raise UnauthenticatedError(INVALID_CREDENTIALS)
    return user
