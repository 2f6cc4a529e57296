"""User bootstrap helpers."""

from __future__ import annotations

from ..domain.repositories import UserRepository
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger("users")


def ensure_user(repo: UserRepository, *, email: str, name: str | None = None) -> User:
    """Return the user with ``email``, creating it on first use."""

    email = (email or "").strip().lower()
    if "@" not in email:
        raise ValueError(f"Invalid email address: {email!r}")
    existing = repo.get_by_email(email)
    if existing is not None:
        return existing
    display_name = (name or "").strip() or email.split("@", 1)[0]
    user = repo.create(User(email=email, name=display_name))
    logger.info("Created user", extra={"user_id": user.id})
    return user


def require_user(repo: UserRepository, email: str | None) -> User:
    """Look up an existing user or raise ``ValueError``."""

    if not email:
        raise ValueError("No user selected; pass --user or set HABITPULSE_USER_EMAIL.")
    user = repo.get_by_email(email)
    if user is None:
        raise ValueError(f"Unknown user: {email}")
    return user
