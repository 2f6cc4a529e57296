"""SQLModel implementation of the user repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.user import User
from ..database import SessionFactory


class SQLModelUserRepository:
    """SQLModel-based user lookups."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self.session_factory() as session:
            obj = session.get(User, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup; emails are stored lower-cased."""
        with self.session_factory() as session:
            obj = session.exec(select(User).where(User.email == email.strip().lower())).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, user: User) -> User:
        with self.session_factory() as session:
            user.email = user.email.strip().lower()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user
