"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelHabitRepository,
    SQLModelNotificationRepository,
    SQLModelUserRepository,
)


@dataclass
class AppContext:
    """Configuration, session factory and repositories shared by services."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    user_repo: SQLModelUserRepository
    habit_repo: SQLModelHabitRepository
    notification_repo: SQLModelNotificationRepository

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, ensure the schema exists and wire the repositories."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        habit_repo=SQLModelHabitRepository(session_factory),
        notification_repo=SQLModelNotificationRepository(session_factory),
    )
