# quizapp/core/db.py
from __future__ import annotations

import logging
from typing import Generator

from sqlmodel import SQLModel, Session, create_engine

from quizapp.core.settings import settings

# register tables on SQLModel.metadata
from quizapp.models import db_models  # noqa: F401

logger = logging.getLogger(__name__)

# shared engine for the whole app
_engine = None


def make_engine(db_url: str, **kwargs):
    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
        **kwargs,
    )


def get_engine():
    global _engine
    if _engine is None:
        _engine = make_engine(settings.DATABASE_URL)
    return _engine


def init_db(engine=None) -> None:
    """Create all tables if missing. Runs at startup."""
    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ensured (%s)", engine.url.render_as_string(hide_password=True))


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency: Depends(get_session)."""
    with Session(get_engine()) as session:
        yield session
