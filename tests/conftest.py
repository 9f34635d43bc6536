from __future__ import annotations

import os
import socket
from typing import Any, Dict

import pytest

# Unit-test-safe configuration before the app modules are imported.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from quizapp.core.db import get_session  # noqa: E402
from quizapp.core.settings import settings  # noqa: E402


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.integration/@pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound network calls in unit tests."""
    if os.getenv("ALLOW_NETWORK") == "1":
        return
    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return
    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def client(engine):
    from quizapp.main import app

    def _session_override():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session_override
    try:
        # no context manager: startup (init_db on the configured URL) is not run
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers() -> Dict[str, str]:
    return {"x-api-key": settings.API_KEY}


@pytest.fixture()
def sample_quiz() -> Dict[str, Any]:
    return {
        "title": "Stress Check",
        "slug": "stress-check",
        "description": "Short stress and anxiety check.",
        "isPublished": True,
        "questions": [
            {"id": "q1", "text": "How tense do you feel?", "type": "scale", "scaleMin": 0, "scaleMax": 5, "category": "Stress"},
            {"id": "q2", "text": "How worried are you?", "type": "scale", "scaleMin": 0, "scaleMax": 5, "category": "Anxiety"},
            {
                "id": "q3",
                "text": "How often do you sleep badly?",
                "type": "multiple-choice",
                "options": ["Never", "Sometimes", "Often"],
                "scoreMapping": {"Never": 0, "Sometimes": 1, "Often": 2},
            },
            {"id": "q4", "text": "Anything else?", "type": "text"},
        ],
        "scoreRanges": [
            {"min": 0, "max": 5, "status": "Low", "description": "Low stress.", "color": "green"},
            {"min": 6, "max": 12, "status": "High", "description": "High stress.", "color": "orange"},
        ],
    }
