"""
Shared pytest fixtures for the TypeRank test suite.

Strategy:
- Domain tests: pure in-memory, zero I/O.
- Application/infrastructure tests: real repositories over an in-memory
  SQLite engine, fresh per test, seeded with the standard game modes.
- API tests: FastAPI TestClient over the same wiring.
DATABASE_URL is cleared so nothing ever reaches a real database.
"""
import itertools
import os
from datetime import datetime, timezone

import pytest

# ---------------------------------------------------------------------------
# Ensure no real database is touched during the test run
# ---------------------------------------------------------------------------
os.environ.pop("DATABASE_URL", None)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production-123456")


from typerank.api.wiring import build_services, register_routes
from typerank.domain.attempt import Attempt
from typerank.domain.enums import GameModeType, Language
from typerank.domain.game_mode import TypingText
from typerank.domain.user import User
from typerank.infrastructure.auth.jwt_handler import create_access_token
from typerank.infrastructure.database.connection import (
    ManagedSessionFactory, build_engine, create_tables,
)
from typerank.infrastructure.database.seed import seed_game_modes

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Domain helpers (reusable across many test modules)
# ---------------------------------------------------------------------------

def make_attempt(**kwargs) -> Attempt:
    defaults = {
        "language": Language.ENGLISH,
        "game_mode_id": "00000000-0000-0000-0000-000000000001",
        "wpm": 50.0,
        "accuracy": 95.0,
        "correct_chars": 250,
        "total_chars": 260,
        "time_elapsed": 60,
        "errors": 10,
        "user_id": "user-1",
    }
    defaults.update(kwargs)
    return Attempt(**defaults)


class World:
    """Test-side handle over a seeded store: users, modes, texts, attempts."""

    def __init__(self, services: dict):
        self.services = services
        self.modes = {(m.type, m.value): m for m in services["game_mode_repo"].list_all()}
        self._seq = itertools.count(1)

    def mode(self, mode_type: GameModeType = GameModeType.BY_TIME, value: int = 60):
        return self.modes[(mode_type, value)]

    def user(self, username: str | None = "alice", email: str | None = None) -> User:
        email = email or f"{username or 'user'}{next(self._seq)}@example.test"
        return self.services["user_repo"].add(User(email=email, username=username))

    def text(self, language: Language = Language.ENGLISH, content: str = "hello world") -> TypingText:
        return self.services["text_repo"].add(TypingText(language, content))

    def attempt(
        self,
        user: User | None = None,
        username: str | None = None,
        mode=None,
        language: Language = Language.ENGLISH,
        wpm: float = 50.0,
        accuracy: float = 95.0,
        created_at: datetime | None = None,
    ) -> Attempt:
        mode = mode or self.mode()
        attempt = Attempt(
            language=language,
            game_mode_id=mode.id,
            wpm=wpm,
            accuracy=accuracy,
            correct_chars=250,
            total_chars=260,
            time_elapsed=60,
            user_id=user.id if user else None,
            username=username if user is None else user.username,
            created_at=created_at or NOW,
        )
        return self.services["attempt_repo"].add(attempt)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield ManagedSessionFactory(engine)
    engine.dispose()


@pytest.fixture
def services(session_factory):
    seed_game_modes(session_factory)
    return build_services(session_factory)


@pytest.fixture
def world(services):
    return World(services)


# ---------------------------------------------------------------------------
# FastAPI TestClient over the same wiring
# ---------------------------------------------------------------------------

@pytest.fixture
def test_app(services):
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    app = FastAPI()
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    register_routes(app, services)
    return app


@pytest.fixture
def client(test_app):
    from fastapi.testclient import TestClient
    return TestClient(test_app)


@pytest.fixture
def registered_user(world):
    return world.user("typist")


@pytest.fixture
def auth_headers(registered_user):
    token = create_access_token(registered_user.id, registered_user.email)
    return {"Authorization": f"Bearer {token}"}
