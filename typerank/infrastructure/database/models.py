"""SQLAlchemy ORM models -- record store schema definition.

Column types are kept portable so the same schema runs on PostgreSQL in
production and SQLite in development and tests.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, Text, ForeignKey, Index,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.types import TypeDecorator


def _utcnow():
    return datetime.now(timezone.utc)


def _new_uuid():
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend.

    SQLite drops tzinfo on the way in, so values are normalised to UTC before
    binding and tagged as UTC again when loaded.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_uuid)
    email = Column(String(120), unique=True, nullable=False, index=True)
    # NULL username keeps the user off every leaderboard
    username = Column(String(30), unique=True, nullable=True, index=True)
    role = Column(String(10), nullable=False, default="USER")
    status = Column(String(10), nullable=False, default="ACTIVE")
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)

    attempts = relationship(
        "AttemptModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="select",
    )


# ---------------------------------------------------------------------------
# Game modes (seeded reference data)
# ---------------------------------------------------------------------------

class GameModeModel(Base):
    __tablename__ = "game_modes"
    __table_args__ = (UniqueConstraint("type", "value", name="uq_game_modes_type_value"),)

    id = Column(String(36), primary_key=True, default=_new_uuid)
    type = Column(String(10), nullable=False)
    value = Column(Integer, nullable=False)


# ---------------------------------------------------------------------------
# Texts (seeded reference data)
# ---------------------------------------------------------------------------

class TextModel(Base):
    __tablename__ = "texts"

    id = Column(String(36), primary_key=True, default=_new_uuid)
    language = Column(String(10), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)


# ---------------------------------------------------------------------------
# Attempts (immutable result record)
# ---------------------------------------------------------------------------

class AttemptModel(Base):
    __tablename__ = "attempts"
    __table_args__ = (
        Index("idx_attempts_user_mode_lang", "user_id", "game_mode_id", "language"),
        Index("idx_attempts_created_at", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=_new_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    # Guest display name; registered users are named through their profile
    username = Column(String(30), nullable=True)
    language = Column(String(10), nullable=False)
    game_mode_id = Column(String(36), ForeignKey("game_modes.id"), nullable=False, index=True)
    wpm = Column(Float, nullable=False, index=True)
    accuracy = Column(Float, nullable=False)
    errors = Column(Integer, nullable=False, default=0)
    correct_chars = Column(Integer, nullable=False)
    total_chars = Column(Integer, nullable=False)
    time_elapsed = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)

    user = relationship("UserModel", back_populates="attempts")
    game_mode = relationship("GameModeModel", lazy="joined")
