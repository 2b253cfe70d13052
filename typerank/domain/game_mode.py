"""Game mode and practice text -- immutable reference data."""
from datetime import datetime, timezone
from uuid import uuid4

from typerank.domain.enums import GameModeType, Language


class GameMode:
    """A practice configuration: a duration in seconds or a word target."""

    def __init__(self, mode_type: GameModeType, value: int, mode_id: str | None = None):
        if value <= 0:
            raise ValueError("Game mode value must be positive")
        self._id = mode_id or str(uuid4())
        self._type = GameModeType(mode_type)
        self._value = value

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> GameModeType:
        return self._type

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_timed(self) -> bool:
        return self._type is GameModeType.BY_TIME

    @property
    def estimated_duration(self) -> int | None:
        return self._value if self.is_timed else None

    @property
    def target_words(self) -> int | None:
        return None if self.is_timed else self._value

    def to_dict(self) -> dict:
        return {"id": self._id, "type": self._type.value, "value": self._value}


class TypingText:
    """A passage the user types during a session."""

    def __init__(
        self,
        language: Language,
        content: str,
        text_id: str | None = None,
        created_at: datetime | None = None,
    ):
        if not content or not content.strip():
            raise ValueError("Text content cannot be empty")
        self._id = text_id or str(uuid4())
        self._language = Language(language)
        self._content = content
        self._created_at = created_at or datetime.now(timezone.utc)

    @property
    def id(self) -> str:
        return self._id

    @property
    def language(self) -> Language:
        return self._language

    @property
    def content(self) -> str:
        return self._content

    def to_dict(self) -> dict:
        return {"id": self._id, "content": self._content, "language": self._language.value}
