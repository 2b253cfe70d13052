"""Attempt entity -- one completed typing test. Immutable."""
from datetime import datetime, timezone
from uuid import uuid4

from typerank.domain.enums import Language
from typerank.domain.exceptions import InvalidInputError
from typerank.domain.game_mode import GameMode


class Attempt:
    """Record of a single typing test result.

    ``user_id`` is None for guest attempts, which must then carry a
    display ``username``.
    """

    MAX_WPM = 300
    MAX_ACCURACY = 100

    def __init__(
        self,
        language: Language,
        game_mode_id: str,
        wpm: float,
        accuracy: float,
        correct_chars: int,
        total_chars: int,
        time_elapsed: int,
        errors: int = 0,
        user_id: str | None = None,
        username: str | None = None,
        attempt_id: str | None = None,
        created_at: datetime | None = None,
        game_mode: GameMode | None = None,
    ):
        if user_id is None and not (username and username.strip()):
            raise InvalidInputError("Username is required for guest users.")
        if not 0 <= wpm <= self.MAX_WPM:
            raise InvalidInputError(f"WPM must be between 0 and {self.MAX_WPM}.")
        if not 0 <= accuracy <= self.MAX_ACCURACY:
            raise InvalidInputError(f"Accuracy must be between 0 and {self.MAX_ACCURACY}.")
        if errors < 0:
            raise InvalidInputError("Errors cannot be negative.")
        if correct_chars < 0:
            raise InvalidInputError("Correct characters cannot be negative.")
        if total_chars < 1:
            raise InvalidInputError("Total characters must be at least 1.")
        if time_elapsed < 1:
            raise InvalidInputError("Time elapsed must be at least 1 second.")

        self._id = attempt_id or str(uuid4())
        self._user_id = user_id
        self._username = username.strip() if username else None
        self._language = Language(language)
        self._game_mode_id = game_mode_id
        self._wpm = wpm
        self._accuracy = accuracy
        self._errors = errors
        self._correct_chars = correct_chars
        self._total_chars = total_chars
        self._time_elapsed = time_elapsed
        self._created_at = created_at or datetime.now(timezone.utc)
        self._game_mode = game_mode

    @property
    def id(self) -> str:
        return self._id

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def username(self) -> str | None:
        return self._username

    @property
    def is_guest(self) -> bool:
        return self._user_id is None

    @property
    def language(self) -> Language:
        return self._language

    @property
    def game_mode_id(self) -> str:
        return self._game_mode_id

    @property
    def game_mode(self) -> GameMode | None:
        return self._game_mode

    @property
    def wpm(self) -> float:
        return self._wpm

    @property
    def accuracy(self) -> float:
        return self._accuracy

    @property
    def errors(self) -> int:
        return self._errors

    @property
    def correct_chars(self) -> int:
        return self._correct_chars

    @property
    def total_chars(self) -> int:
        return self._total_chars

    @property
    def time_elapsed(self) -> int:
        return self._time_elapsed

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def metric(self, name: str) -> float:
        """Value of a ranking metric (``wpm`` or ``accuracy``)."""
        if name == "wpm":
            return self._wpm
        if name == "accuracy":
            return self._accuracy
        raise InvalidInputError(f"Unknown metric: {name}")

    def to_dict(self) -> dict:
        data = {
            "id": self._id,
            "userId": self._user_id,
            "username": self._username,
            "language": self._language.value,
            "gameModeId": self._game_mode_id,
            "wpm": self._wpm,
            "accuracy": self._accuracy,
            "errors": self._errors,
            "correctChars": self._correct_chars,
            "totalChars": self._total_chars,
            "timeElapsed": self._time_elapsed,
            "createdAt": self._created_at.isoformat(),
        }
        if self._game_mode is not None:
            data["gameMode"] = self._game_mode.to_dict()
        return data
