"""Typed filter over the attempt population.

Every repository query takes one of these instead of an ad-hoc dict, so a
request's slice (owner, mode, language, window) is decided once and passed
around by value.
"""
from dataclasses import dataclass, replace
from datetime import datetime

from typerank.domain.enums import GameModeType, Language


@dataclass(frozen=True)
class AttemptCriteria:
    user_id: str | None = None
    game_mode_id: str | None = None
    language: Language | None = None
    game_mode_type: GameModeType | None = None
    game_mode_value: int | None = None
    since: datetime | None = None
    until: datetime | None = None
    # Only attempts whose owner has a non-empty public username
    public_only: bool = False
    exclude_attempt_id: str | None = None

    def with_user(self, user_id: str) -> "AttemptCriteria":
        return replace(self, user_id=user_id)

    def excluding(self, attempt_id: str) -> "AttemptCriteria":
        return replace(self, exclude_attempt_id=attempt_id)

    def without_language(self) -> "AttemptCriteria":
        return replace(self, language=None)

    def without_window(self) -> "AttemptCriteria":
        return replace(self, since=None, until=None)

    def with_window(self, since: datetime | None, until: datetime | None = None) -> "AttemptCriteria":
        return replace(self, since=since, until=until)

    @classmethod
    def personal_group(cls, user_id: str, game_mode_id: str, language: Language) -> "AttemptCriteria":
        """All attempts of one user for one (game mode, language) pair."""
        return cls(user_id=user_id, game_mode_id=game_mode_id, language=Language(language))
