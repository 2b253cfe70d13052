"""Typing volume rules -- how much time and how many words an attempt represents."""
from typerank.domain.enums import GameModeType

SECONDS_PER_MINUTE = 60


class TypingVolume:
    """Modeled time/word totals for attempts.

    A timed mode lasts exactly its duration, so words are derived from wpm.
    A word-target mode covers exactly its word count, so time is estimated
    from wpm (not measured).
    """

    @staticmethod
    def seconds_for(mode_type: GameModeType, mode_value: int, wpm: float) -> float:
        if mode_type is GameModeType.BY_TIME:
            return float(mode_value)
        if wpm <= 0:
            return 0.0
        return (mode_value / wpm) * SECONDS_PER_MINUTE

    @staticmethod
    def words_for(mode_type: GameModeType, mode_value: int, wpm: float) -> int:
        if mode_type is GameModeType.BY_TIME:
            return round(wpm * mode_value / SECONDS_PER_MINUTE)
        return mode_value

    @classmethod
    def totals(cls, rows) -> tuple[int, int]:
        """Sum (seconds, words) over ``(mode_type, mode_value, wpm)`` rows."""
        seconds = 0.0
        words = 0
        for mode_type, mode_value, wpm in rows:
            seconds += cls.seconds_for(GameModeType(mode_type), mode_value, wpm)
            words += cls.words_for(GameModeType(mode_type), mode_value, wpm)
        return round(seconds), round(words)
