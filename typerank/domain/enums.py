"""Enums and value objects used across the domain."""
from datetime import datetime, timedelta, timezone
from enum import Enum


class Language(str, Enum):
    UZBEK = "UZBEK"
    RUSSIAN = "RUSSIAN"
    ENGLISH = "ENGLISH"


class GameModeType(str, Enum):
    BY_TIME = "BY_TIME"
    BY_WORD = "BY_WORD"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    BLOCKED = "BLOCKED"


class LeaderboardType(str, Enum):
    GLOBAL = "global"
    GAME_MODE = "gameMode"
    LANGUAGE = "language"


class RankingMetric(str, Enum):
    WPM = "wpm"
    ACCURACY = "accuracy"


class LeaderboardPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALL = "all"

    def lookback(self) -> timedelta | None:
        return {
            LeaderboardPeriod.DAILY: timedelta(days=1),
            LeaderboardPeriod.WEEKLY: timedelta(days=7),
            LeaderboardPeriod.MONTHLY: timedelta(days=30),
        }.get(self)

    def cutoff(self, now: datetime | None = None) -> datetime | None:
        """Earliest creation time that still counts, or None for ``all``."""
        delta = self.lookback()
        if delta is None:
            return None
        return (now or datetime.now(timezone.utc)) - delta


class StatsPeriod(str, Enum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"
    ALL = "all"

    def cutoff(self, now: datetime | None = None) -> datetime | None:
        if self is StatsPeriod.ALL:
            return None
        now = now or datetime.now(timezone.utc)
        if self is StatsPeriod.LAST_YEAR:
            try:
                return now.replace(year=now.year - 1)
            except ValueError:
                # Feb 29 has no counterpart in the previous year
                return now.replace(year=now.year - 1, day=28)
        days = {"7d": 7, "30d": 30, "90d": 90}[self.value]
        return now - timedelta(days=days)


class SortField(str, Enum):
    CREATED_AT = "createdAt"
    WPM = "wpm"
    ACCURACY = "accuracy"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
