"""Leaderboard ranking across global, per-mode and per-language dimensions."""
import logging
import math
from dataclasses import dataclass
from datetime import datetime

from typerank.domain.criteria import AttemptCriteria
from typerank.domain.enums import (
    Language, LeaderboardPeriod, LeaderboardType, RankingMetric,
)
from typerank.domain.exceptions import NotFoundError
from typerank.domain.invariant import (
    clamp_limit, validate_identifier, validate_leaderboard_dimension, validate_page,
)


@dataclass(frozen=True)
class LeaderboardQuery:
    board_type: LeaderboardType = LeaderboardType.GLOBAL
    game_mode_id: str | None = None
    language: Language | None = None
    period: LeaderboardPeriod = LeaderboardPeriod.ALL
    metric: RankingMetric = RankingMetric.WPM
    page: int = 1
    limit: int = 10


class LeaderboardRanker:
    """Groups eligible attempts per user and ranks by the best metric value.

    Only attempts owned by users with a public username are eligible. Equal
    best values are ordered by who reached the value first.
    """

    def __init__(self, attempt_repo, game_mode_repo, logger: logging.Logger | None = None):
        self._attempts = attempt_repo
        self._modes = game_mode_repo
        self._log = logger or logging.getLogger("typerank.leaderboard")

    def criteria_for(self, query: LeaderboardQuery, now: datetime | None = None) -> AttemptCriteria:
        """Validate the dimension and build the eligible-attempt filter."""
        board_type = LeaderboardType(query.board_type)
        validate_leaderboard_dimension(board_type, query.game_mode_id, query.language)
        game_mode_id = None
        language = None
        if board_type is LeaderboardType.GAME_MODE:
            game_mode_id = validate_identifier(query.game_mode_id, "game mode ID")
        elif board_type is LeaderboardType.LANGUAGE:
            language = Language(query.language)
        return AttemptCriteria(
            game_mode_id=game_mode_id,
            language=language,
            since=LeaderboardPeriod(query.period).cutoff(now),
            public_only=True,
        )

    def rank(self, query: LeaderboardQuery, now: datetime | None = None) -> dict:
        page = validate_page(query.page)
        limit = clamp_limit(query.limit)
        metric = RankingMetric(query.metric)
        criteria = self.criteria_for(query, now)

        game_mode = None
        if criteria.game_mode_id is not None:
            game_mode = self._modes.get(criteria.game_mode_id)
            if game_mode is None:
                raise NotFoundError(
                    f'Game mode with ID "{criteria.game_mode_id}" not found.',
                    identifier=criteria.game_mode_id,
                )

        offset = (page - 1) * limit
        rows = self._attempts.rank_users(criteria, metric.value, skip=offset, limit=limit)
        total = self._attempts.count_ranked_users(criteria)

        leaderboard = [
            {
                "rank": offset + index + 1,
                "username": row["username"],
                "value": row["value"],
                "attempts": row["attempts"],
                "bestAttempt": {
                    "wpm": row["best_attempt"]["wpm"],
                    "accuracy": row["best_attempt"]["accuracy"],
                    "date": row["best_attempt"]["created_at"].isoformat(),
                },
            }
            for index, row in enumerate(rows)
        ]
        self._log.debug(
            "Leaderboard %s/%s/%s page %d: %d of %d users",
            query.board_type, query.period, metric.value, page, len(leaderboard), total,
        )

        return {
            "leaderboard": leaderboard,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
            "context": {
                "type": LeaderboardType(query.board_type).value,
                "gameMode": game_mode.to_dict() if game_mode else None,
                "language": criteria.language.value if criteria.language else None,
                "period": LeaderboardPeriod(query.period).value,
                "metric": metric.value,
            },
        }

    def positions(self, wpm: float, game_mode_id: str, language: Language) -> dict:
        """1-based position of ``wpm`` among public attempts in each dimension."""
        base = AttemptCriteria(public_only=True)
        return {
            "global": self._attempts.count_exceeding(base, "wpm", wpm) + 1,
            "gameMode": self._attempts.count_exceeding(
                AttemptCriteria(game_mode_id=game_mode_id, public_only=True), "wpm", wpm,
            ) + 1,
            "language": self._attempts.count_exceeding(
                AttemptCriteria(language=Language(language), public_only=True), "wpm", wpm,
            ) + 1,
        }
