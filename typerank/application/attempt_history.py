"""Use cases: browse a user's attempt history and look up a single attempt."""
import logging
import math
from dataclasses import dataclass

from typerank.application.leaderboard import LeaderboardRanker
from typerank.application.personal_best import PersonalBestTracker
from typerank.domain.criteria import AttemptCriteria
from typerank.domain.enums import GameModeType, Language, SortField, SortOrder
from typerank.domain.exceptions import InvalidInputError, NotFoundError
from typerank.domain.invariant import (
    clamp_limit, parse_iso_datetime, validate_identifier, validate_page,
)


@dataclass(frozen=True)
class HistoryQuery:
    page: int = 1
    limit: int = 20
    language: Language | None = None
    game_mode_type: GameModeType | None = None
    game_mode_value: int | None = None
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC
    date_from: str | None = None
    date_to: str | None = None


class AttemptHistory:
    def __init__(
        self,
        attempt_repo,
        personal_bests: PersonalBestTracker,
        ranker: LeaderboardRanker,
        logger: logging.Logger | None = None,
    ):
        self._attempts = attempt_repo
        self._bests = personal_bests
        self._ranker = ranker
        self._log = logger or logging.getLogger("typerank.history")

    def list_attempts(self, user_id: str, query: HistoryQuery) -> dict:
        page = validate_page(query.page)
        limit = clamp_limit(query.limit, default=20)
        since = parse_iso_datetime(query.date_from, "dateFrom")
        until = parse_iso_datetime(query.date_to, "dateTo")
        if since and until and since > until:
            raise InvalidInputError("dateFrom must not be later than dateTo.")

        criteria = AttemptCriteria(
            user_id=user_id,
            language=Language(query.language) if query.language else None,
            game_mode_type=GameModeType(query.game_mode_type) if query.game_mode_type else None,
            game_mode_value=query.game_mode_value,
            since=since,
            until=until,
        )
        skip = (page - 1) * limit
        attempts = self._attempts.find(
            criteria,
            sort_by=SortField(query.sort_by),
            descending=SortOrder(query.sort_order) is SortOrder.DESC,
            skip=skip,
            limit=limit,
        )
        total = self._attempts.count(criteria)

        items = []
        for attempt in attempts:
            flags = self._bests.flags_for_stored(attempt)
            item = attempt.to_dict()
            item["isPersonalBest"] = flags["wpm"] or flags["accuracy"]
            items.append(item)

        return {
            "attempts": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit) if total else 0,
            },
        }

    def get_attempt(self, attempt_id: str) -> dict:
        attempt_id = validate_identifier(attempt_id, "attempt ID")
        attempt = self._attempts.get(attempt_id)
        if attempt is None:
            raise NotFoundError(f'Attempt with ID "{attempt_id}" not found.', identifier=attempt_id)

        body = attempt.to_dict()
        body["isPersonalBest"] = self._bests.flags_for_stored(attempt)
        body["leaderboardPosition"] = None
        if attempt.user_id is not None and attempt.username:
            body["leaderboardPosition"] = self._ranker.positions(
                attempt.wpm, attempt.game_mode_id, attempt.language,
            )
        return {"attempt": body}
