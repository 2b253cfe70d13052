"""Per-user typing statistics -- aggregates, personal bests, language split, progress."""
import logging
from collections import OrderedDict
from datetime import datetime, timedelta, timezone

from typerank.domain.criteria import AttemptCriteria
from typerank.domain.enums import GameModeType, Language, SortField, StatsPeriod
from typerank.domain.scoring import TypingVolume

PROGRESS_DAYS = 30


def _round2(value: float | None) -> float:
    return round(value, 2) if value is not None else 0


class StatsAggregator:
    """Builds the statistics document for one user.

    Each section issues its own store query; a failing query raises and
    aborts the whole document.
    """

    def __init__(self, attempt_repo, logger: logging.Logger | None = None):
        self._attempts = attempt_repo
        self._log = logger or logging.getLogger("typerank.stats")

    def get_stats(
        self,
        user_id: str,
        period: StatsPeriod = StatsPeriod.ALL,
        language: Language | None = None,
        now: datetime | None = None,
    ) -> dict:
        now = now or datetime.now(timezone.utc)
        period = StatsPeriod(period)
        language = Language(language) if language else None
        windowed = AttemptCriteria(
            user_id=user_id, language=language, since=period.cutoff(now),
        )

        totals = self._attempts.aggregate(windowed)
        time_typed, words_typed = TypingVolume.totals(self._attempts.volume_rows(windowed))

        stats = {
            "totalAttempts": totals["count"],
            "averageWpm": _round2(totals["avg_wpm"]),
            "bestWpm": totals["max_wpm"] or 0,
            "averageAccuracy": _round2(totals["avg_accuracy"]),
            "bestAccuracy": totals["max_accuracy"] or 0,
            "totalTimeTyped": time_typed,
            "totalWordsTyped": words_typed,
            "personalBests": self.personal_bests(user_id, language),
            "byLanguage": self.by_language(windowed.without_language()),
            "progressChart": self.progress_chart(user_id, language, now),
        }
        self._log.debug("Stats for user %s (%s): %d attempts", user_id, period.value, stats["totalAttempts"])
        return {"stats": stats}

    def personal_bests(self, user_id: str, language: Language | None = None) -> dict:
        """Best-wpm attempt per game mode over the user's whole history.

        Groups are (mode type, mode value, language); the earliest attempt
        wins a tie. Without a language filter, a mode keeps its fastest
        language.
        """
        history = self._attempts.find(
            AttemptCriteria(user_id=user_id, language=language),
            sort_by=SortField.CREATED_AT,
            descending=False,
        )
        grouped = {}
        for attempt in history:
            mode = attempt.game_mode
            key = (mode.type, mode.value, attempt.language)
            if key not in grouped or attempt.wpm > grouped[key].wpm:
                grouped[key] = attempt

        result = {"timeMode": {}, "wordMode": {}}
        for (mode_type, mode_value, _lang), attempt in grouped.items():
            bucket = result["timeMode" if mode_type is GameModeType.BY_TIME else "wordMode"]
            key = str(mode_value)
            if key in bucket and bucket[key]["wpm"] >= attempt.wpm:
                continue
            bucket[key] = {
                "wpm": attempt.wpm,
                "accuracy": attempt.accuracy,
                "date": attempt.created_at.isoformat(),
            }
        return result

    def by_language(self, criteria: AttemptCriteria) -> dict:
        return {
            row["language"].value: {
                "attempts": row["count"],
                "averageWpm": _round2(row["avg_wpm"]),
                "bestWpm": row["max_wpm"] or 0,
                "averageAccuracy": _round2(row["avg_accuracy"]),
            }
            for row in self._attempts.aggregate_by_language(criteria)
        }

    def progress_chart(
        self, user_id: str, language: Language | None = None, now: datetime | None = None,
    ) -> list:
        """Daily averages for the last 30 UTC days, oldest first."""
        now = now or datetime.now(timezone.utc)
        attempts = self._attempts.find(
            AttemptCriteria(
                user_id=user_id,
                language=language,
                since=now - timedelta(days=PROGRESS_DAYS),
            ),
            sort_by=SortField.CREATED_AT,
            descending=False,
        )
        daily = OrderedDict()
        for attempt in attempts:
            day = attempt.created_at.astimezone(timezone.utc).date().isoformat()
            daily.setdefault(day, []).append(attempt)

        chart = [
            {
                "date": day,
                "averageWpm": round(sum(a.wpm for a in items) / len(items), 2),
                "averageAccuracy": round(sum(a.accuracy for a in items) / len(items), 2),
                "attemptsCount": len(items),
            }
            for day, items in sorted(daily.items())
        ]
        return chart[-PROGRESS_DAYS:]
