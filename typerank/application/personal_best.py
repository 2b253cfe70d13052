"""Personal best tracking -- is a value the best a user reached for a (mode, language)?"""
import logging

from typerank.domain.attempt import Attempt
from typerank.domain.criteria import AttemptCriteria
from typerank.domain.enums import Language, RankingMetric

_METRICS = (RankingMetric.WPM.value, RankingMetric.ACCURACY.value)


class PersonalBestTracker:
    """Pure query logic over one user's history.

    A value is a personal best when no prior attempt in the same
    (user, game mode, language) group reached it: equal prior values block
    a new best.
    """

    def __init__(self, attempt_repo, logger: logging.Logger | None = None):
        self._attempts = attempt_repo
        self._log = logger or logging.getLogger("typerank.personal_best")

    def is_new_best(
        self,
        user_id: str,
        game_mode_id: str,
        language: Language,
        metric: str,
        value: float,
        exclude_attempt_id: str | None = None,
    ) -> bool:
        """Candidate is best iff the group is empty or ``value`` beats its maximum."""
        criteria = AttemptCriteria.personal_group(user_id, game_mode_id, language)
        if exclude_attempt_id:
            criteria = criteria.excluding(exclude_attempt_id)
        previous = self._attempts.best_value(criteria, metric)
        return previous is None or value > previous

    def flags_for_new(self, attempt: Attempt) -> dict:
        """Flags for a just-inserted attempt, judged against everything else."""
        if attempt.user_id is None:
            return {m: False for m in _METRICS}
        flags = {
            m: self.is_new_best(
                attempt.user_id,
                attempt.game_mode_id,
                attempt.language,
                m,
                attempt.metric(m),
                exclude_attempt_id=attempt.id,
            )
            for m in _METRICS
        }
        self._log.debug("Personal best flags for attempt %s: %s", attempt.id, flags)
        return flags

    def holds_best(self, attempt: Attempt, metric: str) -> bool:
        """Whether a stored attempt currently holds the best for ``metric``.

        Nothing else in the group may be strictly greater, and nothing earlier
        may have reached the same value.
        """
        if attempt.user_id is None:
            return False
        criteria = AttemptCriteria.personal_group(
            attempt.user_id, attempt.game_mode_id, attempt.language,
        ).excluding(attempt.id)
        value = attempt.metric(metric)
        if self._attempts.count_exceeding(criteria, metric, value) > 0:
            return False
        return self._attempts.count_ties_before(criteria, metric, value, attempt.created_at) == 0

    def flags_for_stored(self, attempt: Attempt) -> dict:
        return {m: self.holds_best(attempt, m) for m in _METRICS}
