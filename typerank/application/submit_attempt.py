"""Use case: validate, persist and evaluate one submitted typing result."""
import logging
from dataclasses import dataclass

from typerank.application.leaderboard import LeaderboardRanker
from typerank.application.personal_best import PersonalBestTracker
from typerank.domain.attempt import Attempt
from typerank.domain.enums import Language
from typerank.domain.exceptions import NotFoundError
from typerank.domain.invariant import validate_guest_identity, validate_identifier


@dataclass(frozen=True)
class AttemptSubmission:
    language: Language
    game_mode_id: str
    wpm: float
    accuracy: float
    correct_chars: int
    total_chars: int
    time_elapsed: int
    errors: int = 0
    username: str | None = None


class AttemptIngestion:
    """Persists an attempt and reports personal bests and leaderboard position.

    Personal bests are only computed for authenticated callers; positions
    only when a display username exists.
    """

    def __init__(
        self,
        attempt_repo,
        game_mode_repo,
        user_repo,
        personal_bests: PersonalBestTracker,
        ranker: LeaderboardRanker,
        logger: logging.Logger | None = None,
    ):
        self._attempts = attempt_repo
        self._modes = game_mode_repo
        self._users = user_repo
        self._bests = personal_bests
        self._ranker = ranker
        self._log = logger or logging.getLogger("typerank.ingestion")

    def submit(self, submission: AttemptSubmission, user_id: str | None = None) -> dict:
        validate_guest_identity(user_id, submission.username)
        game_mode_id = validate_identifier(submission.game_mode_id, "game mode ID")

        game_mode = self._modes.get(game_mode_id)
        if game_mode is None:
            raise NotFoundError(
                f'Game mode with ID "{game_mode_id}" not found.', identifier=game_mode_id,
            )

        if user_id is not None:
            profile = self._users.get(user_id)
            if profile is None:
                raise NotFoundError(f'User with ID "{user_id}" not found.', identifier=user_id)
            display_username = profile.username
        else:
            display_username = submission.username.strip()

        attempt = Attempt(
            language=submission.language,
            game_mode_id=game_mode_id,
            wpm=submission.wpm,
            accuracy=submission.accuracy,
            errors=submission.errors or 0,
            correct_chars=submission.correct_chars,
            total_chars=submission.total_chars,
            time_elapsed=submission.time_elapsed,
            user_id=user_id,
            username=display_username,
            game_mode=game_mode,
        )
        self._attempts.add(attempt)
        self._log.info(
            "Attempt %s stored (user=%s, mode=%s, lang=%s, wpm=%s)",
            attempt.id, user_id or "guest", game_mode_id, attempt.language.value, attempt.wpm,
        )

        personal_best = self._bests.flags_for_new(attempt)

        position = None
        if display_username:
            position = self._ranker.positions(attempt.wpm, game_mode_id, attempt.language)

        body = attempt.to_dict()
        body["isPersonalBest"] = personal_best
        result = {"attempt": body}
        if position is not None:
            result["leaderboardPosition"] = position
        return result
