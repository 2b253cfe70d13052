"""SQL-backed attempt repository -- the record store's query surface."""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func

from typerank.domain.attempt import Attempt
from typerank.domain.criteria import AttemptCriteria
from typerank.domain.enums import GameModeType, Language, SortField
from typerank.domain.exceptions import InvalidInputError
from typerank.domain.game_mode import GameMode
from typerank.infrastructure.database.models import (
    AttemptModel, GameModeModel, UserModel,
)

_METRIC_COLUMNS = {
    "wpm": AttemptModel.wpm,
    "accuracy": AttemptModel.accuracy,
}

_SORT_COLUMNS = {
    SortField.CREATED_AT: AttemptModel.created_at,
    SortField.WPM: AttemptModel.wpm,
    SortField.ACCURACY: AttemptModel.accuracy,
}


def _metric_column(metric: str):
    try:
        return _METRIC_COLUMNS[metric]
    except KeyError:
        raise InvalidInputError(f"Unknown metric: {metric}")


class SqlAttemptRepository:
    """Attempt persistence and aggregate queries via SQLAlchemy."""

    def __init__(self, session_factory):
        self._sf = session_factory

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def add(self, attempt: Attempt) -> Attempt:
        """Insert one attempt (the only mutation the engine performs)."""
        with self._sf() as session:
            row = AttemptModel(
                id=attempt.id,
                user_id=attempt.user_id,
                username=attempt.username if attempt.is_guest else None,
                language=attempt.language.value,
                game_mode_id=attempt.game_mode_id,
                wpm=attempt.wpm,
                accuracy=attempt.accuracy,
                errors=attempt.errors,
                correct_chars=attempt.correct_chars,
                total_chars=attempt.total_chars,
                time_elapsed=attempt.time_elapsed,
                created_at=attempt.created_at,
            )
            session.add(row)
            session.commit()
            return attempt

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, attempt_id: str) -> Optional[Attempt]:
        with self._sf() as session:
            row = session.get(AttemptModel, attempt_id)
            if not row:
                return None
            return self._to_domain(row)

    def find(
        self,
        criteria: AttemptCriteria,
        sort_by: SortField = SortField.CREATED_AT,
        descending: bool = True,
        skip: int = 0,
        limit: int | None = None,
    ) -> List[Attempt]:
        """Filtered scan with sort key and skip/limit."""
        column = _SORT_COLUMNS[SortField(sort_by)]
        order = column.desc() if descending else column.asc()
        with self._sf() as session:
            q = (
                self._filtered(session, criteria, AttemptModel)
                .order_by(order, AttemptModel.id.asc())
                .offset(skip)
            )
            if limit is not None:
                q = q.limit(limit)
            return [self._to_domain(r) for r in q.all()]

    def count(self, criteria: AttemptCriteria) -> int:
        with self._sf() as session:
            return self._filtered(session, criteria, func.count(AttemptModel.id)).scalar() or 0

    def count_exceeding(self, criteria: AttemptCriteria, metric: str, value: float) -> int:
        """Number of attempts whose ``metric`` is strictly greater than ``value``."""
        column = _metric_column(metric)
        with self._sf() as session:
            return (
                self._filtered(session, criteria, func.count(AttemptModel.id))
                .filter(column > value)
                .scalar()
            ) or 0

    def count_ties_before(
        self, criteria: AttemptCriteria, metric: str, value: float, before: datetime,
    ) -> int:
        """Attempts that reached exactly ``value`` earlier than ``before``."""
        column = _metric_column(metric)
        with self._sf() as session:
            return (
                self._filtered(session, criteria, func.count(AttemptModel.id))
                .filter(column == value, AttemptModel.created_at < before)
                .scalar()
            ) or 0

    def best_value(self, criteria: AttemptCriteria, metric: str) -> float | None:
        """Maximum of ``metric`` over the slice, or None when it is empty."""
        column = _metric_column(metric)
        with self._sf() as session:
            return self._filtered(session, criteria, func.max(column)).scalar()

    # ------------------------------------------------------------------
    # Group-by aggregates
    # ------------------------------------------------------------------

    def rank_users(
        self, criteria: AttemptCriteria, metric: str, skip: int, limit: int,
    ) -> List[dict]:
        """One row per owner: best ``metric``, attempt count and best-attempt snapshot.

        Ordered by best value descending, then by the earliest time that
        value was reached, then by user id.
        """
        column = _metric_column(metric)
        with self._sf() as session:
            groups = (
                self._filtered(
                    session,
                    criteria,
                    AttemptModel.user_id.label("user_id"),
                    func.max(column).label("best"),
                    func.count(AttemptModel.id).label("attempts"),
                )
                .filter(AttemptModel.user_id.isnot(None))
                .group_by(AttemptModel.user_id)
                .subquery()
            )
            achieved = (
                self._filtered(
                    session,
                    criteria,
                    AttemptModel.user_id.label("user_id"),
                    func.min(AttemptModel.created_at).label("achieved_at"),
                )
                .join(groups, and_(groups.c.user_id == AttemptModel.user_id, column == groups.c.best))
                .group_by(AttemptModel.user_id)
                .subquery()
            )
            rows = (
                session.query(
                    groups.c.user_id,
                    groups.c.best,
                    groups.c.attempts,
                    UserModel.username,
                )
                .select_from(groups)
                .join(achieved, achieved.c.user_id == groups.c.user_id)
                .join(UserModel, UserModel.id == groups.c.user_id)
                .order_by(
                    groups.c.best.desc(),
                    achieved.c.achieved_at.asc(),
                    groups.c.user_id.asc(),
                )
                .offset(skip)
                .limit(limit)
                .all()
            )

            entries = []
            for user_id, best, attempts, username in rows:
                snapshot = (
                    self._filtered(session, criteria.with_user(user_id), AttemptModel)
                    .filter(column == best)
                    .order_by(AttemptModel.created_at.asc(), AttemptModel.id.asc())
                    .first()
                )
                entries.append({
                    "user_id": user_id,
                    "username": username,
                    "value": best,
                    "attempts": attempts,
                    "best_attempt": {
                        "wpm": snapshot.wpm,
                        "accuracy": snapshot.accuracy,
                        "created_at": snapshot.created_at,
                    },
                })
            return entries

    def count_ranked_users(self, criteria: AttemptCriteria) -> int:
        """Distinct owners in the slice (guests never count)."""
        with self._sf() as session:
            return (
                self._filtered(session, criteria, func.count(func.distinct(AttemptModel.user_id)))
                .filter(AttemptModel.user_id.isnot(None))
                .scalar()
            ) or 0

    def aggregate(self, criteria: AttemptCriteria) -> dict:
        """count/avg/max of wpm and accuracy over the slice."""
        with self._sf() as session:
            count, avg_wpm, max_wpm, avg_acc, max_acc = self._filtered(
                session,
                criteria,
                func.count(AttemptModel.id),
                func.avg(AttemptModel.wpm),
                func.max(AttemptModel.wpm),
                func.avg(AttemptModel.accuracy),
                func.max(AttemptModel.accuracy),
            ).one()
            return {
                "count": count or 0,
                "avg_wpm": float(avg_wpm) if avg_wpm is not None else None,
                "max_wpm": max_wpm,
                "avg_accuracy": float(avg_acc) if avg_acc is not None else None,
                "max_accuracy": max_acc,
            }

    def aggregate_by_language(self, criteria: AttemptCriteria) -> List[dict]:
        with self._sf() as session:
            rows = (
                self._filtered(
                    session,
                    criteria,
                    AttemptModel.language,
                    func.count(AttemptModel.id),
                    func.avg(AttemptModel.wpm),
                    func.max(AttemptModel.wpm),
                    func.avg(AttemptModel.accuracy),
                )
                .group_by(AttemptModel.language)
                .order_by(AttemptModel.language.asc())
                .all()
            )
            return [
                {
                    "language": Language(language),
                    "count": count,
                    "avg_wpm": float(avg_wpm) if avg_wpm is not None else None,
                    "max_wpm": max_wpm,
                    "avg_accuracy": float(avg_acc) if avg_acc is not None else None,
                }
                for language, count, avg_wpm, max_wpm, avg_acc in rows
            ]

    def volume_rows(self, criteria: AttemptCriteria) -> List[tuple]:
        """``(mode_type, mode_value, wpm)`` per attempt in the slice."""
        with self._sf() as session:
            rows = self._filtered(
                session,
                criteria,
                GameModeModel.type,
                GameModeModel.value,
                AttemptModel.wpm,
                join_modes=True,
            ).all()
            return [(GameModeType(t), v, w) for t, v, w in rows]

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    @staticmethod
    def _filtered(session, criteria: AttemptCriteria, *entities, join_modes: bool = False):
        q = session.query(*entities).select_from(AttemptModel)

        if criteria.public_only:
            q = q.join(UserModel, UserModel.id == AttemptModel.user_id).filter(
                UserModel.username.isnot(None),
                UserModel.username != "",
            )

        if join_modes or criteria.game_mode_type is not None or criteria.game_mode_value is not None:
            q = q.join(GameModeModel, GameModeModel.id == AttemptModel.game_mode_id)
            if criteria.game_mode_type is not None:
                q = q.filter(GameModeModel.type == GameModeType(criteria.game_mode_type).value)
            if criteria.game_mode_value is not None:
                q = q.filter(GameModeModel.value == criteria.game_mode_value)

        if criteria.user_id is not None:
            q = q.filter(AttemptModel.user_id == criteria.user_id)
        if criteria.game_mode_id is not None:
            q = q.filter(AttemptModel.game_mode_id == criteria.game_mode_id)
        if criteria.language is not None:
            q = q.filter(AttemptModel.language == Language(criteria.language).value)
        if criteria.since is not None:
            q = q.filter(AttemptModel.created_at >= criteria.since)
        if criteria.until is not None:
            q = q.filter(AttemptModel.created_at <= criteria.until)
        if criteria.exclude_attempt_id is not None:
            q = q.filter(AttemptModel.id != criteria.exclude_attempt_id)
        return q

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_domain(row: AttemptModel) -> Attempt:
        username = row.username
        if row.user_id is not None and row.user is not None:
            username = row.user.username
        mode = row.game_mode
        return Attempt(
            attempt_id=row.id,
            user_id=row.user_id,
            username=username,
            language=Language(row.language),
            game_mode_id=row.game_mode_id,
            wpm=row.wpm,
            accuracy=row.accuracy,
            errors=row.errors,
            correct_chars=row.correct_chars,
            total_chars=row.total_chars,
            time_elapsed=row.time_elapsed,
            created_at=row.created_at,
            game_mode=GameMode(GameModeType(mode.type), mode.value, mode_id=mode.id) if mode else None,
        )
