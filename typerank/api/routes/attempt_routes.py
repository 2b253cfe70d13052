"""Attempt API routes -- submit, history, stats, leaderboard, session start."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from typerank.application.attempt_history import HistoryQuery
from typerank.application.leaderboard import LeaderboardQuery
from typerank.application.submit_attempt import AttemptSubmission
from typerank.domain.enums import (
    GameModeType, Language, LeaderboardPeriod, LeaderboardType, RankingMetric,
    SortField, SortOrder, StatsPeriod,
)
from typerank.domain.exceptions import InternalError, InvalidInputError, NotFoundError
from typerank.infrastructure.auth.dependencies import Caller, get_current_user, get_optional_user

router = APIRouter(prefix="/api/attempt", tags=["attempt"])


class CreateAttemptRequest(BaseModel):
    language: Language
    gameModeId: str = Field(..., min_length=1)
    wpm: float = Field(..., ge=0, le=300)
    accuracy: float = Field(..., ge=0, le=100)
    errors: Optional[int] = Field(default=0, ge=0)
    correctChars: int = Field(..., ge=0)
    totalChars: int = Field(..., ge=1)
    timeElapsed: int = Field(..., ge=1)
    username: Optional[str] = Field(default=None, min_length=3, max_length=30)


class StartSessionRequest(BaseModel):
    language: Language
    gameModeId: str = Field(..., min_length=1)
    textId: Optional[str] = None


_ingestion = None
_history = None
_ranker = None
_stats = None
_sessions = None


def init_attempt_routes(ingestion, history, ranker, stats, sessions):
    global _ingestion, _history, _ranker, _stats, _sessions
    _ingestion = ingestion
    _history = history
    _ranker = ranker
    _stats = stats
    _sessions = sessions


# ---------------------------------------------------------------------------
# Helper: domain error -> HTTP
# ---------------------------------------------------------------------------

def _to_http(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    return HTTPException(status_code=500, detail="Internal server error.")


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------

@router.post("", status_code=201)
def api_create_attempt(req: CreateAttemptRequest, caller: Optional[Caller] = Depends(get_optional_user)):
    """Submit a finished typing test. Guests must supply a username."""
    user_id = caller.user_id if caller else None
    submission = AttemptSubmission(
        language=req.language,
        game_mode_id=req.gameModeId,
        wpm=req.wpm,
        accuracy=req.accuracy,
        errors=req.errors or 0,
        correct_chars=req.correctChars,
        total_chars=req.totalChars,
        time_elapsed=req.timeElapsed,
        username=req.username,
    )
    try:
        return _ingestion.submit(submission, user_id=user_id)
    except (InvalidInputError, NotFoundError, InternalError) as e:
        raise _to_http(e)


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@router.get("")
def api_list_attempts(
    page: int = 1,
    limit: int = 20,
    language: Optional[Language] = None,
    gameModeType: Optional[GameModeType] = None,
    gameModeValue: Optional[int] = None,
    sortBy: SortField = SortField.CREATED_AT,
    sortOrder: SortOrder = SortOrder.DESC,
    dateFrom: Optional[str] = None,
    dateTo: Optional[str] = None,
    caller: Caller = Depends(get_current_user),
):
    """Paginated history of the authenticated user's attempts."""
    query = HistoryQuery(
        page=page,
        limit=limit,
        language=language,
        game_mode_type=gameModeType,
        game_mode_value=gameModeValue,
        sort_by=sortBy,
        sort_order=sortOrder,
        date_from=dateFrom,
        date_to=dateTo,
    )
    try:
        return _history.list_attempts(caller.user_id, query)
    except (InvalidInputError, NotFoundError, InternalError) as e:
        raise _to_http(e)


# ---------------------------------------------------------------------------
# Statistics and leaderboard
# ---------------------------------------------------------------------------

@router.get("/stats")
def api_get_stats(
    period: StatsPeriod = StatsPeriod.ALL,
    language: Optional[Language] = None,
    caller: Caller = Depends(get_current_user),
):
    """Aggregate statistics for the authenticated user."""
    try:
        return _stats.get_stats(caller.user_id, period=period, language=language)
    except (InvalidInputError, NotFoundError, InternalError) as e:
        raise _to_http(e)


@router.get("/leaderboard")
def api_get_leaderboard(
    board_type: LeaderboardType = Query(LeaderboardType.GLOBAL, alias="type"),
    gameModeId: Optional[str] = None,
    language: Optional[Language] = None,
    period: LeaderboardPeriod = LeaderboardPeriod.ALL,
    metric: RankingMetric = RankingMetric.WPM,
    page: int = 1,
    limit: int = 10,
):
    """Ranked users for a dimension and period. Public."""
    query = LeaderboardQuery(
        board_type=board_type,
        game_mode_id=gameModeId,
        language=language,
        period=period,
        metric=metric,
        page=page,
        limit=limit,
    )
    try:
        return _ranker.rank(query)
    except (InvalidInputError, NotFoundError, InternalError) as e:
        raise _to_http(e)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@router.post("/start-session")
def api_start_session(req: StartSessionRequest):
    """Pick a text for a new typing session. Works for guests too."""
    try:
        return _sessions.start(req.language, req.gameModeId, text_id=req.textId)
    except (InvalidInputError, NotFoundError, InternalError) as e:
        raise _to_http(e)


@router.get("/{attempt_id}")
def api_get_attempt(attempt_id: str):
    """Single attempt with personal-best flags and position. Public."""
    try:
        return _history.get_attempt(attempt_id)
    except (InvalidInputError, NotFoundError, InternalError) as e:
        raise _to_http(e)
