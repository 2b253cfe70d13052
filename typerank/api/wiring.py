"""Builds repositories and use cases over one session factory and wires routes."""
import logging

from fastapi import FastAPI

from typerank.api.routes.attempt_routes import router as attempt_router, init_attempt_routes
from typerank.api.routes.game_mode_routes import router as game_mode_router, init_game_mode_routes
from typerank.application.attempt_history import AttemptHistory
from typerank.application.leaderboard import LeaderboardRanker
from typerank.application.personal_best import PersonalBestTracker
from typerank.application.start_session import SessionInitiator
from typerank.application.stats_service import StatsAggregator
from typerank.application.submit_attempt import AttemptIngestion
from typerank.infrastructure.repositories.sql_attempt_repository import SqlAttemptRepository
from typerank.infrastructure.repositories.sql_reference_repository import (
    SqlGameModeRepository, SqlTextRepository,
)
from typerank.infrastructure.repositories.sql_user_repository import SqlUserRepository


def build_services(session_factory) -> dict:
    attempt_repo = SqlAttemptRepository(session_factory)
    game_mode_repo = SqlGameModeRepository(session_factory)
    text_repo = SqlTextRepository(session_factory)
    user_repo = SqlUserRepository(session_factory)

    personal_bests = PersonalBestTracker(attempt_repo, logging.getLogger("typerank.personal_best"))
    ranker = LeaderboardRanker(attempt_repo, game_mode_repo, logging.getLogger("typerank.leaderboard"))

    return {
        "attempt_repo": attempt_repo,
        "game_mode_repo": game_mode_repo,
        "text_repo": text_repo,
        "user_repo": user_repo,
        "personal_bests": personal_bests,
        "ranker": ranker,
        "ingestion": AttemptIngestion(
            attempt_repo, game_mode_repo, user_repo, personal_bests, ranker,
            logging.getLogger("typerank.ingestion"),
        ),
        "history": AttemptHistory(
            attempt_repo, personal_bests, ranker, logging.getLogger("typerank.history"),
        ),
        "stats": StatsAggregator(attempt_repo, logging.getLogger("typerank.stats")),
        "sessions": SessionInitiator(game_mode_repo, text_repo, logging.getLogger("typerank.session")),
    }


def register_routes(app: FastAPI, services: dict) -> None:
    init_attempt_routes(
        services["ingestion"],
        services["history"],
        services["ranker"],
        services["stats"],
        services["sessions"],
    )
    init_game_mode_routes(services["game_mode_repo"])
    app.include_router(attempt_router)
    app.include_router(game_mode_router)
