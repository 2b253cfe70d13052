"""Entry point. Wires the record store into use cases and routes.

Persistence strategy:
  - If DATABASE_URL is set  -> PostgreSQL.
  - Otherwise               -> SQLite file under typerank/data (development only).
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from typerank.infrastructure.config import DATA_DIR, Settings, configure_logging

settings = Settings()
configure_logging(settings.log_level)
log = logging.getLogger("typerank.startup")

from typerank.api.wiring import build_services, register_routes
from typerank.infrastructure.database.connection import (
    check_health, default_sqlite_url, init_session_factory, resolve_database_url,
)
from typerank.infrastructure.database.seed import seed_game_modes, seed_texts

app = FastAPI(
    title="TypeRank",
    description="Typing test results, personal bests, leaderboards and statistics.",
    version="1.0.0",
)

app.add_middleware(GZipMiddleware, minimum_size=1024)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Persistence wiring
# ---------------------------------------------------------------------------

if settings.database_url:
    _database_url = resolve_database_url(settings.database_url)
    _persistence = "postgresql"
else:
    _database_url = default_sqlite_url(DATA_DIR)
    _persistence = "sqlite"
    log.warning("DATABASE_URL not set -- using local SQLite (development only).")

session_factory = init_session_factory(_database_url, logger=logging.getLogger("typerank.db"))

if settings.seed_reference_data:
    seed_game_modes(session_factory)
    seed_texts(session_factory, settings.texts_path)

services = build_services(session_factory)
register_routes(app, services)


@app.get("/health")
def health():
    return {
        "status": "online",
        "persistence": _persistence,
        "database": "connected" if check_health(session_factory.engine) else "disconnected",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("typerank.main:app", host="0.0.0.0", port=8000, reload=True)
