"""Database engine and session factory.

Engine selection:
  - DATABASE_URL set   -> PostgreSQL (psycopg driver) with a small pool.
  - DATABASE_URL empty -> SQLite file under ``typerank/data`` (development only).

Repositories never see an engine: they receive a ``ManagedSessionFactory``
and use it as ``with sf() as session: ...``. Store failures are rolled back,
logged with context and re-raised as ``InternalError``.
"""
import logging
import os
import re
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from typerank.domain.exceptions import InternalError

log = logging.getLogger("typerank.db")

# Matches a postgres(ql):// URL anywhere inside a string.
_PG_URL_RE = re.compile(r"(postgres(?:ql)?(?:\+\w+)?://\S+)")


def resolve_database_url(raw: str | None) -> str:
    """Return a clean SQLAlchemy URL from a pasted connection string.

    Handles surrounding whitespace and quotes, a full ``psql`` command pasted
    instead of the URL, and the ``postgres://`` scheme SQLAlchemy rejects.
    Plain ``postgresql://`` URLs are pinned to the psycopg (v3) driver.
    """
    raw = (raw or "").strip()

    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "'"):
        raw = raw[1:-1].strip()

    match = _PG_URL_RE.search(raw)
    url = match.group(1) if match else raw
    url = url.rstrip("'\"").strip()

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _masked(url: str) -> str:
    if "@" in url:
        return url.split("@")[-1].split("?")[0]
    return url.split("?")[0]


def build_engine(url: str) -> Engine:
    """Create an engine for ``url``; SQLite gets foreign keys switched on."""
    log.info("Initialising database engine -> %s", _masked(url))
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=15,
        pool_recycle=1800,
        pool_pre_ping=True,
        echo=False,
    )


def create_tables(engine: Engine) -> None:
    """Create all tables (idempotent)."""
    from typerank.infrastructure.database.models import Base

    Base.metadata.create_all(bind=engine)
    log.info("Tables verified.")


def check_health(engine: Engine | None) -> bool:
    """Lightweight connectivity probe."""
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


class ManagedSessionFactory:
    """Callable passed to repositories.

    Usage (identical to a bare sessionmaker):
        with sf() as session:
            ...
    """

    def __init__(self, engine: Engine, logger: logging.Logger | None = None):
        self._engine = engine
        self._sessionmaker = sessionmaker(bind=engine, expire_on_commit=False)
        self._log = logger or log

    @property
    def engine(self) -> Engine:
        return self._engine

    def __call__(self):
        return self._managed_session()

    @contextmanager
    def _managed_session(self):
        session = self._sessionmaker()
        try:
            yield session
        except SQLAlchemyError as exc:
            session.rollback()
            self._log.exception("Record store failure: %s", type(exc).__name__)
            raise InternalError() from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def init_session_factory(database_url: str, logger: logging.Logger | None = None) -> ManagedSessionFactory:
    """Build engine, ensure schema, and return the session factory."""
    engine = build_engine(database_url)
    create_tables(engine)
    return ManagedSessionFactory(engine, logger=logger)


def default_sqlite_url(data_dir: str) -> str:
    os.makedirs(data_dir, exist_ok=True)
    return "sqlite:///" + os.path.join(data_dir, "typerank.db")
