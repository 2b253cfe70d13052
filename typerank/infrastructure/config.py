"""Runtime configuration from environment variables (``.env`` supported)."""
import logging
import os

from dotenv import load_dotenv

PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROJECT_DIR = os.path.dirname(PACKAGE_DIR)
DATA_DIR = os.path.join(PACKAGE_DIR, "data")

load_dotenv(os.path.join(PROJECT_DIR, ".env"))

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Snapshot of the environment taken at construction time."""

    def __init__(self):
        self.database_url = os.environ.get("DATABASE_URL", "").strip()
        self.log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self.seed_reference_data = _flag("SEED_REFERENCE_DATA", True)
        self.texts_path = os.environ.get("TEXTS_PATH", os.path.join(DATA_DIR, "texts.json"))
        allowed = os.environ.get("ALLOWED_ORIGINS", "").strip()
        # Wildcard when unset, for local development
        self.allowed_origins = (
            [o.strip() for o in allowed.split(",") if o.strip()] if allowed else ["*"]
        )


def configure_logging(level: str = "INFO") -> None:
    """Root handler for the service; component loggers hang off ``typerank``."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    logging.getLogger("typerank").setLevel(getattr(logging, level, logging.INFO))
