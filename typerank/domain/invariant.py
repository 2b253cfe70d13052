"""Validation guards applied before any record store access."""
from datetime import datetime, timezone
from uuid import UUID

from typerank.domain.enums import Language, LeaderboardType
from typerank.domain.exceptions import InvalidInputError

MAX_PAGE_SIZE = 100


def validate_identifier(value: str, label: str = "ID") -> str:
    """Raises if value is not a well-formed record identifier (UUID)."""
    try:
        return str(UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise InvalidInputError(f"Invalid {label} format: {value!r}.")


def validate_guest_identity(user_id: str | None, username: str | None) -> None:
    """Raises if the caller is neither authenticated nor named."""
    if user_id is None and not (username and username.strip()):
        raise InvalidInputError("Username is required for guest users.")


def validate_page(page: int) -> int:
    if page is None or page < 1:
        raise InvalidInputError("Page must be greater than or equal to 1.")
    return page


def clamp_limit(limit: int, default: int = 10) -> int:
    """Page size capped at MAX_PAGE_SIZE; non-positive falls back to default."""
    if limit is None or limit < 1:
        return default
    return min(limit, MAX_PAGE_SIZE)


def validate_leaderboard_dimension(
    board_type: LeaderboardType,
    game_mode_id: str | None,
    language: Language | None,
) -> None:
    """Raises if a dimension is requested without its identifying value."""
    if board_type is LeaderboardType.GAME_MODE and not game_mode_id:
        raise InvalidInputError("gameModeId is required when type is gameMode.")
    if board_type is LeaderboardType.LANGUAGE and language is None:
        raise InvalidInputError("language is required when type is language.")


def parse_iso_datetime(value: str | None, label: str) -> datetime | None:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        raise InvalidInputError(f"{label} must be a valid ISO 8601 date string.")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
