"""User entity -- profile data relevant to ranking."""
from datetime import datetime, timezone
from uuid import uuid4

from typerank.domain.enums import UserRole, UserStatus


class User:
    """Registered user. Only users with a public username appear on leaderboards."""

    def __init__(
        self,
        email: str,
        username: str | None = None,
        role: UserRole = UserRole.USER,
        status: UserStatus = UserStatus.ACTIVE,
        user_id: str | None = None,
        created_at: datetime | None = None,
    ):
        if not email or "@" not in email:
            raise ValueError("A valid email is required")
        self._id = user_id or str(uuid4())
        self._email = email.lower().strip()
        self._username = username.strip() if username and username.strip() else None
        self._role = UserRole(role)
        self._status = UserStatus(status)
        self._created_at = created_at or datetime.now(timezone.utc)

    @property
    def id(self) -> str:
        return self._id

    @property
    def email(self) -> str:
        return self._email

    @property
    def username(self) -> str | None:
        return self._username

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def status(self) -> UserStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def is_public(self) -> bool:
        return self._username is not None

    def to_public_dict(self) -> dict:
        return {
            "id": self._id,
            "email": self._email,
            "username": self._username,
        }
