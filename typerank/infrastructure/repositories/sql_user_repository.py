"""SQL-backed user repository."""
from typing import Optional

from typerank.domain.enums import UserRole, UserStatus
from typerank.domain.user import User
from typerank.infrastructure.database.models import UserModel


class SqlUserRepository:
    """User profile lookups."""

    def __init__(self, session_factory):
        self._sf = session_factory

    def get(self, user_id: str) -> Optional[User]:
        with self._sf() as session:
            row = session.get(UserModel, user_id)
            return self._to_domain(row) if row else None

    def add(self, user: User) -> User:
        with self._sf() as session:
            session.add(UserModel(
                id=user.id,
                email=user.email,
                username=user.username,
                role=user.role.value,
                status=user.status.value,
                created_at=user.created_at,
            ))
            session.commit()
            return user

    @staticmethod
    def _to_domain(row: UserModel) -> User:
        return User(
            email=row.email,
            username=row.username,
            role=UserRole(row.role),
            status=UserStatus(row.status),
            user_id=row.id,
            created_at=row.created_at,
        )
