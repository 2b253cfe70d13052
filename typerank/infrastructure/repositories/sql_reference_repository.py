"""SQL-backed repositories for game modes and practice texts."""
from typing import List, Optional

from sqlalchemy import case

from typerank.domain.enums import GameModeType, Language
from typerank.domain.game_mode import GameMode, TypingText
from typerank.infrastructure.database.models import GameModeModel, TextModel


class SqlGameModeRepository:
    """Game mode lookups. Reference data, never written by the engine."""

    def __init__(self, session_factory):
        self._sf = session_factory

    def get(self, mode_id: str) -> Optional[GameMode]:
        with self._sf() as session:
            row = session.get(GameModeModel, mode_id)
            return self._to_domain(row) if row else None

    def list_all(self) -> List[GameMode]:
        """All game modes, time modes first, each ascending by value."""
        type_order = case((GameModeModel.type == GameModeType.BY_TIME.value, 0), else_=1)
        with self._sf() as session:
            rows = (
                session.query(GameModeModel)
                .order_by(type_order, GameModeModel.value.asc())
                .all()
            )
            return [self._to_domain(r) for r in rows]

    def add(self, mode: GameMode) -> GameMode:
        with self._sf() as session:
            session.add(GameModeModel(id=mode.id, type=mode.type.value, value=mode.value))
            session.commit()
            return mode

    @staticmethod
    def _to_domain(row: GameModeModel) -> GameMode:
        return GameMode(GameModeType(row.type), row.value, mode_id=row.id)


class SqlTextRepository:
    """Practice text lookups."""

    def __init__(self, session_factory):
        self._sf = session_factory

    def get(self, text_id: str) -> Optional[TypingText]:
        with self._sf() as session:
            row = session.get(TextModel, text_id)
            return self._to_domain(row) if row else None

    def ids_for_language(self, language: Language) -> List[str]:
        with self._sf() as session:
            rows = (
                session.query(TextModel.id)
                .filter(TextModel.language == Language(language).value)
                .order_by(TextModel.id.asc())
                .all()
            )
            return [r[0] for r in rows]

    def add(self, text: TypingText) -> TypingText:
        with self._sf() as session:
            session.add(TextModel(id=text.id, language=text.language.value, content=text.content))
            session.commit()
            return text

    @staticmethod
    def _to_domain(row: TextModel) -> TypingText:
        return TypingText(
            Language(row.language), row.content, text_id=row.id, created_at=row.created_at,
        )
