"""Seed reference data (game modes and practice texts) into the record store."""
import json
import logging
import os

from typerank.domain.enums import GameModeType, Language
from typerank.infrastructure.database.models import GameModeModel, TextModel

log = logging.getLogger("typerank.seed")

TIME_MODE_SECONDS = (15, 30, 60, 120, 180, 300)
WORD_MODE_TARGETS = (10, 25, 30, 50, 100)


def seed_game_modes(session_factory) -> int:
    """Insert the standard game modes when the table is empty.

    Returns the number of rows seeded (0 if modes already exist).
    """
    with session_factory() as session:
        if session.query(GameModeModel).count() > 0:
            return 0
        count = 0
        for seconds in TIME_MODE_SECONDS:
            session.add(GameModeModel(type=GameModeType.BY_TIME.value, value=seconds))
            count += 1
        for words in WORD_MODE_TARGETS:
            session.add(GameModeModel(type=GameModeType.BY_WORD.value, value=words))
            count += 1
        session.commit()
    log.info("Seeded %d game modes.", count)
    return count


def seed_texts(session_factory, json_path: str) -> int:
    """Load practice texts from a JSON list of ``{language, content}`` objects.

    Only seeds an empty table. Entries with an unknown language are skipped.
    """
    if not os.path.exists(json_path):
        return 0

    with open(json_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    with session_factory() as session:
        if session.query(TextModel).count() > 0:
            return 0
        count = 0
        for item in raw:
            try:
                language = Language(item["language"])
            except (KeyError, ValueError):
                log.warning("Skipping text with invalid language: %r", item.get("language"))
                continue
            content = (item.get("content") or "").strip()
            if not content:
                continue
            session.add(TextModel(language=language.value, content=content))
            count += 1
        session.commit()
    log.info("Seeded %d practice texts.", count)
    return count
