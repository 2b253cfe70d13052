"""Use case: pick a practice text and open a stateless typing session."""
import logging
import secrets
import uuid
from datetime import datetime, timezone

from typerank.domain.enums import Language
from typerank.domain.exceptions import NotFoundError
from typerank.domain.invariant import validate_identifier

_rng = secrets.SystemRandom()


def new_session_id() -> str:
    """Opaque, unguessable correlation id. Never stored or checked later."""
    return f"session_{uuid.uuid4()}"


class SessionInitiator:
    def __init__(self, game_mode_repo, text_repo, logger: logging.Logger | None = None, rng=None):
        self._modes = game_mode_repo
        self._texts = text_repo
        self._log = logger or logging.getLogger("typerank.session")
        self._rng = rng or _rng

    def start(self, language: Language, game_mode_id: str, text_id: str | None = None) -> dict:
        language = Language(language)
        game_mode_id = validate_identifier(game_mode_id, "game mode ID")
        game_mode = self._modes.get(game_mode_id)
        if game_mode is None:
            raise NotFoundError(
                f'Game mode with ID "{game_mode_id}" not found.', identifier=game_mode_id,
            )

        if text_id:
            text_id = validate_identifier(text_id, "text ID")
            text = self._texts.get(text_id)
            if text is None or text.language is not language:
                raise NotFoundError(
                    f'Text with ID "{text_id}" not found for language "{language.value}".',
                    identifier=text_id,
                )
        else:
            candidates = self._texts.ids_for_language(language)
            if not candidates:
                raise NotFoundError(
                    f'No texts found for language "{language.value}".', identifier=language.value,
                )
            chosen = self._rng.choice(candidates)
            text = self._texts.get(chosen)
            if text is None:
                # Removed between the listing and the fetch
                raise NotFoundError(f'Text with ID "{chosen}" not found.', identifier=chosen)

        session_id = new_session_id()
        self._log.debug("Session %s: mode=%s text=%s", session_id, game_mode.id, text.id)
        return {
            "session": {
                "sessionId": session_id,
                "text": text.to_dict(),
                "gameMode": game_mode.to_dict(),
                "estimatedDuration": game_mode.estimated_duration,
                "targetWords": game_mode.target_words,
                "startedAt": datetime.now(timezone.utc).isoformat(),
            }
        }
