"""Game mode catalogue routes."""
from fastapi import APIRouter, HTTPException

from typerank.domain.exceptions import InternalError

router = APIRouter(prefix="/api/game-modes", tags=["game-modes"])

_game_mode_repo = None


def init_game_mode_routes(game_mode_repo):
    global _game_mode_repo
    _game_mode_repo = game_mode_repo


@router.get("")
def api_list_game_modes():
    """All game modes, time-based first. Public."""
    try:
        return {"gameModes": [m.to_dict() for m in _game_mode_repo.list_all()]}
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
