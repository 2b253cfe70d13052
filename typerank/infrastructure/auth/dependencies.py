"""Bearer identity for the attempt routes.

Routes receive a ``Caller`` (or None for guests), never the raw JWT payload.
"""
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from typerank.infrastructure.auth.jwt_handler import verify_token

_security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    user_id: str
    email: str | None = None


def _caller_from(credentials: HTTPAuthorizationCredentials | None) -> Caller | None:
    """Caller for a valid access token, None for anything else."""
    if not credentials:
        return None
    payload = verify_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        return None
    return Caller(user_id=payload["sub"], email=payload.get("email"))


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
) -> Caller:
    """Required identity: 401 unless a valid access token is presented."""
    caller = _caller_from(credentials)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required." if not credentials else "Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
) -> Caller | None:
    """Optional identity. A missing, invalid or expired token means guest."""
    return _caller_from(credentials)
