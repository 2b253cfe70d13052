"""Tests for FastAPI auth dependencies -- get_current_user, get_optional_user."""
from datetime import datetime, timedelta, timezone

from fastapi import Depends, FastAPI
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from jose import jwt

from typerank.infrastructure.auth.dependencies import Caller, get_current_user, get_optional_user
from typerank.infrastructure.auth.jwt_handler import ALGORITHM, SECRET_KEY, create_access_token


def _make_app(dependency):
    app = FastAPI()

    @app.get("/test-dep")
    def endpoint(caller=Depends(dependency)):
        return {"userId": caller.user_id if caller else None}

    return TestClient(app)


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def _expired_token():
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    return jwt.encode({"sub": "u1", "type": "access", "exp": past}, SECRET_KEY, algorithm=ALGORITHM)


class TestGetCurrentUser:
    def test_missing_auth_returns_401(self):
        resp = _make_app(get_current_user).get("/test-dep")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Authentication required."

    def test_invalid_token_returns_401(self):
        resp = _make_app(get_current_user).get("/test-dep", headers=_bearer("invalid.token.here"))
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid or expired token."

    def test_non_access_token_returns_401(self):
        token = jwt.encode({"sub": "u1", "type": "refresh"}, SECRET_KEY, algorithm=ALGORITHM)
        resp = _make_app(get_current_user).get("/test-dep", headers=_bearer(token))
        assert resp.status_code == 401

    def test_valid_token_gives_caller_id(self):
        token = create_access_token("dep-user", "dep@example.test")
        resp = _make_app(get_current_user).get("/test-dep", headers=_bearer(token))
        assert resp.status_code == 200
        assert resp.json()["userId"] == "dep-user"


class TestGetOptionalUser:
    def test_no_auth_is_guest(self):
        resp = _make_app(get_optional_user).get("/test-dep")
        assert resp.status_code == 200
        assert resp.json()["userId"] is None

    def test_valid_token_gives_caller_id(self):
        token = create_access_token("dep-user", "dep@example.test")
        resp = _make_app(get_optional_user).get("/test-dep", headers=_bearer(token))
        assert resp.json()["userId"] == "dep-user"

    def test_broken_token_is_guest(self):
        resp = _make_app(get_optional_user).get("/test-dep", headers=_bearer("garbage"))
        assert resp.status_code == 200
        assert resp.json()["userId"] is None

    def test_expired_token_is_guest(self):
        resp = _make_app(get_optional_user).get("/test-dep", headers=_bearer(_expired_token()))
        assert resp.status_code == 200
        assert resp.json()["userId"] is None


class TestCaller:
    def test_built_from_token_claims(self):
        token = create_access_token("u-9", "nine@example.test")
        caller = get_current_user(credentials=HTTPAuthorizationCredentials(scheme="Bearer", credentials=token))
        assert caller == Caller(user_id="u-9", email="nine@example.test")
