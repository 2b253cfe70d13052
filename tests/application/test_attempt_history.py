"""Tests for attempt history listing and single attempt lookup."""
from datetime import timedelta

import pytest

from typerank.application.attempt_history import HistoryQuery
from typerank.domain.enums import GameModeType, Language, SortField, SortOrder
from typerank.domain.exceptions import InvalidInputError, NotFoundError
from tests.conftest import NOW

MISSING_ID = "00000000-0000-4000-8000-000000000000"


@pytest.fixture
def history(services):
    return services["history"]


class TestListAttempts:
    def test_newest_first_by_default(self, world, history):
        alice = world.user("alice")
        for day in range(3):
            world.attempt(user=alice, wpm=40 + day, created_at=NOW - timedelta(days=day))
        result = history.list_attempts(alice.id, HistoryQuery())
        assert [a["wpm"] for a in result["attempts"]] == [40, 41, 42]
        assert result["pagination"] == {"page": 1, "limit": 20, "total": 3, "totalPages": 1}

    def test_only_own_attempts(self, world, history):
        alice = world.user("alice")
        world.attempt(user=world.user("bob"))
        world.attempt(user=alice)
        assert history.list_attempts(alice.id, HistoryQuery())["pagination"]["total"] == 1

    def test_sort_by_wpm_ascending(self, world, history):
        alice = world.user("alice")
        for wpm in (70, 30, 50):
            world.attempt(user=alice, wpm=wpm)
        q = HistoryQuery(sort_by=SortField.WPM, sort_order=SortOrder.ASC)
        assert [a["wpm"] for a in history.list_attempts(alice.id, q)["attempts"]] == [30, 50, 70]

    def test_filters(self, world, history):
        alice = world.user("alice")
        world.attempt(user=alice, language=Language.UZBEK, mode=world.mode(GameModeType.BY_WORD, 25))
        world.attempt(user=alice, language=Language.UZBEK)
        world.attempt(user=alice, language=Language.ENGLISH, mode=world.mode(GameModeType.BY_WORD, 25))
        q = HistoryQuery(language=Language.UZBEK, game_mode_type=GameModeType.BY_WORD, game_mode_value=25)
        assert history.list_attempts(alice.id, q)["pagination"]["total"] == 1

    def test_date_range(self, world, history):
        alice = world.user("alice")
        world.attempt(user=alice, created_at=NOW - timedelta(days=5))
        world.attempt(user=alice, created_at=NOW - timedelta(days=1))
        q = HistoryQuery(date_from=(NOW - timedelta(days=2)).isoformat(), date_to=NOW.isoformat())
        assert history.list_attempts(alice.id, q)["pagination"]["total"] == 1

    def test_inverted_date_range(self, world, history):
        q = HistoryQuery(date_from="2026-06-10T00:00:00Z", date_to="2026-06-01T00:00:00Z")
        with pytest.raises(InvalidInputError):
            history.list_attempts("u1", q)

    def test_personal_best_marker(self, world, history):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=40, accuracy=90, created_at=NOW - timedelta(days=1))
        world.attempt(user=alice, wpm=30, accuracy=85)
        flags = [a["isPersonalBest"] for a in history.list_attempts(alice.id, HistoryQuery())["attempts"]]
        assert flags == [False, True]

    def test_paging(self, world, history):
        alice = world.user("alice")
        for i in range(5):
            world.attempt(user=alice, created_at=NOW - timedelta(minutes=i))
        result = history.list_attempts(alice.id, HistoryQuery(page=3, limit=2))
        assert len(result["attempts"]) == 1
        assert result["pagination"]["totalPages"] == 3

    def test_bad_page(self, history):
        with pytest.raises(InvalidInputError):
            history.list_attempts("u1", HistoryQuery(page=0))


class TestGetAttempt:
    def test_registered_attempt_details(self, world, history):
        alice = world.user("alice")
        stored = world.attempt(user=alice, wpm=66)
        attempt = history.get_attempt(stored.id)["attempt"]
        assert attempt["id"] == stored.id
        assert attempt["isPersonalBest"] == {"wpm": True, "accuracy": True}
        assert attempt["leaderboardPosition"] == {"global": 1, "gameMode": 1, "language": 1}

    def test_guest_attempt_has_no_position(self, world, history):
        stored = world.attempt(username="guest")
        attempt = history.get_attempt(stored.id)["attempt"]
        assert attempt["leaderboardPosition"] is None
        assert attempt["isPersonalBest"] == {"wpm": False, "accuracy": False}

    def test_missing(self, history):
        with pytest.raises(NotFoundError):
            history.get_attempt(MISSING_ID)

    def test_malformed(self, history):
        with pytest.raises(InvalidInputError):
            history.get_attempt("42")
