"""Tests for per-user statistics aggregation."""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from typerank.application.stats_service import PROGRESS_DAYS, StatsAggregator
from typerank.domain.enums import GameModeType, Language, StatsPeriod
from typerank.domain.exceptions import InternalError
from tests.conftest import NOW


@pytest.fixture
def stats(services):
    return services["stats"]


class TestTotals:
    def test_empty_history_is_all_zero(self, world, stats):
        alice = world.user("alice")
        s = stats.get_stats(alice.id, now=NOW)["stats"]
        assert s["totalAttempts"] == 0
        assert s["averageWpm"] == 0
        assert s["bestWpm"] == 0
        assert s["totalTimeTyped"] == 0
        assert s["personalBests"] == {"timeMode": {}, "wordMode": {}}
        assert s["byLanguage"] == {}
        assert s["progressChart"] == []

    def test_averages_rounded(self, world, stats):
        alice = world.user("alice")
        for wpm in (50, 60, 61):
            world.attempt(user=alice, wpm=wpm, accuracy=90)
        s = stats.get_stats(alice.id, now=NOW)["stats"]
        assert s["totalAttempts"] == 3
        assert s["averageWpm"] == 57
        assert s["bestWpm"] == 61
        assert s["averageAccuracy"] == 90

    def test_volume_totals(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=50, mode=world.mode(GameModeType.BY_TIME, 60))
        world.attempt(user=alice, wpm=50, mode=world.mode(GameModeType.BY_WORD, 50))
        s = stats.get_stats(alice.id, now=NOW)["stats"]
        assert s["totalTimeTyped"] == 120
        assert s["totalWordsTyped"] == 100

    def test_other_users_ignored(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=world.user("bob"), wpm=100)
        world.attempt(user=alice, wpm=40)
        assert stats.get_stats(alice.id, now=NOW)["stats"]["bestWpm"] == 40


class TestPeriodAndLanguage:
    def test_seven_day_window(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=90, created_at=NOW - timedelta(days=10))
        world.attempt(user=alice, wpm=40, created_at=NOW - timedelta(days=2))
        s = stats.get_stats(alice.id, period=StatsPeriod.LAST_7_DAYS, now=NOW)["stats"]
        assert s["totalAttempts"] == 1
        assert s["bestWpm"] == 40
        # personal bests ignore the window
        assert s["personalBests"]["timeMode"]["60"]["wpm"] == 90

    def test_language_filter(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=80, language=Language.ENGLISH)
        world.attempt(user=alice, wpm=30, language=Language.UZBEK)
        s = stats.get_stats(alice.id, language=Language.UZBEK, now=NOW)["stats"]
        assert s["totalAttempts"] == 1
        assert s["bestWpm"] == 30
        # the language split always covers every language
        assert set(s["byLanguage"]) == {"ENGLISH", "UZBEK"}

    def test_by_language_rows(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=80, accuracy=90, language=Language.RUSSIAN)
        world.attempt(user=alice, wpm=60, accuracy=100, language=Language.RUSSIAN)
        row = stats.get_stats(alice.id, now=NOW)["stats"]["byLanguage"]["RUSSIAN"]
        assert row == {"attempts": 2, "averageWpm": 70, "bestWpm": 80, "averageAccuracy": 95}


class TestPersonalBests:
    def test_keyed_by_mode_value(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=45, mode=world.mode(GameModeType.BY_TIME, 30))
        world.attempt(user=alice, wpm=55, mode=world.mode(GameModeType.BY_TIME, 30))
        world.attempt(user=alice, wpm=70, mode=world.mode(GameModeType.BY_WORD, 25), accuracy=97)
        bests = stats.personal_bests(alice.id)
        assert bests["timeMode"]["30"]["wpm"] == 55
        assert bests["wordMode"]["25"] == {"wpm": 70, "accuracy": 97, "date": NOW.isoformat()}

    def test_fastest_language_wins_without_filter(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=40, language=Language.UZBEK)
        world.attempt(user=alice, wpm=75, language=Language.ENGLISH)
        assert stats.personal_bests(alice.id)["timeMode"]["60"]["wpm"] == 75
        assert stats.personal_bests(alice.id, Language.UZBEK)["timeMode"]["60"]["wpm"] == 40

    def test_earliest_wins_a_tie(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=60, accuracy=91, created_at=NOW - timedelta(days=1))
        world.attempt(user=alice, wpm=60, accuracy=99)
        assert stats.personal_bests(alice.id)["timeMode"]["60"]["accuracy"] == 91


class TestProgressChart:
    def test_daily_buckets_sorted(self, world, stats):
        alice = world.user("alice")
        world.attempt(user=alice, wpm=40, accuracy=90, created_at=NOW - timedelta(days=1))
        world.attempt(user=alice, wpm=50, accuracy=96, created_at=NOW - timedelta(days=3))
        world.attempt(user=alice, wpm=70, accuracy=98, created_at=NOW - timedelta(days=3, hours=1))
        chart = stats.progress_chart(alice.id, now=NOW)
        assert [p["date"] for p in chart] == ["2026-06-12", "2026-06-14"]
        assert chart[0] == {
            "date": "2026-06-12", "averageWpm": 60, "averageAccuracy": 97, "attemptsCount": 2,
        }

    def test_window_and_cap(self, world, stats):
        alice = world.user("alice")
        for day in range(40):
            world.attempt(user=alice, created_at=NOW - timedelta(days=day))
        chart = stats.progress_chart(alice.id, now=NOW)
        assert len(chart) <= PROGRESS_DAYS
        assert chart[-1]["date"] == "2026-06-15"
        assert [p["date"] for p in chart] == sorted(p["date"] for p in chart)


class TestStoreFailure:
    def test_store_error_propagates(self):
        repo = MagicMock()
        repo.aggregate.side_effect = InternalError()
        with pytest.raises(InternalError):
            StatsAggregator(repo).get_stats("u1", now=NOW)
