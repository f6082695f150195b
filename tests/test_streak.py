"""Tests for the daily login streak engine."""

from datetime import date, datetime, timedelta, timezone

import pytest

from study_streak.gamification.streak import (
    StreakBadge,
    StreakOutcome,
    streak_badge,
    streak_message,
    update_streak,
)
from study_streak.models.user import UserRecord


def make_user(**kwargs) -> UserRecord:
    return UserRecord(email="Student@Example.com", **kwargs)


class TestFirstLogin:
    def test_sets_streak_to_one(self):
        result = update_streak(make_user(), date(2024, 3, 10))
        assert result.outcome == StreakOutcome.FIRST_LOGIN
        assert result.record.streak == 1
        assert result.record.last_login_date == date(2024, 3, 10)

    def test_does_not_mutate_input(self):
        user = make_user()
        update_streak(user, date(2024, 3, 10))
        assert user.streak == 0
        assert user.last_login_date is None

    def test_strips_time_of_day(self):
        result = update_streak(make_user(), datetime(2024, 3, 10, 23, 59))
        assert result.record.last_login_date == date(2024, 3, 10)


class TestSameDay:
    def test_second_login_same_day_is_unchanged(self):
        today = date(2024, 3, 10)
        first = update_streak(make_user(), today)
        second = update_streak(first.record, today)
        assert second.outcome == StreakOutcome.SAME_DAY
        assert second.record is first.record
        assert second.record.streak == 1

    def test_later_time_same_day(self):
        user = make_user(streak=4, last_login_date=date(2024, 3, 10))
        result = update_streak(user, datetime(2024, 3, 10, 8, 30))
        assert result.outcome == StreakOutcome.SAME_DAY
        assert result.record.streak == 4


class TestConsecutiveDays:
    def test_concrete_increment(self):
        user = make_user(streak=5, last_login_date=date(2024, 3, 10))
        result = update_streak(user, date(2024, 3, 11))
        assert result.outcome == StreakOutcome.INCREMENTED
        assert result.record.streak == 6
        assert result.record.last_login_date == date(2024, 3, 11)

    @pytest.mark.parametrize("streak", [0, 1, 29, 365])
    def test_increment_by_exactly_one(self, streak):
        today = date(2024, 12, 31)
        user = make_user(streak=streak, last_login_date=today - timedelta(days=1))
        result = update_streak(user, today)
        assert result.record.streak == streak + 1

    def test_across_month_boundary(self):
        user = make_user(streak=2, last_login_date=date(2024, 2, 29))
        result = update_streak(user, date(2024, 3, 1))
        assert result.outcome == StreakOutcome.INCREMENTED
        assert result.record.streak == 3

    def test_stored_midnight_timestamp(self, local_tz):
        local_tz("UTC")
        user = make_user(streak=3, last_login_date="2024-03-10T00:00:00.000Z")
        result = update_streak(user, date(2024, 3, 11))
        assert result.outcome == StreakOutcome.INCREMENTED
        assert result.record.streak == 4


class TestReset:
    def test_concrete_gap_resets(self):
        user = make_user(streak=5, last_login_date=date(2024, 3, 10))
        result = update_streak(user, date(2024, 3, 15))
        assert result.outcome == StreakOutcome.RESET
        assert result.record.streak == 1
        assert result.record.last_login_date == date(2024, 3, 15)

    @pytest.mark.parametrize("gap", [2, 3, 30, 400])
    def test_gap_of_two_or_more_days(self, gap):
        today = date(2024, 6, 1)
        user = make_user(streak=12, last_login_date=today - timedelta(days=gap))
        result = update_streak(user, today)
        assert result.outcome == StreakOutcome.RESET
        assert result.record.streak == 1

    def test_last_login_in_future_resets(self):
        user = make_user(streak=8, last_login_date=date(2024, 3, 12))
        result = update_streak(user, date(2024, 3, 10))
        assert result.outcome == StreakOutcome.RESET
        assert result.record.streak == 1
        assert result.record.last_login_date == date(2024, 3, 10)


class TestBadgeAndMessage:
    @pytest.mark.parametrize(
        "streak,badge",
        [
            (0, StreakBadge.NONE),
            (6, StreakBadge.NONE),
            (7, StreakBadge.SILVER),
            (29, StreakBadge.SILVER),
            (30, StreakBadge.GOLD),
        ],
    )
    def test_badge_tiers(self, streak, badge):
        assert streak_badge(streak) == badge

    def test_increment_message_mentions_streak(self):
        assert "6" in streak_message(StreakOutcome.INCREMENTED, 6)

    def test_reset_message(self):
        assert "réinitialisé" in streak_message(StreakOutcome.RESET, 1)

    def test_no_message_for_same_day(self):
        assert streak_message(StreakOutcome.SAME_DAY, 3) is None


class TestLocalMidnight:
    def test_utc_timestamp_read_as_local_day(self, local_tz):
        # local midnight in Paris, stored as UTC
        local_tz("Europe/Paris")
        user = make_user(streak=3, last_login_date="2024-03-09T23:00:00.000Z")
        assert user.last_login_date == date(2024, 3, 10)

        result = update_streak(user, date(2024, 3, 10))
        assert result.outcome == StreakOutcome.SAME_DAY
        assert result.record.streak == 3

    def test_aware_today_uses_local_day(self, local_tz):
        local_tz("Europe/Paris")
        user = make_user(streak=3, last_login_date=date(2024, 3, 9))
        late_utc = datetime(2024, 3, 9, 23, 30, tzinfo=timezone.utc)
        result = update_streak(user, late_utc)
        assert result.outcome == StreakOutcome.INCREMENTED
        assert result.record.last_login_date == date(2024, 3, 10)

    def test_naive_datetime_keeps_its_day(self, local_tz):
        local_tz("America/New_York")
        user = make_user(last_login_date=datetime(2024, 3, 9, 23, 30))
        assert user.last_login_date == date(2024, 3, 9)
