"""Daily login streak tracking - pure functions, no storage access.

The caller must serialize calls per user (see ``storage.user_store.user_lock``):
two concurrent logins reading the same stale record would both increment.
"""

from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import NamedTuple

from study_streak.models.user import UserRecord, local_day

SILVER_STREAK = 7
GOLD_STREAK = 30


class StreakOutcome(StrEnum):
    FIRST_LOGIN = "first-login"
    SAME_DAY = "same-day"
    INCREMENTED = "incremented"
    RESET = "reset"


class StreakBadge(StrEnum):
    NONE = "none"
    SILVER = "silver"
    GOLD = "gold"


class StreakResult(NamedTuple):
    record: UserRecord
    outcome: StreakOutcome


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return local_day(value)
    return value


def update_streak(user: UserRecord, today: date | datetime) -> StreakResult:
    """Apply a login on ``today`` to the user's streak.

    Returns the updated record together with what happened. The input
    record is never mutated; on a same-day login it is returned as is.
    A stored login date later than ``today`` is handled like any other
    gap and resets the streak.
    """
    today = _as_day(today)

    if user.last_login_date is None:
        record = user.model_copy(update={"streak": 1, "last_login_date": today})
        return StreakResult(record, StreakOutcome.FIRST_LOGIN)

    last_login = _as_day(user.last_login_date)
    if last_login == today:
        return StreakResult(user, StreakOutcome.SAME_DAY)

    if last_login == today - timedelta(days=1):
        record = user.model_copy(
            update={"streak": user.streak + 1, "last_login_date": today}
        )
        return StreakResult(record, StreakOutcome.INCREMENTED)

    record = user.model_copy(update={"streak": 1, "last_login_date": today})
    return StreakResult(record, StreakOutcome.RESET)


def streak_badge(streak: int) -> StreakBadge:
    """Reward tier shown next to the streak counter."""
    if streak >= GOLD_STREAK:
        return StreakBadge.GOLD
    elif streak >= SILVER_STREAK:
        return StreakBadge.SILVER
    else:
        return StreakBadge.NONE


def streak_message(outcome: StreakOutcome, streak: int) -> str | None:
    """User-facing notification for a streak change, if any."""
    if outcome == StreakOutcome.INCREMENTED:
        return f"🔥 Streak de {streak} jours ! Continuez !"
    if outcome == StreakOutcome.RESET:
        return "Le streak a été réinitialisé. Vous reprenez aujourd'hui !"
    return None
