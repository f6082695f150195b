"""One-lesson-per-day bookkeeping."""

from datetime import date

from study_streak.models.user import UserRecord


def completion_marker(today: date) -> str:
    """Completion marker as stored by clients (YYYY-MM-DD)."""
    return today.isoformat()


def lesson_done_today(user: UserRecord, today: date) -> bool:
    return user.last_lesson_completion_date == today


def mark_lesson_completed(user: UserRecord, today: date) -> UserRecord:
    return user.model_copy(update={"last_lesson_completion_date": today})
