"""Account operations: signup, login with streak update, settings and lessons."""

import random
from datetime import date
from typing import NamedTuple

import bcrypt
import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from study_streak.config import get_settings
from study_streak.gamification.streak import (
    StreakOutcome,
    streak_message,
    update_streak,
)
from study_streak.lesson.bank import get_exercise_bank
from study_streak.lesson.composer import RandomSource, compose_lesson
from study_streak.lesson.progress import lesson_done_today, mark_lesson_completed
from study_streak.models.lesson import LessonStep
from study_streak.models.user import ALLOWED_DURATIONS, Feeling, Level, UserRecord
from study_streak.storage import user_store

logger = structlog.get_logger()


class AccountError(Exception):
    """Base class for account operation failures."""


class UserNotFoundError(AccountError):
    pass


class InvalidCredentialsError(AccountError):
    pass


class LessonAlreadyCompletedError(AccountError):
    pass


class LoginResult(NamedTuple):
    user: UserRecord
    outcome: StreakOutcome
    message: str | None


class ProgressUpdate(BaseModel):
    """Fields a client may change on its own record.

    Also accepts the key names older clients send (``duration``,
    ``lastLessonDate``). Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    level: Level | None = None
    feeling: Feeling | None = None
    duration_preference: int | None = Field(
        default=None,
        validation_alias=AliasChoices("duration_preference", "duration"),
    )
    last_lesson_completion_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("last_lesson_completion_date", "lastLessonDate"),
    )

    @field_validator("duration_preference")
    @classmethod
    def _check_duration(cls, value: int | None) -> int | None:
        if value is not None and value not in ALLOWED_DURATIONS:
            raise ValueError(f"duration must be one of {ALLOWED_DURATIONS}")
        return value

    @model_validator(mode="after")
    def _not_empty(self) -> "ProgressUpdate":
        if not self.model_dump(exclude_none=True):
            raise ValueError("at least one field to update is required")
        return self


# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode()


def _check_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(_password_bytes(password), password_hash.encode())


def _require_user(email: str) -> UserRecord:
    user = user_store.load_user(email)
    if user is None:
        raise UserNotFoundError(email)
    return user


def signup(email: str, password: str) -> UserRecord:
    """Create a user with default settings, streak 0 and no dates."""
    user = UserRecord(email=email, password_hash=_hash_password(password))
    user_store.create_user(user)
    logger.info("user_signed_up", email=user.email)
    return user


def login(email: str, password: str, today: date | None = None) -> LoginResult:
    """Check credentials and apply the login to the user's streak."""
    today = today or date.today()
    with user_store.user_lock(email):
        user = _require_user(email)
        if not _check_password(password, user.password_hash):
            logger.warning("login_rejected", email=user.email)
            raise InvalidCredentialsError(email)

        user, outcome = update_streak(user, today)
        if outcome != StreakOutcome.SAME_DAY:
            user_store.save_user(user)
            logger.info(
                "streak_updated",
                email=user.email,
                outcome=outcome.value,
                streak=user.streak,
            )
    return LoginResult(user, outcome, streak_message(outcome, user.streak))


def save_progress(email: str, changes: ProgressUpdate) -> UserRecord:
    """Merge settings/progress changes into the stored record."""
    with user_store.user_lock(email):
        user = _require_user(email)
        data = user.model_dump()
        data.update(changes.model_dump(exclude_none=True))
        user = UserRecord.model_validate(data)
        user_store.save_user(user)
    logger.info(
        "progress_saved",
        email=user.email,
        fields=sorted(changes.model_fields_set),
    )
    return user


def start_lesson(
    email: str,
    today: date | None = None,
    rng: RandomSource | None = None,
) -> list[LessonStep]:
    """Compose today's lesson from the user's settings."""
    today = today or date.today()
    user = _require_user(email)
    if lesson_done_today(user, today):
        raise LessonAlreadyCompletedError(email)

    steps = compose_lesson(
        user.level.value,
        user.feeling,
        user.duration_preference,
        get_exercise_bank(),
        rng or random.Random(),
    )
    logger.info(
        "lesson_started",
        email=user.email,
        level=user.level.value,
        steps=len(steps),
    )
    return steps


def complete_lesson(email: str, today: date | None = None) -> UserRecord:
    """Persist the lesson completion marker for ``today``."""
    today = today or date.today()
    with user_store.user_lock(email):
        user = mark_lesson_completed(_require_user(email), today)
        user_store.save_user(user)
    logger.info("lesson_completed", email=user.email, date=today.isoformat())
    return user
