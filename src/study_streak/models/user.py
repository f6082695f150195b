"""User record model shared by the streak engine and the lesson composer."""

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

ALLOWED_DURATIONS = (10, 20, 30)


class Level(StrEnum):
    """Academic year the user studies for; selects the exercise bank."""

    FIRST_YEAR = "1ère année"
    SECOND_YEAR = "2ème année"
    THIRD_YEAR = "3ème année"


class Feeling(StrEnum):
    """Self-reported energy/confidence, ordered from very low to very high."""

    VERY_LOW = "--"
    LOW = "-"
    MID = "_"
    HIGH = "+"
    VERY_HIGH = "++"


def local_day(value: datetime) -> date:
    """Calendar day of a timestamp; aware values are read in local time."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def _to_date(value: Any) -> Any:
    # Stored logins may carry local midnight as UTC ("2024-03-09T23:00:00.000Z")
    if isinstance(value, datetime):
        return local_day(value)
    if isinstance(value, str) and "T" in value:
        return local_day(datetime.fromisoformat(value))
    return value


class UserRecord(BaseModel):
    email: str
    password_hash: str = ""
    level: Level = Level.FIRST_YEAR
    feeling: Feeling = Feeling.MID
    duration_preference: int = 20  # minutes
    streak: int = Field(default=0, ge=0)
    last_login_date: date | None = None
    last_lesson_completion_date: date | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("email")
    @classmethod
    def _lowercase_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("duration_preference")
    @classmethod
    def _check_duration(cls, value: int) -> int:
        if value not in ALLOWED_DURATIONS:
            raise ValueError(f"duration must be one of {ALLOWED_DURATIONS}")
        return value

    @field_validator("last_login_date", "last_lesson_completion_date", mode="before")
    @classmethod
    def _truncate_to_day(cls, value: Any) -> Any:
        return _to_date(value)

    def public(self) -> dict[str, Any]:
        """Serializable view without the password hash."""
        return self.model_dump(mode="json", exclude={"password_hash"})
