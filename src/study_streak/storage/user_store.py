"""User record persistence (JSON + fcntl.flock + atomic write).

One document per user, keyed like a key-value store (``user:<email>``).
"""

import fcntl
import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from study_streak.config import get_settings
from study_streak.models.user import UserRecord


class UserExistsError(Exception):
    """Raised when creating a user whose key is already taken."""


def user_key(email: str) -> str:
    return f"user:{email.strip().lower()}"


def get_user_path(email: str) -> Path:
    filename = quote(user_key(email), safe="@._+-:") + ".json"
    return get_settings().users_dir / filename


def load_user(email: str) -> UserRecord | None:
    path = get_user_path(email)
    if not path.exists():
        return None
    with open(path, encoding="utf-8") as f:
        fcntl.flock(f, fcntl.LOCK_SH)
        data = json.load(f)
        fcntl.flock(f, fcntl.LOCK_UN)
    return UserRecord(**data)


def save_user(user: UserRecord) -> None:
    path = get_user_path(user.email)
    user.updated_at = datetime.now()
    with tempfile.NamedTemporaryFile(
        "w", dir=path.parent, delete=False, suffix=".json", encoding="utf-8"
    ) as tmp:
        json.dump(user.model_dump(mode="json"), tmp, ensure_ascii=False)
    os.replace(tmp.name, path)


def create_user(user: UserRecord) -> None:
    with user_lock(user.email):
        if get_user_path(user.email).exists():
            raise UserExistsError(user.email)
        save_user(user)


@contextmanager
def user_lock(email: str) -> Iterator[None]:
    """Serialize read-modify-write cycles on one user's record."""
    lock_path = get_user_path(email).with_suffix(".lock")
    with open(lock_path, "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)
