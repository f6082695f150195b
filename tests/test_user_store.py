"""Tests for user record storage."""

import threading
import time
from datetime import date

import pytest

from study_streak.models.user import Level, UserRecord
from study_streak.storage import user_store

ORIGINAL_GET_USER_PATH = user_store.get_user_path


@pytest.fixture(autouse=True)
def patch_user_path(tmp_path, monkeypatch):
    def _get_user_path(email: str):
        return tmp_path / f"{user_store.user_key(email)}.json"

    monkeypatch.setattr(user_store, "get_user_path", _get_user_path)


def test_user_key_is_lowercased():
    assert user_store.user_key(" Jane@Fac.FR") == "user:jane@fac.fr"


def test_load_unknown_user():
    assert user_store.load_user("nobody@fac.fr") is None


def test_save_and_load():
    user = UserRecord(
        email="jane@fac.fr",
        password_hash="hash",
        level=Level.SECOND_YEAR,
        streak=3,
        last_login_date=date(2024, 3, 10),
    )
    user_store.save_user(user)

    loaded = user_store.load_user("Jane@Fac.fr")
    assert loaded is not None
    assert loaded.level == Level.SECOND_YEAR
    assert loaded.streak == 3
    assert loaded.last_login_date == date(2024, 3, 10)
    assert loaded.password_hash == "hash"


def test_save_refreshes_updated_at():
    user = UserRecord(email="jane@fac.fr")
    before = user.updated_at
    user_store.save_user(user)
    assert user_store.load_user("jane@fac.fr").updated_at >= before


def test_create_user_rejects_duplicate():
    user_store.create_user(UserRecord(email="jane@fac.fr"))
    with pytest.raises(user_store.UserExistsError):
        user_store.create_user(UserRecord(email="JANE@fac.fr"))


def test_user_lock_allows_read_modify_write():
    user_store.save_user(UserRecord(email="jane@fac.fr", streak=1))
    with user_store.user_lock("jane@fac.fr"):
        user = user_store.load_user("jane@fac.fr")
        user.streak += 1
        user_store.save_user(user)
    assert user_store.load_user("jane@fac.fr").streak == 2


def test_default_path_uses_users_dir(tmp_path, monkeypatch):
    class FakeSettings:
        users_dir = tmp_path / "users"

    monkeypatch.setattr(user_store, "get_settings", lambda: FakeSettings)
    path = ORIGINAL_GET_USER_PATH("Jane@Fac.fr")
    assert path.parent == tmp_path / "users"
    assert path.name == "user:jane@fac.fr.json"


def test_user_lock_blocks_second_holder():
    first_holds = threading.Event()
    release_first = threading.Event()
    events = []

    def first():
        with user_store.user_lock("jane@fac.fr"):
            events.append("first_enter")
            first_holds.set()
            release_first.wait(5)
            events.append("first_exit")

    def second():
        first_holds.wait(5)
        with user_store.user_lock("Jane@Fac.fr"):
            events.append("second_enter")

    threads = [threading.Thread(target=first), threading.Thread(target=second)]
    for t in threads:
        t.start()
    first_holds.wait(5)
    time.sleep(0.2)
    assert "second_enter" not in events

    release_first.set()
    for t in threads:
        t.join(5)
    assert events == ["first_enter", "first_exit", "second_enter"]


def test_user_lock_is_per_user():
    entered = threading.Event()

    def other_user():
        with user_store.user_lock("paul@fac.fr"):
            entered.set()

    with user_store.user_lock("jane@fac.fr"):
        t = threading.Thread(target=other_user)
        t.start()
        assert entered.wait(5)
    t.join(5)
