"""Tests for the JSON file key-value store."""

import json

import pytest

from backoffice.adapters.json_file_store import JsonFileStore
from backoffice.domain.session import Session
from backoffice.services.auth import AuthContext, SessionStore


def test_set_get_remove(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = JsonFileStore(tmp_path / "state" / "session.json")

    assert store.get("token") is None

    store.set("token", {"token": "abc"})
    store.set("other", 1)

    assert store.get("token") == {"token": "abc"}
    assert json.loads(store.path.read_text()) == {"token": {"token": "abc"}, "other": 1}

    store.remove("token")
    store.remove("missing")

    assert store.get("token") is None
    assert store.get("other") == 1


def test_create_expands_user_directory(monkeypatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("HOME", str(tmp_path))

    store = JsonFileStore.create("~/.backoffice/session.json")

    assert store.path == tmp_path / ".backoffice" / "session.json"


def test_corrupt_file_raises_value_error(tmp_path) -> None:  # type: ignore[no-untyped-def]
    path = tmp_path / "session.json"
    path.write_text("{not json")

    with pytest.raises(ValueError):
        JsonFileStore(path).get("token")


def test_session_survives_restart(tmp_path) -> None:  # type: ignore[no-untyped-def]
    path = tmp_path / "session.json"
    first = AuthContext(SessionStore(JsonFileStore(path)))
    first.authenticate(Session(token="abc", email="admin@example.org"))

    second = AuthContext(SessionStore(JsonFileStore(path)))

    assert second.restore() is True
    assert second.token == "abc"

    second.sign_out()

    assert AuthContext(SessionStore(JsonFileStore(path))).restore() is False


def test_corrupt_file_does_not_block_startup(tmp_path) -> None:  # type: ignore[no-untyped-def]
    path = tmp_path / "session.json"
    path.write_text("{not json")

    assert AuthContext(SessionStore(JsonFileStore(path))).restore() is False


def test_corrupt_file_is_replaced_on_next_sign_in(tmp_path) -> None:  # type: ignore[no-untyped-def]
    path = tmp_path / "session.json"
    path.write_text("{not json")
    auth = AuthContext(SessionStore(JsonFileStore(path)))

    auth.authenticate(Session(token="abc", email="admin@example.org"))

    assert json.loads(path.read_text())["token"]["token"] == "abc"
    assert AuthContext(SessionStore(JsonFileStore(path))).restore() is True
