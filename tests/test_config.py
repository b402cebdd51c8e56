from __future__ import annotations

import pytest

from pylocalstate import LocalStateConfig, LocalStateConfigError

_ENV_VARS = (
    "PYLOCALSTATE_BACKEND",
    "PYLOCALSTATE_PATH",
    "PYLOCALSTATE_NAMESPACE",
    "PYLOCALSTATE_SORT_KEYS",
    "PYLOCALSTATE_ENSURE_ASCII",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = LocalStateConfig.from_env()
    assert config.backend == "file"
    assert config.resolved_path == ".pylocalstate.json"
    assert config.namespace is None


def test_sqlite_default_path() -> None:
    assert LocalStateConfig(backend="sqlite").resolved_path == ".pylocalstate.sqlite3"


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYLOCALSTATE_BACKEND", "sqlite")
    monkeypatch.setenv("PYLOCALSTATE_PATH", "/tmp/app.db")
    monkeypatch.setenv("PYLOCALSTATE_NAMESPACE", "app")
    monkeypatch.setenv("PYLOCALSTATE_SORT_KEYS", "yes")

    config = LocalStateConfig.from_env()

    assert config.backend == "sqlite"
    assert config.resolved_path == "/tmp/app.db"
    assert config.namespace == "app"
    assert config.sort_keys is True
    assert config.ensure_ascii is False


def test_overrides_win_and_none_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYLOCALSTATE_BACKEND", "sqlite")
    monkeypatch.setenv("PYLOCALSTATE_NAMESPACE", "env-ns")

    config = LocalStateConfig.from_env(backend="memory", namespace=None)

    assert config.backend == "memory"
    assert config.namespace == "env-ns"


def test_unknown_backend_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYLOCALSTATE_BACKEND", "redis")
    with pytest.raises(LocalStateConfigError):
        LocalStateConfig.from_env()


def test_blank_namespace_rejected() -> None:
    with pytest.raises(LocalStateConfigError):
        LocalStateConfig(namespace="  ")


def test_codec_follows_config() -> None:
    codec = LocalStateConfig(sort_keys=True, ensure_ascii=True).codec()
    assert codec.encode({"b": "é", "a": 1}) == '{"a":1,"b":"\\u00e9"}'
