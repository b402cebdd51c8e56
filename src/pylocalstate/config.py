"""Library configuration for pylocalstate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pylocalstate._constants import BACKENDS, DEFAULT_BACKEND, DEFAULT_FILE_PATH, DEFAULT_SQLITE_PATH
from pylocalstate.codec import JsonCodec
from pylocalstate.exceptions import LocalStateConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class LocalStateConfig:
    """Store and codec configuration.

    Parameters
    ----------
    backend : str
        ``"memory"``, ``"file"`` (JSON file) or ``"sqlite"``.
    path : str or None
        Location of the file or database.  ``None`` picks the backend's
        default (``.pylocalstate.json`` / ``.pylocalstate.sqlite3``);
        ignored for ``"memory"``.
    namespace : str or None
        Prefix applied to every key, so several applications can share
        one store without colliding.
    sort_keys : bool
        Emit JSON object keys in sorted order.
    ensure_ascii : bool
        Escape non-ASCII characters in stored JSON.
    """

    backend: str = DEFAULT_BACKEND
    path: str | None = None
    namespace: str | None = None
    sort_keys: bool = False
    ensure_ascii: bool = False

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise LocalStateConfigError(
                f"Unknown backend {self.backend!r}; expected one of {', '.join(sorted(BACKENDS))}"
            )
        if self.namespace is not None and not self.namespace.strip():
            raise LocalStateConfigError("namespace must be non-empty when set")

    @property
    def resolved_path(self) -> str:
        """Storage location with the backend default applied."""
        if self.path:
            return self.path
        if self.backend == "sqlite":
            return DEFAULT_SQLITE_PATH
        return DEFAULT_FILE_PATH

    def codec(self) -> JsonCodec:
        return JsonCodec(sort_keys=self.sort_keys, ensure_ascii=self.ensure_ascii)

    @classmethod
    def from_env(cls, **overrides: Any) -> LocalStateConfig:
        """Create configuration from ``PYLOCALSTATE_*`` environment variables.

        Explicit keyword arguments override environment values; ``None``
        overrides are ignored so CLI flags can be passed straight through.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PYLOCALSTATE_BACKEND": "backend",
            "PYLOCALSTATE_PATH": "path",
            "PYLOCALSTATE_NAMESPACE": "namespace",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val.strip()

        config_kwargs["sort_keys"] = _env_bool(env.get("PYLOCALSTATE_SORT_KEYS"), False)
        config_kwargs["ensure_ascii"] = _env_bool(env.get("PYLOCALSTATE_ENSURE_ASCII"), False)

        config_kwargs.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**config_kwargs)
