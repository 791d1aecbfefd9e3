"""Environment-driven settings for the bunq CLI."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from bunqcli.config.const import CREDENTIALS_FILENAME, DEFAULT_HOME_DIRNAME, DEFAULT_TIMEOUT
from bunqcli.services.auth.errors import ConfigurationError
from bunqcli.services.auth.store import CredentialStore, JsonFileCredentialStore, KeyringCredentialStore

__all__ = ["Settings", "STORE_BACKENDS"]

STORE_BACKENDS = ("file", "keyring")


def _float(value: str | None, default: float, name: str) -> float:
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


@dataclass(slots=True)
class Settings:
    home: Path
    store_backend: str = "file"
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"
    debug: bool = False
    log_json: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        home_override = env.get("BUNQ_CLI_HOME")
        home = Path(home_override).expanduser() if home_override else Path.home() / DEFAULT_HOME_DIRNAME
        backend = (env.get("BUNQ_CLI_STORE") or "file").strip().lower()
        if backend not in STORE_BACKENDS:
            raise ConfigurationError(f"BUNQ_CLI_STORE must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}")
        return cls(
            home=home,
            store_backend=backend,
            timeout=_float(env.get("BUNQ_CLI_TIMEOUT"), DEFAULT_TIMEOUT, "BUNQ_CLI_TIMEOUT"),
            log_level=(env.get("BUNQ_CLI_LOG_LEVEL") or "WARNING").upper(),
            debug=env.get("BUNQ_CLI_DEBUG") == "1",
            log_json=env.get("BUNQ_CLI_LOG_JSON") == "1",
        )

    @property
    def credentials_path(self) -> Path:
        return self.home / CREDENTIALS_FILENAME

    def open_store(self) -> CredentialStore:
        if self.store_backend == "keyring":
            return KeyringCredentialStore()
        return JsonFileCredentialStore(self.credentials_path)
