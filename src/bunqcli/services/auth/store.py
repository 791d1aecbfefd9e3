"""Persistence backends for bunq credential fields."""
from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, Mapping

from bunqcli.config.const import KEYRING_SERVICE_NAME, KEYRING_USERNAME

from .credentials import ROTATION_FIELDS, Credentials, Environment, Field
from .errors import ConfigurationError

__all__ = [
    "CredentialStore",
    "MemoryCredentialStore",
    "JsonFileCredentialStore",
    "KeyringCredentialStore",
]

logger = logging.getLogger(__name__)


def _field_name(name: Field | str) -> str:
    return name.value if isinstance(name, Field) else str(name)


class CredentialStore(ABC):
    """Key/value persistence for credential fields.

    Concrete stores only implement :meth:`_read_all` and :meth:`_write_all`;
    every public operation runs under one lock so a :meth:`snapshot` never
    observes a half-applied update made through the same store object.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @abstractmethod
    def _read_all(self) -> dict[str, Any]: ...

    @abstractmethod
    def _write_all(self, data: Mapping[str, Any]) -> None: ...

    # ---------- field access -----------------------------------------------
    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._read_all())

    def read_field(self, name: Field | str) -> str | None:
        value = self.snapshot().get(_field_name(name))
        if value is None or value == "":
            return None
        return str(value)

    def write_field(self, name: Field | str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[_field_name(name)] = value
            self._write_all(data)

    def write_fields(self, values: Mapping[Field | str, str]) -> None:
        with self._lock:
            data = self._read_all()
            for name, value in values.items():
                data[_field_name(name)] = value
            self._write_all(data)

    def delete_field(self, name: Field | str) -> None:
        self.delete_fields([name])

    def delete_fields(self, names: Iterable[Field | str]) -> None:
        with self._lock:
            data = self._read_all()
            changed = False
            for name in names:
                key = _field_name(name)
                if key in data:
                    del data[key]
                    changed = True
            if changed:
                self._write_all(data)

    def clear_all(self) -> None:
        with self._lock:
            self._write_all({})

    # ---------- collaborator helpers ---------------------------------------
    def load(self) -> Credentials:
        try:
            return Credentials.from_mapping(self.snapshot())
        except ValueError as exc:
            raise ConfigurationError(f"invalid credential store contents: {exc}") from exc

    def get_secret(self) -> str | None:
        return self.read_field(Field.SECRET)

    def get_environment(self) -> Environment:
        raw = self.read_field(Field.ENVIRONMENT)
        try:
            return Environment.parse(raw)
        except ValueError as exc:
            raise ConfigurationError(f"unknown environment in credential store: {raw!r}") from exc

    def set_environment(self, environment: Environment | str) -> None:
        self.write_field(Field.ENVIRONMENT, Environment.parse(environment).value)

    def rotate_secret(self, secret: str) -> None:
        """Replace the API key and drop everything that was derived from the old one."""
        if not secret:
            raise ConfigurationError("API key must not be empty")
        with self._lock:
            data = self._read_all()
            for name in ROTATION_FIELDS:
                data.pop(name.value, None)
            data[Field.SECRET.value] = secret
            self._write_all(data)
        logger.info("API key rotated; keys and tokens cleared")


class MemoryCredentialStore(CredentialStore):
    """Process-local store, used by tests and one-shot scripts."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._data: dict[str, Any] = {_field_name(k): v for k, v in (initial or {}).items()}

    def _read_all(self) -> dict[str, Any]:
        return dict(self._data)

    def _write_all(self, data: Mapping[str, Any]) -> None:
        self._data = dict(data)


class JsonFileCredentialStore(CredentialStore):
    """Credentials persisted as a single JSON document readable only by the owner."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Failed to parse {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.path} does not contain a JSON object")
        return data

    def _write_all(self, data: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(dict(data), ensure_ascii=False, indent=2) + "\n"
        # one temp file per write; writers in other processes never share it
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            try:
                os.chmod(tmp_name, 0o600)
            except PermissionError:
                pass
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise


def _require_keyring():
    try:
        import keyring  # type: ignore
    except Exception as exc:  # pragma: no cover - import failure path
        raise ConfigurationError("system keyring is unavailable") from exc
    return keyring


class KeyringCredentialStore(CredentialStore):
    """Credentials kept as one JSON blob in the system keyring."""

    def __init__(self, service_name: str = KEYRING_SERVICE_NAME, username: str = KEYRING_USERNAME) -> None:
        super().__init__()
        self.service_name = service_name
        self.username = username

    def _read_all(self) -> dict[str, Any]:
        keyring = _require_keyring()
        try:
            raw = keyring.get_password(self.service_name, self.username)
        except Exception as exc:  # pragma: no cover - backend specific errors
            raise ConfigurationError("failed to load credentials from keyring") from exc
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError("keyring entry does not contain valid JSON") from exc
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Mapping[str, Any]) -> None:
        keyring = _require_keyring()
        if not data:
            try:
                keyring.delete_password(self.service_name, self.username)
            except keyring.errors.PasswordDeleteError:  # type: ignore[attr-defined]
                return
            except Exception as exc:  # pragma: no cover
                raise ConfigurationError("failed to delete credentials from keyring") from exc
            return
        try:
            keyring.set_password(self.service_name, self.username, json.dumps(dict(data), ensure_ascii=False))
        except Exception as exc:  # pragma: no cover - backend specific errors
            raise ConfigurationError("failed to write credentials to keyring") from exc
