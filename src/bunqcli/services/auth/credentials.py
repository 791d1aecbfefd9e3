"""Credential record, persisted field names and the environment selector."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Mapping

from bunqcli.config.const import PRODUCTION_BASE_URL, SANDBOX_BASE_URL

__all__ = [
    "Environment",
    "Field",
    "HandshakeState",
    "ROTATION_FIELDS",
    "Credentials",
]


class _StrEnum(str, Enum):
    """Simple ``str``-backed enum compatible with Python 3.10."""

    def __str__(self) -> str:  # CLI output and log lines print the bare value
        return str(self.value)


class Environment(_StrEnum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @property
    def base_url(self) -> str:
        return SANDBOX_BASE_URL if self is Environment.SANDBOX else PRODUCTION_BASE_URL

    @classmethod
    def parse(cls, value: Any) -> "Environment":
        if isinstance(value, Environment):
            return value
        if not value:
            return cls.PRODUCTION
        return cls(str(value).strip().lower())


class Field(_StrEnum):
    SECRET = "secret"
    ENVIRONMENT = "environment"
    PRIVATE_KEY = "private_key"
    PUBLIC_KEY = "public_key"
    SERVER_PUBLIC_KEY = "server_public_key"
    INSTALLATION_TOKEN = "installation_token"
    SESSION_TOKEN = "session_token"
    USER_ID = "user_id"


# fields invalidated whenever the API key changes
ROTATION_FIELDS: tuple[Field, ...] = (
    Field.SESSION_TOKEN,
    Field.INSTALLATION_TOKEN,
    Field.PRIVATE_KEY,
    Field.PUBLIC_KEY,
    Field.SERVER_PUBLIC_KEY,
    Field.USER_ID,
)


class HandshakeState(_StrEnum):
    UNCONFIGURED = "unconfigured"
    INSTALLED = "installed"
    DEVICE_REGISTERED = "device_registered"
    SESSION_ACTIVE = "session_active"


def _optional(data: Mapping[str, Any], name: Field) -> str | None:
    value = data.get(name.value)
    if value is None or value == "":
        return None
    return str(value)


@dataclass(slots=True)
class Credentials:
    """Snapshot of everything the client knows about its bunq identity."""

    secret: str | None = None
    environment: Environment = Environment.PRODUCTION
    private_key: str | None = None
    public_key: str | None = None
    server_public_key: str | None = None
    installation_token: str | None = None
    session_token: str | None = None
    user_id: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Credentials":
        return cls(
            secret=_optional(data, Field.SECRET),
            environment=Environment.parse(data.get(Field.ENVIRONMENT.value)),
            private_key=_optional(data, Field.PRIVATE_KEY),
            public_key=_optional(data, Field.PUBLIC_KEY),
            server_public_key=_optional(data, Field.SERVER_PUBLIC_KEY),
            installation_token=_optional(data, Field.INSTALLATION_TOKEN),
            session_token=_optional(data, Field.SESSION_TOKEN),
            user_id=_optional(data, Field.USER_ID),
        )

    def as_json(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["environment"] = self.environment.value
        return {key: value for key, value in payload.items() if value is not None}

    @property
    def has_key_pair(self) -> bool:
        return bool(self.private_key and self.public_key)

    @property
    def state(self) -> HandshakeState:
        # device registration persists nothing, so it cannot be derived here
        if self.session_token:
            return HandshakeState.SESSION_ACTIVE
        if self.installation_token:
            return HandshakeState.INSTALLED
        return HandshakeState.UNCONFIGURED
