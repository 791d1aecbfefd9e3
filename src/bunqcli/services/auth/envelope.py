"""Decoding of the bunq ``{"Response": [...]}`` envelope.

Each element of ``Response`` is an object with exactly one key naming the
payload kind.  Known kinds are decoded into dedicated entry types; anything
else (accounts, payments, cards...) is kept as an :class:`ObjectEntry` so
domain callers can pick it up via :meth:`ResponseEnvelope.objects`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, TypeVar, Union

from .errors import ProtocolError

__all__ = [
    "PrincipalKind",
    "TokenEntry",
    "ServerPublicKeyEntry",
    "IdEntry",
    "PrincipalEntry",
    "ObjectEntry",
    "Entry",
    "ResponseEnvelope",
    "decode_envelope",
]


class PrincipalKind(str, Enum):
    USER_PERSON = "UserPerson"
    USER_COMPANY = "UserCompany"
    USER_API_KEY = "UserApiKey"


@dataclass(frozen=True, slots=True)
class TokenEntry:
    token: str
    id: int | None = None


@dataclass(frozen=True, slots=True)
class ServerPublicKeyEntry:
    server_public_key: str


@dataclass(frozen=True, slots=True)
class IdEntry:
    id: int


@dataclass(frozen=True, slots=True)
class PrincipalEntry:
    kind: PrincipalKind
    id: str | None
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ObjectEntry:
    kind: str
    payload: Any


Entry = Union[TokenEntry, ServerPublicKeyEntry, IdEntry, PrincipalEntry, ObjectEntry]
_E = TypeVar("_E", TokenEntry, ServerPublicKeyEntry, IdEntry, PrincipalEntry, ObjectEntry)


def _require_mapping(kind: str, body: Any) -> Mapping[str, Any]:
    if not isinstance(body, Mapping):
        raise ProtocolError(f"{kind} entry must be an object")
    return body


def _decode_token(kind: str, body: Any) -> TokenEntry:
    data = _require_mapping(kind, body)
    token = data.get("token")
    if not isinstance(token, str) or not token:
        raise ProtocolError("Token entry is missing 'token'")
    raw_id = data.get("id")
    return TokenEntry(token=token, id=raw_id if isinstance(raw_id, int) else None)


def _decode_server_public_key(kind: str, body: Any) -> ServerPublicKeyEntry:
    data = _require_mapping(kind, body)
    value = data.get("server_public_key")
    if not isinstance(value, str) or not value:
        raise ProtocolError("ServerPublicKey entry is missing 'server_public_key'")
    return ServerPublicKeyEntry(server_public_key=value)


def _decode_id(kind: str, body: Any) -> IdEntry:
    data = _require_mapping(kind, body)
    value = data.get("id")
    if not isinstance(value, int) or isinstance(value, bool):
        raise ProtocolError("Id entry is missing a numeric 'id'")
    return IdEntry(id=value)


def _decode_principal(kind: str, body: Any) -> PrincipalEntry:
    data = _require_mapping(kind, body)
    value = data.get("id")
    # some principal shapes (e.g. UserApiKey) may come without an id
    principal_id = None if value is None or value == "" or isinstance(value, bool) else str(value)
    return PrincipalEntry(kind=PrincipalKind(kind), id=principal_id, payload=dict(data))


_DECODERS: dict[str, Callable[[str, Any], Entry]] = {
    "Token": _decode_token,
    "ServerPublicKey": _decode_server_public_key,
    "Id": _decode_id,
    PrincipalKind.USER_PERSON.value: _decode_principal,
    PrincipalKind.USER_COMPANY.value: _decode_principal,
    PrincipalKind.USER_API_KEY.value: _decode_principal,
}


@dataclass(frozen=True, slots=True)
class ResponseEnvelope:
    entries: tuple[Entry, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict)

    def first(self, entry_type: type[_E]) -> _E | None:
        for entry in self.entries:
            if isinstance(entry, entry_type):
                return entry
        return None

    def token(self) -> str | None:
        entry = self.first(TokenEntry)
        return entry.token if entry else None

    def server_public_key(self) -> str | None:
        entry = self.first(ServerPublicKeyEntry)
        return entry.server_public_key if entry else None

    def principal(self) -> PrincipalEntry | None:
        return self.first(PrincipalEntry)

    def objects(self, kind: str) -> list[Any]:
        return [entry.payload for entry in self.entries if isinstance(entry, ObjectEntry) and entry.kind == kind]

    @property
    def pagination(self) -> Mapping[str, Any] | None:
        value = self.raw.get("Pagination")
        return value if isinstance(value, Mapping) else None


def decode_envelope(payload: Any) -> ResponseEnvelope:
    """Decode a parsed JSON response body into a :class:`ResponseEnvelope`."""
    if payload is None:
        return ResponseEnvelope()
    if not isinstance(payload, Mapping):
        raise ProtocolError("response envelope must be a JSON object")
    items = payload.get("Response")
    if not isinstance(items, list):
        raise ProtocolError("response envelope is missing the 'Response' array")

    entries: list[Entry] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping) or len(item) != 1:
            raise ProtocolError(f"Response[{index}] must be an object with exactly one key")
        ((kind, body),) = item.items()
        decoder = _DECODERS.get(kind)
        entries.append(decoder(kind, body) if decoder else ObjectEntry(kind=kind, payload=body))
    return ResponseEnvelope(entries=tuple(entries), raw=dict(payload))
