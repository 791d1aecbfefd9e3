"""Error taxonomy for the bunq credential lifecycle and request dispatcher."""

from __future__ import annotations

from typing import Any

__all__ = [
    "BunqError",
    "ConfigurationError",
    "ProtocolError",
    "HttpStatusError",
    "TransportError",
]


class BunqError(RuntimeError):
    """Base error for every failure surfaced by :mod:`bunqcli`."""


class ConfigurationError(BunqError):
    """Raised when local configuration (secret, tokens, store) is missing or unusable."""


class ProtocolError(BunqError):
    """Raised when the API answers with a malformed or incomplete envelope."""


class HttpStatusError(BunqError):
    """Raised when the API rejects a call with a 4xx/5xx status."""

    def __init__(self, message: str, *, status_code: int, payload: Any | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.args[0]}"


class TransportError(BunqError):
    """Raised for network-level failures; never retried here."""
