"""Wiring of settings, credential store, dispatcher and handshake for CLI commands."""
from __future__ import annotations

import traceback
from dataclasses import dataclass
from functools import wraps

import typer

from bunqcli.services.auth import BunqError, BunqHttpClient, CredentialStore, HandshakeController
from bunqcli.services.logging import setup_logging
from bunqcli.services.settings import Settings


@dataclass(slots=True)
class CliContext:
    settings: Settings
    store: CredentialStore
    http: BunqHttpClient

    def handshake(self) -> HandshakeController:
        return HandshakeController(store=self.store, http=self.http)


def get_ctx() -> CliContext:
    settings = Settings.from_env()
    setup_logging(settings.log_level, json_output=settings.log_json)
    store = settings.open_store()
    http = BunqHttpClient(store=store, timeout=settings.timeout)
    return CliContext(settings=settings, store=store, http=http)


def print_error(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)


def _debug_enabled() -> bool:
    try:
        return Settings.from_env().debug
    except BunqError:
        # the settings error itself is what gets printed
        return False


def run_safe(func):
    """Turn :class:`BunqError` into a red message and exit code 1."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except BunqError as exc:
            if _debug_enabled():
                traceback.print_exc()
            print_error(str(exc))
            raise typer.Exit(1)

    return wrapper


def redact(value: str | None) -> str:
    if value is None:
        return "(not set)"
    return value[:8] + "..."
