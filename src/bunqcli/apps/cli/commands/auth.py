"""``bunq auth``: installation, device registration and session handling."""
from __future__ import annotations

import typer

from bunqcli.apps.cli.context import get_ctx, run_safe
from bunqcli.services.auth import Credentials

app = typer.Typer(help="Manage authentication with the bunq API.")


def _echo_session(credentials: Credentials) -> None:
    typer.echo(f"Environment: {credentials.environment}")
    if credentials.user_id:
        typer.echo(f"User ID: {credentials.user_id}")


@app.command("setup")
@run_safe
def cmd_setup() -> None:
    """Complete authentication setup (installation + device + session)."""
    credentials = get_ctx().handshake().full_setup()
    typer.secho("Authentication successful!", fg=typer.colors.GREEN)
    _echo_session(credentials)
    typer.echo("Session token saved. You can now use all bunq commands.")


@app.command("refresh")
@run_safe
def cmd_refresh() -> None:
    """Refresh the session token, running the full setup if no installation exists."""
    credentials = get_ctx().handshake().refresh_session()
    typer.secho("Session refreshed successfully.", fg=typer.colors.GREEN)
    _echo_session(credentials)


@app.command("status")
@run_safe
def cmd_status() -> None:
    """Show current authentication status."""
    credentials = get_ctx().store.load()
    typer.echo(f"API Key set: {'yes' if credentials.secret else 'no'}")
    typer.echo(f"Installation token: {'yes' if credentials.installation_token else 'no'}")
    typer.echo(f"Session token: {'yes' if credentials.session_token else 'no'}")
    typer.echo(f"User ID: {credentials.user_id or '(not set)'}")
    typer.echo(f"Environment: {credentials.environment}")
    typer.echo(f"Base URL: {credentials.environment.base_url}")
    typer.echo(f"State: {credentials.state}")


__all__ = ["app"]
