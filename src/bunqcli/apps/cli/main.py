"""Entry point for the ``bunq`` command."""
from __future__ import annotations

import json

import typer

from bunqcli.apps.cli.commands import auth, config
from bunqcli.apps.cli.context import get_ctx, run_safe
from bunqcli.services.auth import ConfigurationError, ProtocolError

app = typer.Typer(help="Command-line client for the bunq API.", no_args_is_help=True)
app.add_typer(config.app, name="config")
app.add_typer(auth.app, name="auth")


@app.command("request")
@run_safe
def cmd_request(
    method: str = typer.Argument(..., help="HTTP method, e.g. GET or POST."),
    path: str = typer.Argument(..., help="API path below /v1, e.g. /user/123/monetary-account."),
    data: str | None = typer.Option(None, "--data", "-d", help="JSON request body."),
) -> None:
    """Send a signed request with the current session and print the raw response envelope."""
    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"--data is not valid JSON: {exc}") from exc
    if not path.startswith("/"):
        path = f"/{path}"
    ctx = get_ctx()
    ctx.handshake().require_session()
    envelope = ctx.http.request(method, path, body)
    typer.echo(json.dumps(dict(envelope.raw), ensure_ascii=False, indent=2))


@app.command("user")
@run_safe
def cmd_user(as_json: bool = typer.Option(False, "--json", help="Print the raw user object.")) -> None:
    """Show the user the current session belongs to."""
    ctx = get_ctx()
    credentials = ctx.handshake().require_session()
    if not credentials.user_id:
        raise ConfigurationError("User ID not found. Please run: bunq auth setup")
    principal = ctx.http.get(f"/user/{credentials.user_id}").principal()
    if principal is None:
        raise ProtocolError(f"/user/{credentials.user_id} returned no user object")
    if as_json:
        typer.echo(json.dumps(dict(principal.payload), ensure_ascii=False, indent=2))
        return
    typer.echo(f"ID: {principal.id or credentials.user_id}")
    typer.echo(f"Type: {principal.kind.value}")
    for label, key in (("Display Name", "display_name"), ("Status", "status")):
        value = principal.payload.get(key)
        if value:
            typer.echo(f"{label}: {value}")


if __name__ == "__main__":  # pragma: no cover
    app()
