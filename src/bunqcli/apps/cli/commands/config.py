"""``bunq config``: API key and environment management."""
from __future__ import annotations

import typer

from bunqcli.apps.cli.context import get_ctx, redact, run_safe
from bunqcli.services.auth import Environment

app = typer.Typer(help="Manage CLI configuration and authentication settings.")


@app.command("set")
@run_safe
def cmd_set(
    api_key: str | None = typer.Option(None, "--api-key", help="Your bunq API key."),
    sandbox: bool = typer.Option(False, "--sandbox", help="Use the sandbox environment."),
    production: bool = typer.Option(False, "--production", help="Use the production environment."),
) -> None:
    if sandbox and production:
        raise typer.BadParameter("--sandbox and --production are mutually exclusive")
    ctx = get_ctx()
    if api_key:
        ctx.store.rotate_secret(api_key)
        typer.secho("API key saved. Run 'bunq auth setup' to complete authentication.", fg=typer.colors.GREEN)
    if sandbox:
        ctx.store.set_environment(Environment.SANDBOX)
        typer.secho("Switched to sandbox environment.", fg=typer.colors.GREEN)
    if production:
        ctx.store.set_environment(Environment.PRODUCTION)
        typer.secho("Switched to production environment.", fg=typer.colors.GREEN)
    if not api_key and not sandbox and not production:
        typer.echo("No options provided. Use --api-key <key>, --sandbox, or --production.")


@app.command("get")
@run_safe
def cmd_get() -> None:
    credentials = get_ctx().store.load()
    typer.echo(f"API Key: {redact(credentials.secret)}")
    typer.echo(f"Environment: {credentials.environment}")
    typer.echo(f"Authenticated: {'yes' if credentials.session_token else 'no'}")
    typer.echo(f"User ID: {credentials.user_id or '(not set)'}")
    typer.echo(f"Session Token: {redact(credentials.session_token)}")


@app.command("clear")
@run_safe
def cmd_clear() -> None:
    get_ctx().store.clear_all()
    typer.secho("Configuration cleared.", fg=typer.colors.GREEN)


__all__ = ["app"]
