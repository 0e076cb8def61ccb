"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from cli.ui_components import print_banner
from core.config import AppSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_backend(settings: AppSettings) -> tuple[bool, str]:
    """Any HTTP answer from the base URL counts as reachable."""

    try:
        async with build_async_client(settings) as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    print_banner(_console)

    table = Table(title="GRH Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API base_url", "OK", settings.api_base_url)
    if settings.api_token:
        table.add_row("Bearer token", "OK", "Token configured")
    else:
        table.add_row("Bearer token", "MISSING", "Authenticated calls fail locally -> `grh doctor set-token`")
    timeout = settings.http_timeout_seconds
    table.add_row("HTTP timeout", "OK", f"{timeout}s" if timeout else "none")
    table.add_row("Language", "OK", settings.language.label())

    ok_http, detail_http = asyncio.run(_check_backend(settings))
    table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] set GRH_API_BASE_URL (env or user .env) to the backend host."
        )


@app.command(name="set-token")
def set_token(
    clear: bool = typer.Option(False, "--clear", help="Remove the stored token."),
) -> None:
    """Store the bearer token in the user config .env.

    The token is read back into the session by `AppSettings` on the next run.
    """

    if clear:
        env_path = write_user_env_vars({"GRH_API_TOKEN": None})
        _console.print(f"[green]Token removed from:[/green] {env_path}")
        return

    token = typer.prompt("Bearer token", hide_input=True).strip()
    if not token:
        raise typer.BadParameter("token is required")

    env_path = write_user_env_vars({"GRH_API_TOKEN": token})
    _console.print(f"[green]Saved token to:[/green] {env_path}")


@app.command(name="config-path")
def config_path() -> None:
    """Print where the user .env lives."""

    typer.echo(str(get_user_env_file()))
