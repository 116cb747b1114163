"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, *, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="discogs-cover Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.discogs_token:
        table.add_row("Discogs token", "OK", "Token configured")
    else:
        table.add_row("Discogs token", "MISSING", "Set DISCOGS_TOKEN or run `doctor setup-token`")
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("User-Agent", "OK", settings.user_agent)
    table.add_row(
        "Placeholder covers",
        "OK",
        "skipped" if settings.skip_placeholder_covers else "accepted",
    )

    if settings.ai_api_key:
        table.add_row("AI key", "OK", f"{settings.ai_model} @ {settings.ai_base_url}")
    else:
        table.add_row("AI key", "OPTIONAL", "No key set -> --facts disabled")

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings.api_base_url, settings=settings))
    table.add_row("Discogs API connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)
    _console.print(f"\n[dim]User config file:[/dim] {get_user_env_file()}")


@app.command(name="setup-token")
def setup_token() -> None:
    """Interactive token setup (stores DISCOGS_TOKEN in the user config .env)."""

    token = typer.prompt("Discogs personal access token", hide_input=True).strip()
    if not token:
        raise typer.BadParameter("token is required")

    env_path = write_user_env_vars({"DISCOGS_TOKEN": token})
    _console.print(f"[green]Saved Discogs token to:[/green] {env_path}")
