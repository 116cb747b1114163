"""CLI principal (Typer).

Comandos:
- `fetch`: resuelve la portada, la descarga y la guarda como `cover.jpg`.
- `resolve`: imprime solo la URI de la imagen (para mostrarla en otro sitio).
- `doctor`: diagnósticos de entorno y configuración del token.

La CLI es el único sitio que lee `AppSettings`; al Core le llegan token y
políticas de forma explícita.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Coroutine, Optional, TypeVar

import typer
from rich.console import Console

from adapters.ai_facts import generate_album_facts
from adapters.console_disambiguator import ConsoleDisambiguator
from adapters.cover_exporter import export_cover
from adapters.http_client import DiscogsHttpClient
from cli import doctor
from cli.ui_components import build_facts_panel, configure_logging, print_banner
from core.config import AppSettings
from core.domain.errors import CoverError
from core.domain.models import AlbumFacts, ResolutionRequest, ResolvedCover
from core.domain.strategy import SelectionStrategy
from core.interfaces.api_client import DiscogsApi
from core.services.cover_pipeline import CoverDownload, fetch_cover
from core.services.cover_resolver import CoverResolver

app = typer.Typer(
    no_args_is_help=True,
    help="Find an album's main cover art on Discogs and save it to disk.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

_T = TypeVar("_T")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level.upper(), console=_err_console)


def _run(coro: Coroutine[Any, Any, _T]) -> _T:
    """Ejecuta la corrutina y mapea errores del dominio a exit code 1."""

    try:
        return asyncio.run(coro)
    except CoverError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def build_resolver(
    api: DiscogsApi,
    *,
    settings: AppSettings,
    token: str | None,
    allow_placeholder: bool = False,
) -> CoverResolver:
    return CoverResolver(
        api,
        token=token or settings.discogs_token,
        disambiguator=ConsoleDisambiguator(console=_err_console, max_attempts=settings.prompt_max_attempts),
        api_base_url=settings.api_base_url,
        skip_placeholder_covers=settings.skip_placeholder_covers and not allow_placeholder,
    )


async def _fetch(
    request: ResolutionRequest,
    *,
    settings: AppSettings,
    token: str | None,
    allow_placeholder: bool,
) -> CoverDownload:
    async with DiscogsHttpClient(settings) as api:
        resolver = build_resolver(api, settings=settings, token=token, allow_placeholder=allow_placeholder)
        return await fetch_cover(resolver=resolver, api=api, request=request)


async def _resolve(
    request: ResolutionRequest,
    *,
    settings: AppSettings,
    token: str | None,
    allow_placeholder: bool,
) -> ResolvedCover:
    async with DiscogsHttpClient(settings) as api:
        resolver = build_resolver(api, settings=settings, token=token, allow_placeholder=allow_placeholder)
        return await resolver.resolve(request)


def _build_request(
    *,
    artist: str | None,
    title: str | None,
    release_id: str | None,
    strategy: SelectionStrategy | None,
    settings: AppSettings,
) -> ResolutionRequest:
    try:
        return ResolutionRequest(
            artist=artist,
            title=title,
            release_id=release_id,
            strategy=strategy or settings.default_strategy,
        )
    except CoverError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        _err_console.print(
            'Usage: discogs-cover fetch --artist "<Artist Name>" --title "<Album Title>" '
            '| --release-id "<ID>" [--target "</path/to/save>"]'
        )
        raise typer.Exit(code=1) from exc


@app.command()
def fetch(
    artist: Optional[str] = typer.Option(None, "--artist", "-a", help="Artist name."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Album title."),
    release_id: Optional[str] = typer.Option(
        None, "--release-id", "-r", help='Discogs release ID ("12345", "r12345" or "[r12345]").'
    ),
    target: Path = typer.Option(Path("."), "--target", "-o", help="Directory where cover.jpg is saved."),
    strategy: Optional[SelectionStrategy] = typer.Option(
        None, "--strategy", "-s", case_sensitive=False, help="How to pick among several results."
    ),
    token: Optional[str] = typer.Option(None, "--token", help="Discogs token (defaults to DISCOGS_TOKEN)."),
    allow_placeholder: bool = typer.Option(
        False, "--allow-placeholder", help="Accept Discogs' default-release.png placeholder as a cover."
    ),
    facts: bool = typer.Option(False, "--facts", help="Also print AI-generated facts about the album."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the banner."),
) -> None:
    """Download the main cover of a release and save it as cover.jpg."""

    settings = AppSettings()
    request = _build_request(
        artist=artist, title=title, release_id=release_id, strategy=strategy, settings=settings
    )

    if not quiet:
        print_banner(_console)
    _console.print(f"Searching for {request.describe()}...")

    download = _run(_fetch(request, settings=settings, token=token, allow_placeholder=allow_placeholder))
    try:
        path = export_cover(content=download.content, target_dir=target)
    except OSError as exc:
        _err_console.print(f"[red]Error:[/red] Could not save the cover to {target}: {exc}")
        raise typer.Exit(code=1) from exc
    _console.print(f"[green]Cover art successfully saved to[/green] {path}")

    if facts:
        _print_facts(request, settings=settings)


def _print_facts(request: ResolutionRequest, *, settings: AppSettings) -> None:
    if request.release_id:
        _console.print("[yellow]Facts need --artist and --title; skipping.[/yellow]")
        return

    async def _generate() -> AlbumFacts:
        return await generate_album_facts(
            artist=str(request.artist), title=str(request.title), settings=settings
        )

    try:
        album_facts = asyncio.run(_generate())
    except CoverError as exc:
        _err_console.print(f"[yellow]Warning:[/yellow] {exc}")
        return
    _console.print(build_facts_panel(album_facts))


@app.command()
def resolve(
    artist: Optional[str] = typer.Option(None, "--artist", "-a", help="Artist name."),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Album title."),
    release_id: Optional[str] = typer.Option(None, "--release-id", "-r", help="Discogs release ID."),
    strategy: Optional[SelectionStrategy] = typer.Option(
        None, "--strategy", "-s", case_sensitive=False, help="How to pick among several results."
    ),
    token: Optional[str] = typer.Option(None, "--token", help="Discogs token (defaults to DISCOGS_TOKEN)."),
    allow_placeholder: bool = typer.Option(
        False, "--allow-placeholder", help="Accept Discogs' default-release.png placeholder as a cover."
    ),
) -> None:
    """Print the resolved cover image URI without downloading it."""

    settings = AppSettings()
    request = _build_request(
        artist=artist, title=title, release_id=release_id, strategy=strategy, settings=settings
    )
    cover = _run(_resolve(request, settings=settings, token=token, allow_placeholder=allow_placeholder))
    typer.echo(cover.image_uri)


def run() -> None:
    app()
