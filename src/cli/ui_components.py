"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar paneles en múltiples comandos.
"""

from __future__ import annotations

import logging

from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from core.domain.models import AlbumFacts


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - El comando `resolve` no lo imprime para que su salida sea parseable.
    """

    title = Text("discogs-cover", style="bold cyan")
    subtitle = Text("Discogs • Master releases • Cover art", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def configure_logging(level: str | int, *, console: Console | None = None) -> None:
    """Instala un `RichHandler` en stderr para el logger raíz."""

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx loguea cada request en INFO; solo interesa en DEBUG.
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def build_facts_panel(facts: AlbumFacts) -> Panel:
    """Panel para presentar los datos curiosos (IA)."""

    title = Text(f"{facts.artist} - {facts.title}", style="bold yellow")
    body = Text()
    if facts.facts:
        for fact in facts.facts:
            body.append(f"- {fact}\n")
    else:
        body.append("No facts available for this album.\n", style="dim")
    if facts.model:
        body.append(f"\nModelo: {facts.model}", style="dim")

    return Panel(body, title=title, border_style="yellow")
