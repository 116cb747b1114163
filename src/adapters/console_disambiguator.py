"""Desambiguador de consola (Rich).

Contrato base: un prompt, un intento. Un input no numérico o fuera de rango
lanza `InvalidChoice` sin más llamadas de red. `max_attempts > 1` añade
reintentos a nivel de adaptador; el Resolver no cambia.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence

from rich.console import Console
from rich.markup import escape

from core.domain.errors import InvalidChoice
from core.services.selection import parse_choice


class ConsoleDisambiguator:
    """Presenta los candidatos numerados desde 1 y lee la elección por stdin."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        ask: Callable[[str], str] | None = None,
        max_attempts: int = 1,
    ) -> None:
        self._console = console or Console()
        self._ask = ask or self._console.input
        self._max_attempts = max(1, max_attempts)

    async def choose_one(self, labels: Sequence[str]) -> int:
        count = len(labels)
        self._console.print("[bold]Multiple results found. Please choose one:[/bold]")
        for position, label in enumerate(labels, start=1):
            self._console.print(f"  [cyan]\\[{position}][/cyan] {escape(label)}", highlight=False)

        attempt = 1
        while True:
            # input() bloquea; se ejecuta fuera del event loop.
            answer = await asyncio.to_thread(self._ask, f"Enter the number of your choice (1-{count}): ")
            try:
                return parse_choice(answer, count)
            except InvalidChoice:
                if attempt >= self._max_attempts:
                    raise
            self._console.print("[yellow]Invalid selection. Please try again.[/yellow]")
            attempt += 1
