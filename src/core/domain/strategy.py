"""Estrategias de desambiguación.

Vive en el dominio para que CLI, config y servicios compartan una única fuente
de verdad sin imports circulares con adaptadores.
"""

from __future__ import annotations

from enum import Enum


class SelectionStrategy(str, Enum):
    """Cómo reducir varios resultados de búsqueda a uno."""

    FIRST = "first"
    PROMPT = "prompt"

    def label(self) -> str:
        """Etiqueta legible para prompts y logging."""

        return "interactive prompt" if self is SelectionStrategy.PROMPT else "first result"
