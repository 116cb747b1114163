"""Contrato del desambiguador.

Por qué separado del Resolver:
- Reducir N candidatos a uno puede ser un prompt de consola, una lista de
  botones o una elección automática; el Core no asume que exista una UI.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class Disambiguator(Protocol):
    async def choose_one(self, labels: Sequence[str]) -> int:
        """Devuelve un índice base 0 dentro de `labels` o lanza `InvalidChoice`.

        `labels` llega en el orden de los resultados de búsqueda; la
        presentación (numeración desde 1, tablas, etc.) es cosa del adaptador.
        """

        ...
