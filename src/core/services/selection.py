"""Conversión de un evento de selección en un índice.

Función pura: la presentación (consola, botones) vive en adaptadores.
"""

from __future__ import annotations

from core.domain.errors import InvalidChoice


def parse_choice(raw: str | int, count: int) -> int:
    """Convierte una elección 1-based en un índice 0-based.

    Acepta `"2"`, `" 2 "` o `2`. Cualquier valor no numérico o fuera de
    `1..count` lanza `InvalidChoice`.
    """

    if isinstance(raw, bool):
        raise InvalidChoice(raw, count)
    if isinstance(raw, int):
        choice = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidChoice(raw, count)
        choice = int(text)

    if choice < 1 or choice > count:
        raise InvalidChoice(raw, count)
    return choice - 1
