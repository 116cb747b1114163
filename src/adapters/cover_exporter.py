"""Exportación de la portada descargada a disco.

Por qué en adapters:
- El Core no escribe en disco; solo entrega bytes.
"""

from __future__ import annotations

from pathlib import Path

COVER_FILENAME = "cover.jpg"


def export_cover(*, content: bytes, target_dir: Path, filename: str = COVER_FILENAME) -> Path:
    """Escribe `content` en `<target_dir>/<filename>`, creando el directorio si falta."""

    target_dir = target_dir.expanduser().resolve()
    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / filename
    output_path.write_bytes(content)
    return output_path
