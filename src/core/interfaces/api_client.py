"""Contrato del cliente de la API de Discogs.

Por qué Protocol:
- El Resolver solo necesita "GET autenticado + JSON" y "GET de bytes".
- En tests se sustituye por un fake en memoria sin tocar la red.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DiscogsApi(Protocol):
    """Contrato mínimo de transporte hacia Discogs.

    Reglas de diseño:
    - Ambos métodos son asíncronos porque hacen I/O (HTTP).
    - Un status no exitoso se traduce a `ApiError` / `DownloadError`.
    """

    async def fetch_json(self, url: str, token: str) -> Any:
        """GET con `Authorization: Discogs token=<token>`; decodifica el cuerpo JSON."""

        ...

    async def fetch_bytes(self, url: str) -> bytes:
        """GET de una imagen; devuelve los bytes crudos."""

        ...
