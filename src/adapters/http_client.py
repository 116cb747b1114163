"""Wrapper de httpx para la API de Discogs.

Por qué un wrapper:
- Estandariza timeouts, headers (User-Agent obligatorio en Discogs) y el
  mapeo de status no exitosos a la taxonomía de errores del Core.
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` con
  `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import ApiError, DownloadError, ResponseDecodeError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite sustituir la red en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class DiscogsHttpClient:
    """Implementación httpx de `core.interfaces.api_client.DiscogsApi`.

    Uso:
        async with DiscogsHttpClient(settings) as api:
            data = await api.fetch_json(url, token)
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)

    async def __aenter__(self) -> "DiscogsHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_json(self, url: str, token: str) -> Any:
        headers = {"Authorization": f"Discogs token={token}"}
        try:
            response = await self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise ApiError(0, str(exc) or type(exc).__name__, url) from exc

        logger.debug("GET %s -> %s", url, response.status_code)
        if not response.is_success:
            raise ApiError(response.status_code, response.reason_phrase, url)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ResponseDecodeError(url) from exc

    async def fetch_bytes(self, url: str) -> bytes:
        # Las imágenes del CDN no requieren token; solo User-Agent.
        try:
            response = await self._client.get(url, headers={"Accept": "image/*"})
        except httpx.HTTPError as exc:
            raise DownloadError(0, str(exc) or type(exc).__name__, url) from exc

        logger.debug("GET %s -> %s (%d bytes)", url, response.status_code, len(response.content))
        if not response.is_success:
            raise DownloadError(response.status_code, response.reason_phrase, url)
        return response.content
