"""Orquestación resolve -> descarga.

Mantiene a la CLI (y a futuros entry-points) fuera de la secuencia de
llamadas: el caller decide qué hacer con los bytes (guardar, mostrar).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.domain.models import ResolutionRequest, ResolvedCover
from core.interfaces.api_client import DiscogsApi
from core.services.cover_resolver import CoverResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoverDownload:
    """Resultado de una descarga completa."""

    cover: ResolvedCover
    content: bytes

    @property
    def image_uri(self) -> str:
        return self.cover.image_uri


async def fetch_cover(
    *,
    resolver: CoverResolver,
    api: DiscogsApi,
    request: ResolutionRequest,
) -> CoverDownload:
    """Resuelve la portada y descarga sus bytes."""

    cover = await resolver.resolve(request)
    logger.debug("Downloading %s", cover.image_uri)
    content = await api.fetch_bytes(cover.image_uri)
    return CoverDownload(cover=cover, content=content)
