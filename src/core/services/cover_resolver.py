"""Resolución de portadas: de (artista, título) o release ID a una URI de imagen.

Este módulo es el núcleo del proyecto. Encadena las llamadas a la API en
orden estricto (búsqueda -> master, o release -> master) porque cada URL
depende de la respuesta anterior, y aplica la política de fallback de
imágenes:

1. imagen `primary` del master release;
2. `cover_image` del resultado de búsqueda (solo ruta artista/título);
3. `NoPrimaryImage`.

No hay estado compartido entre llamadas: dos `resolve` con las mismas
respuestas upstream producen el mismo resultado (o el mismo tipo de error).
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, TypeVar
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ValidationError

from core.domain.errors import (
    CoverError,
    InvalidChoice,
    InvalidIdentifierFormat,
    MissingCredential,
    MissingSearchTerms,
    NoPrimaryImage,
    NoResultsFound,
    ResponseDecodeError,
)
from core.domain.models import (
    Image,
    MasterRelease,
    Release,
    ResolutionRequest,
    ResolvedCover,
    SearchResult,
)
from core.domain.strategy import SelectionStrategy
from core.interfaces.api_client import DiscogsApi
from core.interfaces.disambiguator import Disambiguator

logger = logging.getLogger(__name__)

DISCOGS_API_URL = "https://api.discogs.com"
PLACEHOLDER_COVER_FILENAME = "default-release.png"

_DIGITS_RE = re.compile(r"[0-9]+")

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def parse_release_id(release_id: str) -> str:
    """Extrae el primer bloque de dígitos (`"[r12345]"` -> `"12345"`)."""

    match = _DIGITS_RE.search(release_id or "")
    if match is None:
        raise InvalidIdentifierFormat(release_id)
    return match.group(0)


def is_placeholder_cover(uri: str | None) -> bool:
    return bool(uri) and PLACEHOLDER_COVER_FILENAME in str(uri)


def find_primary_image_uri(images: Iterable[Image], *, skip_placeholder: bool = False) -> str | None:
    """Primera imagen marcada `primary` con URI usable, o None."""

    for image in images:
        if image.type != "primary" or not image.uri:
            continue
        if skip_placeholder and is_placeholder_cover(image.uri):
            continue
        return image.uri
    return None


def build_search_url(api_base_url: str, *, artist: str, title: str) -> str:
    query = urlencode(
        {"type": "master", "artist": artist, "title": title},
        quote_via=quote,
    )
    return f"{api_base_url.rstrip('/')}/database/search?{query}"


def _load(model: type[_ModelT], payload: Any, url: str) -> _ModelT:
    if not isinstance(payload, dict):
        raise ResponseDecodeError(url)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ResponseDecodeError(url) from exc


class CoverResolver:
    """Resuelve una `ResolutionRequest` en exactamente una `ResolvedCover`.

    Colaboradores inyectados:
    - `api`: transporte (ver `DiscogsApi`).
    - `disambiguator`: solo se consulta con estrategia `prompt` y más de un
      resultado.

    El token se pasa explícitamente; el Resolver nunca lee el entorno.
    """

    def __init__(
        self,
        api: DiscogsApi,
        *,
        token: str | None = None,
        disambiguator: Disambiguator | None = None,
        api_base_url: str = DISCOGS_API_URL,
        skip_placeholder_covers: bool = True,
    ) -> None:
        self._api = api
        self._token = token
        self._disambiguator = disambiguator
        self._api_base_url = api_base_url.rstrip("/")
        self._skip_placeholder = skip_placeholder_covers

    async def resolve(self, request: ResolutionRequest, *, token: str | None = None) -> ResolvedCover:
        token = (token or self._token or "").strip()
        if not token:
            raise MissingCredential()

        if request.release_id:
            uri = await self._resolve_release(request.release_id, token)
        else:
            uri = await self._resolve_search(request, token)
        return ResolvedCover(image_uri=uri)

    def _usable(self, uri: str | None) -> bool:
        if not uri:
            return False
        return not (self._skip_placeholder and is_placeholder_cover(uri))

    async def _resolve_release(self, release_id: str, token: str) -> str:
        numeric_id = parse_release_id(release_id)

        release_url = f"{self._api_base_url}/releases/{numeric_id}"
        logger.debug("Fetching release %s", numeric_id)
        release = _load(Release, await self._api.fetch_json(release_url, token), release_url)

        if release.has_master():
            master_url = str(release.master_url)
            logger.debug("Release %s points to master %s", numeric_id, release.master_id)
            master = _load(MasterRelease, await self._api.fetch_json(master_url, token), master_url)
            uri = find_primary_image_uri(master.images, skip_placeholder=self._skip_placeholder)
            if uri:
                logger.info("Using primary image of master %s", release.master_id)
                return uri

        uri = find_primary_image_uri(release.images, skip_placeholder=self._skip_placeholder)
        if uri:
            logger.info("Using primary image of release %s", numeric_id)
            return uri

        raise NoPrimaryImage(f"No primary image found for release {numeric_id}.")

    async def _resolve_search(self, request: ResolutionRequest, token: str) -> str:
        artist = (request.artist or "").strip()
        title = (request.title or "").strip()
        if not artist or not title:
            raise MissingSearchTerms()

        search_url = build_search_url(self._api_base_url, artist=artist, title=title)
        logger.debug("Searching masters for %r - %r", artist, title)
        payload = await self._api.fetch_json(search_url, token)
        if not isinstance(payload, dict):
            raise ResponseDecodeError(search_url)

        raw_results = payload.get("results") or []
        if not isinstance(raw_results, list):
            raise ResponseDecodeError(search_url)
        results = [_load(SearchResult, item, search_url) for item in raw_results]
        if not results:
            raise NoResultsFound(artist, title)

        selected = results[await self._select_index(results, request.strategy)]

        master = _load(
            MasterRelease,
            await self._api.fetch_json(selected.resource_url, token),
            selected.resource_url,
        )
        uri = find_primary_image_uri(master.images, skip_placeholder=self._skip_placeholder)
        if uri:
            logger.info("Using primary image of master %s", selected.id)
            return uri

        if self._usable(selected.cover_image_url):
            logger.info("Master %s has no primary image; using search cover_image", selected.id)
            return selected.cover_image_url

        raise NoPrimaryImage(
            f'No primary image found for the selected release of "{artist} - {title}" (master {selected.id}).'
        )

    async def _select_index(self, results: list[SearchResult], strategy: SelectionStrategy) -> int:
        count = len(results)
        if count == 1 or strategy is SelectionStrategy.FIRST:
            return 0

        logger.debug("%d candidates; selecting via %s", count, strategy.label())
        if self._disambiguator is None:
            raise CoverError("The prompt strategy requires a disambiguator, but none was configured.")

        index = await self._disambiguator.choose_one([r.label() for r in results])
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < count:
            raise InvalidChoice(index, count)
        logger.debug("Disambiguator selected candidate %d of %d", index + 1, count)
        return index
