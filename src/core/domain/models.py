"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación en el borde: las respuestas JSON de Discogs se normalizan aquí
  sin acoplar el Core a httpx.
- Todos los modelos son inmutables y viven solo durante una resolución.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from core.domain.errors import MissingSearchTerms
from core.domain.strategy import SelectionStrategy


class Image(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    uri: str = Field(default="", description="URI absoluta de la imagen.")
    type: str = Field(
        default="secondary",
        description="Etiqueta de Discogs: 'primary' marca la portada canónica.",
    )


class SearchResult(BaseModel):
    """Un candidato (master release) devuelto por la búsqueda.

    `title` es un compuesto "Artista - Álbum" sin delimitador garantizado.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: int = Field(..., description="ID numérico del master en Discogs.")
    title: str = Field(default="", description="Título compuesto 'Artist - Album'.")
    cover_image_url: str = Field(
        default="",
        alias="cover_image",
        description="Miniatura de portada incluida en el resultado de búsqueda.",
    )
    resource_url: str = Field(..., min_length=1, description="URL API del master.")
    year: str | None = Field(default=None, description="Año si Discogs lo informa.")

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: object) -> object:
        if isinstance(data, dict):
            data = dict(data)
            if data.get("cover_image") is None:
                data.pop("cover_image", None)
            if data.get("year") is not None:
                data["year"] = str(data["year"])
        return data

    def label(self) -> str:
        """Etiqueta para presentar el candidato al usuario."""

        return f"{self.title} ({self.year or 'N/A'})"


class MasterRelease(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    images: list[Image] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _null_images(cls, data: object) -> object:
        # Discogs omite o anula `images` cuando no hay imágenes.
        if isinstance(data, dict) and data.get("images") is None:
            data = {**data, "images": []}
        return data


class Release(MasterRelease):
    """Una edición concreta; puede apuntar a su master canónico."""

    master_id: int | None = Field(default=None)
    master_url: str | None = Field(default=None)

    def has_master(self) -> bool:
        return bool(self.master_id) and bool(self.master_url)


class ResolutionRequest(BaseModel):
    """Petición de resolución: (artista, título) o release ID, nunca ninguno.

    Si hay `release_id` se usa esa ruta; artista/título se ignoran.
    """

    model_config = ConfigDict(frozen=True)

    artist: str | None = None
    title: str | None = None
    release_id: str | None = None
    strategy: SelectionStrategy = SelectionStrategy.FIRST

    @model_validator(mode="after")
    def _require_terms(self) -> "ResolutionRequest":
        if self.release_id:
            return self
        if not (self.artist or "").strip() or not (self.title or "").strip():
            raise MissingSearchTerms()
        return self

    def describe(self) -> str:
        if self.release_id:
            return f'release ID "{self.release_id}"'
        return f'"{self.artist} - {self.title}"'


class ResolvedCover(BaseModel):
    model_config = ConfigDict(frozen=True)

    image_uri: str = Field(..., min_length=1)


class AlbumFacts(BaseModel):
    """Datos curiosos generados por IA (feature opcional)."""

    artist: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    facts: list[str] = Field(default_factory=list)
    model: str | None = Field(default=None, description="Modelo IA utilizado.")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Momento de generación (UTC).",
    )
