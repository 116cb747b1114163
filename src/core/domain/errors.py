"""Taxonomía de errores del Core.

Por qué una jerarquía:
- Cada fallo aborta la resolución y llega al caller con un mensaje legible que
  identifica el paso y los identificadores (artista/título o release ID).
- La CLI solo necesita capturar `CoverError` para mapear a exit code.
"""

from __future__ import annotations


class CoverError(Exception):
    """Base de todos los errores de resolución/descarga de portadas."""


class MissingCredential(CoverError):
    """No hay token de Discogs en el momento de la llamada."""

    def __init__(self, what: str = "Discogs token") -> None:
        super().__init__(
            f"{what} is missing. Provide it explicitly or via the DISCOGS_TOKEN variable (.env)."
        )


class MissingSearchTerms(CoverError):
    def __init__(self) -> None:
        super().__init__('Either "artist" and "title" or "release_id" must be provided.')


class InvalidIdentifierFormat(CoverError):
    def __init__(self, release_id: str) -> None:
        self.release_id = release_id
        super().__init__(f'Invalid release_id format: "{release_id}" (no digits found).')


class ApiError(CoverError):
    """La API respondió con status no exitoso (search/release/master)."""

    def __init__(self, status: int, status_text: str, url: str | None = None) -> None:
        self.status = status
        self.status_text = status_text
        self.url = url
        super().__init__(f"Discogs API error: {status} {status_text}".rstrip())


class ResponseDecodeError(CoverError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Discogs API returned a body that is not a JSON object: {url}")


class NoResultsFound(CoverError):
    def __init__(self, artist: str, title: str) -> None:
        self.artist = artist
        self.title = title
        super().__init__(f'No results found for "{artist} - {title}".')


class InvalidChoice(CoverError):
    def __init__(self, raw: object, count: int) -> None:
        self.raw = raw
        self.count = count
        super().__init__(f"Invalid choice {raw!r}: expected a number between 1 and {count}.")


class NoPrimaryImage(CoverError):
    """No hay URI de imagen usable tras agotar la cadena de fallbacks."""


class DownloadError(CoverError):
    def __init__(self, status: int, status_text: str, url: str | None = None) -> None:
        self.status = status
        self.status_text = status_text
        self.url = url
        super().__init__(f"Failed to download image: {status} {status_text}".rstrip())


class FactsError(CoverError):
    """El proveedor IA no pudo generar datos curiosos."""
