from __future__ import annotations

from typing import Any, Sequence

import pytest

from core.services.selection import parse_choice


class FakeDiscogsApi:
    """In-memory DiscogsApi: maps URL -> JSON payload (or exception)."""

    def __init__(self, responses: dict[str, Any] | None = None, images: dict[str, bytes] | None = None):
        self.responses = dict(responses or {})
        self.images = dict(images or {})
        self.calls: list[tuple[str, str | None]] = []

    async def fetch_json(self, url: str, token: str) -> Any:
        self.calls.append((url, token))
        if url not in self.responses:
            raise AssertionError(f"unexpected fetch_json({url!r})")
        payload = self.responses[url]
        if isinstance(payload, Exception):
            raise payload
        return payload

    async def fetch_bytes(self, url: str) -> bytes:
        self.calls.append((url, None))
        return self.images.get(url, b"image-bytes")

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


class ScriptedDisambiguator:
    """Simulates a user typing `answer` at a single prompt."""

    def __init__(self, answer: str):
        self.answer = answer
        self.seen: list[list[str]] = []

    async def choose_one(self, labels: Sequence[str]) -> int:
        self.seen.append(list(labels))
        return parse_choice(self.answer, len(labels))


@pytest.fixture
def fake_api() -> FakeDiscogsApi:
    return FakeDiscogsApi()


def search_result(idx: int, *, cover: str = "", title: str | None = None) -> dict[str, Any]:
    return {
        "id": idx,
        "title": title or f"Artist - Album {idx}",
        "cover_image": cover,
        "resource_url": f"https://api.discogs.com/masters/{idx}",
        "year": 1990 + idx,
    }
