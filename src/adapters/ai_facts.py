"""Adaptador IA: datos curiosos sobre un álbum (SDK OpenAI compatible).

Responsabilidad:
- Pedir al proveedor IA una lista corta de datos curiosos sobre artista/álbum.
- Parsear la salida JSON y normalizarla como `AlbumFacts`.

Es una feature lateral: no participa en la resolución de portadas y un
fallo aquí nunca impide guardar la portada.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from typing import Any

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)
from pydantic import BaseModel, Field, ValidationError

from core.config import AppSettings
from core.domain.errors import FactsError, MissingCredential
from core.domain.models import AlbumFacts

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)

_SYSTEM_PROMPT = (
    "You are a music historian. Given an artist and an album title, reply with ONLY a JSON "
    'object of the form {"facts": ["...", "..."]} containing 3 to 5 short, verifiable and '
    "interesting facts about the album (recording, release, reception, cover art). "
    "Do not invent facts; if you do not know the album, return an empty list."
)


class _FactsPayload(BaseModel):
    facts: list[str] = Field(default_factory=list)


def build_ai_client(settings: AppSettings) -> AsyncOpenAI:
    api_key = (settings.ai_api_key or "").strip()
    if not api_key:
        raise MissingCredential("AI API key (DISCOGS_COVER_AI_API_KEY)")
    return AsyncOpenAI(
        api_key=api_key,
        base_url=settings.ai_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=0,
    )


def _extract_json_object(text: str) -> str:
    """Obtiene el primer objeto JSON presente en la respuesta del proveedor."""
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()

    stripped = text.strip()
    start = stripped.find("{")
    end = stripped.rfind("}")
    if 0 <= start < end:
        return stripped[start : end + 1]
    raise ValueError("Could not locate a JSON object in the AI provider response.")


def parse_facts(content: str, *, max_facts: int = 5) -> list[str]:
    data: Any = json.loads(_extract_json_object(content))
    parsed = _FactsPayload.model_validate(data)
    facts = [f.strip() for f in parsed.facts if isinstance(f, str) and f.strip()]
    return facts[:max_facts]


async def generate_album_facts(
    *,
    artist: str,
    title: str,
    settings: AppSettings | None = None,
    client: AsyncOpenAI | None = None,
) -> AlbumFacts:
    """Genera `AlbumFacts` para el álbum; lanza `FactsError` si el proveedor falla."""

    settings = settings or AppSettings()
    client = client or build_ai_client(settings)

    messages = [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": json.dumps({"artist": artist, "album": title}, ensure_ascii=False)},
    ]

    last_error: Exception | None = None
    for attempt in range(settings.ai_max_retries + 1):
        try:
            response = await client.chat.completions.create(
                model=settings.ai_model,
                messages=messages,  # type: ignore[arg-type]
                temperature=0.3,
                max_tokens=600,
            )
            content = (response.choices[0].message.content or "").strip()
            return AlbumFacts(
                artist=artist,
                title=title,
                facts=parse_facts(content),
                model=settings.ai_model,
            )

        except (RateLimitError, APITimeoutError, APIConnectionError) as exc:
            last_error = exc
            if attempt >= settings.ai_max_retries:
                break
            delay = 1.25 * (2**attempt) + random.uniform(0.0, 0.35)
            logger.warning("AI provider transient failure (%s); retrying in %.1fs", type(exc).__name__, delay)
            await asyncio.sleep(delay)

        except APIStatusError as exc:
            last_error = exc
            break

        except (json.JSONDecodeError, ValueError, ValidationError) as exc:
            last_error = exc
            if attempt >= settings.ai_max_retries:
                break
            # Auto-corrección: pedir SOLO JSON válido.
            messages.append({"role": "assistant", "content": content})
            messages.append(
                {"role": "user", "content": "Your response was not valid JSON. Rewrite ONLY the JSON object."}
            )

    raise FactsError(
        f'Could not generate facts for "{artist} - {title}": '
        f"{type(last_error).__name__ if last_error else 'unknown error'}"
    ) from last_error
