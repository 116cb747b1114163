"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/IA) lean config de forma consistente.

Importante:
- El Resolver NO lee `AppSettings`: la CLI construye la config y pasa token y
  políticas de forma explícita (core testeable y sin estado global).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.strategy import SelectionStrategy


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "discogs-cover"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "discogs-cover"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "discogs-cover"
    return Path.home() / ".config" / "discogs-cover"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# discogs-cover user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="DISCOGS_COVER_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    discogs_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DISCOGS_COVER_DISCOGS_TOKEN", "DISCOGS_TOKEN"),
        description="Personal access token de Discogs (también como DISCOGS_TOKEN).",
    )
    api_base_url: str = Field(
        default="https://api.discogs.com",
        min_length=8,
        description="Base URL de la API de Discogs.",
    )
    user_agent: str = Field(
        default="DiscogsCover/1.2.0",
        min_length=1,
        description="User-Agent obligatorio para la API de Discogs.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )

    skip_placeholder_covers: bool = Field(
        default=True,
        description="Tratar 'default-release.png' como portada ausente.",
    )
    default_strategy: SelectionStrategy = Field(
        default=SelectionStrategy.PROMPT,
        description="Estrategia de la CLI cuando hay varios resultados.",
    )
    prompt_max_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Intentos del prompt de consola (1 = falla al primer input inválido).",
    )
    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging de la CLI.",
    )

    ai_api_key: str | None = Field(
        default=None,
        description="API key para el proveedor IA (compatible OpenAI).",
    )
    ai_base_url: str = Field(
        default="https://api.deepseek.com",
        min_length=8,
        description="Base URL compatible OpenAI.",
    )
    ai_model: str = Field(
        default="deepseek-chat",
        min_length=1,
        description="Modelo por defecto para los datos curiosos.",
    )
    ai_timeout_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Timeout para llamadas al proveedor IA (segundos).",
    )
    ai_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Reintentos máximos ante fallos transitorios (rate limit, red).",
    )
