"""Configuración del cliente.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el adaptador HTTP y la CLI lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "rtorrent-rpc"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "rtorrent-rpc"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "rtorrent-rpc"
    return Path.home() / ".config" / "rtorrent-rpc"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


_ENV_HEADER = "# rtorrent-rpc: generado por `rtorrent-rpc doctor setup`"


def _env_line_key(line: str) -> str | None:
    """Clave de una línea `KEY=valor` (acepta `export KEY=valor`); None si no es asignación."""

    stripped = line.strip()
    if stripped.startswith("export "):
        stripped = stripped[len("export ") :].lstrip()
    if not stripped or stripped.startswith("#") or "=" not in stripped:
        return None
    return stripped.split("=", 1)[0].strip() or None


def _format_env_value(value: str) -> str:
    if value and not any(char.isspace() or char in "#\"'" for char in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def write_user_env_vars(values: Mapping[str, str | None], env_path: Path | None = None) -> Path:
    """Actualiza variables en el .env del usuario.

    Las claves existentes se reescriben en su sitio; comentarios, líneas ajenas
    y orden se conservan. Las claves nuevas van al final. `None` no escribe nada.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    pending = {key: value for key, value in values.items() if value is not None}
    if env_path.exists():
        lines = env_path.read_text(encoding="utf-8").splitlines()
    else:
        lines = [_ENV_HEADER]

    updated: list[str] = []
    for line in lines:
        key = _env_line_key(line)
        if key is not None and key in pending:
            updated.append(f"{key}={_format_env_value(pending.pop(key))}")
        else:
            updated.append(line)
    updated.extend(f"{key}={_format_env_value(value)}" for key, value in pending.items())

    env_path.write_text("\n".join(updated) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central.

    Orden de lectura: variables `RTORRENT_RPC_*`, `.env` del proyecto y luego
    el `.env` del usuario.
    """

    model_config = SettingsConfigDict(
        env_prefix="RTORRENT_RPC_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    endpoint: str = Field(
        default="http://localhost/RPC2",
        min_length=8,
        pattern=r"^https?://",
        description="URL XML-RPC del daemon (p.ej. http://host/RPC2).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="rtorrent-rpc/0.1",
        min_length=1,
        description="User-Agent enviado al daemon.",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verificar certificados cuando el endpoint es https.",
    )
    default_view: str = Field(
        default="main",
        description="Vista de rtorrent usada por defecto al listar downloads.",
    )
    log_level: str = Field(
        default="WARNING",
        pattern=r"^(?i:debug|info|warning|error|critical)$",
        description="Nivel de logging de la CLI.",
    )
