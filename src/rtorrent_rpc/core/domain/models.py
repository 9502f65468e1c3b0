"""Snapshots del estado del daemon (Pydantic v2).

Por qué Pydantic aquí:
- Un snapshot es una foto ya convertida a tipos nativos: validarla una vez
  evita que la CLI o el exportador JSON reciban datos a medio formar.
- `model_dump(mode="json")` da una serialización estable sin código extra.

Nota:
- Estos modelos describen *qué* devolvió el daemon en un instante; los
  handles de `core.entities` siguen siendo la vía para leer estado vivo.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

_INFO_HASH_PATTERN = r"^[0-9A-F]{40}$"


class TrackerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Índice del tracker según el daemon.")
    url: str = Field(..., description="URL de announce.")
    is_enabled: bool = Field(..., description="Si rtorrent anuncia a este tracker.")
    latest_sum_peers: int = Field(
        default=0,
        ge=0,
        description="Peers reportados en el último scrape/announce.",
    )


class PeerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Identificador interno del peer en rtorrent.")
    address: str = Field(..., description="Dirección IP del peer.")
    port: int = Field(..., ge=0, le=65535, description="Puerto remoto.")
    client_version: str = Field(default="Unknown", description="Cliente BitTorrent detectado.")
    completed_percent: int = Field(default=0, ge=0, le=100, description="Porcentaje que tiene el peer.")
    down_rate: int = Field(default=0, ge=0, description="Bytes/s recibidos del peer.")
    up_rate: int = Field(default=0, ge=0, description="Bytes/s enviados al peer.")
    is_encrypted: bool = Field(default=False, description="Conexión cifrada.")


class FileSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Índice del file según el daemon.")
    path: str = Field(..., description="Path relativo al directorio base del download.")
    size_bytes: int = Field(..., ge=0, description="Tamaño en bytes.")
    priority: int = Field(..., ge=0, le=2, description="0 off, 1 normal, 2 high.")
    completed_chunks: int = Field(default=0, ge=0, description="Chunks completos.")
    size_chunks: int = Field(default=0, ge=0, description="Chunks totales del file.")

    @property
    def progress(self) -> float:
        if self.size_chunks == 0:
            return 0.0
        return self.completed_chunks / self.size_chunks


class DownloadSnapshot(BaseModel):
    """Foto de un download, producida por una fila de `d.multicall2`."""

    model_config = ConfigDict(frozen=True)

    info_hash: str = Field(
        ...,
        pattern=_INFO_HASH_PATTERN,
        description="Info-hash (40 hex, mayúsculas).",
    )
    name: str = Field(..., description="Nombre del torrent.")
    is_active: bool = Field(..., description="Si el download está activo.")
    complete: bool = Field(..., description="Si todos los chunks están descargados.")
    size_bytes: int = Field(..., ge=0, description="Tamaño total en bytes.")
    completed_bytes: int = Field(default=0, ge=0, description="Bytes completos.")
    down_rate: int = Field(default=0, ge=0, description="Bytes/s de bajada.")
    up_rate: int = Field(default=0, ge=0, description="Bytes/s de subida.")
    ratio: float = Field(default=0.0, ge=0.0, description="Ratio de subida/bajada.")
    directory: str = Field(default="", description="Directorio de datos.")
    message: str = Field(default="", description="Último mensaje de error del daemon/tracker.")
    trackers: list[TrackerSnapshot] = Field(
        default_factory=list,
        description="Trackers (solo si se pidieron).",
    )
    peers: list[PeerSnapshot] = Field(
        default_factory=list,
        description="Peers conectados (solo si se pidieron).",
    )
    files: list[FileSnapshot] = Field(
        default_factory=list,
        description="Files del torrent (solo si se pidieron).",
    )

    @property
    def progress(self) -> float:
        if self.size_bytes == 0:
            return 0.0
        return self.completed_bytes / self.size_bytes


class ServerSnapshot(BaseModel):
    """Estado global del daemon más (opcionalmente) sus downloads."""

    endpoint: str = Field(..., description="Endpoint XML-RPC consultado.")
    hostname: str = Field(..., description="Hostname del daemon.")
    client_version: str = Field(..., description="Versión de rtorrent.")
    library_version: str = Field(..., description="Versión de libtorrent.")
    api_version: str = Field(..., description="Versión de la API XML-RPC.")
    down_rate: int = Field(default=0, ge=0, description="Bytes/s de bajada global.")
    up_rate: int = Field(default=0, ge=0, description="Bytes/s de subida global.")
    downloads: list[DownloadSnapshot] = Field(
        default_factory=list,
        description="Downloads de la vista consultada.",
    )
    taken_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Momento en que se tomó la foto (UTC).",
    )
