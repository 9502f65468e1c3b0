"""Exportación JSON de snapshots.

Por qué JSON:
- Interoperabilidad con scripts y dashboards que no hablan XML-RPC.
- Permite guardar una foto del daemon y compararla después.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel

from rtorrent_rpc.core.domain.models import DownloadSnapshot, ServerSnapshot


def _write_json(payload: object, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path


def snapshot_payload(snapshot: BaseModel) -> dict:
    return snapshot.model_dump(mode="json")


def export_server_json(*, snapshot: ServerSnapshot, output_path: Path) -> Path:
    """Exporta `ServerSnapshot` a JSON UTF-8 con formato estable."""

    return _write_json(snapshot_payload(snapshot), output_path)


def export_downloads_json(*, downloads: Sequence[DownloadSnapshot], output_path: Path) -> Path:
    """Exporta una lista de `DownloadSnapshot` (p.ej. la salida de `downloads --json`)."""

    return _write_json([snapshot_payload(item) for item in downloads], output_path)
