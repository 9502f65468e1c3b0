"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from rtorrent_rpc.core.domain.models import (
    DownloadSnapshot,
    FileSnapshot,
    PeerSnapshot,
    TrackerSnapshot,
)

_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")


def format_bytes(size: int) -> str:
    value = float(size)
    for unit in _UNITS:
        if value < 1024 or unit == _UNITS[-1]:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"


def format_rate(rate: int) -> str:
    return f"{format_bytes(rate)}/s"


def _yes_no(flag: bool) -> Text:
    return Text("yes", style="green") if flag else Text("no", style="dim")


def print_banner(console: Console, endpoint: str) -> None:
    """Imprime el banner con el endpoint activo.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite omitir el banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("rtorrent-rpc", style="bold cyan")
    subtitle = Text(endpoint, style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_downloads_table(downloads: Iterable[DownloadSnapshot], view: str) -> Table:
    table = Table(title=f"Downloads ({view})")
    table.add_column("Hash", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Active")
    table.add_column("Done", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Down", justify="right", style="green")
    table.add_column("Up", justify="right", style="magenta")
    table.add_column("Ratio", justify="right")
    for item in downloads:
        table.add_row(
            item.info_hash[:12],
            item.name,
            _yes_no(item.is_active),
            f"{item.progress:.0%}",
            format_bytes(item.size_bytes),
            format_rate(item.down_rate),
            format_rate(item.up_rate),
            f"{item.ratio:.2f}",
        )
    return table


def build_trackers_table(trackers: Iterable[TrackerSnapshot]) -> Table:
    table = Table(title="Trackers")
    table.add_column("#", justify="right", style="dim")
    table.add_column("URL", style="cyan")
    table.add_column("Enabled")
    table.add_column("Peers", justify="right")
    for tracker in trackers:
        table.add_row(str(tracker.index), tracker.url, _yes_no(tracker.is_enabled), str(tracker.latest_sum_peers))
    return table


def build_peers_table(peers: Iterable[PeerSnapshot]) -> Table:
    table = Table(title="Peers")
    table.add_column("Address", style="cyan", no_wrap=True)
    table.add_column("Client")
    table.add_column("Has", justify="right")
    table.add_column("Down", justify="right", style="green")
    table.add_column("Up", justify="right", style="magenta")
    table.add_column("Encrypted")
    for peer in peers:
        table.add_row(
            f"{peer.address}:{peer.port}",
            peer.client_version,
            f"{peer.completed_percent}%",
            format_rate(peer.down_rate),
            format_rate(peer.up_rate),
            _yes_no(peer.is_encrypted),
        )
    return table


def build_files_table(files: Iterable[FileSnapshot]) -> Table:
    table = Table(title="Files")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Path", style="white")
    table.add_column("Size", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Priority", justify="right")
    for item in files:
        table.add_row(
            str(item.index),
            item.path,
            format_bytes(item.size_bytes),
            f"{item.progress:.0%}",
            str(item.priority),
        )
    return table


def build_download_panel(info_hash: str, fields: dict[str, Any]) -> Panel:
    """Panel clave/valor para `info HASH`."""

    body = Table.grid(padding=(0, 2))
    body.add_column(style="bold")
    body.add_column()
    for label, value in fields.items():
        if isinstance(value, bool):
            rendered: Text | str = _yes_no(value)
        elif isinstance(value, datetime):
            rendered = value.isoformat()
        elif value is None:
            rendered = Text("-", style="dim")
        else:
            rendered = str(value)
        body.add_row(label, rendered)
    return Panel(body, title=Text(info_hash, style="bold cyan"), border_style="cyan")
