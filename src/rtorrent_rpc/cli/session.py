"""Estado compartido por los comandos: settings, logging y construcción del Server.

Los comandos llaman `session.build_server(...)` a través del módulo, así los
tests pueden reemplazarlo por un Server con un transporte falso.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from rtorrent_rpc.core.config import AppSettings
from rtorrent_rpc.core.server import Server

console = Console()
err_console = Console(stderr=True)


def load_settings(endpoint: str | None = None) -> AppSettings:
    if endpoint:
        return AppSettings(endpoint=endpoint)
    return AppSettings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def build_server(settings: AppSettings) -> Server:
    return Server.from_settings(settings)


def fail(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
