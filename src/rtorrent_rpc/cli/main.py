"""CLI `rtorrent-rpc` (Typer).

Comandos de solo lectura sobre el daemon más `call` para depurar métodos
crudos. Cada comando abre un `Server`, hace un número fijo de round trips y
lo cierra al terminar.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from pydantic import ValidationError
from rich.pretty import Pretty

from rtorrent_rpc.adapters.json_exporter import export_downloads_json
from rtorrent_rpc.cli import doctor, session
from rtorrent_rpc.cli.ui_components import (
    build_download_panel,
    build_downloads_table,
    build_files_table,
    build_peers_table,
    build_trackers_table,
    format_bytes,
    format_rate,
    print_banner,
)
from rtorrent_rpc.core.codec.calls import encode_response
from rtorrent_rpc.core.config import AppSettings
from rtorrent_rpc.core.domain.values import from_wire
from rtorrent_rpc.core.entities import download as d
from rtorrent_rpc.core.errors import RpcError
from rtorrent_rpc.core.server import Server
from rtorrent_rpc.core.services import snapshots

app = typer.Typer(no_args_is_help=True, help="Typed client for the rtorrent XML-RPC interface.")
app.add_typer(doctor.app, name="doctor")

_INTEGER_ARG_RE = re.compile(r"^-?\d+$")

INFO_FIELDS = (
    ("Name", d.NAME, None),
    ("Active", d.IS_ACTIVE, None),
    ("Started", d.STATE, None),
    ("Complete", d.COMPLETE, None),
    ("Size", d.SIZE_BYTES, format_bytes),
    ("Completed", d.COMPLETED_BYTES, format_bytes),
    ("Ratio", d.RATIO, lambda ratio: f"{ratio:.3f}"),
    ("Down rate", d.DOWN_RATE, format_rate),
    ("Up rate", d.UP_RATE, format_rate),
    ("Directory", d.DIRECTORY, None),
    ("Trackers", d.TRACKER_SIZE, None),
    ("Files", d.SIZE_FILES, None),
    ("Priority", d.PRIORITY, None),
    ("Created", d.CREATION_DATE, None),
    ("Loaded", d.LOAD_DATE, None),
    ("Message", d.MESSAGE, None),
)


@contextmanager
def _connected(ctx: typer.Context) -> Iterator[Server]:
    """Abre el Server y traduce cualquier error del cliente a exit code 1."""

    settings: AppSettings = ctx.obj
    try:
        with session.build_server(settings) as server:
            yield server
    except (RpcError, ValueError) as exc:
        session.fail(f"{type(exc).__name__}: {exc}")
        raise typer.Exit(code=1) from exc


def _parse_call_arg(raw: str) -> int | str:
    """`"42"` se envía como Integer; todo lo demás como String."""

    if _INTEGER_ARG_RE.match(raw):
        return int(raw)
    return raw


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="XML-RPC endpoint (overrides RTORRENT_RPC_ENDPOINT).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every RPC call (DEBUG)."),
) -> None:
    try:
        settings = session.load_settings(endpoint)
    except ValidationError as exc:
        session.fail(f"invalid configuration: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=1) from exc

    session.configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@app.command()
def downloads(
    ctx: typer.Context,
    view: Optional[str] = typer.Option(None, "--view", help="rtorrent view (default from config)."),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Also write the snapshots to this JSON file."),
    banner: bool = typer.Option(False, "--banner", help="Print the banner first."),
) -> None:
    """List downloads with one d.multicall2 round trip."""

    settings: AppSettings = ctx.obj
    selected_view = view or settings.default_view
    with _connected(ctx) as server:
        items = snapshots.collect_downloads(server, selected_view)

    if banner:
        print_banner(session.console, settings.endpoint)
    session.console.print(build_downloads_table(items, selected_view))
    if json_path is not None:
        written = export_downloads_json(downloads=items, output_path=json_path)
        session.console.print(f"[green]JSON written to:[/green] {written}")


@app.command()
def info(ctx: typer.Context, info_hash: str = typer.Argument(..., help="40-character info-hash.")) -> None:
    """Show the attributes of one download (single system.multicall)."""

    with _connected(ctx) as server:
        handle = server.download(info_hash)
        values = handle.fetch(*(accessor for _, accessor, _ in INFO_FIELDS))

    fields = {
        label: (formatter(value) if formatter is not None else value)
        for (label, _, formatter), value in zip(INFO_FIELDS, values)
    }
    session.console.print(build_download_panel(handle.info_hash, fields))


@app.command()
def trackers(ctx: typer.Context, info_hash: str = typer.Argument(..., help="40-character info-hash.")) -> None:
    """List the trackers of a download (t.multicall)."""

    with _connected(ctx) as server:
        rows = snapshots.collect_trackers(server, info_hash)
    session.console.print(build_trackers_table(rows))


@app.command()
def peers(ctx: typer.Context, info_hash: str = typer.Argument(..., help="40-character info-hash.")) -> None:
    """List the connected peers of a download (p.multicall)."""

    with _connected(ctx) as server:
        rows = snapshots.collect_peers(server, info_hash)
    session.console.print(build_peers_table(rows))


@app.command()
def files(
    ctx: typer.Context,
    info_hash: str = typer.Argument(..., help="40-character info-hash."),
    glob: Optional[str] = typer.Option(None, "--glob", help='Filter by pattern, e.g. "*.mkv".'),
) -> None:
    """List the files of a download (f.multicall)."""

    with _connected(ctx) as server:
        rows = snapshots.collect_files(server, info_hash, glob)
    session.console.print(build_files_table(rows))


@app.command()
def call(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="Method name, e.g. d.name"),
    args: Optional[list[str]] = typer.Argument(None, help="Arguments; integers are sent as <i4>/<i8>."),
    xml: bool = typer.Option(False, "--xml", help="Print the value as an XML-RPC response body."),
) -> None:
    """Raw call for debugging; prints the decoded value."""

    params = [_parse_call_arg(raw) for raw in args or []]
    with _connected(ctx) as server:
        value = server.call(method, *params)

    if xml:
        session.console.print(encode_response(value).decode("utf-8"), markup=False, highlight=False)
    else:
        session.console.print(Pretty(from_wire(value)))


def run() -> None:
    app()
