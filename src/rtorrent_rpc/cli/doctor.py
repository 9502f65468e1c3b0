"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.table import Table

from rtorrent_rpc.cli import session
from rtorrent_rpc.core.config import AppSettings, write_user_env_vars
from rtorrent_rpc.core.errors import RpcError
from rtorrent_rpc.core.server import Server

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

REQUIRED_METHODS = ("system.multicall", "d.multicall2", "download_list")


def _check(label: str, probe, table: Table) -> bool:
    try:
        detail = probe()
    except RpcError as exc:
        table.add_row(label, "[red]FAIL[/red]", f"{type(exc).__name__}: {exc}")
        return False
    table.add_row(label, "[green]OK[/green]", str(detail))
    return True


def _check_methods(server: Server) -> str:
    available = set(server.list_methods())
    missing = [name for name in REQUIRED_METHODS if name not in available]
    if missing:
        return f"{len(available)} methods, missing: {', '.join(missing)}"
    return f"{len(available)} methods"


@app.command()
def run(ctx: typer.Context) -> None:
    """Check connectivity with the daemon and show its versions."""

    settings: AppSettings = ctx.obj or session.load_settings()

    table = Table(title="rtorrent-rpc Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Endpoint", "[green]OK[/green]", settings.endpoint)
    table.add_row("Timeout", "[green]OK[/green]", f"{settings.http_timeout_seconds:g}s")
    if settings.endpoint.startswith("https://") and not settings.verify_tls:
        table.add_row("TLS", "[yellow]WARN[/yellow]", "certificate verification disabled")

    with session.build_server(settings) as server:
        connected = _check("Client version", server.client_version, table)
        if connected:
            _check("Library version", server.library_version, table)
            _check("API version", server.api_version, table)
            _check("Methods", lambda: _check_methods(server), table)

    session.console.print(table)
    if not connected:
        session.console.print(
            "\n[yellow]Note:[/yellow] check that rtorrent exposes XML-RPC over HTTP "
            "(e.g. a web server in front of its SCGI socket) and run `rtorrent-rpc doctor setup`."
        )
        raise typer.Exit(code=1)


@app.command()
def setup() -> None:
    """Interactive setup (stores the endpoint in the user config .env)."""

    current = AppSettings()
    endpoint = typer.prompt("XML-RPC endpoint", default=current.endpoint, show_default=True).strip()
    timeout = typer.prompt("HTTP timeout (seconds)", default=current.http_timeout_seconds, type=float)
    verify_tls = typer.confirm("Verify TLS certificates?", default=current.verify_tls)

    if not endpoint.startswith(("http://", "https://")):
        raise typer.BadParameter("endpoint must start with http:// or https://")
    if timeout <= 0:
        raise typer.BadParameter("timeout must be greater than zero")

    env_path = write_user_env_vars(
        {
            "RTORRENT_RPC_ENDPOINT": endpoint,
            "RTORRENT_RPC_HTTP_TIMEOUT_SECONDS": f"{timeout:g}",
            "RTORRENT_RPC_VERIFY_TLS": "true" if verify_tls else "false",
        }
    )

    session.console.print(f"[green]Saved config to:[/green] {env_path}")
