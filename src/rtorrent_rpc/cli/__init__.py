"""CLI `rtorrent-rpc` (Typer + Rich)."""
