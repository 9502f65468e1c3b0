"""Adaptadores de I/O (HTTP, exportación).

Cada módulo implementa un contrato de `rtorrent_rpc.core.interfaces` o
consume modelos del dominio.
"""

from rtorrent_rpc.adapters.http_transport import HttpTransport, build_client
from rtorrent_rpc.adapters.json_exporter import export_downloads_json, export_server_json

__all__ = ["HttpTransport", "build_client", "export_downloads_json", "export_server_json"]
