"""Conexión con una instancia de rtorrent (`Server`).

Responsabilidad:
- Poseer el endpoint y el transporte (solo lectura tras construirse).
- Exponer las primitivas `execute` / `call` / `call_batch` sobre el codec.
- Ser el punto de entrada a la fachada tipada (`downloads()`, `download()`).

No cachea nada: cada llamada es un round trip nuevo.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from rtorrent_rpc.adapters.http_transport import HttpTransport
from rtorrent_rpc.core.codec.calls import decode_response, encode_call
from rtorrent_rpc.core.codec.multicall import build_multicall, split_multicall
from rtorrent_rpc.core.config import AppSettings
from rtorrent_rpc.core.conversion import (
    as_hash_list,
    as_size,
    as_str,
    as_str_list,
    as_timestamp,
    as_void,
)
from rtorrent_rpc.core.domain.calls import CallOutcome, MethodCall
from rtorrent_rpc.core.domain.values import Base64, WireValue
from rtorrent_rpc.core.entities.accessors import Accessor, getter
from rtorrent_rpc.core.entities.download import Download
from rtorrent_rpc.core.interfaces.transport import Transport
from rtorrent_rpc.core.services.batch import Batch

logger = logging.getLogger(__name__)

DOWNLOAD_LIST = getter("download_list", as_hash_list)
HOSTNAME = getter("system.hostname", as_str)
IP = getter("network.bind_address", as_str)
PORT_RANGE = getter("network.port_range", as_str)
STARTUP_TIME = getter("system.startup_time", as_timestamp)
API_VERSION = getter("system.api_version", as_str)
CLIENT_VERSION = getter("system.client_version", as_str)
LIBRARY_VERSION = getter("system.library_version", as_str)
DOWN_TOTAL = getter("throttle.global_down.total", as_size)
DOWN_RATE = getter("throttle.global_down.rate", as_size)
UP_TOTAL = getter("throttle.global_up.total", as_size)
UP_RATE = getter("throttle.global_up.rate", as_size)
LIST_METHODS = getter("system.listMethods", as_str_list)


class Server:
    """Instancia lógica de rtorrent.

    Ejemplo::

        with Server("http://127.0.0.1/RPC2") as server:
            for info_hash in server.download_list():
                print(server.download(info_hash).name())

    Sin `endpoint` la configuración se lee de `RTORRENT_RPC_*` y los `.env`;
    con `endpoint` explícito y sin `settings` se usan los valores por defecto.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        *,
        transport: Transport | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        if settings is None and not endpoint:
            settings = AppSettings()
        elif settings is None and transport is None:
            # Endpoint explícito: el entorno no se consulta, solo los defaults.
            settings = AppSettings.model_construct(endpoint=endpoint)
        resolved = endpoint or settings.endpoint  # type: ignore[union-attr]
        if transport is None and not resolved.startswith(("http://", "https://")):
            raise ValueError(f"only HTTP(S) endpoints are supported, got {resolved!r}")
        self._endpoint = resolved
        self._transport: Transport = transport or HttpTransport(settings=settings)

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "Server":
        settings = settings or AppSettings()
        return cls(settings.endpoint, settings=settings)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    # Primitivas RPC

    def execute(self, call: MethodCall) -> CallOutcome:
        """Una llamada, un round trip. Los faults se devuelven, no se lanzan."""

        logger.debug("rpc %s (%d args) -> %s", call.name, len(call.arguments), self._endpoint)
        response = self._transport.send(self._endpoint, encode_call(call))
        outcome = decode_response(response)
        if not outcome.ok:
            logger.debug("rpc %s faulted: %s", call.name, outcome)
        return outcome

    def call(self, name: str, *args: Any) -> WireValue:
        """Llama `name` y devuelve el valor; un fault se lanza como `RemoteFault`."""

        return self.execute(MethodCall.of(name, *args)).unwrap()

    def call_batch(self, calls: Iterable[MethodCall]) -> list[CallOutcome]:
        """N llamadas en un `system.multicall`; un outcome por llamada, en orden.

        Un batch vacío no toca la red.
        """

        pending = list(calls)
        if not pending:
            return []
        logger.debug("multicall with %d calls -> %s", len(pending), self._endpoint)
        reply = self.execute(build_multicall(pending)).unwrap()
        return split_multicall(reply, len(pending))

    def batch(self) -> Batch:
        return Batch(self)

    def get(self, accessor: Accessor, *args: Any) -> Any:
        return accessor.convert(self.execute(accessor.bind(None, *args)).unwrap())

    # Downloads

    def download_list(self, view: str = "") -> list[str]:
        """Info-hashes cargados (validados, en mayúsculas)."""

        if view:
            return self.get(DOWNLOAD_LIST, "", view)
        return self.get(DOWNLOAD_LIST)

    def downloads(self, view: str = "") -> list[Download]:
        return [Download(self, info_hash) for info_hash in self.download_list(view)]

    def download(self, info_hash: str) -> Download:
        return Download.from_hash(self, info_hash)

    def load_torrent_url(self, link: str, start: bool = False) -> None:
        """Agrega un torrent desde URL o magnet; `start` lo arranca."""

        method = "load.start_verbose" if start else "load.verbose"
        as_void(self.call(method, "", link))

    def load_torrent_bytes(self, contents: bytes, start: bool = False) -> None:
        """Agrega un torrent a partir del contenido del .torrent."""

        method = "load.raw_start_verbose" if start else "load.raw_verbose"
        as_void(self.call(method, "", Base64(contents)))

    # Estado global

    def hostname(self) -> str:
        return self.get(HOSTNAME)

    def ip(self) -> str:
        return self.get(IP)

    def port(self) -> str:
        return self.get(PORT_RANGE)

    def startup_time(self) -> datetime | None:
        return self.get(STARTUP_TIME)

    def api_version(self) -> str:
        return self.get(API_VERSION)

    def client_version(self) -> str:
        return self.get(CLIENT_VERSION)

    def library_version(self) -> str:
        return self.get(LIBRARY_VERSION)

    def down_total(self) -> int:
        return self.get(DOWN_TOTAL)

    def down_rate(self) -> int:
        return self.get(DOWN_RATE)

    def up_total(self) -> int:
        return self.get(UP_TOTAL)

    def up_rate(self) -> int:
        return self.get(UP_RATE)

    def list_methods(self) -> list[str]:
        return self.get(LIST_METHODS)

    def shutdown(self) -> None:
        """Cierra rtorrent avisando a los trackers (`system.shutdown.normal`)."""

        as_void(self.call("system.shutdown.normal"))

    # Recursos

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "Server":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Server({self._endpoint!r})"
