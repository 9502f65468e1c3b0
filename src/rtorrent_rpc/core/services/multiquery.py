"""Consultas por filas (`d.multicall2`, `t.multicall`, `p.multicall`, `f.multicall`).

Una sola llamada XML-RPC pide las mismas columnas (getters) para todos los
objetos de un conjunto: todos los downloads de una vista, o todos los
trackers/peers/files de un download. Cada fila vuelve ya convertida.

Ejemplo::

    rows = (
        MultiQuery.downloads(server, "main")
        .call(download.NAME)
        .call(download.RATIO)
        .invoke()
    )
    for name, ratio in rows:
        ...
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rtorrent_rpc.core.conversion import as_list, normalize_info_hash
from rtorrent_rpc.core.domain.calls import MethodCall
from rtorrent_rpc.core.entities.accessors import Accessor
from rtorrent_rpc.core.errors import ProtocolViolationError

if TYPE_CHECKING:
    from rtorrent_rpc.core.server import Server

logger = logging.getLogger(__name__)


class MultiQuery:
    """Builder inmutable: `call()` devuelve una consulta nueva con una columna más."""

    def __init__(
        self,
        server: "Server",
        method: str,
        target: str,
        call_filter: str,
        columns: tuple[Accessor, ...] = (),
    ) -> None:
        self._server = server
        self._method = method
        self._target = target
        self._filter = call_filter
        self._columns = columns

    @classmethod
    def downloads(cls, server: "Server", view: str = "main") -> "MultiQuery":
        """Downloads de una vista de rtorrent (`main`, `started`, `stopped`, ...)."""

        return cls(server, "d.multicall2", "", view)

    @classmethod
    def trackers(cls, server: "Server", info_hash: str) -> "MultiQuery":
        return cls(server, "t.multicall", normalize_info_hash(info_hash), "")

    @classmethod
    def peers(cls, server: "Server", info_hash: str) -> "MultiQuery":
        return cls(server, "p.multicall", normalize_info_hash(info_hash), "")

    @classmethod
    def files(cls, server: "Server", info_hash: str, glob: str | None = None) -> "MultiQuery":
        """Files de un download; `glob` filtra por patrón (p.ej. `"*.iso"`)."""

        return cls(server, "f.multicall", normalize_info_hash(info_hash), glob or "")

    @property
    def columns(self) -> tuple[Accessor, ...]:
        return self._columns

    def call(self, accessor: Accessor) -> "MultiQuery":
        accessor.column()
        return MultiQuery(
            self._server,
            self._method,
            self._target,
            self._filter,
            self._columns + (accessor,),
        )

    def to_method_call(self) -> MethodCall:
        return MethodCall.of(
            self._method,
            self._target,
            self._filter,
            *(accessor.column() for accessor in self._columns),
        )

    def invoke(self) -> list[tuple[Any, ...]]:
        """Ejecuta la consulta; una tupla por fila, en el orden del daemon."""

        if not self._columns:
            raise ValueError("a multicall query needs at least one column")
        rows = as_list(self._server.execute(self.to_method_call()).unwrap())
        logger.debug("%s returned %d rows x %d columns", self._method, len(rows), len(self._columns))
        result: list[tuple[Any, ...]] = []
        for index, row in enumerate(rows):
            cells = as_list(row)
            if len(cells) != len(self._columns):
                raise ProtocolViolationError(
                    f"{self._method} row {index} has {len(cells)} columns, expected {len(self._columns)}"
                )
            result.append(tuple(accessor.convert(cell) for accessor, cell in zip(self._columns, cells)))
        return result
