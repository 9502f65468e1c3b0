"""Base común de las entidades (Download, Tracker, Peer, File).

Una entidad es solo identidad + referencia no propietaria al `Server`.
No guarda atributos: cada accessor es un round trip nuevo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rtorrent_rpc.core.entities.accessors import Accessor

if TYPE_CHECKING:
    from rtorrent_rpc.core.server import Server


class Entity:
    """Handle sin estado más allá de su identidad."""

    def __init__(self, server: "Server") -> None:
        self._server = server

    @property
    def server(self) -> "Server":
        return self._server

    @property
    def target(self) -> str:
        """Clave con la que el daemon identifica a la entidad."""

        raise NotImplementedError

    def get(self, accessor: Accessor, *args: Any) -> Any:
        """Ejecuta `accessor` contra esta entidad y convierte el resultado."""

        value = self._server.execute(accessor.bind(self.target, *args)).unwrap()
        return accessor.convert(value)

    def fetch(self, *accessors: Accessor) -> tuple[Any, ...]:
        """Varios getters en un solo `system.multicall`, en el orden pedido."""

        batch = self._server.batch()
        slots = [batch.add(self, accessor) for accessor in accessors]
        batch.invoke()
        return tuple(slot.value for slot in slots)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.target == other.target and self._server is other._server  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.target))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target!r})"
