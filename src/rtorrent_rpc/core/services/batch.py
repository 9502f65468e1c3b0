"""Batches explícitos sobre `system.multicall`.

El llamador decide qué agrupar: cada `add()` devuelve un `BatchSlot` que se
llena al invocar el batch. Un fault en un slot no afecta a los demás.
Si el round trip entero falla, todos los slots relanzan ese error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rtorrent_rpc.core.domain.calls import CallOutcome, MethodCall
from rtorrent_rpc.core.entities.accessors import Accessor
from rtorrent_rpc.core.entities.base import Entity
from rtorrent_rpc.core.errors import RpcError

if TYPE_CHECKING:
    from rtorrent_rpc.core.server import Server


class BatchSlot:
    """Resultado pendiente de una llamada dentro de un batch."""

    def __init__(self, accessor: Accessor, call: MethodCall) -> None:
        self.accessor = accessor
        self.call = call
        self._outcome: CallOutcome | None = None
        self._failure: RpcError | None = None

    @property
    def ready(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> CallOutcome:
        if self._failure is not None:
            raise self._failure
        if self._outcome is None:
            raise RuntimeError("batch has not been invoked yet")
        return self._outcome

    @property
    def ok(self) -> bool:
        return self.outcome.ok

    @property
    def value(self) -> Any:
        """Valor convertido; `RemoteFault` si esta llamada falló en el daemon."""

        return self.accessor.convert(self.outcome.unwrap())

    def _resolve(self, outcome: CallOutcome) -> None:
        self._outcome = outcome

    def _fail(self, error: RpcError) -> None:
        self._failure = error


class Batch:
    """Acumula llamadas y las envía en un único round trip.

    Uso::

        with server.batch() as batch:
            name = batch.add(download_handle, download.NAME)
            active = batch.add(download_handle, download.IS_ACTIVE)
        print(name.value, active.value)
    """

    def __init__(self, server: "Server") -> None:
        self._server = server
        self._slots: list[BatchSlot] = []
        self._invoked = False

    def add(self, target: Entity | str | None, accessor: Accessor, *args: Any) -> BatchSlot:
        """Agrega `accessor` contra una entidad, una clave cruda o (None) el servidor."""

        if self._invoked:
            raise RuntimeError("batch was already invoked")
        key = target.target if isinstance(target, Entity) else target
        slot = BatchSlot(accessor, accessor.bind(key, *args))
        self._slots.append(slot)
        return slot

    @property
    def slots(self) -> list[BatchSlot]:
        return list(self._slots)

    def invoke(self) -> list[CallOutcome]:
        if self._invoked:
            raise RuntimeError("batch was already invoked")
        self._invoked = True
        try:
            outcomes = self._server.call_batch([slot.call for slot in self._slots])
        except RpcError as exc:
            # Sin respuesta del daemon: cada slot reporta el mismo error.
            for slot in self._slots:
                slot._fail(exc)
            raise
        for slot, outcome in zip(self._slots, outcomes):
            slot._resolve(outcome)
        return outcomes

    def __len__(self) -> int:
        return len(self._slots)

    def __enter__(self) -> "Batch":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is None and not self._invoked:
            self.invoke()
