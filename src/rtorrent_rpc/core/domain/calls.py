"""Llamadas y resultados.

- `MethodCall`: nombre de método + argumentos ordenados (wire values).
- `CallOutcome`: `Success(value)` o `Fault(code, message)`. Un outcome por
  llamada, en el mismo orden en que se enviaron.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

from rtorrent_rpc.core.domain.values import WireValue, to_wire
from rtorrent_rpc.core.errors import RemoteFault

_METHOD_NAME_RE = re.compile(r"^[A-Za-z0-9_]+(\.[A-Za-z0-9_]+)*$")


@dataclass(frozen=True)
class MethodCall:
    name: str
    arguments: tuple[WireValue, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not _METHOD_NAME_RE.match(self.name):
            raise ValueError(f"invalid XML-RPC method name: {self.name!r}")
        object.__setattr__(self, "arguments", tuple(to_wire(arg) for arg in self.arguments))

    @classmethod
    def of(cls, name: str, *args: Any) -> "MethodCall":
        """Construye la llamada convirtiendo argumentos nativos con `to_wire`."""

        return cls(name, tuple(args))


@dataclass(frozen=True)
class Success:
    value: WireValue

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> WireValue:
        return self.value


@dataclass(frozen=True)
class Fault:
    code: int
    message: str

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> WireValue:
        raise self.to_exception()

    def to_exception(self) -> RemoteFault:
        return RemoteFault(self.code, self.message)


CallOutcome = Union[Success, Fault]

