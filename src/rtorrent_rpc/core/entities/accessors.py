"""Tabla estática de accessors.

Cada accessor es una fila: método del daemon, regla de conversión del
resultado y tipo (getter, setter o acción). Las entidades y los multicalls
por filas comparten las mismas constantes, así que no hay dispatch dinámico
por nombre en ningún punto.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from rtorrent_rpc.core.conversion import as_void
from rtorrent_rpc.core.domain.calls import MethodCall
from rtorrent_rpc.core.domain.values import WireValue


class AccessorKind(str, Enum):
    GETTER = "getter"
    SETTER = "setter"
    ACTION = "action"


@dataclass(frozen=True)
class Accessor:
    method: str
    convert: Callable[[WireValue], Any]
    kind: AccessorKind = AccessorKind.GETTER
    doc: str = ""

    def bind(self, target: str | None, *args: Any) -> MethodCall:
        """Construye la llamada; `target` va primero salvo en métodos globales."""

        params: tuple[Any, ...] = args if target is None else (target, *args)
        return MethodCall.of(self.method, *params)

    def column(self) -> str:
        """Columna para `*.multicall` (p.ej. `"d.name="`)."""

        if self.kind is not AccessorKind.GETTER:
            raise ValueError(f"{self.method} is not a getter and cannot be a multicall column")
        return f"{self.method}="


def getter(method: str, convert: Callable[[WireValue], Any], doc: str = "") -> Accessor:
    return Accessor(method, convert, AccessorKind.GETTER, doc)


def setter(method: str, doc: str = "") -> Accessor:
    return Accessor(f"{method}.set", as_void, AccessorKind.SETTER, doc)


def action(method: str, doc: str = "") -> Accessor:
    return Accessor(method, as_void, AccessorKind.ACTION, doc)
