"""Valores XML-RPC (Wire Values).

Cada variante es un dataclass inmutable; `WireValue` es la unión de todas.
Un valor se construye por llamada y se consume enseguida en la conversión a
tipos nativos: no hay caché ni estado compartido.

Variantes:
- `Integer` (64 bits con signo), `Double` (finito), `Boolean`, `String`,
  `Base64` (bytes), `Array` (anidable), `Struct` (miembros ordenados) y
  `Nil` (el "void" de rtorrent, extensión `<nil/>`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Union

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Integer:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer requires an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"integer {self.value} does not fit in 64 bits")

    @property
    def fits_i4(self) -> bool:
        return INT32_MIN <= self.value <= INT32_MAX


@dataclass(frozen=True)
class Double:
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"Double requires a float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))
        if not math.isfinite(self.value):
            raise ValueError("XML-RPC doubles must be finite")


@dataclass(frozen=True)
class Boolean:
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"Boolean requires a bool, got {type(self.value).__name__}")


@dataclass(frozen=True)
class String:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"String requires a str, got {type(self.value).__name__}")


@dataclass(frozen=True)
class Base64:
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise TypeError(f"Base64 requires bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True)
class Array:
    items: tuple["WireValue", ...] = ()

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, WIRE_TYPES):
                raise TypeError(f"Array items must be wire values, got {type(item).__name__}")
        object.__setattr__(self, "items", items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["WireValue"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "WireValue":
        return self.items[index]


@dataclass(frozen=True)
class Struct:
    """Struct XML-RPC con el orden de sus miembros preservado."""

    members: tuple[tuple[str, "WireValue"], ...] = ()

    def __post_init__(self) -> None:
        raw: Iterable[tuple[str, WireValue]]
        raw = self.members.items() if isinstance(self.members, Mapping) else self.members
        members = tuple((name, value) for name, value in raw)
        seen: set[str] = set()
        for name, value in members:
            if not isinstance(name, str):
                raise TypeError(f"struct member names must be str, got {type(name).__name__}")
            if name in seen:
                raise ValueError(f"duplicate struct member {name!r}")
            if not isinstance(value, WIRE_TYPES):
                raise TypeError(f"struct member {name!r} is not a wire value")
            seen.add(name)
        object.__setattr__(self, "members", members)

    def get(self, name: str) -> "WireValue | None":
        for key, value in self.members:
            if key == name:
                return value
        return None

    def keys(self) -> list[str]:
        return [key for key, _ in self.members]

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self.members)

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class Nil:
    pass


WireValue = Union[Integer, Double, Boolean, String, Base64, Array, Struct, Nil]
WIRE_TYPES: tuple[type, ...] = (Integer, Double, Boolean, String, Base64, Array, Struct, Nil)


def to_wire(value: Any) -> WireValue:
    """Convierte un valor Python nativo a `WireValue`.

    `bool` se comprueba antes que `int` porque en Python es subclase.
    Los wire values se devuelven tal cual.
    """

    if isinstance(value, WIRE_TYPES):
        return value
    if value is None:
        return Nil()
    if isinstance(value, bool):
        return Boolean(value)
    if isinstance(value, int):
        return Integer(value)
    if isinstance(value, float):
        return Double(value)
    if isinstance(value, str):
        return String(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Base64(bytes(value))
    if isinstance(value, Mapping):
        return Struct(tuple((_member_name(k), to_wire(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return Array(tuple(to_wire(item) for item in value))
    raise TypeError(f"cannot marshal {type(value).__name__} as an XML-RPC value")


def from_wire(value: WireValue) -> Any:
    """Inversa de `to_wire`: devuelve estructuras Python planas."""

    if isinstance(value, Array):
        return [from_wire(item) for item in value.items]
    if isinstance(value, Struct):
        return {name: from_wire(member) for name, member in value.members}
    if isinstance(value, Nil):
        return None
    return value.value


def _member_name(key: object) -> str:
    if not isinstance(key, str):
        raise TypeError(f"struct member names must be str, got {type(key).__name__}")
    return key
