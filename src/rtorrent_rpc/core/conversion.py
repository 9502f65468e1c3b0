"""Reglas de conversión WireValue -> tipo nativo.

Convenciones de rtorrent:
- Los booleanos viajan como Integer 0/1; cualquier otro entero es un error.
- Bytes y duraciones viajan como Integer.
- Algunos ratios viajan en punto fijo (x1000).
- Los info-hashes son 40 caracteres hex, en mayúsculas.

Una variante inesperada es `TypeMismatchError`; un valor del tipo correcto
pero fuera de rango es `ProtocolViolationError`. Nunca se sustituye un valor
por defecto.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from rtorrent_rpc.core.codec.values import expect
from rtorrent_rpc.core.domain.values import Array, Boolean, Integer, Nil, String, WireValue
from rtorrent_rpc.core.errors import ProtocolViolationError, TypeMismatchError

_INFO_HASH_RE = re.compile(r"^[0-9A-Fa-f]{40}$")


def is_info_hash(text: str) -> bool:
    return bool(_INFO_HASH_RE.match(text))


def normalize_info_hash(text: str) -> str:
    """Valida un hash introducido por el usuario y lo pasa a mayúsculas."""

    candidate = text.strip()
    if not is_info_hash(candidate):
        raise ValueError(f"not a 40-character hex info-hash: {text!r}")
    return candidate.upper()


def as_str(value: WireValue) -> str:
    return expect(value, String).value


def as_int(value: WireValue) -> int:
    return expect(value, Integer).value


def as_size(value: WireValue) -> int:
    """Contador de bytes/chunks: entero no negativo."""

    number = as_int(value)
    if number < 0:
        raise ProtocolViolationError(f"expected a non-negative count, got {number}")
    return number


def as_bool(value: WireValue) -> bool:
    if isinstance(value, Boolean):
        return value.value
    if isinstance(value, Integer):
        if value.value == 1:
            return True
        if value.value == 0:
            return False
        raise ProtocolViolationError(f"boolean flag must be 0 or 1, got {value.value}")
    raise TypeMismatchError("Integer 0/1", value)


def as_ratio(value: WireValue) -> float:
    return as_int(value) / 1000.0


def as_timestamp(value: WireValue) -> datetime | None:
    """Segundos desde epoch -> `datetime` UTC; 0 significa "desconocido"."""

    seconds = as_int(value)
    if seconds < 0:
        raise ProtocolViolationError(f"timestamp must not be negative, got {seconds}")
    if seconds == 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ProtocolViolationError(f"timestamp out of range: {seconds}") from exc


def as_void(value: WireValue) -> None:
    """El "void" de rtorrent: Integer 0 (o `<nil/>`)."""

    if isinstance(value, Nil):
        return None
    if as_int(value) != 0:
        raise ProtocolViolationError(f"expected a void result (0), got {value!r}")
    return None


def as_hash(value: WireValue) -> str:
    text = as_str(value)
    if not is_info_hash(text):
        raise ProtocolViolationError(f"not a 40-character hex info-hash: {text!r}")
    return text.upper()


def as_list(value: WireValue) -> tuple[WireValue, ...]:
    return expect(value, Array).items


def as_str_list(value: WireValue) -> list[str]:
    return [as_str(item) for item in as_list(value)]


def as_hash_list(value: WireValue) -> list[str]:
    return [as_hash(item) for item in as_list(value)]

