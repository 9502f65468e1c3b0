"""Agrupación de llamadas en `system.multicall`.

Request: un único argumento Array con un struct `{methodName, params}` por
llamada. Response: un Array con un elemento por llamada, en el mismo orden;
cada elemento es un Array de un valor (éxito) o un struct de fault.
"""

from __future__ import annotations

from typing import Sequence

from rtorrent_rpc.core.codec.calls import fault_from_struct
from rtorrent_rpc.core.domain.calls import CallOutcome, MethodCall, Success
from rtorrent_rpc.core.domain.values import Array, String, Struct, WireValue
from rtorrent_rpc.core.errors import ProtocolViolationError

MULTICALL_METHOD = "system.multicall"


def build_multicall(calls: Sequence[MethodCall]) -> MethodCall:
    if not calls:
        raise ValueError("an empty batch must not be sent to the daemon")
    entries = tuple(multicall_entry(call) for call in calls)
    return MethodCall(MULTICALL_METHOD, (Array(entries),))


def split_multicall(value: WireValue, expected: int) -> list[CallOutcome]:
    """Demultiplexa la respuesta posicionalmente (elemento i -> llamada i)."""

    if not isinstance(value, Array):
        raise ProtocolViolationError(f"multicall reply must be an array, got {type(value).__name__}")
    if len(value) != expected:
        raise ProtocolViolationError(f"multicall reply has {len(value)} results for {expected} calls")
    return [_outcome(index, item) for index, item in enumerate(value.items)]


def _outcome(index: int, item: WireValue) -> CallOutcome:
    if isinstance(item, Array):
        if len(item) != 1:
            raise ProtocolViolationError(
                f"multicall result {index} wraps {len(item)} values instead of one"
            )
        return Success(item[0])
    fault = fault_from_struct(item)
    if fault is None:
        raise ProtocolViolationError(f"multicall result {index} is neither a value nor a fault")
    return fault


def multicall_entry(call: MethodCall) -> Struct:
    return Struct((("methodName", String(call.name)), ("params", Array(call.arguments))))
