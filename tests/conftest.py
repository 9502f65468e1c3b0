"""Shared fixtures: an in-memory rtorrent daemon speaking real XML-RPC bytes."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from rtorrent_rpc.core.codec.calls import decode_call, encode_fault, encode_response
from rtorrent_rpc.core.codec.multicall import MULTICALL_METHOD
from rtorrent_rpc.core.domain.calls import Fault, MethodCall
from rtorrent_rpc.core.domain.values import Array, Integer, String, Struct, WireValue, to_wire
from rtorrent_rpc.core.errors import RpcError
from rtorrent_rpc.core.server import Server

HASH = "0123456789ABCDEF0123456789ABCDEF01234567"
OTHER_HASH = "89ABCDEF0123456789ABCDEF0123456789ABCDEF"
ENDPOINT = "http://daemon.test/RPC2"

Handler = Callable[..., Any]


class FakeDaemon:
    """Transport double: decodes each request and answers from `handlers`.

    A handler is either a plain value (native or wire) or a callable that
    receives the call's wire arguments. Returning a `Fault` produces a fault.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Any] = {}
        self.requests: list[MethodCall] = []
        self.raw_reply: bytes | None = None
        self.failure: RpcError | None = None
        self.closed = False

    def on(self, method: str, handler: Any) -> "FakeDaemon":
        self.handlers[method] = handler
        return self

    def send(self, endpoint: str, body: bytes) -> bytes:
        assert endpoint == ENDPOINT
        if self.failure is not None:
            raise self.failure
        call = decode_call(body)
        self.requests.append(call)
        if self.raw_reply is not None:
            return self.raw_reply
        result = self._dispatch(call)
        if isinstance(result, Fault):
            return encode_fault(result.code, result.message)
        return encode_response(result)

    def close(self) -> None:
        self.closed = True

    @property
    def methods(self) -> list[str]:
        return [call.name for call in self.requests]

    def _dispatch(self, call: MethodCall) -> WireValue | Fault:
        if call.name == MULTICALL_METHOD:
            return self._multicall(call.arguments[0])
        handler = self.handlers.get(call.name)
        if handler is None:
            return Fault(-506, f"Method '{call.name}' not defined")
        result = handler(*call.arguments) if callable(handler) else handler
        return result if isinstance(result, Fault) else to_wire(result)

    def _multicall(self, entries: WireValue) -> WireValue:
        results: list[WireValue] = []
        for entry in entries:
            assert isinstance(entry, Struct)
            name = entry.get("methodName")
            params = entry.get("params")
            outcome = self._dispatch(MethodCall(name.value, params.items))
            if isinstance(outcome, Fault):
                results.append(Struct((("faultCode", Integer(outcome.code)), ("faultString", String(outcome.message)))))
            else:
                results.append(Array((outcome,)))
        return Array(tuple(results))


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest.fixture
def server(daemon: FakeDaemon) -> Server:
    return Server(ENDPOINT, transport=daemon)
