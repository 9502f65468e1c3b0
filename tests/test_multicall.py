"""system.multicall batching: shape, positional mapping and fault isolation."""

from __future__ import annotations

import pytest

from rtorrent_rpc.core.codec.calls import encode_response
from rtorrent_rpc.core.codec.multicall import build_multicall, split_multicall
from rtorrent_rpc.core.domain.calls import Fault, MethodCall, Success
from rtorrent_rpc.core.domain.values import Array, Integer, String, Struct
from rtorrent_rpc.core.errors import ProtocolViolationError, TransportError
from tests.conftest import HASH, OTHER_HASH

FAULT = Struct((("faultCode", Integer(-501)), ("faultString", String("Could not find info-hash."))))


def test_build_multicall_wraps_each_call_in_a_struct():
    call = build_multicall([MethodCall.of("d.name", HASH), MethodCall.of("system.hostname")])
    assert call.name == "system.multicall"
    (entries,) = call.arguments
    assert [entry.get("methodName") for entry in entries] == [String("d.name"), String("system.hostname")]
    assert entries[0].get("params") == Array((String(HASH),))
    assert entries[1].get("params") == Array(())


def test_build_multicall_refuses_an_empty_batch():
    with pytest.raises(ValueError):
        build_multicall([])


def test_split_maps_results_by_position():
    reply = Array((Array((String("a"),)), FAULT, Array((Integer(1),))))
    assert split_multicall(reply, 3) == [
        Success(String("a")),
        Fault(-501, "Could not find info-hash."),
        Success(Integer(1)),
    ]


@pytest.mark.parametrize(
    ("reply", "expected"),
    [
        (Array((Array((Integer(1),)),)), 2),
        (Array((Array((Integer(1),)), Array((Integer(2),)))), 1),
        (Struct({"x": Integer(1)}), 1),
        (Array((Array((Integer(1), Integer(2))),)), 1),
        (Array((Array(()),)), 1),
        (Array((Integer(1),)), 1),
        (Array((Struct({"faultCode": Integer(1)}),)), 1),
    ],
)
def test_split_rejects_shapes_that_break_the_contract(reply, expected):
    with pytest.raises(ProtocolViolationError):
        split_multicall(reply, expected)


def test_empty_batch_never_reaches_the_transport(server, daemon):
    assert server.call_batch([]) == []
    assert daemon.requests == []


def test_batch_preserves_call_order(server, daemon):
    names = {HASH: "first", OTHER_HASH: "second"}
    daemon.on("d.name", lambda target: names[target.value])
    daemon.on("system.hostname", "seedbox")

    outcomes = server.call_batch(
        [
            MethodCall.of("d.name", OTHER_HASH),
            MethodCall.of("system.hostname"),
            MethodCall.of("d.name", HASH),
        ]
    )

    assert [outcome.unwrap() for outcome in outcomes] == [String("second"), String("seedbox"), String("first")]
    assert daemon.methods == ["system.multicall"]


def test_one_fault_does_not_poison_the_batch(server, daemon):
    daemon.on("d.name", "ok")
    daemon.on("d.size_bytes", 10)

    outcomes = server.call_batch(
        [
            MethodCall.of("d.name", HASH),
            MethodCall.of("d.no_such_method", HASH),
            MethodCall.of("d.size_bytes", HASH),
        ]
    )

    assert [outcome.ok for outcome in outcomes] == [True, False, True]
    assert outcomes[0] == Success(String("ok"))
    assert outcomes[1].code == -506
    assert outcomes[2] == Success(Integer(10))


def test_length_mismatch_from_the_daemon_is_a_protocol_violation(server, daemon):
    daemon.raw_reply = encode_response(Array((Array((String("only one"),)),)))
    with pytest.raises(ProtocolViolationError):
        server.call_batch([MethodCall.of("d.name", HASH), MethodCall.of("d.name", OTHER_HASH)])


def test_transport_failure_fails_the_whole_batch(server, daemon):
    daemon.failure = TransportError("connection reset")
    with pytest.raises(TransportError):
        server.call_batch([MethodCall.of("d.name", HASH)])
