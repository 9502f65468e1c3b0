from __future__ import annotations

import pytest

from rtorrent_rpc.core import server as srv
from rtorrent_rpc.core.domain.calls import MethodCall
from rtorrent_rpc.core.domain.values import Integer, String
from rtorrent_rpc.core.entities import download as d
from rtorrent_rpc.core.entities import file as f
from rtorrent_rpc.core.entities import tracker as t
from rtorrent_rpc.core.errors import ProtocolViolationError, RemoteFault, TransportError
from rtorrent_rpc.core.services.batch import Batch
from rtorrent_rpc.core.services.multiquery import MultiQuery
from tests.conftest import HASH, OTHER_HASH


def test_batch_slots_resolve_after_invoke(server, daemon):
    daemon.on("d.name", lambda target: f"name-{target.value[:4]}")
    daemon.on("system.hostname", "seedbox")

    batch = server.batch()
    first = batch.add(server.download(HASH), d.NAME)
    host = batch.add(None, srv.HOSTNAME)
    second = batch.add(OTHER_HASH, d.NAME)
    assert len(batch) == 3
    assert not first.ready

    batch.invoke()

    assert (first.value, host.value, second.value) == ("name-0123", "seedbox", "name-89AB")
    assert daemon.methods == ["system.multicall"]


def test_batch_isolates_faults_per_slot(server, daemon):
    daemon.on("d.name", "ok")

    with server.batch() as batch:
        good = batch.add(HASH, d.NAME)
        bad = batch.add(HASH, d.TIED_TO_FILE)
        again = batch.add(HASH, d.NAME)

    assert [good.ok, bad.ok, again.ok] == [True, False, True]
    assert again.value == "ok"
    with pytest.raises(RemoteFault):
        bad.value


def test_slot_before_invoke_is_an_error(server):
    slot = server.batch().add(HASH, d.NAME)
    with pytest.raises(RuntimeError):
        slot.outcome


def test_batch_is_single_use(server, daemon):
    daemon.on("d.name", "x")
    batch = Batch(server)
    batch.add(HASH, d.NAME)
    batch.invoke()
    with pytest.raises(RuntimeError):
        batch.invoke()
    with pytest.raises(RuntimeError):
        batch.add(HASH, d.NAME)


def test_batch_context_skips_invoke_on_error(server, daemon):
    with pytest.raises(KeyError):
        with server.batch() as batch:
            batch.add(HASH, d.NAME)
            raise KeyError("boom")
    assert daemon.requests == []


def test_empty_batch_context_sends_nothing(server, daemon):
    with server.batch():
        pass
    assert daemon.requests == []


def test_setters_can_be_batched(server, daemon):
    daemon.on("d.priority.set", 0)
    with server.batch() as batch:
        slot = batch.add(HASH, d.SET_PRIORITY, 2)
    assert slot.value is None
    entry = daemon.requests[0].arguments[0][0]
    assert entry.get("params").items == (String(HASH), Integer(2))


def test_downloads_query_shape(server):
    query = MultiQuery.downloads(server, "main").call(d.NAME).call(d.RATIO)
    assert query.to_method_call() == MethodCall.of("d.multicall2", "", "main", "d.name=", "d.ratio=")
    assert [accessor.method for accessor in query.columns] == ["d.name", "d.ratio"]


def test_query_builder_is_immutable(server):
    base = MultiQuery.downloads(server)
    extended = base.call(d.NAME)
    assert base.columns == ()
    assert extended.columns == (d.NAME,)


def test_downloads_query_converts_rows(server, daemon):
    daemon.on("d.multicall2", lambda target, view, *columns: [[HASH.lower(), 1500], [OTHER_HASH, 0]])

    rows = MultiQuery.downloads(server, "seeding").call(d.HASH).call(d.RATIO).invoke()

    assert rows == [(HASH, 1.5), (OTHER_HASH, 0.0)]
    assert daemon.requests[0].arguments[1] == String("seeding")


def test_tracker_and_file_queries_target_the_download(server, daemon):
    daemon.on("t.multicall", [["http://a.test/announce", 1]])
    daemon.on("f.multicall", [["a.iso"]])

    assert MultiQuery.trackers(server, HASH.lower()).call(t.URL).call(t.IS_ENABLED).invoke() == [
        ("http://a.test/announce", True)
    ]
    assert MultiQuery.files(server, HASH, glob="*.iso").call(f.PATH).invoke() == [("a.iso",)]
    assert daemon.requests[0] == MethodCall.of("t.multicall", HASH, "", "t.url=", "t.is_enabled=")
    assert daemon.requests[1] == MethodCall.of("f.multicall", HASH, "*.iso", "f.path=")


def test_row_with_wrong_width_is_rejected(server, daemon):
    daemon.on("d.multicall2", [["only-one-column"]])
    with pytest.raises(ProtocolViolationError):
        MultiQuery.downloads(server).call(d.NAME).call(d.RATIO).invoke()


def test_query_needs_getter_columns(server):
    with pytest.raises(ValueError):
        MultiQuery.downloads(server).invoke()
    with pytest.raises(ValueError):
        MultiQuery.downloads(server).call(d.STOP)
    with pytest.raises(ValueError):
        MultiQuery.peers(server, "nope")


def test_failed_round_trip_is_reported_by_every_slot(server, daemon):
    daemon.failure = TransportError("connection refused")
    batch = server.batch()
    name = batch.add(HASH, d.NAME)
    host = batch.add(None, srv.HOSTNAME)

    with pytest.raises(TransportError):
        batch.invoke()

    assert not name.ready
    for slot in (name, host):
        with pytest.raises(TransportError, match="connection refused"):
            slot.value
