"""Construcción de snapshots a partir de multicalls por filas.

Responsabilidad:
- Traducir filas de `d.multicall2` / `t.multicall` / `p.multicall` /
  `f.multicall` a los modelos de `core.domain.models`.
- Tomar el estado global del daemon en un solo `system.multicall`.

Cada función hace un número fijo de round trips, independiente de cuántos
downloads o sub-entidades haya (salvo `collect_downloads(..., detailed=True)`,
que agrega tres consultas por download).
"""

from __future__ import annotations

import logging
from typing import Iterable

from rtorrent_rpc.core import server as srv
from rtorrent_rpc.core.domain.models import (
    DownloadSnapshot,
    FileSnapshot,
    PeerSnapshot,
    ServerSnapshot,
    TrackerSnapshot,
)
from rtorrent_rpc.core.entities import download as d
from rtorrent_rpc.core.entities import file as f
from rtorrent_rpc.core.entities import peer as p
from rtorrent_rpc.core.entities import tracker as t
from rtorrent_rpc.core.entities.accessors import Accessor
from rtorrent_rpc.core.services.multiquery import MultiQuery

logger = logging.getLogger(__name__)

DOWNLOAD_COLUMNS = (
    d.HASH,
    d.NAME,
    d.IS_ACTIVE,
    d.COMPLETE,
    d.SIZE_BYTES,
    d.COMPLETED_BYTES,
    d.DOWN_RATE,
    d.UP_RATE,
    d.RATIO,
    d.DIRECTORY,
    d.MESSAGE,
)
TRACKER_COLUMNS = (t.URL, t.IS_ENABLED, t.LATEST_SUM_PEERS)
PEER_COLUMNS = (
    p.ID,
    p.ADDRESS,
    p.PORT,
    p.CLIENT_VERSION,
    p.COMPLETED_PERCENT,
    p.DOWN_RATE,
    p.UP_RATE,
    p.IS_ENCRYPTED,
)
FILE_COLUMNS = (f.PATH, f.SIZE_BYTES, f.PRIORITY, f.COMPLETED_CHUNKS, f.SIZE_CHUNKS)


def _with_columns(query: MultiQuery, columns: Iterable[Accessor]) -> MultiQuery:
    for accessor in columns:
        query = query.call(accessor)
    return query


def collect_trackers(server: srv.Server, info_hash: str) -> list[TrackerSnapshot]:
    rows = _with_columns(MultiQuery.trackers(server, info_hash), TRACKER_COLUMNS).invoke()
    return [
        TrackerSnapshot(index=index, url=url, is_enabled=enabled, latest_sum_peers=peers)
        for index, (url, enabled, peers) in enumerate(rows)
    ]


def collect_peers(server: srv.Server, info_hash: str) -> list[PeerSnapshot]:
    rows = _with_columns(MultiQuery.peers(server, info_hash), PEER_COLUMNS).invoke()
    return [
        PeerSnapshot(
            id=peer_id,
            address=address,
            port=port,
            client_version=client,
            completed_percent=percent,
            down_rate=down_rate,
            up_rate=up_rate,
            is_encrypted=encrypted,
        )
        for peer_id, address, port, client, percent, down_rate, up_rate, encrypted in rows
    ]


def collect_files(server: srv.Server, info_hash: str, glob: str | None = None) -> list[FileSnapshot]:
    """Files de un download; con `glob` el índice sigue siendo la posición en la respuesta."""

    rows = _with_columns(MultiQuery.files(server, info_hash, glob), FILE_COLUMNS).invoke()
    return [
        FileSnapshot(
            index=index,
            path=path,
            size_bytes=size,
            priority=priority,
            completed_chunks=completed,
            size_chunks=chunks,
        )
        for index, (path, size, priority, completed, chunks) in enumerate(rows)
    ]


def collect_downloads(server: srv.Server, view: str = "main", *, detailed: bool = False) -> list[DownloadSnapshot]:
    """Una fila por download de `view`; `detailed` agrega trackers, peers y files."""

    rows = _with_columns(MultiQuery.downloads(server, view), DOWNLOAD_COLUMNS).invoke()
    snapshots: list[DownloadSnapshot] = []
    for info_hash, name, active, complete, size, done, down, up, ratio, directory, message in rows:
        extra = {}
        if detailed:
            extra = {
                "trackers": collect_trackers(server, info_hash),
                "peers": collect_peers(server, info_hash),
                "files": collect_files(server, info_hash),
            }
        snapshots.append(
            DownloadSnapshot(
                info_hash=info_hash,
                name=name,
                is_active=active,
                complete=complete,
                size_bytes=size,
                completed_bytes=done,
                down_rate=down,
                up_rate=up,
                ratio=ratio,
                directory=directory,
                message=message,
                **extra,
            )
        )
    logger.debug("collected %d download snapshots from view %r", len(snapshots), view)
    return snapshots


def collect_server(server: srv.Server, view: str | None = "main") -> ServerSnapshot:
    """Estado global en un round trip; con `view` también sus downloads."""

    with server.batch() as batch:
        hostname = batch.add(None, srv.HOSTNAME)
        client = batch.add(None, srv.CLIENT_VERSION)
        library = batch.add(None, srv.LIBRARY_VERSION)
        api = batch.add(None, srv.API_VERSION)
        down_rate = batch.add(None, srv.DOWN_RATE)
        up_rate = batch.add(None, srv.UP_RATE)

    return ServerSnapshot(
        endpoint=server.endpoint,
        hostname=hostname.value,
        client_version=client.value,
        library_version=library.value,
        api_version=api.value,
        down_rate=down_rate.value,
        up_rate=up_rate.value,
        downloads=collect_downloads(server, view) if view is not None else [],
    )
