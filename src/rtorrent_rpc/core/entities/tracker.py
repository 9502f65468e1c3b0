"""Trackers (`t.*`) de un download."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rtorrent_rpc.core.conversion import as_bool, as_int, as_size, as_str, as_timestamp
from rtorrent_rpc.core.entities.accessors import getter, setter
from rtorrent_rpc.core.entities.base import Entity

if TYPE_CHECKING:
    from rtorrent_rpc.core.entities.download import Download

URL = getter("t.url", as_str, "Announce URL of the tracker.")
ID = getter("t.id", as_str)
GROUP = getter("t.group", as_int)
IS_ENABLED = getter("t.is_enabled", as_bool)
ACTIVITY_TIME_LAST = getter("t.activity_time_last", as_timestamp)
ACTIVITY_TIME_NEXT = getter("t.activity_time_next", as_timestamp)
LATEST_SUM_PEERS = getter("t.latest_sum_peers", as_size)

SET_ENABLED = setter("t.is_enabled")


class Tracker(Entity):
    """Tracker identificado por (download, índice del daemon)."""

    def __init__(self, download: "Download", index: int) -> None:
        if index < 0:
            raise ValueError(f"tracker index must not be negative, got {index}")
        super().__init__(download.server)
        self._download = download
        self._index = index

    @property
    def download(self) -> "Download":
        return self._download

    @property
    def index(self) -> int:
        return self._index

    @property
    def target(self) -> str:
        return f"{self._download.info_hash}:t{self._index}"

    def url(self) -> str:
        return self.get(URL)

    def id(self) -> str:
        return self.get(ID)

    def group(self) -> int:
        return self.get(GROUP)

    def is_enabled(self) -> bool:
        return self.get(IS_ENABLED)

    def activity_time_last(self) -> datetime | None:
        return self.get(ACTIVITY_TIME_LAST)

    def activity_time_next(self) -> datetime | None:
        return self.get(ACTIVITY_TIME_NEXT)

    def latest_sum_peers(self) -> int:
        return self.get(LATEST_SUM_PEERS)

    def set_enabled(self, enabled: bool) -> None:
        self.get(SET_ENABLED, int(enabled))
