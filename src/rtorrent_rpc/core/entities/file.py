"""Files (`f.*`) de un download."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rtorrent_rpc.core.conversion import as_int, as_size, as_str
from rtorrent_rpc.core.entities.accessors import getter, setter
from rtorrent_rpc.core.entities.base import Entity

if TYPE_CHECKING:
    from rtorrent_rpc.core.entities.download import Download

PATH = getter("f.path", as_str, "Path relative to the download's base path.")
FROZEN_PATH = getter("f.frozen_path", as_str, "Absolute path of the file.")
OFFSET = getter("f.offset", as_size, "Byte offset from the start of the torrent data.")
PRIORITY = getter("f.priority", as_int, "0 off, 1 normal, 2 high.")
SIZE_BYTES = getter("f.size_bytes", as_size)
SIZE_CHUNKS = getter("f.size_chunks", as_size)
COMPLETED_CHUNKS = getter("f.completed_chunks", as_size)

SET_PRIORITY = setter("f.priority")

PRIORITIES = range(0, 3)


class File(Entity):
    def __init__(self, download: "Download", index: int) -> None:
        if index < 0:
            raise ValueError(f"file index must not be negative, got {index}")
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
        return f"{self._download.info_hash}:f{self._index}"

    def path(self) -> str:
        return self.get(PATH)

    def frozen_path(self) -> str:
        return self.get(FROZEN_PATH)

    def offset(self) -> int:
        return self.get(OFFSET)

    def priority(self) -> int:
        return self.get(PRIORITY)

    def size_bytes(self) -> int:
        return self.get(SIZE_BYTES)

    def size_chunks(self) -> int:
        return self.get(SIZE_CHUNKS)

    def completed_chunks(self) -> int:
        return self.get(COMPLETED_CHUNKS)

    def set_priority(self, priority: int) -> None:
        if priority not in PRIORITIES:
            raise ValueError(f"file priority must be 0-2, got {priority}")
        self.get(SET_PRIORITY, priority)
