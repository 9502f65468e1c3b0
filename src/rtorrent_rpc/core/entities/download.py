"""Downloads (`d.*`).

Un `Download` es un torrent cargado, identificado por su info-hash (40 hex,
en mayúsculas). Sus colecciones (`trackers()`, `files()`, `peers()`) hacen una
sola llamada y construyen un handle por elemento, sin pedir atributos.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rtorrent_rpc.core.conversion import (
    as_bool,
    as_hash,
    as_int,
    as_ratio,
    as_size,
    as_str,
    as_timestamp,
    normalize_info_hash,
)
from rtorrent_rpc.core.entities.accessors import action, getter, setter
from rtorrent_rpc.core.entities.base import Entity
from rtorrent_rpc.core.entities.file import File
from rtorrent_rpc.core.entities.peer import Peer
from rtorrent_rpc.core.entities.peer import ID as PEER_ID
from rtorrent_rpc.core.entities.tracker import Tracker
from rtorrent_rpc.core.services.multiquery import MultiQuery

if TYPE_CHECKING:
    from rtorrent_rpc.core.server import Server

HASH = getter("d.hash", as_hash, "Info-hash of the download.")
NAME = getter("d.name", as_str, "Name of the torrent.")
BASE_FILENAME = getter("d.base_filename", as_str)
BASE_PATH = getter("d.base_path", as_str)
DIRECTORY = getter("d.directory", as_str)
DIRECTORY_BASE = getter("d.directory_base", as_str)
CHUNK_SIZE = getter("d.chunk_size", as_size, "Chunk (piece) size in bytes.")
COMPLETE = getter("d.complete", as_bool)
INCOMPLETE = getter("d.incomplete", as_bool)
COMPLETED_BYTES = getter("d.completed_bytes", as_size)
COMPLETED_CHUNKS = getter("d.completed_chunks", as_size)
DOWN_RATE = getter("d.down.rate", as_size, "Download rate (bytes/s).")
DOWN_TOTAL = getter("d.down.total", as_size)
UP_RATE = getter("d.up.rate", as_size, "Upload rate (bytes/s).")
UP_TOTAL = getter("d.up.total", as_size)
IS_ACTIVE = getter("d.is_active", as_bool)
IS_OPEN = getter("d.is_open", as_bool)
IS_CLOSED = getter("d.is_closed", as_bool)
STATE = getter("d.state", as_bool, "False when stopped.")
LOADED_FILE = getter("d.loaded_file", as_str)
MESSAGE = getter("d.message", as_str, "Error message from rtorrent or the tracker.")
BITFIELD = getter("d.bitfield", as_str)
RATIO = getter("d.ratio", as_ratio)
SIZE_BYTES = getter("d.size_bytes", as_size)
LEFT_BYTES = getter("d.left_bytes", as_size)
SIZE_FILES = getter("d.size_files", as_size)
SIZE_CHUNKS = getter("d.size_chunks", as_size)
TIED_TO_FILE = getter("d.tied_to_file", as_str)
TRACKER_SIZE = getter("d.tracker_size", as_size)
GROUP_NAME = getter("d.group.name", as_str)
CREATION_DATE = getter("d.creation_date", as_timestamp)
LOAD_DATE = getter("d.load_date", as_timestamp)
PRIORITY = getter("d.priority", as_int, "0 off, 1 low, 2 normal, 3 high.")

SET_DIRECTORY = setter("d.directory")
SET_DIRECTORY_BASE = setter("d.directory_base")
SET_PRIORITY = setter("d.priority")

START = action("d.start")
STOP = action("d.stop")
OPEN = action("d.open")
CLOSE = action("d.close")
ERASE = action("d.erase", "Remove from rtorrent's index; data on disk is kept.")
CHECK_HASH = action("d.check_hash")
TRACKER_ANNOUNCE = action("d.tracker_announce")

PRIORITIES = range(0, 4)


class Download(Entity):
    """Torrent cargado en rtorrent.

    Ejemplo::

        server = Server("http://127.0.0.1/RPC2")
        for download in server.downloads():
            print(download.name(), download.is_active())
    """

    def __init__(self, server: "Server", info_hash: str) -> None:
        super().__init__(server)
        self._info_hash = normalize_info_hash(info_hash)

    @classmethod
    def from_hash(cls, server: "Server", info_hash: str) -> "Download":
        """Handle para un hash conocido; no consulta al daemon."""

        return cls(server, info_hash)

    @property
    def info_hash(self) -> str:
        return self._info_hash

    @property
    def target(self) -> str:
        return self._info_hash

    # Colecciones

    def trackers(self) -> list[Tracker]:
        return [Tracker(self, index) for index in range(self.tracker_size())]

    def files(self) -> list[File]:
        return [File(self, index) for index in range(self.size_files())]

    def peers(self) -> list[Peer]:
        rows = MultiQuery.peers(self._server, self._info_hash).call(PEER_ID).invoke()
        return [Peer(self, peer_id) for (peer_id,) in rows]

    def tracker(self, index: int) -> Tracker:
        return Tracker(self, index)

    def file(self, index: int) -> File:
        return File(self, index)

    def peer(self, peer_id: str) -> Peer:
        return Peer(self, peer_id)

    # Getters

    def name(self) -> str:
        return self.get(NAME)

    def is_active(self) -> bool:
        return self.get(IS_ACTIVE)

    def is_open(self) -> bool:
        return self.get(IS_OPEN)

    def is_closed(self) -> bool:
        return self.get(IS_CLOSED)

    def state(self) -> bool:
        return self.get(STATE)

    def complete(self) -> bool:
        return self.get(COMPLETE)

    def incomplete(self) -> bool:
        return self.get(INCOMPLETE)

    def base_filename(self) -> str:
        return self.get(BASE_FILENAME)

    def base_path(self) -> str:
        return self.get(BASE_PATH)

    def directory(self) -> str:
        return self.get(DIRECTORY)

    def directory_base(self) -> str:
        return self.get(DIRECTORY_BASE)

    def loaded_file(self) -> str:
        return self.get(LOADED_FILE)

    def tied_to_file(self) -> str:
        return self.get(TIED_TO_FILE)

    def message(self) -> str:
        return self.get(MESSAGE)

    def bitfield(self) -> str:
        return self.get(BITFIELD)

    def group_name(self) -> str:
        return self.get(GROUP_NAME)

    def chunk_size(self) -> int:
        return self.get(CHUNK_SIZE)

    def completed_bytes(self) -> int:
        return self.get(COMPLETED_BYTES)

    def completed_chunks(self) -> int:
        return self.get(COMPLETED_CHUNKS)

    def size_bytes(self) -> int:
        return self.get(SIZE_BYTES)

    def left_bytes(self) -> int:
        return self.get(LEFT_BYTES)

    def size_files(self) -> int:
        return self.get(SIZE_FILES)

    def size_chunks(self) -> int:
        return self.get(SIZE_CHUNKS)

    def tracker_size(self) -> int:
        return self.get(TRACKER_SIZE)

    def down_rate(self) -> int:
        return self.get(DOWN_RATE)

    def down_total(self) -> int:
        return self.get(DOWN_TOTAL)

    def up_rate(self) -> int:
        return self.get(UP_RATE)

    def up_total(self) -> int:
        return self.get(UP_TOTAL)

    def ratio(self) -> float:
        return self.get(RATIO)

    def priority(self) -> int:
        return self.get(PRIORITY)

    def creation_date(self) -> datetime | None:
        return self.get(CREATION_DATE)

    def load_date(self) -> datetime | None:
        return self.get(LOAD_DATE)

    # Setters

    def set_directory(self, directory: str) -> None:
        self.get(SET_DIRECTORY, directory)

    def set_directory_base(self, directory: str) -> None:
        self.get(SET_DIRECTORY_BASE, directory)

    def set_priority(self, priority: int) -> None:
        if priority not in PRIORITIES:
            raise ValueError(f"download priority must be 0-3, got {priority}")
        self.get(SET_PRIORITY, priority)

    # Acciones

    def start(self) -> None:
        self.get(START)

    def stop(self) -> None:
        self.get(STOP)

    def open(self) -> None:
        self.get(OPEN)

    def close(self) -> None:
        self.get(CLOSE)

    def erase(self) -> None:
        self.get(ERASE)

    def check_hash(self) -> None:
        self.get(CHECK_HASH)

    def tracker_announce(self) -> None:
        self.get(TRACKER_ANNOUNCE)
