"""Peers (`p.*`) conectados a un download.

Los peers aparecen y desaparecen en cualquier momento: un accessor sobre un
peer que ya se fue termina en `RemoteFault`, y el llamador debe esperarlo.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rtorrent_rpc.core.conversion import as_bool, as_int, as_size, as_str
from rtorrent_rpc.core.entities.accessors import getter, setter
from rtorrent_rpc.core.entities.base import Entity

if TYPE_CHECKING:
    from rtorrent_rpc.core.entities.download import Download

ID = getter("p.id", as_str, "rtorrent's internal identifier for the peer.")
ADDRESS = getter("p.address", as_str, "IP address of the peer.")
PORT = getter("p.port", as_int)
BANNED = getter("p.banned", as_bool)
CLIENT_VERSION = getter("p.client_version", as_str, '"Unknown" when rtorrent cannot parse the id.')
COMPLETED_PERCENT = getter("p.completed_percent", as_int)
DOWN_RATE = getter("p.down_rate", as_size)
DOWN_TOTAL = getter("p.down_total", as_size)
UP_RATE = getter("p.up_rate", as_size)
UP_TOTAL = getter("p.up_total", as_size)
ID_HTML = getter("p.id_html", as_str, "Raw client id, URL-encoded (BEP 20).")
IS_ENCRYPTED = getter("p.is_encrypted", as_bool)
IS_INCOMING = getter("p.is_incoming", as_bool)
IS_OBFUSCATED = getter("p.is_obfuscated", as_bool)
IS_PREFERRED = getter("p.is_preferred", as_bool)
IS_UNWANTED = getter("p.is_unwanted", as_bool)
PEER_RATE = getter("p.peer_rate", as_size, "Estimated swarm-wide download rate of the peer.")
PEER_TOTAL = getter("p.peer_total", as_size)
SNUBBED = getter("p.snubbed", as_bool)

SET_BANNED = setter("p.banned")
SET_SNUBBED = setter("p.snubbed")


class Peer(Entity):
    def __init__(self, download: "Download", peer_id: str) -> None:
        if not peer_id:
            raise ValueError("peer id must not be empty")
        super().__init__(download.server)
        self._download = download
        self._peer_id = peer_id

    @property
    def download(self) -> "Download":
        return self._download

    @property
    def peer_id(self) -> str:
        return self._peer_id

    @property
    def target(self) -> str:
        return f"{self._download.info_hash}:p{self._peer_id}"

    def id(self) -> str:
        return self.get(ID)

    def address(self) -> str:
        return self.get(ADDRESS)

    def port(self) -> int:
        return self.get(PORT)

    def banned(self) -> bool:
        return self.get(BANNED)

    def client_version(self) -> str:
        return self.get(CLIENT_VERSION)

    def completed_percent(self) -> int:
        return self.get(COMPLETED_PERCENT)

    def down_rate(self) -> int:
        return self.get(DOWN_RATE)

    def down_total(self) -> int:
        return self.get(DOWN_TOTAL)

    def up_rate(self) -> int:
        return self.get(UP_RATE)

    def up_total(self) -> int:
        return self.get(UP_TOTAL)

    def id_html(self) -> str:
        return self.get(ID_HTML)

    def is_encrypted(self) -> bool:
        return self.get(IS_ENCRYPTED)

    def is_incoming(self) -> bool:
        return self.get(IS_INCOMING)

    def is_obfuscated(self) -> bool:
        return self.get(IS_OBFUSCATED)

    def is_preferred(self) -> bool:
        return self.get(IS_PREFERRED)

    def is_unwanted(self) -> bool:
        return self.get(IS_UNWANTED)

    def peer_rate(self) -> int:
        return self.get(PEER_RATE)

    def peer_total(self) -> int:
        return self.get(PEER_TOTAL)

    def snubbed(self) -> bool:
        return self.get(SNUBBED)

    def set_banned(self, banned: bool) -> None:
        self.get(SET_BANNED, int(banned))

    def set_snubbed(self, snubbed: bool) -> None:
        self.get(SET_SNUBBED, int(snubbed))
