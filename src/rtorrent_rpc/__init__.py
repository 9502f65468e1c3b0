"""Cliente tipado para la interfaz XML-RPC de rtorrent.

Ejemplo::

    from rtorrent_rpc import Server
    from rtorrent_rpc.core.entities import download as d

    with Server("http://127.0.0.1/RPC2") as server:
        for download in server.downloads():
            name, active = download.fetch(d.NAME, d.IS_ACTIVE)
"""

from rtorrent_rpc.core.domain.calls import Fault, MethodCall, Success
from rtorrent_rpc.core.entities.download import Download
from rtorrent_rpc.core.entities.file import File
from rtorrent_rpc.core.entities.peer import Peer
from rtorrent_rpc.core.entities.tracker import Tracker
from rtorrent_rpc.core.errors import (
    DecodeError,
    MalformedError,
    ProtocolError,
    ProtocolViolationError,
    RemoteFault,
    RpcError,
    TransportError,
    TypeMismatchError,
)
from rtorrent_rpc.core.server import Server
from rtorrent_rpc.core.services.batch import Batch, BatchSlot
from rtorrent_rpc.core.services.multiquery import MultiQuery

__version__ = "0.1.0"

__all__ = [
    "Batch",
    "BatchSlot",
    "DecodeError",
    "Download",
    "Fault",
    "File",
    "MalformedError",
    "MethodCall",
    "MultiQuery",
    "Peer",
    "ProtocolError",
    "ProtocolViolationError",
    "RemoteFault",
    "RpcError",
    "Server",
    "Success",
    "Tracker",
    "TransportError",
    "TypeMismatchError",
    "__version__",
]
