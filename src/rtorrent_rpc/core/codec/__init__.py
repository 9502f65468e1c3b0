"""Codec XML-RPC: valores, envelopes y multicall.

Módulos puros (sin I/O): reciben y devuelven bytes.
"""

from rtorrent_rpc.core.codec.calls import (
    decode_call,
    decode_response,
    encode_call,
    encode_fault,
    encode_response,
)
from rtorrent_rpc.core.codec.multicall import MULTICALL_METHOD, build_multicall, split_multicall
from rtorrent_rpc.core.codec.values import decode_value, encode_value, expect

__all__ = [
    "MULTICALL_METHOD",
    "build_multicall",
    "decode_call",
    "decode_response",
    "decode_value",
    "encode_call",
    "encode_fault",
    "encode_response",
    "encode_value",
    "expect",
    "split_multicall",
]
