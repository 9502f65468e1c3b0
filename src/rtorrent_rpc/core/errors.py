"""Jerarquía de errores del cliente.

Taxonomía:
- `TransportError`: red, timeout o status HTTP (opaco para esta capa).
- `ProtocolError`: el daemon o el transporte devolvió algo que no respeta la
  forma esperada. Sus subclases (`DecodeError` y derivadas) indican el motivo.
- `RemoteFault`: el daemon reportó un error de aplicación (código + mensaje).

Todos heredan de `RpcError`, así que un `except RpcError` cubre cualquier
fallo de una llamada.
"""

from __future__ import annotations


class RpcError(Exception):
    """Base de todos los errores producidos por `rtorrent_rpc`."""


class TransportError(RpcError):
    """El transporte no pudo completar el intercambio request/response."""


class ProtocolError(RpcError):
    """Respuesta que no respeta el contrato XML-RPC o las convenciones de rtorrent."""


class DecodeError(ProtocolError):
    """Fallo al decodificar un payload o un valor."""


class MalformedError(DecodeError):
    """Markup ilegible, truncado, con tags desconocidos o literales inválidos."""


class TypeMismatchError(DecodeError):
    """El valor decodificado no es de la variante que pidió el llamador."""

    def __init__(self, expected: str, actual: object) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected}, got {actual!r}")


class ProtocolViolationError(DecodeError):
    """Envelope o valor bien formado pero fuera de lo que el protocolo permite."""


class RemoteFault(RpcError):
    """Fault reportado explícitamente por el daemon."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"remote fault {code}: {message}")
