"""Contrato del transporte.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir el adaptador HTTP por un doble en memoria en los tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Canal byte-in/byte-out hacia el daemon.

    Reglas de diseño:
    - `send` es síncrono: bloquea hasta tener respuesta o fallo.
    - Cualquier fallo de red/timeout/status se reporta como `TransportError`.
    - No interpreta el payload: el framing XML-RPC es cosa del codec.
    """

    def send(self, endpoint: str, body: bytes) -> bytes:
        """Envía `body` a `endpoint` y devuelve el cuerpo de la respuesta."""

        ...

    def close(self) -> None:
        """Libera recursos del canal (pool de conexiones, sockets)."""

        ...
