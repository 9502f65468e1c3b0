"""Interfaces/abstracciones del Core.

Define contratos (Protocol) que implementan adaptadores concretos.
"""

from rtorrent_rpc.core.interfaces.transport import Transport

__all__ = ["Transport"]
