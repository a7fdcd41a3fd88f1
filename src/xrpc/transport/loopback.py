"""In-process transport.

Hands each request document to a Python callable and returns whatever bytes
it produces. Useful for tests, and for talking to a server implementation
living in the same process.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

from .base import Transport


class LoopbackTransport(Transport):
    """Deliver request documents to *handler* directly.

    The handler receives the request bytes and returns the response bytes;
    it may raise :class:`xrpc.transport.TransportError` to simulate a
    failure. Every (destination, request) pair is kept in :attr:`sent`.
    """

    def __init__(self, handler: Callable[[bytes], bytes]):
        self.handler = handler
        self.sent: List[Tuple[str, bytes]] = []

    def send(self, destination: str, data: bytes) -> bytes:
        self.sent.append((destination, data))
        return self.handler(data)
