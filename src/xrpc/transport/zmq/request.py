"""ZeroMQ request/response transport.

Each request document travels as a single frame on a REQ socket, and the
reply is a single frame holding the response document. One socket is kept
per destination; calls to the same destination are serialized, since a REQ
socket only allows one outstanding request.

A REQ socket that timed out can no longer be used (it is still waiting for
a reply), so it is discarded and a fresh one is connected on the next call.
"""

from __future__ import annotations

import threading
import time
from typing import Dict, Optional

import zmq
from loguru import logger

from ... import config
from ..base import Transport, TransportConnectionError, TransportTimeout


zmq_context = zmq.Context()


def endpoint(destination: str) -> str:
    """Accept ``host:port`` as shorthand for ``tcp://host:port``."""

    if "://" in destination:
        return destination
    return f"tcp://{destination}"


class ZmqTransport(Transport):
    """Send request documents over ZeroMQ REQ sockets."""

    def __init__(self, timeout: Optional[float] = None, context: Optional[zmq.Context] = None):
        if timeout is None:
            timeout = config.timeout

        self.timeout = timeout
        self.context = context or zmq_context

        self._sockets: Dict[str, zmq.Socket] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    def _destination_lock(self, address: str) -> threading.Lock:
        """Acquire and return the lock for *address*.

        A lock that :meth:`close` retired while this thread was waiting on it
        is released again, and the current one is taken instead.
        """

        while True:
            with self._lock:
                lock = self._locks.get(address)
                if lock is None:
                    lock = threading.Lock()
                    self._locks[address] = lock

            lock.acquire()

            # No self._lock here: close() holds it while waiting on this lock.
            if self._locks.get(address) is lock:
                return lock

            lock.release()

    def _socket(self, address: str) -> zmq.Socket:
        socket = self._sockets.get(address)
        if socket is None:
            socket = self.context.socket(zmq.REQ)
            socket.setsockopt(zmq.LINGER, 0)
            socket.connect(address)
            self._sockets[address] = socket
        return socket

    def _discard(self, address: str) -> None:
        socket = self._sockets.pop(address, None)
        if socket is not None:
            socket.close()

    def send(self, destination: str, data: bytes) -> bytes:
        address = endpoint(destination)

        lock = self._destination_lock(address)

        try:
            start = time.monotonic()

            try:
                socket = self._socket(address)
                socket.send(data)

                if not socket.poll(int(self.timeout * 1000), zmq.POLLIN):
                    self._discard(address)
                    raise TransportTimeout(f"{address}: no response in {self.timeout:.2f} sec")

                reply = socket.recv()
            except zmq.ZMQError as e:
                self._discard(address)
                raise TransportConnectionError(f"{address}: {e}") from e
        finally:
            lock.release()

        elapsed = time.monotonic() - start
        logger.debug("{} -> {} bytes in {:.3f} sec", address, len(reply), elapsed)
        return reply

    def close(self) -> None:
        """Close every socket, waiting for any call in progress on it.

        The per-destination locks are dropped as well; a later call starts
        over with a fresh socket.
        """

        with self._lock:
            for address, lock in list(self._locks.items()):
                with lock:
                    self._discard(address)

            self._locks.clear()
