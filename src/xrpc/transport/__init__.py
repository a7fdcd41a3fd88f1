"""Transport layer implementations."""

from .. import config

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    TransportStatusError,
    ContentTypeError,
    check_content_type,
    content_type,
)

from .loopback import LoopbackTransport
from .http import HttpTransport
from .zmq import ZmqTransport


def default(name=None) -> Transport:
    """Create the transport named by *name*, or by ``XRPC_TRANSPORT``."""

    if name is None:
        name = config.transport

    if name == "http":
        return HttpTransport()
    if name == "zmq":
        return ZmqTransport()

    raise ValueError(f"unknown XRPC_TRANSPORT backend: {name!r}")
