"""ZeroMQ transport."""

from .request import ZmqTransport
