"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`xrpc.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import Error
from ..protocol import fields


# Transport agnostic exceptions

class TransportError(Error):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """A request did not receive a timely response."""


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportStatusError(TransportError):
    """The remote side answered with a non-success status."""

    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        message = f"server response indicates error: {status}"
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)

    def __reduce__(self):
        return (type(self), (self.status, self.reason))


class ContentTypeError(TransportError):
    """The response does not declare an XML document."""

    def __init__(self, found: str):
        self.found = found
        super().__init__(f"expected Content-Type '{fields.CONTENT_TYPE}', got '{found}'")

    def __reduce__(self):
        return (type(self), (self.found,))


class Transport(ABC):
    """Minimal contract for a byte-level transport."""

    @abstractmethod
    def send(self, destination: str, data: bytes) -> bytes:
        """Deliver one request document to *destination* and block until
        the complete response document is available.

        Any failure is raised as a :class:`TransportError`.
        """

    def close(self) -> None:
        """Release any resources held by the transport."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def content_type() -> str:
    """Content-Type header value for an outbound request document."""
    return f"{fields.CONTENT_TYPE}; charset={fields.CHARSET}"


def check_content_type(value: Optional[str]) -> None:
    """Reject a response whose declared Content-Type is not ``text/xml``.

    Parameters such as ``charset`` are ignored, as is a missing header.
    """

    if value is None or value.strip() == "":
        return

    media = value.split(";", 1)[0].strip().lower()

    if media != fields.CONTENT_TYPE:
        raise ContentTypeError(media)
