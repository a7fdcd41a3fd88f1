"""HTTP request/response transport.

The request document is sent as the body of a POST; the body of the reply
is the response document. The headers follow the XML-RPC specification:

    User-Agent: xrpc/<version>
    Content-Type: text/xml; charset=utf-8
    Content-Length: <body length>

From :func:`build_headers` and :func:`check_response` you can build your own
transport around a differently configured client, or add headers (cookies,
authentication) with the *headers* argument of :class:`HttpTransport`.
"""

from __future__ import annotations

import time
from typing import Dict, Mapping, Optional

import httpx
from loguru import logger

from ... import config
from ..base import (
    Transport,
    TransportConnectionError,
    TransportStatusError,
    TransportTimeout,
    check_content_type,
    content_type,
)


def build_headers(body_length: int, user_agent: Optional[str] = None) -> Dict[str, str]:
    """Return the headers required by the XML-RPC specification.

    The ``Host`` header is also required; httpx adds it on its own.
    """

    return {
        "User-Agent": user_agent or config.user_agent,
        "Content-Type": content_type(),
        "Content-Length": str(body_length),
    }


def check_response(response: httpx.Response) -> None:
    """Check that *response* has a success status and declares an XML body.

    Content-Length is not checked: it does not matter to the parser, and it
    no longer describes the body once httpx has undone a content encoding.
    """

    if not response.is_success:
        raise TransportStatusError(response.status_code, response.reason_phrase)

    check_content_type(response.headers.get("content-type"))


class HttpTransport(Transport):
    """POST request documents with an :class:`httpx.Client`.

    If no *client* is supplied, one is created (and closed again by
    :meth:`close`) with the configured timeout.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        timeout: Optional[float] = None,
        headers: Optional[Mapping[str, str]] = None,
        user_agent: Optional[str] = None,
    ):
        self._owns_client = client is None

        if client is None:
            if timeout is None:
                timeout = config.timeout
            client = httpx.Client(timeout=timeout)

        self.client = client
        self.headers = dict(headers or {})
        self.user_agent = user_agent

    def send(self, destination: str, data: bytes) -> bytes:
        headers = build_headers(len(data), self.user_agent)
        headers.update(self.headers)

        start = time.monotonic()

        try:
            response = self.client.post(destination, content=data, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportTimeout(f"POST {destination}: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportConnectionError(f"POST {destination}: {e}") from e

        elapsed = time.monotonic() - start
        logger.debug(
            "POST {} -> {} ({} bytes in {:.3f} sec)",
            destination, response.status_code, len(response.content), elapsed,
        )

        check_response(response)
        return response.content

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
