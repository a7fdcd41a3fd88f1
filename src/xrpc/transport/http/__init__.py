"""HTTP transport (httpx)."""

from .request import HttpTransport, build_headers, check_response
