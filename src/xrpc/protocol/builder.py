from __future__ import annotations

from typing import Any, Iterable, List, Optional

from ..value import Value, to_value
from .request import Request


class RequestBuilder:
    """Fluent construction of a :class:`Request` from native Python objects.

        RequestBuilder('pow').arg(2).arg(8).build()
    """

    def __init__(
        self,
        method_name: Optional[str] = None,
        *,
        allow_nil: Optional[bool] = None,
        allow_int64: Optional[bool] = None,
    ):
        self._method = method_name
        self._params: List[Value] = []
        self._allow_nil = allow_nil
        self._allow_int64 = allow_int64

    # Target
    def method(self, name: str):
        self._method = name
        return self

    # Parameters
    def arg(self, value: Any):
        self._params.append(to_value(value, self._allow_nil, self._allow_int64))
        return self

    def args(self, values: Iterable[Any]):
        for value in values:
            self.arg(value)
        return self

    # Finalize
    def build(self) -> Request:
        return Request(self._method, self._params)


def request(method_name: str, *params: Any, **kwargs) -> Request:
    """Shorthand for ``RequestBuilder(method_name).args(params).build()``."""
    return RequestBuilder(method_name, **kwargs).args(params).build()


def multicall(requests: Iterable[Request]) -> Request:
    return Request.multicall(requests)
