""" The :class:`Client` is the primary entry point for making calls. It
    ties the pieces together: requests are rendered by the protocol layer,
    delivered by a transport, and the response is parsed back into a
    value. Each call follows the same path, with no retries and no state
    carried from one call to the next:

        built -> serialized -> sent -> response parsed -> outcome

    where the outcome is a result value, a :class:`xrpc.fault.Fault`, a
    :class:`xrpc.errors.DocumentError`, or a
    :class:`xrpc.transport.TransportError`.
"""

from loguru import logger

from . import config
from . import transport as transports
from .errors import DocumentError
from .fault import Fault
from .protocol import response
from .protocol.builder import RequestBuilder
from .protocol.request import Request
from .transport import TransportConnectionError, TransportError


class Client:
    """ Issue calls to the server at *destination*; for the HTTP transport
        that is a URL, for ZeroMQ an endpoint such as ``tcp://host:port``.
        If no *transport* is supplied, the one named in
        :mod:`xrpc.config` is created.

        The *allow_nil*, *allow_int64* and *max_depth* options default to
        the values in :mod:`xrpc.config` and apply to every call made
        through this client.
    """

    def __init__(self, destination, transport=None, allow_nil=None, allow_int64=None, max_depth=None):

        if transport is None:
            transport = transports.default()

        if allow_nil is None:
            allow_nil = config.allow_nil
        if allow_int64 is None:
            allow_int64 = config.allow_int64
        if max_depth is None:
            max_depth = config.max_depth

        self.destination = destination
        self.transport = transport
        self.allow_nil = allow_nil
        self.allow_int64 = allow_int64
        self.max_depth = max_depth


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __repr__(self):
        return 'Client(%r, %s)' % (self.destination, type(self.transport).__name__)


    def close(self):
        self.transport.close()


    def request(self, method_name, *params):
        """ Build a :class:`xrpc.protocol.request.Request` from native Python
            *params*, using this client's conversion options.
        """

        builder = RequestBuilder(method_name, allow_nil=self.allow_nil, allow_int64=self.allow_int64)
        return builder.args(params).build()


    def call(self, method_name, *params):
        """ Call *method_name* with the supplied *params*, which may be
            native Python objects or :class:`xrpc.value.Value` instances.
            Returns the result :class:`xrpc.value.Value`; a remote fault is
            raised as a :class:`xrpc.fault.Fault`.
        """

        return self.call_request(self.request(method_name, *params))


    def call_request(self, request):
        """ As :func:`call`, for a request that has already been built.
        """

        outcome = self._roundtrip(request)

        if isinstance(outcome, Fault):
            raise outcome

        return outcome


    def multicall(self, requests):
        """ Submit all *requests* in a single ``system.multicall`` call.
            Returns a list with one entry per request, in the same order:
            the result :class:`xrpc.value.Value` for calls that succeeded,
            a :class:`xrpc.fault.Fault` for calls that failed. The faults
            are returned, not raised; if the multicall as a whole fails,
            that fault is raised.
        """

        requests = list(requests)
        batch = Request.multicall(requests)
        result = self.call_request(batch)

        try:
            return response.unpack_multicall(result, len(requests))
        except DocumentError as e:
            logger.warning('{}: malformed multicall reply: {}', self.destination, e)
            raise


    def _roundtrip(self, request):
        """ Serialize, send, and parse. Returns the result value or the
            :class:`xrpc.fault.Fault`; everything else is raised.
        """

        data = request.dumps(self.allow_nil, self.max_depth)
        method_name = request.method_name
        destination = self.destination

        logger.debug('{}: calling {} ({} bytes)', destination, method_name, len(data))

        try:
            reply = self.transport.send(destination, data)
        except TransportError as e:
            logger.warning('{}: {} failed in transport: {}', destination, method_name, e)
            raise
        except OSError as e:
            logger.warning('{}: {} failed in transport: {}', destination, method_name, e)
            raise TransportConnectionError('%s: %s' % (destination, e)) from e

        try:
            outcome = response.loads(reply, self.allow_nil, self.max_depth)
        except DocumentError as e:
            logger.warning('{}: malformed response to {}: {}', destination, method_name, e)
            raise

        if isinstance(outcome, Fault):
            logger.info('{}: {} returned fault {}: {}', destination, method_name, outcome.code, outcome.string)

        return outcome


# end of class Client


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
