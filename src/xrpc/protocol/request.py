""" The :class:`Request` represents one method call, and knows how to
    render itself as a ``<methodCall>`` document. A batch of requests can
    be folded into a single ``system.multicall`` request with
    :func:`Request.multicall`.
"""

from .. import config
from .. import value as values
from ..errors import EncodingError
from . import codec
from . import fields


declaration = '<?xml version="1.0" encoding="utf-8"?>'


class Request:
    """ A call to the remote procedure *method_name* with the ordered
        *params*, each of which must already be a
        :class:`xrpc.value.Value`; see :class:`xrpc.protocol.builder.RequestBuilder`
        for building a request from native Python objects.

        A :class:`Request` is not modified after construction, and is
        consumed by rendering it with :func:`dumps`.

        :ivar method_name: The name of the remote procedure.
        :ivar params: A tuple of :class:`xrpc.value.Value` instances.
    """

    def __init__(self, method_name, params=()):

        if not isinstance(method_name, str) or method_name == '':
            raise EncodingError('the method name must be a non-empty string')

        params = tuple(params)

        for param in params:
            if not isinstance(param, values.Value):
                raise EncodingError('request parameters must be Value instances, not %s' % (type(param).__name__))

        self.method_name = method_name
        self.params = params


    def __eq__(self, other):
        if not isinstance(other, Request):
            return NotImplemented
        return self.method_name == other.method_name and self.params == other.params


    def __hash__(self):
        return hash((self.method_name, self.params))


    def __repr__(self):
        return 'Request(%r, %r)' % (self.method_name, list(self.params))


    @classmethod
    def multicall(cls, requests):
        """ Fold the supplied *requests* into a single call to
            ``system.multicall``. The only parameter is an array holding one
            struct per request, each with a ``methodName`` and a ``params``
            member, in the order given.
        """

        calls = list()

        for request in requests:
            calls.append(request.to_multicall_struct())

        return cls(fields.MULTICALL, (values.Array(calls),))


    def to_multicall_struct(self):
        """ Return the ``{methodName, params}`` struct that represents this
            request inside a ``system.multicall`` batch.
        """

        members = list()
        members.append((fields.MULTICALL_METHOD, values.String(self.method_name)))
        members.append((fields.MULTICALL_PARAMS, values.Array(self.params)))

        return values.Struct(members)


    def dumps(self, allow_nil=None, max_depth=None):
        """ Render the complete ``<methodCall>`` document and return it as
            UTF-8 encoded bytes. Any value that cannot be represented raises
            :class:`xrpc.errors.EncodingError`.
        """

        if allow_nil is None:
            allow_nil = config.allow_nil

        encoder = codec.Encoder(allow_nil, max_depth)

        out = list()
        write = out.append

        write(declaration)
        write('<methodCall><methodName>')
        write(codec.escape(self.method_name))
        write('</methodName><params>')

        for param in self.params:
            write('<param>')
            encoder.dump(param, write)
            write('</param>')

        write('</params></methodCall>')

        return ''.join(out).encode(fields.CHARSET)


# end of class Request


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
