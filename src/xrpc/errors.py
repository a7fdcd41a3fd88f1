""" Exception classes shared by every layer of :mod:`xrpc`. A call can end
    in exactly one of three ways: a result value, a remote
    :class:`xrpc.fault.Fault`, or one of the errors defined here. All of
    them, faults included, derive from :class:`Error`, so a caller that
    does not care about the distinction can catch a single type.

    The transport-specific subclasses live in :mod:`xrpc.transport.base`
    alongside the transport contract.
"""


class Error(Exception):
    """ Base class for anything that prevents a call from producing a
        result value.
    """

    @property
    def fault(self):
        """ The :class:`xrpc.fault.Fault` behind this error, if the remote
            side returned one; None for every other kind of failure.
        """

        return None


# end of class Error



class EncodingError(Error, ValueError):
    """ A value or request could not be rendered as a document. This is
        always raised locally, before anything is handed to a transport.
    """


# end of class EncodingError



class DocumentError(Error):
    """ The bytes received are not a well-formed document, or are
        well-formed XML that breaks the XML-RPC grammar. The *position*,
        when known, is a (line, column) tuple pointing at the offending
        token; lines are numbered from one, columns from zero.
    """

    def __init__(self, message, position=None):

        self.message = message
        self.position = position

        if position is None:
            text = message
        else:
            text = '%s (line %d, column %d)' % (message, position[0], position[1])

        Error.__init__(self, text)


    # The exception args only hold the formatted text; pickle the
    # constructor arguments instead.

    def __reduce__(self):
        return (type(self), (self.message, self.position))


# end of class DocumentError



class XmlError(DocumentError):
    """ The underlying XML is not well formed, or uses a construct this
        library refuses to process (a DOCTYPE, entity declarations).
    """


class UnexpectedXml(DocumentError):
    """ A tag or text node appeared where the grammar does not allow it.
    """

    def __init__(self, expected, found, position=None):

        self.expected = expected
        self.found = found

        message = 'expected %s, found %s' % (expected, found)
        DocumentError.__init__(self, message, position)


    def __reduce__(self):
        return (type(self), (self.expected, self.found, self.position))


class InvalidValue(DocumentError):
    """ A scalar tag held text that cannot be interpreted as its type; for
        example, ``<int>AAA</int>`` or a date with a thirteenth month.
    """

    def __init__(self, for_type, found, position=None, reason=None):

        self.for_type = for_type
        self.found = found
        self.reason = reason

        message = 'invalid value for type %r: %r' % (for_type, found)
        if reason:
            message = message + ': ' + reason

        DocumentError.__init__(self, message, position)


    def __reduce__(self):
        return (type(self), (self.for_type, self.found, self.position, self.reason))


class DuplicateMember(DocumentError):
    """ The same member name occurs twice within one struct.
    """

    def __init__(self, name, position=None):

        self.name = name

        message = 'duplicate struct member %r' % (name,)
        DocumentError.__init__(self, message, position)


    def __reduce__(self):
        return (type(self), (self.name, self.position))


class MalformedResponse(DocumentError):
    """ The response envelope has the wrong shape: no result, more than
        one result, a fault that is not a proper fault struct, or a
        multicall reply that does not line up with the submitted calls.
    """


class DepthExceeded(DocumentError):
    """ Containers are nested deeper than the configured limit. Decoding
        stops as soon as the limit is crossed.
    """

    def __init__(self, limit, position=None):

        self.limit = limit

        message = 'array/struct nesting exceeds the limit of %d' % (limit)
        DocumentError.__init__(self, message, position)


    def __reduce__(self):
        return (type(self), (self.limit, self.position))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
