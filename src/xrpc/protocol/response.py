""" Parsing of ``<methodResponse>`` documents. A response reduces to one
    of two legitimate outcomes, a single result :class:`xrpc.value.Value`
    or a :class:`xrpc.fault.Fault`; anything else is a
    :class:`xrpc.errors.DocumentError`.

    The same outcome type is used per call when unpacking the reply to a
    ``system.multicall`` request with :func:`unpack_multicall`.
"""

from .. import value as values
from ..errors import MalformedResponse
from ..fault import Fault, code_member, string_member
from . import events
from . import fields
from .parser import Parser


def loads(data, allow_nil=None, max_depth=None):
    """ Parse the response document in *data* (bytes or str). Returns the
        result :class:`xrpc.value.Value`, or a :class:`xrpc.fault.Fault` if
        the server reported one. The fault is returned, not raised.
    """

    parser = Parser.from_bytes(data, allow_nil, max_depth)
    parser.expect_open(fields.METHOD_RESPONSE)
    parser.skip_space()

    event = parser.event

    if event.kind == events.START and event.name == fields.PARAMS:
        result = _params(parser)
    elif event.kind == events.START and event.name == fields.FAULT:
        result = _fault(parser)
    elif event.kind == events.END and event.name == fields.METHOD_RESPONSE:
        raise MalformedResponse('the response holds neither <params> nor <fault>', event.position)
    else:
        parser.unexpected('<params> or <fault>')

    parser.skip_space()
    event = parser.event

    if event.kind == events.START and event.name in (fields.PARAMS, fields.FAULT):
        raise MalformedResponse('the response holds more than one of <params> and <fault>', event.position)

    parser.expect_close(fields.METHOD_RESPONSE)
    parser.expect_end()

    return result



def _params(parser):
    """ Consume a ``<params>`` element, which must hold exactly one
        ``<param>``.
    """

    position = parser.event.position
    parser.advance()

    result = None
    count = 0

    while True:
        parser.skip_space()
        event = parser.event

        if event.kind == events.END and event.name == fields.PARAMS:
            parser.advance()
            break

        if event.kind == events.START and event.name == fields.PARAM and count == 1:
            raise MalformedResponse('a response must hold exactly one <param>, found a second one', event.position)

        parser.expect_open(fields.PARAM)
        result = parser.parse_value()
        parser.expect_close(fields.PARAM)
        count += 1

    if count == 0:
        raise MalformedResponse('a response must hold exactly one <param>, found none', position)

    return result



def _fault(parser):

    position = parser.event.position
    parser.advance()

    value = parser.parse_value()
    parser.expect_close(fields.FAULT)

    return fault_from_value(value, '<fault>', position)



def fault_from_value(value, where='fault', position=None):
    """ Interpret *value* as a fault struct, raising
        :class:`xrpc.errors.MalformedResponse` with the specific reason if
        it is not one. The *where* string identifies the location in
        error messages.
    """

    fault = Fault.from_value(value)
    if fault is not None:
        return fault

    # Work out what is wrong, so that the error says so.

    if not isinstance(value, values.Struct):
        reason = 'expected a struct, found %s' % (type(value).__name__)
    elif code_member not in value:
        reason = 'missing member %r' % (code_member)
    elif string_member not in value:
        reason = 'missing member %r' % (string_member)
    elif not isinstance(value[code_member], values.Int):
        reason = '%r must be an integer, found %s' % (code_member, type(value[code_member]).__name__)
    elif not isinstance(value[string_member], values.String):
        reason = '%r must be a string, found %s' % (string_member, type(value[string_member]).__name__)
    elif len(value) != 2:
        extra = sorted(name for name in value if name not in (code_member, string_member))
        reason = 'unexpected members %s' % (', '.join(repr(name) for name in extra))
    else:
        reason = 'invalid %r or %r' % (code_member, string_member)

    raise MalformedResponse('malformed %s: %s' % (where, reason), position)



def unpack_multicall(result, count):
    """ Split the *result* of a ``system.multicall`` request into one
        outcome per submitted call, in submission order. Each outcome is
        either the call's result :class:`xrpc.value.Value` or a
        :class:`xrpc.fault.Fault`. The *count* is the number of calls that
        were submitted; a reply with a different number of entries, or an
        entry that is neither a one-element array nor a fault struct, is a
        :class:`xrpc.errors.MalformedResponse`.
    """

    if not isinstance(result, values.Array):
        raise MalformedResponse('a multicall reply must be an array, found %s' % (type(result).__name__))

    if len(result) != count:
        raise MalformedResponse('a multicall reply must hold %d entries, found %d' % (count, len(result)))

    outcomes = list()

    for index, entry in enumerate(result):
        if isinstance(entry, values.Array):
            if len(entry) != 1:
                raise MalformedResponse('multicall entry %d must be a one-element array, found %d elements' % (index, len(entry)))
            outcomes.append(entry[0])

        elif isinstance(entry, values.Struct):
            outcomes.append(fault_from_value(entry, 'multicall entry %d' % (index)))

        else:
            raise MalformedResponse('multicall entry %d must be an array or a fault struct, found %s' % (index, type(entry).__name__))

    return outcomes


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
