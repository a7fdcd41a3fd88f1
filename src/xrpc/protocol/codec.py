""" Conversion between :class:`xrpc.value.Value` trees and the XML-RPC
    value grammar. Encoding is handled here in full; decoding is driven
    by :mod:`xrpc.protocol.parser`, which relies on the scalar parsing
    functions defined in this module so that the formatting and parsing
    rules for each type sit next to each other.
"""

import base64
import binascii
import decimal
import math
import re

from .. import config
from .. import value as values
from ..errors import EncodingError
from . import fields


# Characters that XML 1.0 does not allow in a document at all, escaped or
# not. Tab, newline and carriage return are the only permitted controls.

_illegal = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]')


def escape(text):
    """ Escape *text* for use as character data. Ampersands and angle
        brackets are replaced by entity references; carriage returns are
        written as character references, otherwise the receiving parser
        would normalize them into newlines.

        Text that cannot be carried in a UTF-8 XML document at all is
        rejected with :class:`EncodingError`: undecodable bytes, lone
        surrogates, and the control characters XML 1.0 forbids.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError('text is not valid UTF-8: ' + str(e))

    try:
        text.encode('utf-8')
    except UnicodeEncodeError as e:
        raise EncodingError('text cannot be encoded as UTF-8: ' + str(e))

    illegal = _illegal.search(text)
    if illegal is not None:
        raise EncodingError('character %r is not allowed in XML' % (illegal.group(0)))

    text = text.replace('&', '&amp;')
    text = text.replace('<', '&lt;')
    text = text.replace('>', '&gt;')
    text = text.replace('\r', '&#13;')
    return text



def format_double(number):
    """ Render a float with a mandatory decimal point and without an
        exponent, using the shortest digit string that reads back as the
        same float.
    """

    if math.isnan(number) or math.isinf(number):
        raise EncodingError('%r cannot be represented as an XML-RPC double' % (number))

    text = repr(number)

    if 'e' in text or 'E' in text:
        text = format(decimal.Decimal(text), 'f')

    if '.' not in text:
        text = text + '.0'

    return text



def format_datetime(when):
    """ Render a :class:`xrpc.value.DateTime` in the compact form
        ``YYYYMMDDTHH:MM:SS``. Fractional seconds and the UTC offset are
        appended only when they are non-zero.
    """

    text = '%04d%02d%02dT%02d:%02d:%02d' % (when.year, when.month, when.day,
                                            when.hour, when.minute, when.second)

    microsecond = when.microsecond
    if microsecond:
        if microsecond % 1000 == 0:
            text += '.%03d' % (microsecond // 1000)
        else:
            text += '.%06d' % (microsecond)

    offset = when.offset
    if offset:
        sign = '+' if offset > 0 else '-'
        hours, minutes = divmod(abs(offset), 60)
        text += '%s%02d:%02d' % (sign, hours, minutes)

    return text



def _element(tag, text):
    return '<%s>%s</%s>' % (tag, text, tag)



class Encoder:
    """ Render values as XML text. One :class:`Encoder` may be reused for
        any number of values; it holds no state beyond its options.

        Nil values are only accepted if *allow_nil* is set. Trees nested
        deeper than *max_depth* containers are rejected, which keeps the
        recursive rendering well inside the interpreter's stack limit.
    """

    dispatch = dict()

    def __init__(self, allow_nil=None, max_depth=None):

        if allow_nil is None:
            allow_nil = config.allow_nil
        if max_depth is None:
            max_depth = config.max_depth

        self.allow_nil = allow_nil
        self.max_depth = max_depth


    def dumps(self, value):
        """ Return the ``<value>`` element for *value* as a string.
        """

        out = list()
        self.dump(value, out.append)
        return ''.join(out)


    def dump(self, value, write, depth=0):

        function = None

        for klass in type(value).__mro__:
            try:
                function = self.dispatch[klass]
            except KeyError:
                continue
            else:
                break

        if function is None:
            raise EncodingError('cannot encode %s objects; use xrpc.value.to_value()' % (type(value).__name__))

        write('<value>')
        function(self, value, write, depth)
        write('</value>')


    # Scalars are rendered as <tag>text</tag>, with the element name
    # taken from the value's class.

    def dump_int(self, value, write, depth):
        write(_element(value.tag, '%d' % (value.value)))

    dispatch[values.Int] = dump_int
    dispatch[values.Int64] = dump_int


    def dump_bool(self, value, write, depth):
        write(_element(value.tag, '1' if value.value else '0'))

    dispatch[values.Bool] = dump_bool


    def dump_double(self, value, write, depth):
        write(_element(value.tag, format_double(value.value)))

    dispatch[values.Double] = dump_double


    def dump_string(self, value, write, depth):
        write(_element(value.tag, escape(value.value)))

    dispatch[values.String] = dump_string


    def dump_datetime(self, value, write, depth):
        write(_element(value.tag, format_datetime(value)))

    dispatch[values.DateTime] = dump_datetime


    def dump_base64(self, value, write, depth):
        write(_element(value.tag, base64.b64encode(value.value).decode('ascii')))

    dispatch[values.Base64] = dump_base64


    def dump_nil(self, value, write, depth):

        if not self.allow_nil:
            raise EncodingError('cannot encode nil unless the nil extension is enabled')

        write('<%s/>' % (value.tag))

    dispatch[values.Nil] = dump_nil


    def dump_array(self, value, write, depth):

        depth += 1
        if depth > self.max_depth:
            raise EncodingError('array/struct nesting exceeds the limit of %d' % (self.max_depth))

        write('<%s><%s>' % (value.tag, fields.DATA))
        for item in value:
            self.dump(item, write, depth)
        write('</%s></%s>' % (fields.DATA, value.tag))

    dispatch[values.Array] = dump_array


    def dump_struct(self, value, write, depth):

        depth += 1
        if depth > self.max_depth:
            raise EncodingError('array/struct nesting exceeds the limit of %d' % (self.max_depth))

        write('<%s>' % (value.tag))
        for name, member in value.items():
            write('<%s>' % (fields.MEMBER))
            write(_element(fields.NAME, escape(name)))
            self.dump(member, write, depth)
            write('</%s>' % (fields.MEMBER))
        write('</%s>' % (value.tag))

    dispatch[values.Struct] = dump_struct


# end of class Encoder



def encode(value, allow_nil=None, max_depth=None):
    """ Convenience wrapper: render a single *value* with a new
        :class:`Encoder`.
    """

    return Encoder(allow_nil, max_depth).dumps(value)


### Scalar parsing. Each function takes the character data found inside
### the type tag and either returns the Python payload or raises
### ValueError explaining what is wrong with it; the parser turns that
### into an InvalidValue carrying the document position.

_integer = re.compile(r'[+-]?[0-9]+\Z')
_double = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z')
_datetime = re.compile(r'''
    (?P<year>[0-9]{4})-?(?P<month>[0-9]{2})-?(?P<day>[0-9]{2})
    T
    (?P<hour>[0-9]{2}):?(?P<minute>[0-9]{2}):?(?P<second>[0-9]{2})
    (?:[.,](?P<fraction>[0-9]+))?
    (?P<zone>Z|(?P<sign>[+-])(?P<zhour>[0-9]{2})(?::?(?P<zminute>[0-9]{2}))?)?
    \Z''', re.VERBOSE)


def parse_integer(text, minimum=values.I32_MIN, maximum=values.I32_MAX):

    if _integer.match(text) is None:
        raise ValueError('not a decimal integer')

    number = int(text)

    if number < minimum or number > maximum:
        raise ValueError('out of range')

    return number



def parse_boolean(text):

    if text == '0':
        return False
    if text == '1':
        return True

    raise ValueError('boolean must be 0 or 1')



def parse_double(text):

    if _double.match(text) is None:
        raise ValueError('not a decimal number')

    number = float(text)

    if math.isinf(number):
        raise ValueError('out of range')

    return number



def parse_datetime(text):
    """ Parse an ISO 8601 date and time. Both the compact form used by
        XML-RPC (``19980717T14:08:55``) and the extended form
        (``1998-07-17T14:08:55``) are accepted, each with an optional
        fraction and an optional ``Z`` or numeric UTC offset.
    """

    match = _datetime.match(text)
    if match is None:
        raise ValueError('not an ISO 8601 date and time')

    fraction = match.group('fraction')
    if fraction is None:
        microsecond = 0
    else:
        microsecond = int(fraction[:6].ljust(6, '0'))

    zone = match.group('zone')
    if zone is None:
        offset = None
    elif zone == 'Z':
        offset = 0
    else:
        hours = int(match.group('zhour'))
        minutes = int(match.group('zminute') or 0)
        if hours > 23 or minutes > 59:
            raise ValueError('UTC offset out of range')
        offset = hours * 60 + minutes
        if match.group('sign') == '-':
            offset = -offset

    year = int(match.group('year'))
    month = int(match.group('month'))
    day = int(match.group('day'))
    hour = int(match.group('hour'))
    minute = int(match.group('minute'))
    second = int(match.group('second'))

    try:
        return values.DateTime(year, month, day, hour, minute, second, microsecond, offset)
    except EncodingError as e:
        raise ValueError(str(e))



def parse_base64(text):
    """ Decode base64 text. Servers commonly wrap their output, so all
        whitespace (including newlines) is removed first; what remains
        must be strictly valid base64.
    """

    compact = ''.join(text.split())

    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as e:
        raise ValueError(str(e))


# Map the scalar element names to a function producing the Value.

def _int(text):
    return values.Int(parse_integer(text))

def _int64(text):
    return values.Int64(parse_integer(text, values.I64_MIN, values.I64_MAX))

def _boolean(text):
    return values.Bool(parse_boolean(text))

def _double_value(text):
    return values.Double(parse_double(text))

def _base64(text):
    return values.Base64(parse_base64(text))


scalars = {
    fields.I4: _int,
    fields.INT: _int,
    fields.I8: _int64,
    fields.BOOLEAN: _boolean,
    fields.DOUBLE: _double_value,
    fields.STRING: values.String,
    fields.DATETIME: parse_datetime,
    fields.BASE64: _base64,
}


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
