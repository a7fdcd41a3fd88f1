""" The XML-RPC value model. Every value the protocol can carry is an
    instance of one of the :class:`Value` subclasses defined here; the
    payload is always available as the *value* attribute. Instances are
    immutable once constructed: containers copy their contents into a
    tuple or a read-only mapping, so a tree cannot be modified (or made
    cyclic) after the fact.

    Native Python objects can be converted with :func:`to_value`, and any
    tree can be turned back into plain Python objects with
    :func:`Value.to_python`.
"""

import datetime
import types

from . import config
from .errors import EncodingError


I32_MIN = -2 ** 31
I32_MAX = 2 ** 31 - 1
I64_MIN = -2 ** 63
I64_MAX = 2 ** 63 - 1


class Value:
    """ Base class for all XML-RPC values. Two values are equal only if
        they are the same variant carrying equal payloads; ``Int(1)`` is
        not equal to ``Int64(1)``, nor to the Python integer 1.

        :ivar tag: The element name used for this variant on the wire.
    """

    __slots__ = ('value',)
    tag = None

    def __init__(self, value):
        self.value = value


    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()


    def __hash__(self):
        return hash((type(self).__name__, self._key()))


    def __repr__(self):
        return '%s(%r)' % (type(self).__name__, self.value)


    def _key(self):
        return self.value


    def to_python(self):
        """ Return the payload as a plain Python object.
        """

        return self.value


# end of class Value



class Int(Value):
    """ A 32-bit signed integer, ``<i4>`` or ``<int>`` on the wire.
    """

    __slots__ = ()
    tag = 'i4'
    minimum = I32_MIN
    maximum = I32_MAX

    def __init__(self, value):

        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError('%s requires an int, not %s' % (type(self).__name__, type(value).__name__))

        if value < self.minimum or value > self.maximum:
            raise EncodingError('%d is out of range for %s' % (value, type(self).__name__))

        Value.__init__(self, value)


class Int64(Int):
    """ A 64-bit signed integer, carried in the ``<i8>`` extension tag.
    """

    __slots__ = ()
    tag = 'i8'
    minimum = I64_MIN
    maximum = I64_MAX


class Bool(Value):

    __slots__ = ()
    tag = 'boolean'

    def __init__(self, value):

        if not isinstance(value, bool):
            raise EncodingError('Bool requires a bool, not %s' % (type(value).__name__))

        Value.__init__(self, value)


class Double(Value):

    __slots__ = ()
    tag = 'double'

    def __init__(self, value):

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EncodingError('Double requires a float, not %s' % (type(value).__name__))

        Value.__init__(self, float(value))


class String(Value):
    """ A text value. The payload may be given as :class:`str` or as raw
        :class:`bytes`; bytes are kept as-is and only checked for valid
        UTF-8 when the text is actually needed, either by reading
        :attr:`text` or by encoding the value into a document.
    """

    __slots__ = ()
    tag = 'string'

    def __init__(self, value=''):

        if isinstance(value, (bytearray, memoryview)):
            value = bytes(value)

        if not isinstance(value, (str, bytes)):
            raise EncodingError('String requires str or bytes, not %s' % (type(value).__name__))

        Value.__init__(self, value)


    @property
    def text(self):
        """ The payload as :class:`str`. Raises :class:`EncodingError` if
            the payload was supplied as bytes that are not valid UTF-8.
        """

        value = self.value

        if isinstance(value, str):
            return value

        try:
            return value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError('string is not valid UTF-8: ' + str(e))


    def _key(self):
        value = self.value
        if isinstance(value, bytes):
            try:
                return value.decode('utf-8')
            except UnicodeDecodeError:
                pass
        return value


    def to_python(self):
        return self.text


class Base64(Value):
    """ Opaque binary data, transmitted as base64 text.
    """

    __slots__ = ()
    tag = 'base64'

    def __init__(self, value=b''):

        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodingError('Base64 requires bytes, not %s' % (type(value).__name__))

        Value.__init__(self, bytes(value))


class DateTime(Value):
    """ A calendar date and time of day, ``<dateTime.iso8601>`` on the
        wire. The UTC *offset* (in minutes east of UTC) and the fractional
        *microsecond* component are both optional. An absent offset and an
        offset of zero are treated as the same value, as are an absent and
        a zero fraction.

        The *value* attribute holds the instance itself; the individual
        fields are available as attributes.
    """

    __slots__ = ('year', 'month', 'day', 'hour', 'minute', 'second', 'microsecond', 'offset')
    tag = 'dateTime.iso8601'

    def __init__(self, year, month, day, hour=0, minute=0, second=0, microsecond=0, offset=None):

        # Let the datetime module do the calendar checks; it rejects the
        # thirteenth month, the thirty-first of April, and so on.

        try:
            datetime.datetime(year, month, day, hour, minute, second, microsecond)
        except (TypeError, ValueError) as e:
            raise EncodingError('invalid date/time: ' + str(e))

        if offset is not None:
            if isinstance(offset, bool) or not isinstance(offset, int):
                raise EncodingError('UTC offset must be an int number of minutes')
            if abs(offset) >= 24 * 60:
                raise EncodingError('UTC offset out of range: %d minutes' % (offset))

        self.year = year
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self.second = second
        self.microsecond = microsecond
        self.offset = offset

        Value.__init__(self, self)


    def __repr__(self):
        fields = (self.year, self.month, self.day, self.hour, self.minute, self.second, self.microsecond, self.offset)
        return 'DateTime(%d, %d, %d, %d, %d, %d, %d, %r)' % fields


    def _key(self):
        return (self.year, self.month, self.day,
                self.hour, self.minute, self.second, self.microsecond,
                self.offset or 0)


    @classmethod
    def from_datetime(cls, when):
        """ Build a :class:`DateTime` from a :class:`datetime.datetime` or a
            :class:`datetime.date`. An aware datetime keeps its UTC offset,
            rounded down to whole minutes.
        """

        if not isinstance(when, datetime.datetime):
            if isinstance(when, datetime.date):
                return cls(when.year, when.month, when.day)
            raise EncodingError('expected a datetime, not %s' % (type(when).__name__))

        offset = when.utcoffset()
        if offset is not None:
            offset = int(offset.total_seconds() // 60)

        return cls(when.year, when.month, when.day,
                   when.hour, when.minute, when.second, when.microsecond,
                   offset)


    def to_datetime(self):
        """ Return the equivalent :class:`datetime.datetime`. The result is
            timezone-aware only if an offset was present.
        """

        tzinfo = None
        if self.offset is not None:
            tzinfo = datetime.timezone(datetime.timedelta(minutes=self.offset))

        return datetime.datetime(self.year, self.month, self.day,
                                 self.hour, self.minute, self.second,
                                 self.microsecond, tzinfo)


    def to_python(self):
        return self.to_datetime()


# end of class DateTime



class Array(Value):
    """ An ordered sequence of values. Order is significant and preserved
        through encoding and decoding.
    """

    __slots__ = ()
    tag = 'array'

    def __init__(self, values=()):

        values = tuple(values)

        for value in values:
            if not isinstance(value, Value):
                raise EncodingError('array elements must be Value instances, not %s' % (type(value).__name__))

        Value.__init__(self, values)


    def __getitem__(self, index):
        return self.value[index]


    def __iter__(self):
        return iter(self.value)


    def __len__(self):
        return len(self.value)


    def __repr__(self):
        return 'Array(%r)' % (list(self.value),)


    def to_python(self):
        return [value.to_python() for value in self.value]


# end of class Array



class Struct(Value):
    """ A mapping of member names to values. Names are unique; insertion
        order carries no meaning but is kept, so that encoding a given
        struct always produces the same document. The *members* may be a
        mapping or an iterable of (name, value) pairs; a name repeated in
        the pairs is an error rather than a silent overwrite.
    """

    __slots__ = ()
    tag = 'struct'

    def __init__(self, members=()):

        try:
            pairs = members.items()
        except AttributeError:
            pairs = members

        collected = dict()

        for name, value in pairs:
            if not isinstance(name, str):
                raise EncodingError('struct member names must be str, not %s' % (type(name).__name__))
            if not isinstance(value, Value):
                raise EncodingError('struct member %r must be a Value, not %s' % (name, type(value).__name__))
            if name in collected:
                raise EncodingError('duplicate struct member %r' % (name,))
            collected[name] = value

        Value.__init__(self, types.MappingProxyType(collected))


    def __contains__(self, name):
        return name in self.value


    def __getitem__(self, name):
        return self.value[name]


    def __iter__(self):
        return iter(self.value)


    def __len__(self):
        return len(self.value)


    def __repr__(self):
        return 'Struct(%r)' % (dict(self.value),)


    def _key(self):
        return frozenset(self.value.items())


    def get(self, name, default=None):
        return self.value.get(name, default)


    def items(self):
        return self.value.items()


    def to_python(self):
        return dict((name, value.to_python()) for name, value in self.value.items())


# end of class Struct



class Nil(Value):
    """ The explicit absence of a value, ``<nil/>``. Only valid where the
        nil extension has been enabled.
    """

    __slots__ = ()
    tag = 'nil'

    def __init__(self):
        Value.__init__(self, None)


    def __repr__(self):
        return 'Nil()'


def to_value(thing, allow_nil=None, allow_int64=None):
    """ Convert a native Python object into a :class:`Value` tree. Existing
        :class:`Value` instances pass through untouched, which allows mixing
        native objects and explicit variants (for example, to force an
        :class:`Int64` for a small number).

        Integers become :class:`Int` when they fit in 32 bits, otherwise
        :class:`Int64` if *allow_int64* is set. None becomes :class:`Nil`
        only if *allow_nil* is set. Both flags default to the values in
        :mod:`xrpc.config`. Anything that cannot be represented raises
        :class:`EncodingError`.
    """

    if allow_nil is None:
        allow_nil = config.allow_nil
    if allow_int64 is None:
        allow_int64 = config.allow_int64

    return _Converter(allow_nil, allow_int64).convert(thing)



class _Converter:
    """ Helper for :func:`to_value`; tracks the containers currently being
        converted so that a self-referencing list or dict is reported
        instead of recursing forever.
    """

    def __init__(self, allow_nil, allow_int64):

        self.allow_nil = allow_nil
        self.allow_int64 = allow_int64
        self.memo = set()


    def convert(self, thing):

        if isinstance(thing, Value):
            return thing

        if thing is None:
            if not self.allow_nil:
                raise EncodingError('cannot convert None unless the nil extension is enabled')
            return Nil()

        # bool is a subclass of int, check it first.

        if isinstance(thing, bool):
            return Bool(thing)

        if isinstance(thing, int):
            if I32_MIN <= thing <= I32_MAX:
                return Int(thing)
            if not self.allow_int64:
                raise EncodingError('%d does not fit in 32 bits and the i8 extension is disabled' % (thing))
            return Int64(thing)

        if isinstance(thing, float):
            return Double(thing)

        if isinstance(thing, str):
            return String(thing)

        if isinstance(thing, (bytes, bytearray, memoryview)):
            return Base64(thing)

        if isinstance(thing, (datetime.datetime, datetime.date)):
            return DateTime.from_datetime(thing)

        if isinstance(thing, (list, tuple, dict)):
            key = id(thing)
            if key in self.memo:
                raise EncodingError('cannot convert a recursive ' + type(thing).__name__)

            self.memo.add(key)
            try:
                if isinstance(thing, dict):
                    converted = Struct(self._members(thing))
                else:
                    converted = Array([self.convert(item) for item in thing])
            finally:
                self.memo.discard(key)

            return converted

        raise EncodingError('cannot convert %s objects' % (type(thing).__name__))


    def _members(self, thing):

        for name, value in thing.items():
            if not isinstance(name, str):
                raise EncodingError('dictionary keys must be str, not %s' % (type(name).__name__))
            yield (name, self.convert(value))


# end of class _Converter


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
