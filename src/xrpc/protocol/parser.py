""" Decode XML-RPC values and documents from a stream of
    :class:`xrpc.protocol.events.Event` instances.

    Nested arrays and structs are handled with an explicit stack of
    container frames rather than by recursion: each ``<array>`` or
    ``<struct>`` pushes a frame, its closing tag pops it. The depth of
    that stack is what the *max_depth* limit applies to, and a hostile
    document can therefore never exhaust the interpreter's call stack.

    The grammar is applied strictly. Anything the grammar does not allow
    at a given point raises a :class:`xrpc.errors.DocumentError` subclass
    naming what was expected and what was found; no attempt is made to
    guess at the meaning of an ambiguous document.
"""

from .. import config
from .. import value as values
from ..errors import DepthExceeded, DuplicateMember, InvalidValue, UnexpectedXml
from . import codec
from . import events
from . import fields


class _Frame:
    """ A container under construction. :func:`advance` is called each
        time the parser is positioned just inside the container or just
        after one of its children; it returns True when the next child
        value is about to start, or False once the container has been
        closed (including the enclosing ``</value>``).
    """

    def advance(self, parser):
        raise NotImplementedError()


    def add(self, value):
        raise NotImplementedError()


    def finish(self):
        raise NotImplementedError()



class _ArrayFrame(_Frame):

    def __init__(self):
        self.items = list()


    def advance(self, parser):

        parser.skip_space()
        event = parser.event

        if event.kind == events.START and event.name == fields.VALUE:
            return True

        if event.kind == events.END and event.name == fields.DATA:
            parser.advance()
            parser.expect_close(fields.ARRAY)
            parser.expect_close(fields.VALUE)
            return False

        parser.unexpected('<value> or </data>')


    def add(self, value):
        self.items.append(value)


    def finish(self):
        return values.Array(self.items)


# end of class _ArrayFrame



class _StructFrame(_Frame):

    def __init__(self):
        self.members = dict()
        self.name = None


    def advance(self, parser):

        # Close out the member whose value was just added, if any.

        if self.name is not None:
            parser.expect_close(fields.MEMBER)
            self.name = None

        parser.skip_space()
        event = parser.event

        if event.kind == events.END and event.name == fields.STRUCT:
            parser.advance()
            parser.expect_close(fields.VALUE)
            return False

        if event.kind != events.START or event.name != fields.MEMBER:
            parser.unexpected('<member> or </struct>')

        parser.advance()
        parser.expect_open(fields.NAME)

        position = parser.event.position
        name = parser.collect_text()
        parser.expect_close(fields.NAME, skip=False)

        if name in self.members:
            raise DuplicateMember(name, position)

        parser.skip_space()
        event = parser.event
        if event.kind != events.START or event.name != fields.VALUE:
            parser.unexpected('<value>')

        self.name = name
        return True


    def add(self, value):
        self.members[self.name] = value


    def finish(self):
        return values.Struct(self.members)


# end of class _StructFrame



class Parser:
    """ Decode values and documents from an
        :class:`xrpc.protocol.events.EventReader`. The parser always holds
        the current event in :attr:`event`; the ``expect`` methods check it
        and move on to the next one.

        The *allow_nil* and *max_depth* options default to the values in
        :mod:`xrpc.config`.
    """

    def __init__(self, reader, allow_nil=None, max_depth=None):

        if allow_nil is None:
            allow_nil = config.allow_nil
        if max_depth is None:
            max_depth = config.max_depth

        self.reader = reader
        self.allow_nil = allow_nil
        self.max_depth = max_depth
        self.event = reader.next()


    @classmethod
    def from_bytes(cls, data, allow_nil=None, max_depth=None):
        return cls(events.EventReader(data), allow_nil, max_depth)


    def advance(self):
        self.event = self.reader.next()


    def unexpected(self, expected):
        event = self.event
        raise UnexpectedXml(expected, event.describe(), event.position)


    def skip_space(self):
        """ Step over whitespace-only character data. Any other text found
            between elements is left in place for the caller to reject.
        """

        if self.event.is_space():
            self.advance()


    def expect_open(self, name, skip=True):

        if skip:
            self.skip_space()

        event = self.event
        if event.kind != events.START or event.name != name:
            self.unexpected('<%s>' % (name))

        self.advance()


    def expect_close(self, name, skip=True):

        if skip:
            self.skip_space()

        event = self.event
        if event.kind != events.END or event.name != name:
            self.unexpected('</%s>' % (name))

        self.advance()


    def expect_end(self):

        self.skip_space()

        if self.event.kind != events.EOF:
            self.unexpected('end of document')


    def collect_text(self):
        """ Return the character data at the current position, or an empty
            string if an element starts or ends here instead.
        """

        event = self.event

        if event.kind == events.TEXT:
            self.advance()
            return event.data

        return ''


    def parse_value(self):
        """ Decode the ``<value>`` element at the current position and
            return the resulting :class:`xrpc.value.Value`.
        """

        stack = list()
        item = self._open_value()

        while True:
            if isinstance(item, _Frame):
                if len(stack) >= self.max_depth:
                    raise DepthExceeded(self.max_depth, self.event.position)
                stack.append(item)
            elif stack:
                stack[-1].add(item)
            else:
                return item

            # Pop every container that closes here; if one of them has
            # another child, go back around and open it.

            while stack:
                frame = stack[-1]
                if frame.advance(self):
                    break

                stack.pop()
                finished = frame.finish()

                if stack:
                    stack[-1].add(finished)
                else:
                    return finished

            item = self._open_value()


    def _open_value(self):
        """ Consume an opening ``<value>`` and whatever it directly
            contains. Scalars are consumed through the closing ``</value>``
            and returned as a :class:`xrpc.value.Value`; for arrays and
            structs, a new frame is returned with the parser positioned
            just inside the container.
        """

        self.expect_open(fields.VALUE)

        event = self.event

        # A value with no type element is a string; this is also how an
        # empty <value></value> is read.

        if event.kind == events.TEXT:
            text = event.data
            self.advance()
            event = self.event

            if event.kind == events.END and event.name == fields.VALUE:
                self.advance()
                return values.String(text)

            if text.strip() != '':
                self.unexpected('</value> after untyped text')

        if event.kind == events.END and event.name == fields.VALUE:
            self.advance()
            return values.String('')

        if event.kind != events.START:
            self.unexpected('a type element or </value>')

        name = event.name
        position = event.position
        self.advance()

        if name == fields.ARRAY:
            self.expect_open(fields.DATA)
            return _ArrayFrame()

        if name == fields.STRUCT:
            return _StructFrame()

        if name == fields.NIL:
            if not self.allow_nil:
                raise InvalidValue(fields.NIL, '', position, 'the nil extension is not enabled')
            self.expect_close(fields.NIL, skip=False)
            self.expect_close(fields.VALUE)
            return values.Nil()

        try:
            scalar = codec.scalars[name]
        except KeyError:
            raise UnexpectedXml('a type element', '<%s>' % (name), position)

        text = self.collect_text()
        self.expect_close(name, skip=False)

        try:
            item = scalar(text)
        except ValueError as e:
            raise InvalidValue(name, text, position, str(e))

        # Exactly one type element is allowed; a second one shows up here
        # as something other than the closing </value>.

        self.expect_close(fields.VALUE)
        return item


# end of class Parser



def decode(data, allow_nil=None, max_depth=None):
    """ Decode a standalone ``<value>`` element held in *data* (bytes or
        str). Nothing but whitespace may follow it.
    """

    parser = Parser.from_bytes(data, allow_nil, max_depth)
    result = parser.parse_value()
    parser.expect_end()
    return result


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
