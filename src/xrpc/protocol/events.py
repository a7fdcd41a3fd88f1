""" A pull-style event source over the expat XML parser. The document is
    fed to expat a chunk at a time, only as fast as the consumer asks for
    events, so a malformed document is reported at the first point where
    the consumer would have run into it.

    Only the constructs that can occur in an XML-RPC document are passed
    through: element starts and ends, and character data. Comments and
    processing instructions are dropped. Attributes, document type
    declarations and entity declarations are rejected outright; none of
    them have a place in the grammar, and the latter two are the usual
    vehicle for entity expansion attacks.
"""

import collections

from xml.parsers import expat

from ..errors import UnexpectedXml, XmlError


START = 'start'
END = 'end'
TEXT = 'text'
EOF = 'eof'

chunk_size = 65536


class Event:
    """ A single parse event. The *name* is the element name for
        :data:`START` and :data:`END` events; *data* holds the character
        data for :data:`TEXT` events. The *position* is a (line, column)
        tuple.
    """

    __slots__ = ('kind', 'name', 'data', 'position')

    def __init__(self, kind, name=None, data=None, position=None):

        self.kind = kind
        self.name = name
        self.data = data
        self.position = position


    def __repr__(self):
        return 'Event(%r, %r, %r)' % (self.kind, self.name, self.data)


    def describe(self):
        """ Return a short human-readable rendition of this event, for
            inclusion in error messages.
        """

        kind = self.kind

        if kind == START:
            return '<%s>' % (self.name)
        if kind == END:
            return '</%s>' % (self.name)
        if kind == TEXT:
            data = self.data
            if len(data) > 40:
                data = data[:37] + '...'
            return 'text %r' % (data,)

        return 'end of document'


    def is_space(self):
        return self.kind == TEXT and self.data.strip() == ''


# end of class Event



class EventReader:
    """ Pull :class:`Event` instances out of a complete document held in
        memory, as bytes or str. Consecutive character data, including
        CDATA sections and expanded character references, is delivered
        as a single :data:`TEXT` event. After the end of the document has
        been reached, every further call to :func:`next` returns an
        :data:`EOF` event.
    """

    def __init__(self, data):

        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)

        self.data = data
        self.offset = 0
        self.finished = False

        self.events = collections.deque()
        self.text = list()
        self.text_position = None

        parser = expat.ParserCreate()
        parser.StartElementHandler = self._start
        parser.EndElementHandler = self._end
        parser.CharacterDataHandler = self._characters
        parser.StartDoctypeDeclHandler = self._doctype
        parser.EntityDeclHandler = self._entity
        self.parser = parser


    def _position(self):
        return (self.parser.CurrentLineNumber, self.parser.CurrentColumnNumber)


    def _flush_text(self):

        if self.text:
            data = ''.join(self.text)
            self.events.append(Event(TEXT, data=data, position=self.text_position))
            self.text = list()
            self.text_position = None


    def _start(self, name, attributes):

        position = self._position()

        if attributes:
            raise UnexpectedXml('<%s> without attributes' % (name), '<%s %s=...>' % (name, next(iter(attributes))), position)

        self._flush_text()
        self.events.append(Event(START, name=name, position=position))


    def _end(self, name):

        self._flush_text()
        self.events.append(Event(END, name=name, position=self._position()))


    def _characters(self, data):

        if not self.text:
            self.text_position = self._position()

        self.text.append(data)


    def _doctype(self, name, system_id, public_id, has_internal_subset):
        raise XmlError('document type declarations are not allowed', self._position())


    def _entity(self, name, *ignored):
        raise XmlError('entity declarations are not allowed', self._position())


    def _feed(self):
        """ Hand the next chunk of the document to expat. The final call
            signals the end of the input, which is when expat checks that
            every element has been closed.
        """

        data = self.data
        start = self.offset
        end = start + chunk_size
        chunk = data[start:end]
        final = end >= len(data)

        self.offset = end

        try:
            self.parser.Parse(chunk, final)
        except expat.ExpatError as e:
            message = expat.ErrorString(e.code)
            raise XmlError('malformed XML: ' + message, (e.lineno, e.offset))

        if final:
            self._flush_text()
            self.finished = True


    def next(self):
        """ Return the next :class:`Event`.
        """

        events = self.events

        while not events:
            if self.finished:
                return Event(EOF, position=self._position())
            self._feed()

        return events.popleft()


# end of class EventReader


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
