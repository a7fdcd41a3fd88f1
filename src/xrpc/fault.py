""" The :class:`Fault` is how a remote server reports that a call failed.
    It is a legitimate outcome of a call rather than a malfunction, and is
    returned as such by the response layer; the :class:`xrpc.Client` call
    methods raise it, which is why it is also an :class:`xrpc.errors.Error`.
"""

from .errors import Error
from .value import I32_MAX, I32_MIN, Int, String, Struct

code_member = 'faultCode'
string_member = 'faultString'


class Fault(Error):
    """ A ``<fault>`` response: an integer *code* and a descriptive
        *string*, both supplied by the server. The meaning of the code is
        not defined by XML-RPC and depends entirely on the service.
    """

    def __init__(self, code, string):

        self.code = code
        self.string = string

        Error.__init__(self, code, string)


    def __eq__(self, other):
        if not isinstance(other, Fault):
            return NotImplemented
        return self.code == other.code and self.string == other.string


    def __hash__(self):
        return hash((self.code, self.string))


    def __repr__(self):
        return 'Fault(%r, %r)' % (self.code, self.string)


    def __str__(self):
        return '%s (%d)' % (self.string, self.code)


    @property
    def fault(self):
        return self


    @classmethod
    def from_value(cls, value):
        """ Interpret a decoded value as a fault. The value must be a
            :class:`xrpc.value.Struct` with exactly two members: an integer
            ``faultCode`` within the 32-bit range and a string
            ``faultString``. Returns None if the value has any other shape.
        """

        if not isinstance(value, Struct):
            return None

        if len(value) != 2:
            return None

        code = value.get(code_member)
        string = value.get(string_member)

        if not isinstance(code, Int) or not isinstance(string, String):
            return None

        if code.value < I32_MIN or code.value > I32_MAX:
            return None

        try:
            text = string.text
        except Error:
            return None

        return cls(code.value, text)


    def to_value(self):
        """ The inverse of :func:`from_value`.
        """

        members = ((code_member, Int(self.code)), (string_member, String(self.string)))
        return Struct(members)


# end of class Fault


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
