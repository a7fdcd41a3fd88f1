"""Element names of the XML-RPC grammar.

Keep these in one place to avoid stringly-typed document handling.
"""

# Envelope
METHOD_CALL = "methodCall"
METHOD_NAME = "methodName"
METHOD_RESPONSE = "methodResponse"
PARAMS = "params"
PARAM = "param"
FAULT = "fault"

# Values
VALUE = "value"
ARRAY = "array"
DATA = "data"
STRUCT = "struct"
MEMBER = "member"
NAME = "name"

# Scalars
I4 = "i4"
INT = "int"
I8 = "i8"
BOOLEAN = "boolean"
STRING = "string"
DOUBLE = "double"
DATETIME = "dateTime.iso8601"
BASE64 = "base64"
NIL = "nil"

# system.multicall
MULTICALL = "system.multicall"
MULTICALL_METHOD = "methodName"
MULTICALL_PARAMS = "params"

CONTENT_TYPE = "text/xml"
CHARSET = "utf-8"
