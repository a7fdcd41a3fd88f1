from . import fields
from . import events
from . import codec
from . import parser
from . import request
from . import response
from . import builder

from .request import Request
from .builder import RequestBuilder


"""
xrpc Protocol Layer
===================

This package implements the XML-RPC document grammar: the encoding of
values, the request document, and the strict parsing of responses.

The protocol layer MUST NOT depend on any transport implementation
(e.g. HTTP, ZeroMQ, etc).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Client Facade (xrpc/client.py)
    High-level call API
    - call()
    - call_request()
    - multicall()
    Hides document + transport details

    │
    ▼
Request Builder (builder.py)
    Fluent construction of requests
    - Converts native Python arguments
    - No transport awareness

    │
    ▼
Documents (request.py, response.py)
    - <methodCall> rendering
    - <methodResponse> parsing
    - system.multicall packing/unpacking

    │
    ▼
Values (codec.py, parser.py, events.py)
    - Value -> XML text (codec)
    - XML events -> Value (parser, frame stack)
    - Pull-style events over expat (events)

    │
    ▼
Element Vocabulary (fields.py)
    Canonical element names
    Prevents string drift across system

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Transport Layer
    Moves bytes
    - HTTP (httpx)
    - ZeroMQ
    - Loopback (in process)

---------------------------------------------------------------------

Design Principles
-----------------

1. Transport Agnostic
   Documents are identical regardless of backend.

2. Strictness
   An ambiguous or malformed document is rejected, never guessed at.

3. Layer Isolation
   Dependencies only flow downward:
       Client -> Protocol -> Values
   Transports are handed bytes and return bytes.

4. Bounded Decoding
   Nesting depth is limited by configuration, never by the call stack.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
