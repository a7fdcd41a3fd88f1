""" Python implementation of an XML-RPC client. This includes the typed
    value model, strict parsing and rendering of XML-RPC documents, the
    system.multicall batching convention, and pluggable transports for
    HTTP and ZeroMQ.
"""

from loguru import logger

# Utility components.

from . import config
from . import errors
from . import value

# Submodules used by multiple other components.

from . import fault
from . import protocol
from . import transport

# Primary public-facing interfaces.

from .client import Client
from .errors import Error, EncodingError, DocumentError
from .fault import Fault
from .protocol import Request, RequestBuilder
from .transport import TransportError
from .value import (
    Value, Int, Int64, Bool, Double, String, DateTime, Base64,
    Array, Struct, Nil, to_value,
)

__version__ = config.version

# Library logging stays silent unless the application asks for it with
# logger.enable('xrpc').

logger.disable(__name__)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
