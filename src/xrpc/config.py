""" Process-wide defaults for :mod:`xrpc`. Each setting is read once from
    the environment when this module is imported; :class:`xrpc.Client`
    instances and the lower level functions accept per-call overrides, so
    these values only matter when nothing more specific is supplied.
"""

import os


version = '0.4.0'


def _flag(name, default):
    """ Interpret an environment variable as a boolean. Unset variables
        take the *default*; anything other than the usual spellings of
        true and false is a configuration error.
    """

    raw = os.environ.get(name)

    if raw is None or raw == '':
        return default

    raw = raw.strip().lower()

    if raw in ('1', 'true', 'yes', 'on'):
        return True
    if raw in ('0', 'false', 'no', 'off'):
        return False

    raise ValueError('%s must be a boolean, not %r' % (name, raw))


def _number(name, default, cast=int):

    raw = os.environ.get(name)

    if raw is None or raw == '':
        return default

    try:
        value = cast(raw)
    except ValueError:
        raise ValueError('%s must be numeric, not %r' % (name, raw))

    if value <= 0:
        raise ValueError('%s must be positive, not %r' % (name, raw))

    return value


# Name of the transport used when a Client is created without one.

transport = os.environ.get('XRPC_TRANSPORT', 'http').strip().lower()

# Maximum nesting of array/struct containers, applied when decoding and
# when encoding. The grammar itself imposes no limit.

max_depth = _number('XRPC_MAX_DEPTH', 64)

# The <nil/> and <i8> extensions are not part of the base protocol.
# Nil must be requested explicitly; i8 is widely understood and only
# affects the conversion of large Python integers.

allow_nil = _flag('XRPC_ALLOW_NIL', False)
allow_int64 = _flag('XRPC_ALLOW_INT64', True)

timeout = _number('XRPC_TIMEOUT', 30.0, float)

user_agent = os.environ.get('XRPC_USER_AGENT', 'xrpc/' + version)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
