import importlib
import pytest
import xrpc


declaration = '<?xml version="1.0"?>\n'


@pytest.fixture
def respond():
    """ Return a function that wraps a value in a successful response
        document, the way a server would send it back.
    """

    def respond(value):
        body = xrpc.protocol.codec.encode(value, allow_nil=True)
        document = declaration + '<methodResponse><params><param>' + body + '</param></params></methodResponse>'
        return document.encode('utf-8')

    return respond


@pytest.fixture
def respond_fault():

    def respond_fault(code, string):
        body = xrpc.protocol.codec.encode(xrpc.Fault(code, string).to_value())
        document = declaration + '<methodResponse><fault>' + body + '</fault></methodResponse>'
        return document.encode('utf-8')

    return respond_fault


@pytest.fixture
def reload_config(monkeypatch):
    """ Reload :mod:`xrpc.config` after changing the environment with
        *monkeypatch*; the original settings are restored afterwards.
    """

    yield lambda: importlib.reload(xrpc.config)

    monkeypatch.undo()
    importlib.reload(xrpc.config)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
