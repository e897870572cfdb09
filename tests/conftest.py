import pytest

import actionlink
import unitserver

from actionlink.transport.local import LocalNode
from actionlink.transport.zmq import Broker


@pytest.fixture
def node():

    node = LocalNode()
    yield node
    node.shutdown()


@pytest.fixture
def server(node):

    server = unitserver.UnitServer(node)
    yield server
    server.shutdown()


@pytest.fixture
def client(node, server):

    clock = FixedClock()
    client = actionlink.ActionClient(node, 'fibonacci', 'Fibonacci', clock=clock)
    yield client
    client.shutdown()


@pytest.fixture
def broker():

    # Loopback only, on whatever ports are free starting from the default.
    broker = Broker(address='127.0.0.1')
    yield broker
    broker.stop()


class FixedClock:
    """ Time provider that counts up one second per call, so stamps are
        predictable.
    """

    def __init__(self):
        self.secs = 1000

    def __call__(self):
        self.secs += 1
        return actionlink.messages.Time(self.secs, 0)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
