"""ZeroMQ transport: nodes and the broker they meet at."""

from .node import ZmqNode, ZmqPublisher, ZmqSubscriber
from .broker import Broker
