"""Transport layer implementations."""

from .base import (
    ChannelClosedError,
    ChannelOptions,
    FramingError,
    Node,
    Publisher,
    Subscriber,
    TransportError,
    TransportPortError,
)

from . import local
from . import zmq

from .. import config


def node(**kwargs) -> Node:
    """Return a new :class:`Node` for the backend named by
    ``ACTIONLINK_TRANSPORT``; keyword arguments go to its constructor."""

    backend = config.transport

    if backend == "zmq":
        return zmq.ZmqNode(**kwargs)
    elif backend == "local":
        return local.LocalNode(**kwargs)
    else:
        raise ValueError(f"unknown ACTIONLINK_TRANSPORT backend: {backend!r}")
