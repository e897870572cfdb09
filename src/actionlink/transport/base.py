"""Transport interface.

This is the (small) contract a publish/subscribe backend must satisfy for
:class:`actionlink.ActionClient` to bind its five channels. It lives apart
from any one backend so the client remains transport-agnostic.
"""

from __future__ import annotations

import concurrent.futures
from abc import ABC, abstractmethod
from typing import Any, Callable, Type

from ..config import ChannelOptions


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class ChannelClosedError(TransportError):
    """A message was sent through a channel that has been released."""


class TransportPortError(TransportError):
    """No suitable port could be bound or connected."""


class FramingError(TransportError, ValueError):
    """Inbound frames could not be decoded into the expected message."""


def completed(result: Any = None) -> concurrent.futures.Future:
    """Return a future that has already resolved to *result*."""

    future: concurrent.futures.Future = concurrent.futures.Future()
    future.set_result(result)
    return future


class Publisher(ABC):
    """Outbound end of a channel."""

    topic: str
    type_name: str

    @abstractmethod
    def publish(self, message) -> None:
        """Send *message*; raise ChannelClosedError after release."""

    @abstractmethod
    def shutdown(self) -> concurrent.futures.Future:
        """Release the channel. The future resolves once released."""


class Subscriber(ABC):
    """Inbound end of a channel."""

    topic: str
    type_name: str

    @abstractmethod
    def shutdown(self) -> concurrent.futures.Future:
        """Stop delivery and release the channel."""


class Node(ABC):
    """Factory for the channels of one participant."""

    @abstractmethod
    def advertise(self, topic: str, type_name: str,
                  options: ChannelOptions) -> Publisher:
        """Create a publisher for *topic*."""

    @abstractmethod
    def subscribe(self, topic: str, type_name: str, message_class: Type,
                  callback: Callable[[Any], None],
                  options: ChannelOptions) -> Subscriber:
        """Create a subscriber that decodes *message_class* records and
        hands each one to *callback*."""

    @abstractmethod
    def shutdown(self) -> None:
        """Stop the node and everything it created."""
