"""In-process publish/subscribe transport.

Messages are handed from publisher to subscribers synchronously, in the
publishing thread, without being serialized. Any number of clients and
servers sharing one :class:`LocalNode` see each other's traffic, which makes
it the transport of choice for tests and for wiring components together in a
single process. Queue depth is meaningless without buffering and is ignored.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List

from .base import (
    ChannelClosedError,
    ChannelOptions,
    Node,
    Publisher,
    Subscriber,
    completed,
)

logger = logging.getLogger(__name__)


class LocalPublisher(Publisher):

    def __init__(self, node: 'LocalNode', topic: str, type_name: str, options: ChannelOptions):
        self.node = node
        self.topic = topic
        self.type_name = type_name
        self.options = options
        self.closed = False

    def publish(self, message) -> None:
        if self.closed:
            raise ChannelClosedError(f"{self.topic}: publisher has been shut down")
        self.node._deliver(self, message)

    def shutdown(self):
        self.closed = True
        self.node._forget_publisher(self)
        return completed()


class LocalSubscriber(Subscriber):

    def __init__(self, node: 'LocalNode', topic: str, type_name: str, callback, options: ChannelOptions):
        self.node = node
        self.topic = topic
        self.type_name = type_name
        self.callback = callback
        self.options = options
        self.closed = False

    def _incoming(self, message) -> None:
        if self.closed:
            return
        try:
            self.callback(message)
        except Exception:
            logger.exception("%s: subscriber callback failed", self.topic)

    def shutdown(self):
        self.closed = True
        self.node._forget_subscriber(self)
        return completed()


class LocalNode(Node):
    """Topic table shared by every channel created through this node.

    ``published`` records a ``(topic, message)`` tuple for every message
    sent through the node, in order.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._subscribers: Dict[str, List[LocalSubscriber]] = {}
        self._latched: Dict[str, Dict[LocalPublisher, object]] = {}
        self.published: List[tuple] = []

    def advertise(self, topic, type_name, options):
        return LocalPublisher(self, topic, type_name, options)

    def subscribe(self, topic, type_name, message_class, callback, options):
        subscriber = LocalSubscriber(self, topic, type_name, callback, options)
        with self._lock:
            self._subscribers.setdefault(topic, []).append(subscriber)
            latched = list(self._latched.get(topic, {}).values())

        for message in latched:
            subscriber._incoming(message)

        return subscriber

    def shutdown(self) -> None:
        with self._lock:
            subscribers = [s for group in self._subscribers.values() for s in group]
            self._subscribers.clear()
            self._latched.clear()

        for subscriber in subscribers:
            subscriber.closed = True

    def _deliver(self, publisher: LocalPublisher, message) -> None:
        with self._lock:
            self.published.append((publisher.topic, message))
            if publisher.options.latching:
                self._latched.setdefault(publisher.topic, {})[publisher] = message
            subscribers = list(self._subscribers.get(publisher.topic, ()))

        for subscriber in subscribers:
            subscriber._incoming(message)

    def _forget_publisher(self, publisher: LocalPublisher) -> None:
        with self._lock:
            latched = self._latched.get(publisher.topic)
            if latched is not None:
                latched.pop(publisher, None)

    def _forget_subscriber(self, subscriber: LocalSubscriber) -> None:
        with self._lock:
            group = self._subscribers.get(subscriber.topic, [])
            if subscriber in group:
                group.remove(subscriber)
