"""ZeroMQ publish/subscribe transport.

A :class:`ZmqNode` connects to a :class:`~actionlink.transport.zmq.Broker`:
publishers are XPUB sockets connected to the broker frontend, subscribers are
SUB sockets connected to the broker backend. All sockets belonging to a node
are serviced by one background thread; callers hand work to that thread via
an internal queue and a signal over an inproc PAIR socket, so every
subscription callback for a node runs on the same thread, one at a time.
"""

from __future__ import annotations

import concurrent.futures
import logging
import queue
import threading
from typing import Callable, Dict, Optional

import zmq

from ... import config
from ..base import (
    ChannelClosedError,
    ChannelOptions,
    FramingError,
    Node,
    Publisher,
    Subscriber,
    TransportError,
    completed,
)
from .framing import from_pub_frames, to_pub_frames, topic_frame

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()

_STOP = object()


class ZmqPublisher(Publisher):
    """XPUB publisher.

    A latched publisher remembers the frames it last sent and sends them
    again whenever a matching subscription arrives from the broker. Existing
    subscribers on the same topic see that message a second time.
    """

    def __init__(self, node: 'ZmqNode', topic: str, type_name: str, options: ChannelOptions):
        self.node = node
        self.topic = topic
        self.type_name = type_name
        self.options = options
        self.closed = False

        self._topic = topic_frame(topic)
        self._latched: Optional[tuple] = None

        self.socket = zmq_context.socket(zmq.XPUB)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.setsockopt(zmq.SNDHWM, options.queue_size)
        if options.latching:
            self.socket.setsockopt(zmq.XPUB_VERBOSE, 1)
        self.socket.connect(node.publish_endpoint)

        node._call(lambda: node._attach(self.socket, self._incoming))

    def publish(self, message) -> None:
        if self.closed or self.node._stopped:
            raise ChannelClosedError(f"{self.topic}: publisher has been shut down")

        frames = to_pub_frames(self.topic, self.type_name, message)
        self.node._call(lambda: self._send(frames))

    def shutdown(self) -> concurrent.futures.Future:
        if self.closed:
            return completed()

        self.closed = True
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.node._call(lambda: self.node._release(self.socket, future))
        return future

    def _send(self, frames: tuple) -> None:
        self.socket.send_multipart(frames)
        if self.options.latching:
            self._latched = frames

    def _incoming(self) -> None:
        # XPUB sockets receive subscription events: a leading byte of 1 for
        # subscribe, 0 for unsubscribe, followed by the topic prefix.
        event = self.socket.recv()

        if event[:1] != b"\x01" or self._latched is None:
            return

        if self._topic.startswith(event[1:]):
            logger.debug("%s: resending latched message", self.topic)
            self.socket.send_multipart(self._latched)


class ZmqSubscriber(Subscriber):

    def __init__(self, node: 'ZmqNode', topic: str, type_name: str, message_class,
                 callback: Callable, options: ChannelOptions):
        self.node = node
        self.topic = topic
        self.type_name = type_name
        self.message_class = message_class
        self.callback = callback
        self.options = options
        self.closed = False

        self.socket = zmq_context.socket(zmq.SUB)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.setsockopt(zmq.RCVHWM, options.queue_size)
        self.socket.connect(node.subscribe_endpoint)
        self.socket.setsockopt(zmq.SUBSCRIBE, topic_frame(topic))

        node._call(lambda: node._attach(self.socket, self._incoming))

    def shutdown(self) -> concurrent.futures.Future:
        if self.closed:
            return completed()

        self.closed = True
        future: concurrent.futures.Future = concurrent.futures.Future()
        self.node._call(lambda: self.node._release(self.socket, future))
        return future

    def _incoming(self) -> None:
        parts = self.socket.recv_multipart()

        if self.closed:
            return

        try:
            message = from_pub_frames(parts, self.type_name, self.message_class)
        except FramingError as exc:
            logger.warning("dropping message: %s", exc)
            return

        self.callback(message)


class ZmqNode(Node):
    """One participant on a broker. The *publish_endpoint* is the broker
    frontend, the *subscribe_endpoint* the broker backend; both default to
    the values in :mod:`actionlink.config`.
    """

    def __init__(self, publish_endpoint: Optional[str] = None,
                 subscribe_endpoint: Optional[str] = None):
        if publish_endpoint is None:
            publish_endpoint = config.publish_endpoint
        if subscribe_endpoint is None:
            subscribe_endpoint = config.subscribe_endpoint

        self.publish_endpoint = publish_endpoint
        self.subscribe_endpoint = subscribe_endpoint

        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._handlers: Dict[zmq.Socket, Callable[[], None]] = {}

        internal = f"inproc://actionlink.ZmqNode:signal:{id(self)}"
        self._sig_rx = zmq_context.socket(zmq.PAIR)
        self._sig_rx.bind(internal)
        self._sig_tx = zmq_context.socket(zmq.PAIR)
        self._sig_tx.connect(internal)
        self._sig_lock = threading.Lock()
        self._stopped = False

        self._poller = zmq.Poller()
        self._poller.register(self._sig_rx, zmq.POLLIN)

        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def advertise(self, topic, type_name, options):
        self._check_running()
        return ZmqPublisher(self, topic, type_name, options)

    def subscribe(self, topic, type_name, message_class, callback, options):
        self._check_running()
        return ZmqSubscriber(self, topic, type_name, message_class, callback, options)

    def shutdown(self) -> None:
        if self._stopped:
            return

        self._call(_STOP)

        if threading.current_thread() is not self.thread:
            self.thread.join()

    def run(self) -> None:
        running = True

        while running:
            for active, _flag in self._poller.poll(1000):
                if active == self._sig_rx:
                    self._sig_rx.recv()
                    command = self._queue.get_nowait()
                    if command is _STOP:
                        running = False
                        break
                    self._run_command(command)
                    continue

                handler = self._handlers.get(active)
                if handler is None:
                    continue

                try:
                    handler()
                except Exception:
                    logger.exception("socket handler failed")

        self._finish()

    def _finish(self) -> None:
        with self._sig_lock:
            self._stopped = True

        # Anything queued before the stop request still runs, in order.
        while True:
            try:
                command = self._queue.get_nowait()
            except queue.Empty:
                break
            self._run_command(command)

        for socket in list(self._handlers):
            socket.close()
        self._handlers.clear()

        self._sig_rx.close()
        self._sig_tx.close()

    def _check_running(self) -> None:
        if self._stopped:
            raise TransportError("node has been shut down")

    def _call(self, command) -> None:
        """Run *command* on the I/O thread. Once the node has stopped,
        commands run immediately in the calling thread instead."""

        with self._sig_lock:
            if not self._stopped:
                self._queue.put(command)
                self._sig_tx.send(b"")
                return

        if command is not _STOP:
            self._run_command(command)

    def _run_command(self, command) -> None:
        try:
            command()
        except Exception:
            logger.exception("transport command failed")

    def _attach(self, socket: zmq.Socket, handler: Callable[[], None]) -> None:
        if socket.closed:
            return
        self._handlers[socket] = handler
        self._poller.register(socket, zmq.POLLIN)

    def _release(self, socket: zmq.Socket, future: concurrent.futures.Future) -> None:
        try:
            if socket in self._handlers:
                del self._handlers[socket]
                self._poller.unregister(socket)
            socket.close()
        except zmq.ZMQError as exc:
            future.set_exception(exc)
        else:
            future.set_result(None)
