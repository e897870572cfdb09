"""Message broker for ZeroMQ nodes.

Publishers connect to the XSUB frontend and subscribers to the XPUB backend.
Messages flow frontend to backend; subscriptions flow backend to frontend,
which in turn forwards them to every connected publisher. The backend is
verbose so a latched publisher hears about every new subscriber, not just
the first one for a topic.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

import zmq

from ..base import TransportPortError
from .node import zmq_context

logger = logging.getLogger(__name__)

minimum_port = 10139
maximum_port = 13679


class Broker:
    """Forward traffic between publishers and subscribers. If a port is not
    specified, the first available port in the default range is used; the
    ports actually bound are available as ``frontend_port`` and
    ``backend_port``, and the endpoints nodes should connect to as
    ``frontend_endpoint`` and ``backend_endpoint``.
    """

    def __init__(self, address: str = "*", frontend_port: Optional[int] = None,
                 backend_port: Optional[int] = None):
        self.address = address

        self.frontend = zmq_context.socket(zmq.XSUB)
        self.frontend.setsockopt(zmq.LINGER, 0)
        self.backend = zmq_context.socket(zmq.XPUB)
        self.backend.setsockopt(zmq.LINGER, 0)
        self.backend.setsockopt(zmq.XPUB_VERBOSE, 1)

        try:
            self.frontend_port = self._bind(self.frontend, frontend_port)
            self.backend_port = self._bind(self.backend, backend_port)
        except TransportPortError:
            self.frontend.close()
            self.backend.close()
            raise

        if address in ("*", "0.0.0.0"):
            host = "localhost"
        else:
            host = address

        self.frontend_endpoint = f"tcp://{host}:{self.frontend_port}"
        self.backend_endpoint = f"tcp://{host}:{self.backend_port}"

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def _bind(self, socket: zmq.Socket, port: Optional[int]) -> int:
        if port is not None:
            port = int(port)
            try:
                socket.bind(f"tcp://{self.address}:{port}")
            except zmq.ZMQError as exc:
                raise TransportPortError(f"port already in use: {port}") from exc
            return port

        for trial in range(minimum_port, maximum_port + 1):
            try:
                socket.bind(f"tcp://{self.address}:{trial}")
            except zmq.ZMQError:
                continue
            return trial

        raise TransportPortError(
            f"no ports available in range {minimum_port}:{maximum_port}"
        )

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.frontend, zmq.POLLIN)
        poller.register(self.backend, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(100):
                try:
                    if active == self.frontend:
                        self.backend.send_multipart(self.frontend.recv_multipart())
                    elif active == self.backend:
                        self.frontend.send_multipart(self.backend.recv_multipart())
                except zmq.ZMQError:
                    logger.exception("broker forwarding failed")

        self.frontend.close()
        self.backend.close()

    def stop(self) -> None:
        self.shutdown = True
        self.thread.join()
