"""ZMQ multipart framing for action messages.

Publish (PUB/SUB)
    topic_with_trailing_dot, version, type_name, payload_json
"""

from __future__ import annotations

from typing import Sequence, Tuple, Type

from ... import json
from ..base import FramingError


# Version of the on-the-wire layout implemented here, a single byte.

PROTOCOL_VERSION = b"a"


def topic_frame(topic: str) -> bytes:
    """Subscription prefix for *topic*.

    The trailing dot prevents a subscription to ``arm/goal`` from also
    matching ``arm/goal_status`` by leading substring.
    """

    return (topic + ".").encode()


def to_pub_frames(topic: str, type_name: str, message) -> Tuple[bytes, ...]:
    """Encode a message record for PUB/SUB sockets."""

    payload = json.dumps(message.to_dict())
    return (topic_frame(topic), PROTOCOL_VERSION, type_name.encode(), payload)


def from_pub_frames(parts: Sequence[bytes], type_name: str, message_class: Type):
    """Decode PUB/SUB frames into an instance of *message_class*.

    Raises FramingError if the frames are not from a compatible sender,
    carry a different message type than the subscriber expects, or do not
    decode into a well-formed record.
    """

    if len(parts) < 4:
        raise FramingError(f"invalid PUB message: {len(parts)} frames")

    try:
        topic = parts[0].decode()
    except UnicodeDecodeError as exc:
        raise FramingError(f"undecodable topic {parts[0]!r}") from exc

    if topic.endswith("."):
        topic = topic[:-1]

    their_version = parts[1]
    if their_version != PROTOCOL_VERSION:
        raise FramingError(
            f"{topic}: message is protocol {their_version!r}, recipient expects {PROTOCOL_VERSION!r}"
        )

    try:
        their_type = parts[2].decode()
    except UnicodeDecodeError as exc:
        raise FramingError(f"{topic}: undecodable message type {parts[2]!r}") from exc

    if their_type != type_name:
        raise FramingError(f"{topic}: expected {type_name}, received {their_type}")

    try:
        payload = json.loads(parts[3])
    except json.DecodeError as exc:
        raise FramingError(f"{topic}: undecodable payload") from exc

    if not isinstance(payload, dict):
        raise FramingError(f"{topic}: payload is not an object")

    try:
        return message_class.from_dict(payload)
    except (AttributeError, TypeError, ValueError) as exc:
        raise FramingError(f"{topic}: malformed {type_name}: {exc}") from exc
