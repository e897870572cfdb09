""" Default settings, some of which may be overridden from the environment.

    ``ACTIONLINK_TRANSPORT``
        Backend used by :func:`actionlink.transport.node`; either ``zmq``
        (the default) or ``local``.

    ``ACTIONLINK_PUBLISH_ENDPOINT``, ``ACTIONLINK_SUBSCRIBE_ENDPOINT``
        The broker endpoints a ZeroMQ node connects its publishers and
        subscribers to.
"""

import os
from dataclasses import dataclass


@dataclass
class ChannelOptions:
    """ Quality-of-service settings for one channel. *queue_size* bounds
        the number of messages buffered for the channel; *latching* asks a
        publisher to hand its most recent message to any subscriber that
        arrives later.
    """

    queue_size: int = 1
    latching: bool = False


transport = os.environ.get('ACTIONLINK_TRANSPORT', 'zmq')

publish_endpoint = os.environ.get('ACTIONLINK_PUBLISH_ENDPOINT', 'tcp://localhost:10139')
subscribe_endpoint = os.environ.get('ACTIONLINK_SUBSCRIBE_ENDPOINT', 'tcp://localhost:10140')


# Quality of service for the five channels of an action client. Outbound
# channels are latched so a server that comes up after a goal or cancel was
# sent still receives it.

channels = dict()
channels['goal'] = dict(queue_size=10, latching=True)
channels['cancel'] = dict(queue_size=10, latching=True)
channels['status'] = dict(queue_size=1, latching=False)
channels['feedback'] = dict(queue_size=1, latching=False)
channels['result'] = dict(queue_size=1, latching=False)


def channel_options(channel, overrides=None):
    """ Return the :class:`ChannelOptions` for the named *channel*. The
        *overrides*, if any, are either a complete :class:`ChannelOptions`
        instance, which is returned as-is, or a dictionary whose entries
        replace the corresponding defaults.
    """

    if isinstance(overrides, ChannelOptions):
        return overrides

    settings = dict(channels[channel])

    if overrides:
        settings.update(overrides)

    return ChannelOptions(**settings)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
