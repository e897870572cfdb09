""" Python client for the action protocol: long-running goals submitted to
    an action server over publish/subscribe channels, with status, feedback,
    and result notifications routed back to the client that sent them.
"""

# Utility components.

from . import json
from . import config
from . import ids

# Record types and the transports that carry them.

from . import messages
from . import transport

# Primary public-facing interfaces.

from . import events
from .events import ActionListener
from .registry import GoalRegistry
from .client import ActionClient

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
