""" Record types exchanged with an action server. Every record knows how to
    flatten itself to a plain dictionary via :func:`to_dict`, and how to be
    rebuilt from one via :func:`from_dict`; the transport codec relies on
    nothing else.

    The goal, feedback, and result contents are specific to a given action
    type and are carried as opaque dictionaries.
"""

from __future__ import annotations

import dataclasses
import time as timemodule
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Goal status vocabulary. These values are relayed as received; nothing in
# this package interprets them.

PENDING = 0
ACTIVE = 1
PREEMPTED = 2
SUCCEEDED = 3
ABORTED = 4
REJECTED = 5
PREEMPTING = 6
RECALLING = 7
RECALLED = 8
LOST = 9


class _Record:

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class Time(_Record):
    """ A timestamp split into whole seconds and nanoseconds since the UNIX
        epoch.
    """

    secs: int = 0
    nsecs: int = 0

    @classmethod
    def now(cls) -> 'Time':
        """ The default time provider: the current wall-clock time.
        """

        stamp = timemodule.time_ns()
        secs, nsecs = divmod(stamp, 1000000000)
        return cls(secs, nsecs)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Time':
        return cls(secs=d.get('secs', 0), nsecs=d.get('nsecs', 0))

    def to_sec(self) -> float:
        return self.secs + self.nsecs / 1e9


@dataclass
class GoalID(_Record):
    """ Identifier and timestamp for a goal. An empty *id* is only
        meaningful on the cancel channel, where it targets every goal.
    """

    stamp: Time = field(default_factory=Time)
    id: str = ''

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GoalID':
        return cls(stamp=Time.from_dict(d.get('stamp') or {}), id=d.get('id', ''))


@dataclass
class Header(_Record):

    seq: int = 0
    stamp: Time = field(default_factory=Time)
    frame_id: str = ''

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Header':
        return cls(seq=d.get('seq', 0),
                   stamp=Time.from_dict(d.get('stamp') or {}),
                   frame_id=d.get('frame_id', ''))


@dataclass
class GoalStatus(_Record):

    goal_id: GoalID = field(default_factory=GoalID)
    status: int = PENDING
    text: str = ''

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GoalStatus':
        return cls(goal_id=GoalID.from_dict(d.get('goal_id') or {}),
                   status=d.get('status', PENDING),
                   text=d.get('text', ''))


@dataclass
class GoalStatusArray(_Record):
    """ Broadcast from the action server describing every goal it knows
        about, including goals submitted by other clients.
    """

    header: Header = field(default_factory=Header)
    status_list: List[GoalStatus] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GoalStatusArray':
        status_list = [GoalStatus.from_dict(s) for s in d.get('status_list') or ()]
        return cls(header=Header.from_dict(d.get('header') or {}), status_list=status_list)


@dataclass
class ActionGoal(_Record):
    """ A goal as it travels to the action server. The *header* and
        *goal_id* are filled in by :func:`ActionClient.send_goal` when the
        caller leaves them unset.
    """

    header: Optional[Header] = None
    goal_id: Optional[GoalID] = None
    goal: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ActionGoal':
        header = d.get('header')
        goal_id = d.get('goal_id')

        if header is not None:
            header = Header.from_dict(header)
        if goal_id is not None:
            goal_id = GoalID.from_dict(goal_id)

        return cls(header=header, goal_id=goal_id, goal=d.get('goal') or {})


@dataclass
class _StatusEnvelope(_Record):

    header: Header = field(default_factory=Header)
    status: GoalStatus = field(default_factory=GoalStatus)

    @property
    def goal_id(self) -> str:
        """ The identifier of the goal this envelope concerns.
        """

        return self.status.goal_id.id


@dataclass
class ActionFeedback(_StatusEnvelope):

    feedback: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ActionFeedback':
        return cls(header=Header.from_dict(d.get('header') or {}),
                   status=GoalStatus.from_dict(d.get('status') or {}),
                   feedback=d.get('feedback') or {})


@dataclass
class ActionResult(_StatusEnvelope):

    result: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ActionResult':
        return cls(header=Header.from_dict(d.get('header') or {}),
                   status=GoalStatus.from_dict(d.get('status') or {}),
                   result=d.get('result') or {})


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
