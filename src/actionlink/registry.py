""" Bookkeeping for goals that have been submitted but have not yet seen a
    result.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from .messages import ActionGoal


class GoalRegistry:
    """ Mapping of goal identifier to the :class:`ActionGoal` that was sent.
        An identifier is present if and only if no result has arrived for
        it. Entries are never expired; a goal whose result never arrives
        stays here until the owning client goes away.

        Inbound messages are handled on the transport's thread while goals
        may be submitted from any other thread, hence the lock.
    """

    def __init__(self):
        self._goals: Dict[str, ActionGoal] = dict()
        self._lock = threading.Lock()


    def __contains__(self, goal_id) -> bool:
        with self._lock:
            return goal_id in self._goals


    def __len__(self) -> int:
        with self._lock:
            return len(self._goals)


    def add(self, goal: ActionGoal) -> None:
        """ Track *goal*, which must already carry its identifier. A goal
            submitted twice with the same identifier replaces the earlier
            record.
        """

        with self._lock:
            self._goals[goal.goal_id.id] = goal


    def get(self, goal_id) -> Optional[ActionGoal]:
        with self._lock:
            return self._goals.get(goal_id)


    def ids(self) -> List[str]:
        with self._lock:
            return list(self._goals)


    def retire(self, goal_id) -> Optional[ActionGoal]:
        """ Remove and return the goal for *goal_id*. Returns None if the
            goal is not tracked here; the membership test and the removal
            happen under one acquisition of the lock, so a goal can only be
            retired once.
        """

        with self._lock:
            return self._goals.pop(goal_id, None)


# end of class GoalRegistry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
