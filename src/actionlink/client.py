""" The client half of the action protocol: submit goals to an action
    server, cancel them, and hear about their progress.
"""

import concurrent.futures
import functools
import itertools
import logging
import random
import threading

from . import config
from . import events
from . import ids
from .messages import (
    ActionFeedback,
    ActionGoal,
    ActionResult,
    GoalID,
    GoalStatusArray,
    Header,
    Time,
)
from .registry import GoalRegistry

logger = logging.getLogger(__name__)

frame_id = 'auto-generated'
envelope_keys = frozenset(('header', 'goal_id', 'goal'))


class ActionClient:
    """ An :class:`ActionClient` talks to the action server whose topics
        live under *action_server*, for actions of type *action_type*.
        Five channels are bound on the transport *node* at construction:

        ========================  =========  ============================
        Topic                     Direction  Message type
        ========================  =========  ============================
        *action_server*/goal      out        *action_type* + ``Goal``
        *action_server*/cancel    out        ``GoalID``
        *action_server*/status    in         ``GoalStatusArray``
        *action_server*/feedback  in         *action_type* + ``Feedback``
        *action_server*/result    in         *action_type* + ``Result``
        ========================  =========  ============================

        The quality of service for any channel can be adjusted by passing a
        dictionary (or a :class:`ChannelOptions` instance) as the keyword
        argument of the same name, for example ``status={'queue_size': 5}``;
        see :mod:`actionlink.config` for the defaults.

        *clock* is the time provider used to stamp goals and cancellations,
        and *source* the random number generator used for goal identifiers.

        Status broadcasts are always passed along, since they describe every
        goal the server knows about. Feedback and results are only passed
        along for goals submitted by this client that have not yet seen a
        result. No attempt is made to track goal state beyond that; a
        caller interested in the lifecycle of a goal reads it from the
        status messages.

        :ivar events: The :class:`actionlink.events.ActionEvents` instance
            delivering ``status``, ``feedback``, and ``result``
            notifications.
        :ivar goals: The :class:`actionlink.registry.GoalRegistry` of goals
            awaiting a result.
    """

    def __init__(self, node, action_server, action_type, clock=None, source=None, **options):

        unknown = set(options) - set(config.channels)
        if unknown:
            raise TypeError('unexpected channel options: ' + ', '.join(sorted(unknown)))

        self.action_server = action_server
        self.action_type = action_type

        if clock is None:
            clock = Time.now
        if source is None:
            source = random.Random()

        self._clock = clock
        self._source = source

        self.events = events.ActionEvents()
        self.goals = GoalRegistry()

        self._goal_seq = itertools.count()
        self._closed = False

        self._goal_pub = node.advertise(action_server + '/goal',
                                        action_type + 'Goal',
                                        config.channel_options('goal', options.get('goal')))

        self._cancel_pub = node.advertise(action_server + '/cancel',
                                          'GoalID',
                                          config.channel_options('cancel', options.get('cancel')))

        self._status_sub = node.subscribe(action_server + '/status',
                                          'GoalStatusArray',
                                          GoalStatusArray,
                                          self._handle_status,
                                          config.channel_options('status', options.get('status')))

        self._feedback_sub = node.subscribe(action_server + '/feedback',
                                            action_type + 'Feedback',
                                            ActionFeedback,
                                            self._handle_feedback,
                                            config.channel_options('feedback', options.get('feedback')))

        self._result_sub = node.subscribe(action_server + '/result',
                                          action_type + 'Result',
                                          ActionResult,
                                          self._handle_result,
                                          config.channel_options('result', options.get('result')))


    def register(self, kind, callback):
        """ Shorthand for :func:`ActionEvents.register` on :attr:`events`.
        """

        self.events.register(kind, callback)


    def attach(self, listener):
        """ Shorthand for :func:`ActionEvents.attach` on :attr:`events`.
        """

        self.events.attach(listener)


    def _handle_status(self, msg):

        if self._closed:
            return

        self.events.emit(events.STATUS, msg)


    def _handle_feedback(self, msg):

        if self._closed:
            return

        if msg.goal_id in self.goals:
            self.events.emit(events.FEEDBACK, msg)
        else:
            logger.debug('%s: ignoring feedback for unknown goal %r', self.action_server, msg.goal_id)


    def _handle_result(self, msg):

        if self._closed:
            return

        goal = self.goals.retire(msg.goal_id)

        if goal is None:
            logger.debug('%s: ignoring result for unknown goal %r', self.action_server, msg.goal_id)
            return

        self.events.emit(events.RESULT, msg)


    def cancel(self, goal_id=None):
        """ Ask the server to cancel the goal identified by *goal_id*. If
            no *goal_id* is given, ask it to cancel every goal. Nothing is
            sent for a *goal_id* this client is not waiting on. The goal is
            not forgotten until its result arrives; cancellation is a
            request, and the server may finish the goal anyway.
        """

        cancel_goal = GoalID(stamp=self._clock())

        if not goal_id:
            logger.debug('%s: cancelling all goals', self.action_server)
            self._cancel_pub.publish(cancel_goal)
        elif goal_id in self.goals:
            logger.debug('%s: cancelling %s', self.action_server, goal_id)
            cancel_goal.id = goal_id
            self._cancel_pub.publish(cancel_goal)


    def send_goal(self, goal):
        """ Submit *goal* to the action server, and return it. The *goal* is
            an :class:`ActionGoal`, or a dictionary. A dictionary whose keys
            are drawn only from ``header``, ``goal_id``, and ``goal`` is read
            as a flattened :class:`ActionGoal`; any other dictionary is taken
            to be the goal contents and wrapped in one. A missing goal
            identifier or header is filled in before the goal is sent; the
            goal is registered under its identifier before it is published.
        """

        if isinstance(goal, ActionGoal):
            pass
        elif goal and goal.keys() <= envelope_keys:
            goal = ActionGoal.from_dict(goal)
        else:
            goal = ActionGoal(goal=goal)

        if goal.goal_id is None:
            goal.goal_id = GoalID(stamp=self._clock(), id=self.generate_goal_id())

        if goal.header is None:
            goal.header = Header(seq=next(self._goal_seq),
                                 stamp=goal.goal_id.stamp,
                                 frame_id=frame_id)

        self.goals.add(goal)
        logger.debug('%s: sending goal %s', self.action_server, goal.goal_id.id)

        self._goal_pub.publish(goal)
        return goal


    def generate_goal_id(self):
        """ Return a new goal identifier for this client's action type. The
            identifier is random, not guaranteed unique; see
            :mod:`actionlink.ids`.
        """

        return ids.generate(self.action_type, self._source)


    def shutdown(self):
        """ Detach every event listener and release all five channels. The
            returned :class:`concurrent.futures.Future` resolves once every
            channel has been released, or fails with the first error raised
            by any release. No notifications are delivered once this method
            has been called.
        """

        self._closed = True
        self.events.remove_all()

        channels = (self._goal_pub,
                    self._cancel_pub,
                    self._status_sub,
                    self._feedback_sub,
                    self._result_sub)

        releases = list()

        for channel in channels:
            try:
                release = channel.shutdown()
            except Exception as e:
                release = concurrent.futures.Future()
                release.set_exception(e)

            releases.append(release)

        return gather(releases)


# end of class ActionClient



def gather(futures):
    """ Combine *futures* into one :class:`concurrent.futures.Future`. The
        result is the list of individual results, in order, available once
        all of them have completed; if any one of them fails, the combined
        future fails immediately with that exception, without waiting for
        the rest.
    """

    combined = concurrent.futures.Future()
    futures = list(futures)

    if not futures:
        combined.set_result(list())
        return combined

    results = [None] * len(futures)
    remaining = [len(futures)]
    lock = threading.Lock()

    def done(index, future):
        with lock:
            if combined.done():
                return

            if future.cancelled():
                combined.set_exception(concurrent.futures.CancelledError())
                return

            exception = future.exception()

            if exception is not None:
                combined.set_exception(exception)
                return

            results[index] = future.result()
            remaining[0] -= 1

            if remaining[0] == 0:
                combined.set_result(results)

    for index, future in enumerate(futures):
        future.add_done_callback(functools.partial(done, index))

    return combined


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
