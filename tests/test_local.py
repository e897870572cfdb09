import pytest

import unitserver

from actionlink import messages
from actionlink.transport import ChannelClosedError, ChannelOptions
from actionlink.transport.local import LocalNode


latched = ChannelOptions(queue_size=10, latching=True)
unlatched = ChannelOptions(queue_size=1, latching=False)


def test_delivery():

    node = LocalNode()
    first = unitserver.Recorder()
    second = unitserver.Recorder()
    other = unitserver.Recorder()

    node.subscribe('a/result', 'AResult', messages.ActionResult, first, unlatched)
    node.subscribe('a/result', 'AResult', messages.ActionResult, second, unlatched)
    node.subscribe('a/results', 'AResult', messages.ActionResult, other, unlatched)

    publisher = node.advertise('a/result', 'AResult', unlatched)
    message = messages.ActionResult()
    publisher.publish(message)

    assert first.received == [message]
    assert second.received == [message]
    assert len(other) == 0
    assert node.published == [('a/result', message)]


def test_latching():

    node = LocalNode()

    publisher = node.advertise('a/goal', 'AGoal', latched)
    publisher.publish(messages.ActionGoal(goal={'n': 1}))
    last = messages.ActionGoal(goal={'n': 2})
    publisher.publish(last)

    late = unitserver.Recorder()
    node.subscribe('a/goal', 'AGoal', messages.ActionGoal, late, latched)

    assert late.received == [last]

    # Released publishers no longer latch.

    publisher.shutdown()
    later = unitserver.Recorder()
    node.subscribe('a/goal', 'AGoal', messages.ActionGoal, later, latched)
    assert len(later) == 0


def test_no_latching():

    node = LocalNode()

    publisher = node.advertise('a/status', 'GoalStatusArray', unlatched)
    publisher.publish(messages.GoalStatusArray())

    late = unitserver.Recorder()
    node.subscribe('a/status', 'GoalStatusArray', messages.GoalStatusArray, late, unlatched)

    assert len(late) == 0


def test_release():

    node = LocalNode()
    received = unitserver.Recorder()

    subscriber = node.subscribe('a/feedback', 'AFeedback', messages.ActionFeedback, received, unlatched)
    publisher = node.advertise('a/feedback', 'AFeedback', unlatched)

    released = subscriber.shutdown()
    assert released.done()

    publisher.publish(messages.ActionFeedback())
    assert len(received) == 0

    released = publisher.shutdown()
    assert released.result(timeout=1) is None

    with pytest.raises(ChannelClosedError):
        publisher.publish(messages.ActionFeedback())


def test_failing_subscriber(caplog):

    node = LocalNode()
    received = unitserver.Recorder()

    def broken(message):
        raise RuntimeError('broken subscriber')

    node.subscribe('a/result', 'AResult', messages.ActionResult, broken, unlatched)
    node.subscribe('a/result', 'AResult', messages.ActionResult, received, unlatched)

    node.advertise('a/result', 'AResult', unlatched).publish(messages.ActionResult())

    assert len(received) == 1
    assert 'broken subscriber' in caplog.text


def test_node_shutdown():

    node = LocalNode()
    received = unitserver.Recorder()

    node.subscribe('a/result', 'AResult', messages.ActionResult, received, unlatched)
    publisher = node.advertise('a/result', 'AResult', unlatched)
    node.shutdown()

    publisher.publish(messages.ActionResult())
    assert len(received) == 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
