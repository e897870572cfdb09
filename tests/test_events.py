import gc

import pytest

import actionlink


class Referenced:

    def __init__(self):
        self.received = list()

    def a_method(self, message):
        self.received.append(message)


def test_register_invalid():

    events = actionlink.events.ActionEvents()

    with pytest.raises(ValueError):
        events.register('progress', print)

    with pytest.raises(TypeError):
        events.register('status', 'not callable')


def test_emit_by_kind():

    events = actionlink.events.ActionEvents()
    status = list()
    result = list()

    def on_status(message):
        status.append(message)

    def on_result(message):
        result.append(message)

    events.register('status', on_status)
    events.register('result', on_result)

    events.emit('status', 'first')
    events.emit('result', 'second')
    events.emit('feedback', 'third')

    assert status == ['first']
    assert result == ['second']


def test_bound_method_survives():
    """ A plain weak reference to a bound method is dead on arrival; the
        callback must stay registered for as long as its object lives.
    """

    events = actionlink.events.ActionEvents()
    thing = Referenced()

    events.register('feedback', thing.a_method)
    events.emit('feedback', 'message')

    assert thing.received == ['message']
    assert events.count('feedback') == 1


def test_removed_object():

    events = actionlink.events.ActionEvents()
    thing = Referenced()

    events.register('feedback', thing.a_method)
    del thing
    gc.collect()

    events.emit('feedback', 'message')
    assert events.count('feedback') == 0


def test_function_kept_alive():
    """ Plain functions are held strongly; dropping the caller's name for
        one must not unregister it.
    """

    events = actionlink.events.ActionEvents()
    received = list()

    def callback(message):
        received.append(message)

    events.register('result', callback)
    del callback
    gc.collect()

    events.emit('result', 'message')
    assert received == ['message']
    assert events.count('result') == 1


def test_lambda():

    events = actionlink.events.ActionEvents()
    received = list()

    events.register('feedback', lambda message: received.append(message))
    gc.collect()

    events.emit('feedback', 'first')
    events.emit('feedback', 'second')
    assert received == ['first', 'second']

    events.remove_all()
    events.emit('feedback', 'third')
    assert received == ['first', 'second']


def test_failing_callback(caplog):

    events = actionlink.events.ActionEvents()
    received = list()

    def broken(message):
        raise RuntimeError('broken callback')

    def working(message):
        received.append(message)

    events.register('status', broken)
    events.register('status', working)

    events.emit('status', 'message')

    assert received == ['message']
    assert 'broken callback' in caplog.text


def test_remove_all():

    events = actionlink.events.ActionEvents()
    thing = Referenced()

    events.attach(actionlink.ActionListener())
    events.register('result', thing.a_method)
    events.remove_all()

    for kind in actionlink.events.kinds:
        assert events.count(kind) == 0

    events.emit('result', 'message')
    assert thing.received == []


def test_listener():

    class Listener(actionlink.ActionListener):

        def __init__(self):
            self.seen = list()

        def on_status(self, status):
            self.seen.append(('status', status))

        def on_feedback(self, feedback):
            self.seen.append(('feedback', feedback))

    events = actionlink.events.ActionEvents()
    listener = Listener()
    events.attach(listener)

    events.emit('status', 1)
    events.emit('feedback', 2)
    events.emit('result', 3)

    assert listener.seen == [('status', 1), ('feedback', 2)]


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
