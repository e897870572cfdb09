""" The notification surface of an :class:`actionlink.ActionClient`.
    Consumers register a callable for one of the three notification kinds,
    or attach an :class:`ActionListener` to receive all three.

    Bound methods are held by weak reference: registering ``thing.method``
    does not keep ``thing`` alive, and the callback is quietly dropped once
    ``thing`` has been collected. Plain functions, lambdas, closures, and
    other callable objects are held by strong reference, and stay registered
    until :func:`ActionEvents.remove_all` is called.
"""

import logging
import threading
import weakref

logger = logging.getLogger(__name__)

STATUS = 'status'
FEEDBACK = 'feedback'
RESULT = 'result'

kinds = (STATUS, FEEDBACK, RESULT)


class _Strong:
    """ Stand-in for a weak reference that never dies.
    """

    def __init__(self, callback):
        self.callback = callback

    def __call__(self):
        return self.callback


def reference(callback):
    """ Return a zero-argument callable that yields *callback*, or None if
        it has gone away. A plain weak reference to a bound method dies
        immediately, since the method object itself is created on attribute
        access; :class:`weakref.WeakMethod` tracks the underlying object
        instead. Anything else is usually a one-off that nobody else holds,
        such as a lambda, so it is kept alive here.
    """

    try:
        callback.__func__
        callback.__self__
    except AttributeError:
        return _Strong(callback)
    else:
        return weakref.WeakMethod(callback)


class ActionListener:
    """ Observer interface for :func:`ActionEvents.attach`. Subclasses
        override whichever of the three methods they care about; the
        defaults ignore the notification.
    """

    def on_status(self, status):
        pass

    def on_feedback(self, feedback):
        pass

    def on_result(self, result):
        pass


# end of class ActionListener



class ActionEvents:
    """ One-to-many delivery of ``status``, ``feedback``, and ``result``
        notifications. Delivery happens synchronously, in the thread that
        calls :func:`emit`, in registration order.
    """

    def __init__(self):
        self.callbacks = dict()
        self._lock = threading.Lock()

        for kind in kinds:
            self.callbacks[kind] = list()


    def register(self, kind, callback):
        """ Invoke *callback* with the message every time a notification of
            the requested *kind* is emitted.
        """

        if kind not in self.callbacks:
            raise ValueError('unknown notification kind: ' + repr(kind))

        if callable(callback):
            pass
        else:
            raise TypeError('callback must be callable')

        with self._lock:
            self.callbacks[kind].append(reference(callback))


    def attach(self, listener):
        """ Register the ``on_status``, ``on_feedback``, and ``on_result``
            methods of *listener*.
        """

        self.register(STATUS, listener.on_status)
        self.register(FEEDBACK, listener.on_feedback)
        self.register(RESULT, listener.on_result)


    def remove_all(self):
        """ Detach every registered callback.
        """

        with self._lock:
            for references in self.callbacks.values():
                references.clear()


    def count(self, kind):
        """ Return the number of callbacks currently registered for *kind*,
            including any whose referent has not yet been noticed as gone.
        """

        with self._lock:
            return len(self.callbacks[kind])


    def emit(self, kind, message):
        """ Deliver *message* to every callback registered for *kind*. An
            exception raised by one callback is logged and does not prevent
            delivery to the others.
        """

        with self._lock:
            references = list(self.callbacks[kind])

        invalid = list()

        for ref in references:
            callback = ref()

            if callback is None:
                invalid.append(ref)
                continue

            try:
                callback(message)
            except Exception:
                logger.exception('%s callback %r failed', kind, callback)
                continue

        if invalid:
            with self._lock:
                current = self.callbacks[kind]
                for ref in invalid:
                    try:
                        current.remove(ref)
                    except ValueError:
                        # Already gone, likely via remove_all().
                        pass


# end of class ActionEvents


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
