import inspect, logging

from promissory.errors import ChainingCycleError

logger = logging.getLogger(__name__)

_NOTHING = object()


def resolve_value(promise, result, fulfill, reject):
    """Deliver result into promise, adopting it first if it is a thenable.

    fulfill and reject settle promise with a final value or reason. A thenable
    whose then() calls back synchronously is unwrapped by this loop rather
    than by recursion; a callback that fires later starts over from a fresh
    stack.
    """
    while True:
        if result is promise:
            logger.debug('Chaining cycle detected for %r', promise)
            reject(ChainingCycleError(promise))
            return

        # Classes are values: their then, if any, belongs to their instances.
        if result is None or isinstance(result, type):
            fulfill(result)
            return

        try:
            then = result.then
        except Exception as e:
            if isinstance(e, AttributeError) and \
                    inspect.getattr_static(result, 'then', _NOTHING) is _NOTHING:
                fulfill(result)
                return
            logger.debug('Reading then() of %r raised %r', result, e)
            reject(e)
            return

        if not callable(then):
            fulfill(result)
            return

        result = _Adoption(promise, fulfill, reject).run(then)
        if result is _NOTHING:
            return


class _Adoption:
    def __init__(self, promise, fulfill, reject):
        self._promise = promise
        self._fulfill = fulfill
        self._reject = reject
        self._called = False
        self._in_then = False
        self._next = _NOTHING

    def run(self, then):
        """Call then() and return the value it fulfilled with synchronously, if any."""
        self._in_then = True
        try:
            then(self._on_fulfilled, self._on_rejected)
        except Exception as e:
            if not self._called:
                self._called = True
                logger.debug('Adopting %r failed: then() raised %r', self._promise, e)
                self._reject(e)
        finally:
            self._in_then = False
        return self._next

    def _on_fulfilled(self, value=None):
        if self._called:
            return
        self._called = True

        if self._in_then:
            self._next = value
        else:
            resolve_value(self._promise, value, self._fulfill, self._reject)

    def _on_rejected(self, reason=None):
        if self._called:
            return
        self._called = True
        self._reject(reason)
