import logging

from promissory import combinators
from promissory.continuation import Continuation
from promissory.deferred import Deferred
from promissory.errors import PromisePendingError, RejectedValueError
from promissory.resolution import resolve_value
from promissory.scheduling.task_queue import TaskQueue
from promissory.status import Status

logger = logging.getLogger(__name__)


def _run_handler(handler, argument, passthrough, resolve, reject):
    if handler is None:
        passthrough(argument)
        return

    try:
        result = handler(argument)
    except Exception as e:
        logger.debug('Handler %r raised %r', handler, e)
        reject(e)
    else:
        resolve(result)


class Promise:
    """Single-assignment cell for the eventual result of an asynchronous operation.

    executor is called immediately with (resolve, reject). Handlers attached
    with then() always run from the promise's task queue, never from the call
    that attached them or from the call that settled the promise.
    """

    Status = Status

    def __init__(self, executor, queue=None):
        if not callable(executor):
            raise TypeError('Promise resolver {0!r} is not callable'.format(executor))

        self._status = Status.Pending
        self._result = None
        self._continuations = []
        self._queue = queue if queue is not None else TaskQueue.instance()

        resolve, reject = self._resolving_functions()
        try:
            executor(resolve, reject)
        except Exception as e:
            reject(e)

    @property
    def status(self):
        return self._status

    @property
    def queue(self):
        return self._queue

    def __repr__(self):
        if self._status == Status.Pending:
            return '<{0} pending>'.format(type(self).__name__)
        return '<{0} {1}: {2!r}>'.format(type(self).__name__, self._status.value, self._result)

    def _resolving_functions(self):
        already_resolved = False

        def resolve(value=None):
            nonlocal already_resolved
            if already_resolved:
                return
            already_resolved = True
            resolve_value(self, value, self._fulfill, self._reject)

        def reject(reason=None):
            nonlocal already_resolved
            if already_resolved:
                return
            already_resolved = True
            self._reject(reason)

        return resolve, reject

    def _fulfill(self, value):
        self._settle(Status.Fulfilled, value)

    def _reject(self, reason):
        self._settle(Status.Rejected, reason)

    def _settle(self, status, result):
        if self._status != Status.Pending:
            return
        self._status = status
        self._result = result

        continuations, self._continuations = self._continuations, []
        for continuation in continuations:
            if status == Status.Fulfilled:
                continuation.on_fulfilled()
            else:
                continuation.on_rejected()

    @classmethod
    def _with_resolvers(cls, queue):
        resolvers = []
        promise = cls(lambda resolve, reject: resolvers.extend((resolve, reject)), queue=queue)
        resolve, reject = resolvers
        return promise, resolve, reject

    def then(self, on_fulfilled=None, on_rejected=None):
        if not callable(on_fulfilled):
            on_fulfilled = None
        if not callable(on_rejected):
            on_rejected = None

        downstream, resolve, reject = type(self)._with_resolvers(self._queue)
        continuation = Continuation(
            downstream,
            on_fulfilled=lambda: self._queue.schedule(
                _run_handler, on_fulfilled, self._result, resolve, resolve, reject),
            on_rejected=lambda: self._queue.schedule(
                _run_handler, on_rejected, self._result, reject, resolve, reject))

        if self._status == Status.Pending:
            self._continuations.append(continuation)
        elif self._status == Status.Fulfilled:
            continuation.on_fulfilled()
        else:
            continuation.on_rejected()

        return continuation.promise

    def catch(self, on_rejected=None):
        return self.then(None, on_rejected)

    def finally_(self, on_finally):
        if not callable(on_finally):
            return self.then(None, None)

        cls = type(self)
        queue = self._queue

        def on_value(value):
            return cls.resolve(on_finally(), queue=queue).then(lambda _: value)

        def on_reason(reason):
            return cls.resolve(on_finally(), queue=queue).then(
                lambda _: cls.reject(reason, queue=queue))

        return self.then(on_value, on_reason)

    def wait(self, timeout=None):
        if not self._queue.run_until(lambda: self._status != Status.Pending, timeout=timeout):
            raise PromisePendingError(self)

    def get(self, timeout=None):
        """Run the task queue until this promise settles, then return its value.

        A rejection is raised: the reason itself if it is an exception,
        otherwise a RejectedValueError carrying it.
        """
        self.wait(timeout=timeout)
        if self._status == Status.Rejected:
            if isinstance(self._result, BaseException):
                raise self._result
            raise RejectedValueError(self._result)
        return self._result

    @classmethod
    def resolve(cls, value=None, queue=None):
        """Return value itself if it is already a cls, else a cls resolved with it.

        When queue is given and value runs on a different queue, value is
        wrapped so the result schedules its handlers on queue.
        """
        if type(value) is cls and (queue is None or value.queue is queue):
            return value
        return cls(lambda resolve, reject: resolve(value), queue=queue)

    @classmethod
    def reject(cls, reason=None, queue=None):
        return cls(lambda resolve, reject: reject(reason), queue=queue)

    @classmethod
    def all(cls, iterable, queue=None):
        return combinators.all_(cls, iterable, queue=queue)

    @classmethod
    def all_settled(cls, iterable, queue=None):
        return combinators.all_settled(cls, iterable, queue=queue)

    @classmethod
    def race(cls, iterable, queue=None):
        return combinators.race(cls, iterable, queue=queue)

    @classmethod
    def any(cls, iterable, queue=None):
        return combinators.any_(cls, iterable, queue=queue)

    @classmethod
    def deferred(cls, queue=None):
        promise, resolve, reject = cls._with_resolvers(queue)
        return Deferred(promise, resolve=resolve, reject=reject)

    defer = deferred
