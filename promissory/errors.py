class PromiseError(Exception):
    pass


class ChainingCycleError(PromiseError, TypeError):
    def __init__(self, promise):
        super().__init__('Chaining cycle detected for promise {0!r}'.format(promise))


class AggregateError(PromiseError):
    """Rejection reason of Promise.any: every input's reason, in input order."""

    def __init__(self, errors, message='All promises were rejected'):
        super().__init__(message)
        self.errors = list(errors)


class PromisePendingError(PromiseError, RuntimeError):
    def __init__(self, promise):
        super().__init__('task queue drained while {0!r} is still pending'.format(promise))
        self.promise = promise


class RejectedValueError(PromiseError):
    """Raised by Promise.get() when the rejection reason is not an exception."""

    def __init__(self, reason):
        super().__init__('promise rejected with {0!r}'.format(reason))
        self.reason = reason
