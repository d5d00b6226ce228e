"""Promise combinators.

Each takes the promise class to build with, so subclasses get instances of
themselves back. Per-input results are stored by input index; completion
order never affects the output order.
"""

from promissory.errors import AggregateError
from promissory.settled_result import SettledResult


def _to_list(iterable):
    try:
        iterator = iter(iterable)
    except TypeError:
        raise TypeError('{0!r} object is not iterable'.format(type(iterable).__name__)) from None
    return list(iterator)


def all_(cls, iterable, queue=None):
    promises = _to_list(iterable)

    def executor(resolve, reject):
        values = [None] * len(promises)
        remaining = len(promises)

        if remaining == 0:
            resolve(values)
            return

        def fulfill_at(index):
            def on_fulfilled(value):
                nonlocal remaining
                values[index] = value
                remaining -= 1
                if remaining == 0:
                    resolve(values)
            return on_fulfilled

        for index, promise in enumerate(promises):
            cls.resolve(promise, queue=queue).then(fulfill_at(index), reject)

    return cls(executor, queue=queue)


def all_settled(cls, iterable, queue=None):
    promises = _to_list(iterable)

    def executor(resolve, reject):
        results = [None] * len(promises)
        remaining = len(promises)

        if remaining == 0:
            resolve(results)
            return

        def record(index, result):
            nonlocal remaining
            results[index] = result
            remaining -= 1
            if remaining == 0:
                resolve(results)

        def fulfilled_at(index):
            return lambda value: record(index, SettledResult.fulfilled(value))

        def rejected_at(index):
            return lambda reason: record(index, SettledResult.rejected(reason))

        for index, promise in enumerate(promises):
            cls.resolve(promise, queue=queue).then(fulfilled_at(index), rejected_at(index))

    return cls(executor, queue=queue)


def race(cls, iterable, queue=None):
    promises = _to_list(iterable)

    def executor(resolve, reject):
        # Empty input never settles.
        for promise in promises:
            cls.resolve(promise, queue=queue).then(resolve, reject)

    return cls(executor, queue=queue)


def any_(cls, iterable, queue=None):
    promises = _to_list(iterable)

    def executor(resolve, reject):
        reasons = [None] * len(promises)
        remaining = len(promises)

        if remaining == 0:
            reject(AggregateError(reasons))
            return

        def reject_at(index):
            def on_rejected(reason):
                nonlocal remaining
                reasons[index] = reason
                remaining -= 1
                if remaining == 0:
                    reject(AggregateError(reasons))
            return on_rejected

        for index, promise in enumerate(promises):
            cls.resolve(promise, queue=queue).then(resolve, reject_at(index))

    return cls(executor, queue=queue)
