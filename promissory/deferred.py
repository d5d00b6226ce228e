class Deferred:
    """A promise together with the functions that settle it, as returned by Promise.deferred()."""

    def __init__(self, promise, resolve, reject):
        self._promise = promise
        self._resolve = resolve
        self._reject = reject

    @property
    def promise(self):
        return self._promise

    @property
    def resolve(self):
        return self._resolve

    @property
    def reject(self):
        return self._reject
