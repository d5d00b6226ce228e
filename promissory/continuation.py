class Continuation:
    """One then() registration: the handler pair and the promise it settles."""

    def __init__(self, promise, on_fulfilled, on_rejected):
        self._promise = promise
        self._on_fulfilled = on_fulfilled
        self._on_rejected = on_rejected

    @property
    def promise(self):
        return self._promise

    @property
    def on_fulfilled(self):
        return self._on_fulfilled

    @property
    def on_rejected(self):
        return self._on_rejected
