import logging
from collections import deque

logger = logging.getLogger(__name__)


class TaskQueue:
    """FIFO queue of deferred callbacks, drained by whoever owns the loop."""

    _instance = None

    @classmethod
    def instance(cls):
        if TaskQueue._instance is None:
            TaskQueue._instance = cls()
        return TaskQueue._instance

    @classmethod
    def set_instance(cls, queue):
        logger.debug('Default task queue set to %r', queue)
        TaskQueue._instance = queue

    def __init__(self):
        self._tasks = deque()

    def __len__(self):
        return len(self._tasks)

    def schedule(self, callback, *args):
        self._tasks.append((callback, args))

    def run(self):
        count = 0
        while True:
            task = self._next()
            if task is None:
                return count
            callback, args = task
            callback(*args)
            count += 1

    def run_until(self, predicate, timeout=None):
        """Run tasks until predicate() holds or the queue is empty.

        timeout is ignored; an empty queue returns False at once.
        """
        while not predicate():
            task = self._next()
            if task is None:
                return False
            callback, args = task
            callback(*args)
        return True

    def _next(self):
        if self._tasks:
            return self._tasks.popleft()
        return None
