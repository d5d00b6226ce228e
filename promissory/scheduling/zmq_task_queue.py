import itertools, logging, threading, time
import zmq

from promissory.scheduling.task_queue import TaskQueue

logger = logging.getLogger(__name__)


class ZmqTaskQueue(TaskQueue):
    """Task queue whose FIFO is an inproc ZeroMQ pipe.

    Any thread may schedule; the thread that calls run()/run_until() is the
    loop thread and is the only one that executes callbacks.
    """

    ENDPOINT = 'inproc://promissory-task-queue-{0}'
    HWM = 0

    _endpoint_ids = itertools.count()

    def __init__(self, context=None):
        self._sequence = 0
        self._calls = {}
        self._calls_lock = threading.Lock()
        self._closed = False

        ctx = context or zmq.Context.instance()
        self._endpoint = ZmqTaskQueue.ENDPOINT.format(next(ZmqTaskQueue._endpoint_ids))

        self._loop_pipe = ctx.socket(zmq.PAIR)
        self._actor_pipe = ctx.socket(zmq.PAIR)
        for sock in (self._loop_pipe, self._actor_pipe):
            sock.setsockopt(zmq.SNDHWM, ZmqTaskQueue.HWM)
            sock.setsockopt(zmq.RCVHWM, ZmqTaskQueue.HWM)
        self._loop_pipe.bind(self._endpoint)
        self._actor_pipe.connect(self._endpoint)

        self._poller = zmq.Poller()
        self._poller.register(self._loop_pipe, flags=zmq.POLLIN)

        logger.debug('Task queue listening on %s', self._endpoint)

    @property
    def endpoint(self):
        return self._endpoint

    @property
    def closed(self):
        return self._closed

    def __len__(self):
        self._calls_lock.acquire()
        try:
            return len(self._calls)
        finally:
            self._calls_lock.release()

    def schedule(self, callback, *args):
        self._calls_lock.acquire()
        try:
            if self._closed:
                raise RuntimeError('task queue {0} is closed'.format(self._endpoint))
            self._calls[self._sequence] = (callback, args)
            self._actor_pipe.send_string('$CALL', flags=zmq.SNDMORE)
            self._actor_pipe.send_string(str(self._sequence))
            self._sequence += 1
        finally:
            self._calls_lock.release()

    def run_until(self, predicate, timeout=None):
        """Run tasks until predicate() holds.

        With a timeout (milliseconds), wait that long in total for tasks
        posted from other threads before giving up.
        """
        deadline = None if timeout is None else time.monotonic() + timeout / 1000.0
        while not predicate():
            wait = 0
            if deadline is not None:
                wait = max(0, int((deadline - time.monotonic()) * 1000))
            task = self._next(wait)
            if task is None:
                return predicate()
            callback, args = task
            callback(*args)
        return True

    def term(self):
        """Ask the loop thread to close the queue; safe to call from any thread."""
        self._calls_lock.acquire()
        try:
            if not self._closed:
                self._actor_pipe.send_string('$TERM')
        finally:
            self._calls_lock.release()

    def close(self):
        """Close both sockets and drop unrun tasks. Loop thread only; see term()."""
        self._calls_lock.acquire()
        try:
            if self._closed:
                return
            self._closed = True
            discarded = len(self._calls)
            self._calls.clear()
            self._actor_pipe.close(linger=0)
        finally:
            self._calls_lock.release()

        self._poller.unregister(self._loop_pipe)
        self._loop_pipe.close(linger=0)
        logger.debug('Closed task queue %s, discarded %d task(s)', self._endpoint, discarded)

    def _next(self, timeout=0):
        if self._closed:
            return None

        while True:
            if timeout and not self._poller.poll(timeout):
                return None
            try:
                msg = self._loop_pipe.recv_multipart(flags=zmq.NOBLOCK)
            except zmq.Again:
                return None

            cmd = msg.pop(0)
            if cmd == b'$CALL':
                local_id = int(msg[0])

                self._calls_lock.acquire()
                try:
                    if local_id in self._calls:
                        return self._calls.pop(local_id)
                finally:
                    self._calls_lock.release()
            elif cmd == b'$TERM':
                self.close()
                return None
            else:
                logger.warning('Ignoring unknown task queue command %r', cmd)
