import pytest

from promissory.scheduling.task_queue import TaskQueue


@pytest.fixture(autouse=True)
def queue():
    previous = TaskQueue._instance
    queue = TaskQueue()
    TaskQueue.set_instance(queue)
    yield queue
    TaskQueue.set_instance(previous)
