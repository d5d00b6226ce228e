import pytest

from promissory.errors import ChainingCycleError
from promissory.promise import Promise
from promissory.resolution import resolve_value


class Recorder:
    def __init__(self):
        self.fulfilled = []
        self.rejected = []

    def fulfill(self, value):
        self.fulfilled.append(value)

    def reject(self, reason):
        self.rejected.append(reason)


def test_plain_values_fulfill_directly():
    for value in (None, 0, 'text', [1, 2], {'then': 'not an attribute'}):
        recorder = Recorder()
        resolve_value(object(), value, recorder.fulfill, recorder.reject)
        assert recorder.fulfilled == [value]
        assert recorder.rejected == []


def test_result_identical_to_target_is_a_cycle():
    target = object()
    recorder = Recorder()
    resolve_value(target, target, recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == []
    assert isinstance(recorder.rejected[0], ChainingCycleError)
    assert isinstance(recorder.rejected[0], TypeError)


def test_non_callable_then_is_a_plain_value():
    class Box:
        then = 'not callable'

    box = Box()
    recorder = Recorder()
    resolve_value(object(), box, recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == [box]


def test_reading_then_raises_rejects():
    error = RuntimeError('getter failed')

    class Hostile:
        @property
        def then(self):
            raise error

    recorder = Recorder()
    resolve_value(object(), Hostile(), recorder.fulfill, recorder.reject)
    assert recorder.rejected == [error]


def test_only_first_callback_is_honored():
    class Fickle:
        def then(self, on_fulfilled, on_rejected):
            on_fulfilled('first')
            on_rejected(ValueError('second'))
            on_fulfilled('third')

    recorder = Recorder()
    resolve_value(object(), Fickle(), recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == ['first']
    assert recorder.rejected == []


def test_reject_then_fulfill_honors_rejection():
    error = ValueError('first')

    class Fickle:
        def then(self, on_fulfilled, on_rejected):
            on_rejected(error)
            on_fulfilled('second')

    recorder = Recorder()
    resolve_value(object(), Fickle(), recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == []
    assert recorder.rejected == [error]


def test_exception_from_then_after_callback_is_ignored():
    class Thrower:
        def then(self, on_fulfilled, on_rejected):
            on_fulfilled('done')
            raise RuntimeError('ignored')

    recorder = Recorder()
    resolve_value(object(), Thrower(), recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == ['done']
    assert recorder.rejected == []


def test_exception_from_then_before_callback_rejects():
    error = RuntimeError('then failed')

    class Thrower:
        def then(self, on_fulfilled, on_rejected):
            raise error

    recorder = Recorder()
    resolve_value(object(), Thrower(), recorder.fulfill, recorder.reject)
    assert recorder.rejected == [error]


def test_nested_thenables_are_adopted_transitively():
    class Layer:
        def __init__(self, inner):
            self.inner = inner

        def then(self, on_fulfilled, on_rejected):
            on_fulfilled(self.inner)

    value = 'core'
    for _ in range(5000):
        value = Layer(value)

    recorder = Recorder()
    resolve_value(object(), value, recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == ['core']


def test_late_callback_resolves_later():
    callbacks = []

    class Later:
        def then(self, on_fulfilled, on_rejected):
            callbacks.append(on_fulfilled)

    recorder = Recorder()
    resolve_value(object(), Later(), recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == []
    callbacks[0]('eventually')
    callbacks[0]('twice')
    assert recorder.fulfilled == ['eventually']


def test_promise_adopts_thenable_resolving_with_its_target(queue):
    holder = []

    class Loop:
        def then(self, on_fulfilled, on_rejected):
            on_fulfilled(holder[0])

    d = Promise.deferred()
    holder.append(d.promise)
    d.resolve(Loop())
    with pytest.raises(ChainingCycleError):
        d.promise.get()


def test_callable_object_with_then_is_adopted(queue):
    def thenable_function():
        pass

    thenable_function.then = lambda on_fulfilled, on_rejected: on_fulfilled('from function')
    assert Promise.resolve(thenable_function).get() == 'from function'


def test_getter_raising_attribute_error_rejects():
    error = AttributeError('broken getter')

    class Hostile:
        @property
        def then(self):
            raise error

    recorder = Recorder()
    resolve_value(object(), Hostile(), recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == []
    assert recorder.rejected == [error]


class Receipt:
    def then(self, on_fulfilled, on_rejected):
        on_fulfilled('instance')


def test_class_with_thenable_instances_is_a_plain_value():
    recorder = Recorder()
    resolve_value(object(), Receipt, recorder.fulfill, recorder.reject)
    assert recorder.fulfilled == [Receipt]
    assert recorder.rejected == []


def test_handler_returning_a_class_fulfills_with_it(queue):
    assert Promise.resolve(1).then(lambda v: Receipt).get() is Receipt


def test_promise_class_itself_is_a_plain_value(queue):
    assert Promise.resolve(Promise).get() is Promise
    assert Promise.all([int, Promise, Receipt]).get() == [int, Promise, Receipt]
