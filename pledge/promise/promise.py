# -*- coding: utf-8 -*-

import inspect
import logging
from functools import partial
from threading import Lock

from .errors import ChainingCycleError, RejectionError, TimeoutError
from .scheduler import get_scheduler

_logger = logging.getLogger(__name__)


def resolve_with(promise, x, fulfill, reject):
    """Settle `promise` according to the value `x`.

    This is the resolution procedure of the Promises/A+ standard:
    - if `x` is `promise` itself, it's rejected with a ChainingCycleError.
    - if `x` is a thenable (a Promise or any object with a callable `then`
      attribute), `promise` adopts its state when it's settled.
    - else, `promise` is fulfilled with `x`.

    A thenable may call its callbacks several times, or call both. Only the
    first call is used; the others are ignored.

    Args:
        promise (Promise): the promise to settle.
        x: the value used to settle the promise.
        fulfill (callable): fulfill capability of `promise`.
        reject (callable): reject capability of `promise`.
    """
    if x is promise:
        return reject(ChainingCycleError())
    if x is None:
        return fulfill(x)

    called = [False]

    def on_thenable_fulfilled(y):
        if called[0]:
            return
        called[0] = True
        resolve_with(promise, y, fulfill, reject)

    def on_thenable_rejected(reason):
        if called[0]:
            return
        called[0] = True
        reject(reason)

    try:
        try:
            then = x.then
        except AttributeError:
            # A `then` getter raising AttributeError is not a missing `then`.
            if inspect.getattr_static(x, 'then', None) is None:
                return fulfill(x)
            raise
        if not callable(then):
            return fulfill(x)
        then(on_thenable_fulfilled, on_thenable_rejected)
    except Exception as error:
        if called[0]:
            _logger.debug('Thenable %r raised an error after being settled. '
                          'Error ignored: %r' % (x, error))
            return
        called[0] = True
        reject(error)


class Promise(object):
    """It represents an operation expected to be completed in the future.

    A Promise is used for asynchronous computation. It contains a value not yet
    known when the Promise is created. It allows to set callbacks who will be
    called as soon as the result is known. It's a "promise" of a future value.

    The callbacks are never executed immediately: they are scheduled, and run
    by the scheduler after the current code has returned (See
    ``pledge.promise.scheduler``).

    All calls to the methods are thread-safe.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, executor, _name=None, _previous=None, _scheduler=None):
        """Constructor of the Promise.

        Generate the two callbacks for the executor, then call the `executor`.
        It means the executor will be fully executed before the the constructor
        returns.
        If the executor raises an exception, it's caught and the Promise is
        rejected with this exception.

        Args:
            executor (callable): Takes 2 callable arguments:
                The first one, `on_fulfilled()` should be called when the
                Promise is fulfilled (ie the tasks is done) and must accept
                the result's value as its only argument.
                The second, `on_rejected()`, should be called when an error
                occurs. It accepts the rejection reason, usually an instance
                of `Exception`.
            _name (str): if set, name used when converted to text.
            _previous (Promise): if set, the promise chained to this one.
            _scheduler (Scheduler): if set, scheduler used to run the
                callbacks. By default, the default scheduler.
        """

        self._state = self.PENDING
        self._result = None
        self._error = None
        self._lock = Lock()
        self._name = _name or getattr(executor, '__name__', '???')
        self._previous = _previous
        if _scheduler is None:
            _scheduler = get_scheduler()
        self._scheduler = _scheduler

        self._callbacks = []
        self._errbacks = []

        def on_fulfilled(result):
            with self._lock:
                if self._state != self.PENDING:
                    _logger.debug('Try to fulfill Promise %s already settled. '
                                  'New result will be ignored: %r'
                                  % (self._name, result))
                    return
                self._result = result
                self._state = self.FULFILLED

                for callback in self._callbacks:
                    self._scheduler.schedule(partial(callback, result))

                # Free the references
                self._callbacks = None
                self._errbacks = None

            self._scheduler.notify()

        def on_rejected(error):
            with self._lock:
                if self._state != self.PENDING:
                    _logger.debug('Try to reject Promise %s already settled. '
                                  'New error will be ignored: %r'
                                  % (self._name, error))
                    return
                self._error = error
                self._state = self.REJECTED

                for errback in self._errbacks:
                    self._scheduler.schedule(partial(errback, error))

                # Free the references
                self._callbacks = None
                self._errbacks = None

            self._scheduler.notify()

        try:
            executor(on_fulfilled, on_rejected)
        except Exception as error:
            on_rejected(error)

    @property
    def state(self):
        """str: one of PENDING, FULFILLED or REJECTED."""
        return self._state

    def _is_settled(self):
        return self._state != self.PENDING

    def _wait(self, timeout):
        if not self._scheduler.run_until(self._is_settled, timeout):
            raise TimeoutError()

    def result(self, timeout=None):
        """Run the scheduler until the result is available, then returns it.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be fulfilled. By default, it can wait indefinitely.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
            RejectionError: if the promise is rejected with a non-exception
                value.
            *: If the promise is rejected, the rejection cause is raised.
        """
        self._wait(timeout)

        with self._lock:
            if self._state == self.REJECTED:
                if isinstance(self._error, BaseException):
                    raise self._error
                raise RejectionError(self._error)
            return self._result

    def exception(self, timeout=None):
        """Run the scheduler until the promise is settled; returns its error.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be settled. By default, it can wait indefinitely.
        Returns:
            *: the reason of the rejection of the Promise (usually an
                Exception).
            None: if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        self._wait(timeout)

        with self._lock:
            return self._error

    def then(self, on_fulfilled=None, on_rejected=None):
        """Create a new promise from callbacks called when this one is settled.

        If the promise is fulfilled, the `on_fulfilled` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called. The callback is always called by the scheduler,
        never during the call to `then()`.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can returns:
        - A value: the new promise will be fulfilled with this value.
        - Another Promise, or any object with a `then` method: when fulfilled
            or rejected, will transfer its status (state and result/error) to
            the Promise returned by this method.

        If a callback is not callable, the state of the self promise is
        transferred to the new promise (the state and the value/error).

        Args:
            on_fulfilled (callable, optional):  This callback will receive the
                result of the original promise as argument.
            on_rejected (callable, optional): This callback will receive the
                reason of the rejection of the original promise as argument.
        Returns:
            Promise<*>: new promise depending of self.
        """
        if not callable(on_fulfilled):
            on_fulfilled = None
        if not callable(on_rejected):
            on_rejected = None

        if not on_rejected:
            name = '%s' % getattr(on_fulfilled, '__name__', '???')
        elif not on_fulfilled:
            name = '<None, %s>' % getattr(on_rejected, '__name__', '???')
        else:
            name = '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                                 getattr(on_rejected, '__name__', '???'))

        capabilities = []
        chained = Promise(lambda ok, error: capabilities.extend((ok, error)),
                          _name=name, _previous=self,
                          _scheduler=self._scheduler)
        fulfilled, rejected = capabilities

        def callback(result):
            if on_fulfilled is not None:
                try:
                    result = on_fulfilled(result)
                except Exception as error:
                    return rejected(error)
            resolve_with(chained, result, fulfilled, rejected)

        def errback(error):
            if on_rejected is None:
                return rejected(error)
            try:
                result = on_rejected(error)
            except Exception as new_error:
                return rejected(new_error)
            resolve_with(chained, result, fulfilled, rejected)

        self._add_callback(callback)
        self._add_errback(errback)
        return chained

    def catch(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): Will receive the rejection reason (usually
                an instance of Exception). Will be called if `self` is
                rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. If no error handler has been set (via then() or catch()), the
        default behavior is to do nothing, and thus, errors are silently
        ignored.
        Calling `safeguard()` after all chains are set will catch these errors,
        and log them as ERROR with the maximum of details possible.
        """
        def guard(error):
            if isinstance(error, BaseException):
                _logger.error('[SAFEGUARD] %s' % self,
                              exc_info=(type(error), error,
                                        error.__traceback__))
            else:
                _logger.error('[SAFEGUARD] %s rejected with %r'
                              % (self, error))

        self._add_errback(guard)

    def __repr__(self):
        return 'Promise(%s)' % self._inner_print()

    def _inner_print(self):
        if self._state == self.REJECTED:
            state = 'R'
        elif self._state == self.FULFILLED:
            state = 'F'
        else:
            state = 'P'

        if self._previous:
            return '%s -> %s %s' % (self._previous._inner_print(), self._name,
                                    state)
        return '%s %s' % (self._name, state)

    @classmethod
    def resolve(cls, value):
        """Create a promise who resolves the selected value.

        The value is not unwrapped: if it's a promise, the new Promise is
        fulfilled with the promise object itself. A chained callback
        (`then()`) will unwrap it.

        Args:
            value: result of the promise.
        Returns:
            Promise: new Promise already fulfilled, containing the value
                passed in parameter.
        """
        return cls(lambda ok, error: ok(value), _name='RESOLVE')

    @classmethod
    def reject(cls, reason):
        """Create a Promise rejected for the reason specified.

        Args:
            reason: Exception set to the Promise
        Returns:
            Promise: new Promise already rejected.
        """
        return cls(lambda ok, error: error(reason), _name='REJECT')

    @classmethod
    def _adopt(cls, item):
        """Convert a value, a Promise or a thenable in a settled Promise.

        Settled promises and plain values need the same number of scheduler
        turns, so the first of them in a list is the first to settle.
        """
        if isinstance(item, Promise):
            return item.then()
        return cls.resolve(item).then()

    @classmethod
    def all(cls, promises):
        """Create a Promise who wait a list of promises to be all fulfilled.

        The resulting Promise resolve when all of the promises in the list are
        resolved, and returns a list of all the resulting values, keeping the
        order of the promise list.
        If a promise is rejected, then the resulting promise is rejected with
        the same reason, and all results from other promises are ignored.

        Args:
            promises (iterable): promises, thenables or direct values.
        Returns:
            Promise<list>: resulting promise., fulfilled when all promises
                are fulfilled, or when one of the promises has been rejected.
        """
        promises = list(promises)
        if not promises:
            return cls.resolve([])

        lock = Lock()
        remaining_tasks = [len(promises)]
        results = [None] * len(promises)

        def executor(resolve, reject):
            def resolve_one_promise(index, value):
                with lock:
                    results[index] = value
                    remaining_tasks[0] -= 1
                    is_last = remaining_tasks[0] == 0
                if is_last:
                    resolve(results)

            for index, p in enumerate(promises):
                cls._adopt(p).then(partial(resolve_one_promise, index),
                                   reject)

        return cls(executor, _name='ALL')

    @classmethod
    def race(cls, promises):
        """Run all promises, then resolve or reject with the fastest Promise.

        Returns a new Promise settled as soon as the one the promises is
        settled. Result value or rejection reason of the finished promise are
        transmitted.
        All other Promise result's will be ignored.

        Args:
            promises (iterable): promises, thenables or direct values. If
                several of them are already settled, the first in the list
                wins.
        Returns:
            Promise: a promise. If the list is empty, it will never be
                settled.
        """
        promises = list(promises)
        if not promises:
            _logger.warning('Empty promise list in Promise.race(): the '
                            'resulting Promise will never be settled.')

        def executor(resolve, reject):
            for p in promises:
                cls._adopt(p).then(resolve, reject)

        return cls(executor, _name='RACE')

    def _add_callback(self, callback):
        with self._lock:
            if self._state == self.PENDING:
                self._callbacks.append(callback)
            elif self._state == self.FULFILLED:
                self._scheduler.schedule(partial(callback, self._result))

    def _add_errback(self, errback):
        with self._lock:
            if self._state == self.PENDING:
                self._errbacks.append(errback)
            elif self._state == self.REJECTED:
                self._scheduler.schedule(partial(errback, self._error))
