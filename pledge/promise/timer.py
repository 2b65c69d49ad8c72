# -*- coding: utf-8 -*-

"""Promises settled after a delay, and helpers built on them.

The timers run in their own thread, and only settle the promises. The
callbacks are still executed by the scheduler.
"""

import logging
import threading

from ..common import config
from .decorators import wrap_promise
from .errors import RejectionError, TimeoutError
from .promise import Promise
from .reduce_coroutine import reduce_coroutine

_logger = logging.getLogger(__name__)


def _start_timer(seconds, fn, *args):
    timer = threading.Timer(seconds, fn, args=args)
    timer.daemon = True
    timer.start()
    return timer


def delay(seconds, value=None):
    """Create a Promise fulfilled after a delay.

    Args:
        seconds (float): delay before the fulfillment.
        value (optional): result of the promise.
    Returns:
        Promise: new Promise, fulfilled with `value` after `seconds`.
    """
    def executor(resolve, _reject):
        _start_timer(seconds, resolve, value)

    return Promise(executor, _name='DELAY %ss' % seconds)


def timeout(promise, seconds):
    """Limit the time allowed to a Promise to be settled.

    The operation behind `promise` is not stopped: if it takes too long, its
    result is just ignored.

    Args:
        promise (Promise): any promise or thenable.
        seconds (float): maximum delay allowed.
    Returns:
        Promise: new Promise, settled like `promise`; or rejected with a
            TimeoutError if `promise` is not settled after `seconds`.
    """
    timers = []

    def executor(_resolve, reject):
        error = TimeoutError('Promise not settled after %ss' % seconds)
        timers.append(_start_timer(seconds, reject, error))

    result = Promise.race([promise, Promise(executor, _name='TIMEOUT')])

    def _stop_timer(_value):
        timers[0].cancel()

    result.then(_stop_timer, _stop_timer)
    return result


def retry(fn, max_retries=None, interval=None):
    """Call an asynchronous function until it succeeds.

    Args:
        fn (callable): function without arguments. It can return a direct
            value, or a Promise.
        max_retries (int, optional): number of calls allowed after the first
            failure. Default to the 'retry_max' config entry.
        interval (float, optional): delay between a failure and the next
            call, in seconds. Default to the 'retry_interval' config entry.
    Returns:
        Promise: fulfilled with the result of the first successful call, or
            rejected with the reason of the last failure.
    """
    if max_retries is None:
        max_retries = config.get('retry_max')
    if interval is None:
        interval = config.get('retry_interval')
    name = getattr(fn, '__name__', '???')

    @reduce_coroutine()
    def _retry_loop():
        attempt = 0
        while True:
            try:
                result = yield wrap_promise(fn)()
            except Exception as error:
                if attempt >= max_retries:
                    _logger.debug('Call to %s failed %s times. Give up.',
                                  name, attempt + 1)
                    raise
                attempt += 1
                _logger.info('Call to %s failed (%s). Retry in %ss (%s/%s)',
                             name, error, interval, attempt, max_retries)
                yield delay(interval)
            else:
                return result

    def _give_up(error):
        if isinstance(error, RejectionError):
            error = error.reason
        return Promise.reject(error)

    return _retry_loop().catch(_give_up)
