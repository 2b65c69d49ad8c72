# -*- coding: utf-8 -*-

from .decorators import wrap_promise
from .deferred import Deferred
from .errors import ChainingCycleError, RejectionError, TimeoutError
from .promise import Promise
from .reduce_coroutine import reduce_coroutine
from .scheduler import Scheduler, get_scheduler, set_scheduler
from .thread_pool import ThreadPoolExecutor
from .timer import delay, retry, timeout
from .util import is_thenable

__all__ = ['is_thenable', 'ChainingCycleError', 'Deferred', 'Promise',
           'RejectionError', 'TimeoutError', 'Scheduler', 'get_scheduler',
           'set_scheduler', 'reduce_coroutine', 'ThreadPoolExecutor',
           'wrap_promise', 'delay', 'retry', 'timeout']
