# -*- coding: utf-8 -*-

from .promise import Promise


class Deferred(object):
    """Pending Promise, with its settlement capabilities exposed.

    The code producing the value keeps the Deferred, and hands out only
    `promise` to the consumers.

    Attributes:
        promise (Promise): pending promise, settled by the two functions below.
        resolve (callable): fulfill `promise` with a value, kept as-is.
        reject (callable): reject `promise` with a reason.
    """

    def __init__(self, _name=None, _scheduler=None):
        capabilities = []
        self.promise = Promise(
            lambda ok, error: capabilities.extend((ok, error)),
            _name=_name or 'DEFERRED', _scheduler=_scheduler)
        self.resolve, self.reject = capabilities

    def __repr__(self):
        return 'Deferred(%s)' % self.promise._inner_print()
