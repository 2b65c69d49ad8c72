# -*- coding: utf-8 -*-

import builtins


class ChainingCycleError(TypeError):
    """A Promise has been resolved with itself."""

    def __init__(self, message='Chaining cycle detected for promise'):
        TypeError.__init__(self, message)


class RejectionError(Exception):
    """A Promise has been rejected with a value who is not an exception.

    Attributes:
        reason: the rejection reason, as given to `reject()`.
    """

    def __init__(self, reason):
        Exception.__init__(self, 'Promise rejected with non-exception value: '
                                 '%r' % (reason,))
        self.reason = reason


class TimeoutError(builtins.TimeoutError):
    """An operation could not be executed within the time allowed."""
    pass
