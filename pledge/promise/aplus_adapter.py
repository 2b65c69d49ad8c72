# -*- coding: utf-8 -*-

"""Adapter used by the Promises/A+ compliance tests.

The test runner only needs three functions: one creating a fulfilled
promise, one creating a rejected promise, and one creating a pending promise
settled by hand.
"""

from .deferred import Deferred
from .promise import Promise


def resolved(value):
    return Promise.resolve(value)


def rejected(reason):
    return Promise.reject(reason)


def deferred():
    """Returns a Deferred: an object with `promise`, `resolve` and `reject`
    attributes."""
    return Deferred()
