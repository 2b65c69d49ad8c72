# -*- coding: utf-8 -*-

import functools

from .promise import Promise
from .util import is_thenable


def wrap_promise(f):
    """Decorator who converts the result in a Promise object.

    The function is called immediately. If it returns a Promise, it's
    transmitted as is; another thenable is adopted by a new Promise.
    Else, a new Promise is created with the returned value as result.
    If the function raises an exception, a rejected Promise is returned.
    """
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            result = f(*args, **kwargs)
        except Exception as error:
            return Promise.reject(error)

        if isinstance(result, Promise):
            return result
        elif is_thenable(result):
            return Promise.resolve(result).then()
        return Promise.resolve(result)

    return wrapper
