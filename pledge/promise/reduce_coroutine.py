# -*- coding: utf-8 -*-

import functools

from .deferred import Deferred
from .errors import RejectionError
from .util import is_thenable


def reduce_coroutine(safeguard=False):
    """Decorator who converts a coroutine of promises into a single promise.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous Promises.
    Whatever is the number of Promises or async calls used, the result will
    always be an unique Promise wrapping the whole process.

    Each Promise yielded is resolved, and its result is sent back to the
    generator. If it's rejected, the error is raised inside the generator.
    The first non-thenable value yielded (or the value returned by the
    generator) is the result of the resulting Promise.

    Args:
        safeguard (boolean): if true, use `Promise.safeguard()` on the
            resulting promise.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                Promise<*>
            """
            df = Deferred(_name='COROUTINE %s' % func.__name__)
            if safeguard:
                df.promise.safeguard()

            try:
                # Create generator; Initialization phase
                gen = func(*args, **kwargs)
            except Exception as error:
                df.reject(error)
                return df.promise

            def _call_next_or_set_result(value):
                if is_thenable(value):
                    value.then(iter_next, iter_error)
                else:
                    gen.close()
                    df.resolve(value)

            def _step(method, arg, default_result):
                try:
                    next_value = method(arg)
                except StopIteration as stop:
                    if stop.value is not None:
                        return df.resolve(stop.value)
                    return df.resolve(default_result)
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            def iter_next(yielded_value):
                _step(gen.send, yielded_value, yielded_value)

            def iter_error(reason):
                if not isinstance(reason, BaseException):
                    reason = RejectionError(reason)
                _step(gen.throw, reason, None)

            # Start and resolve loop.
            _step(gen.send, None, None)

            return df.promise

        return wrapper
    return decorator
