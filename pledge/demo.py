# -*- coding: utf-8 -*-

"""Small scenarios showing how the promises are used.

Run with the ``pledge`` command. Each scenario returns a Promise; the command
waits for all of them and logs their results.
"""

import logging
import sys

from .common import config, log
from .promise import Promise, TimeoutError, delay, retry, timeout

_logger = logging.getLogger(__name__)


def create_audio_file_async(duration=0.2):
    """Simulated asynchronous operation, wrapped around a timer."""
    return delay(duration, 'audio file created')


def run_all_functions(duration=0.1):
    """Wait three operations finishing at different times."""
    operations = [delay(duration * 3, 'func1'),
                  delay(duration, 'func2'),
                  delay(duration * 2, 'func3')]
    return Promise.all(operations)


def flaky_operation(nb_failures):
    """Build a function failing `nb_failures` times, then succeeding."""
    calls = [0]

    def operation():
        calls[0] += 1
        if calls[0] <= nb_failures:
            return Promise.reject(IOError('attempt %s failed' % calls[0]))
        return delay(0.01, 'success after %s calls' % calls[0])

    return operation


SCENARIOS = [
    # (name, factory, expected error type)
    ('timer-wrapped operation', create_audio_file_async, None),
    ('all() over three operations', run_all_functions, None),
    ('retry loop', lambda: retry(flaky_operation(2), max_retries=3,
                                 interval=0.05), None),
    ('timeout', lambda: timeout(delay(5, 'too late'), 0.1), TimeoutError),
]


def run_scenarios(scenarios=SCENARIOS, max_delay=10):
    """Start all scenarios and wait their results.

    Returns:
        int: number of scenarios rejected with an unexpected error.
    """
    nb_errors = 0
    promises = [(name, Promise.resolve(None).then(lambda _, f=f: f()), exp)
                for (name, f, exp) in scenarios]

    for name, p, expected_error in promises:
        try:
            error = p.exception(max_delay)
        except TimeoutError:
            _logger.error('%s: still pending after %ss', name, max_delay)
            nb_errors += 1
            continue
        if error is None and expected_error is None:
            _logger.info('%s: %r', name, p.result())
        elif expected_error and isinstance(error, expected_error):
            _logger.info('%s: rejected as expected (%s)', name, error)
        else:
            _logger.error('%s: unexpected outcome %r', name, error)
            nb_errors += 1
    return nb_errors


def main():
    """Entry point of the ``pledge`` command."""
    with log.Context():
        config.load()
        log.set_debug_mode(config.get('debug_mode'))
        log.set_logs_level(config.get('log_levels'))

        nb_errors = run_scenarios()

    return 1 if nb_errors else 0


if __name__ == "__main__":
    sys.exit(main())
