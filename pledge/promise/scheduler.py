# -*- coding: utf-8 -*-

"""Queue of deferred tasks, used by the promises to run their callbacks.

A Promise never calls its callbacks directly: it schedules them, and they are
executed later, when the scheduler is run. The scheduler is a simple FIFO
queue of callables without arguments, drained by an explicit run loop
(``Scheduler.run()``, or ``Promise.result()`` who uses ``run_until()``).

Any thread can schedule a task; the tasks are executed by the thread running
the scheduler.
"""

from collections import deque
import logging
import threading
import time

_logger = logging.getLogger(__name__)


class Scheduler(object):
    """FIFO queue of tasks executed after the current code returns.

    All calls are thread-safe.
    """

    def __init__(self, name='default'):
        """
        Args:
            name (str): name used in the logs.
        """
        self.name = name
        self._tasks = deque()
        self._condition = threading.Condition()

    def __len__(self):
        with self._condition:
            return len(self._tasks)

    def __repr__(self):
        return 'Scheduler(%s, %s tasks)' % (self.name, len(self))

    def schedule(self, task):
        """Add a task at the end of the queue.

        The task is never executed during this call.

        Args:
            task (callable): function without arguments.
        """
        with self._condition:
            self._tasks.append(task)
            self._condition.notify_all()

    def notify(self):
        """Wake up the threads waiting in `run_until()`."""
        with self._condition:
            self._condition.notify_all()

    def run_once(self):
        """Execute the oldest task of the queue.

        If the task raises an exception, it's logged and ignored.

        Returns:
            boolean: False if the queue was empty; True otherwise.
        """
        with self._condition:
            if not self._tasks:
                return False
            task = self._tasks.popleft()

        try:
            task()
        except Exception:
            _logger.exception('Deferred task %r raised an exception!', task)
        return True

    def run(self):
        """Execute tasks until the queue is empty.

        Tasks added during the run are also executed.

        Returns:
            int: number of tasks executed.
        """
        count = 0
        while self.run_once():
            count += 1
        return count

    def run_until(self, predicate, timeout=None):
        """Execute tasks, and wait for new ones, until the predicate is true.

        Args:
            predicate (callable): called without arguments after each run of
                the queue. It must not acquire locks held by threads calling
                `schedule()`.
            timeout (float, optional): maximum time to wait, in seconds. If
                None, it can wait indefinitely.
        Returns:
            boolean: the last value returned by `predicate`.
        """
        deadline = None
        if timeout is not None:
            deadline = time.monotonic() + timeout

        while True:
            self.run()
            with self._condition:
                if predicate():
                    return True
                if self._tasks:
                    continue
                if deadline is None:
                    self._condition.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return False
                    self._condition.wait(remaining)


_default_scheduler = Scheduler()


def get_scheduler():
    """Returns the scheduler used by default by the new promises."""
    return _default_scheduler


def set_scheduler(scheduler):
    """Replace the default scheduler.

    Promises already created keep their scheduler.

    Args:
        scheduler (Scheduler): the new default scheduler.
    Returns:
        Scheduler: the previous default scheduler.
    """
    global _default_scheduler

    previous = _default_scheduler
    _default_scheduler = scheduler
    return previous
