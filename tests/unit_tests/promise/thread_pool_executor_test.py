# -*- coding: utf-8 -*-

import threading

from pledge.common import config
from pledge.promise import ThreadPoolExecutor


class TestThreadPoolExecutor(object):

    def test_small_task(self):
        with ThreadPoolExecutor(1) as executor:
            def task(arg):
                return 'OK %s' % arg

            f = executor.submit(task, 'ARG')
            assert f.result(1) == 'OK ARG'

    def test_task_failure(self):
        class MyException(Exception):
            pass

        with ThreadPoolExecutor(1) as executor:
            def task(arg):
                raise MyException

            f = executor.submit(task, 'ARG')
            assert isinstance(f.exception(1), MyException)

    def test_chained_callback_runs_in_scheduler_thread(self):
        threads = []

        with ThreadPoolExecutor(2) as executor:
            def task():
                threads.append(threading.current_thread())
                return 3

            def callback(value):
                threads.append(threading.current_thread())
                return value * 2

            p = executor.submit(task).then(callback)
            assert p.result(1) == 6

        assert threads[0] is not threading.current_thread()
        assert threads[1] is threading.current_thread()

    def test_default_number_of_workers(self, monkeypatch):
        monkeypatch.setattr(config, 'get', lambda key: 2)
        executor = ThreadPoolExecutor()
        assert executor._executor._max_workers == 2
        executor.shutdown()
