# -*- coding: utf-8 -*-

import pytest

from pledge.promise import Scheduler, set_scheduler


@pytest.fixture(autouse=True)
def scheduler(request):
    """Give to each test its own default scheduler.

    Tasks left in the queue by a test can't be executed by the next one.

    Returns:
        Scheduler: the default scheduler used during the test.
    """
    test_scheduler = Scheduler('test')
    previous = set_scheduler(test_scheduler)

    def _restore_scheduler():
        set_scheduler(previous)
    request.addfinalizer(_restore_scheduler)
    return test_scheduler
