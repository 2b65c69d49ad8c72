#!/usr/bin/env python
# -*- coding: utf-8 -*-

import logging
import os

import pytest

from pledge.common import config
from pledge.common.config import _config_parser, get, load, set

"""### TEST CASES ###
    ## load
    config file exist
    config file does not exist

    ## get
    key does not exist
    get a bool value
    get a bool with invalid value
    get an int value
    get an int with invalid value
    get a float value
    get a dict
    get a dict with invalid value

    ## set
    set a not existing key
    set a None value
    set a dict value
    set with existing file
"""


class catchLogging(logging.NullHandler):

    def __init__(self):
        logging.NullHandler.__init__(self)
        self.lastLogRecord = None

    def handle(self, record):
        self.lastLogRecord = record

catcher = catchLogging()


def setup_module(module):
    _logger = logging.getLogger()
    _logger.addHandler(catcher)


def teardown_module(module):
    logger = logging.getLogger()
    logger.removeHandler(catcher)


@pytest.fixture(autouse=True)
def config_path(tmpdir, monkeypatch):
    """Use a temporary config file, and reset the config values."""
    path = str(tmpdir.join('pledge.ini'))
    monkeypatch.setattr(config, '_get_config_file_path', lambda: path)
    logging.getLogger('pledge.common.config').setLevel(logging.DEBUG)
    catcher.lastLogRecord = None
    _config_parser.remove_section('config')
    _config_parser.add_section('config')
    return path


class TestConfigLoad(object):

    def test_load_without_existing_file(self, config_path):
        assert not os.path.exists(config_path)
        load()
        assert catcher.lastLogRecord is not None
        assert catcher.lastLogRecord.levelno == logging.WARNING

    def test_load_with_existing_file(self, config_path):
        with open(config_path, 'w') as config_file:
            config_file.write('[config]\nretry_max = 7\n')

        load()
        assert catcher.lastLogRecord is None
        assert get('retry_max') == 7


class TestConfigGet(object):

    def test_key_does_not_exist(self):
        with pytest.raises(KeyError):
            get('plop')

    def test_default_values(self):
        assert get('debug_mode') is False
        assert get('log_levels') == {}
        assert get('thread_pool_workers') == 4
        assert get('retry_max') == 3
        assert get('retry_interval') == 0.1

    def test_get_a_bool_value(self):
        set('debug_mode', True)
        value = get('debug_mode')
        assert type(value) is bool and value

        set('debug_mode', 'False')
        value = get('debug_mode')
        assert type(value) is bool and not value

    def test_get_a_bool_with_invalid_value(self):
        _config_parser.set('config', 'debug_mode', 'plop')
        assert get('debug_mode') is False
        assert catcher.lastLogRecord is not None

    def test_get_an_int_value(self):
        set('retry_max', 42)
        value = get('retry_max')
        assert type(value) is int and value == 42

        set('retry_max', '12')
        assert get('retry_max') == 12

    def test_get_an_int_with_invalid_value(self):
        _config_parser.set('config', 'thread_pool_workers', 'plop')
        assert get('thread_pool_workers') == 4

    def test_get_a_float_value(self):
        set('retry_interval', 2.5)
        value = get('retry_interval')
        assert type(value) is float and value == 2.5

    def test_get_a_dict_value(self):
        _config_parser.set('config', 'log_levels', 'aa=bb;cc = dd')
        value = get('log_levels')
        assert value == {'aa': 'bb', 'cc': 'dd'}

    def test_get_a_dict_with_invalid_value(self):
        _config_parser.set('config', 'log_levels', 'plop;toto=tata')
        assert catcher.lastLogRecord is None

        value = get('log_levels')
        assert value == {'toto': 'tata'}
        assert catcher.lastLogRecord is not None


class TestConfigSet(object):

    def test_key_does_not_exist(self):
        with pytest.raises(KeyError):
            set('plop', 42)

    def test_none_value_reset_to_default(self):
        set('retry_max', 10)
        assert get('retry_max') == 10

        set('retry_max', None)
        assert get('retry_max') == 3

    def test_set_a_dict(self):
        set('log_levels', {'pledge': 'debug'})
        assert get('log_levels') == {'pledge': 'debug'}

    def test_set_writes_the_file(self, config_path):
        set('retry_max', 5)
        set('debug_mode', True)

        with open(config_path) as config_file:
            content = config_file.read()
        assert 'retry_max = 5' in content
        assert 'debug_mode = True' in content

        _config_parser.remove_section('config')
        _config_parser.add_section('config')
        load()
        assert get('retry_max') == 5
        assert get('debug_mode') is True
