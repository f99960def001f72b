#!/usr/bin/env python3

import contextlib
import logging
import logging.handlers
import pytest
from hogan_middleware.config.config import DEFAULTS, get_base_dir, load_config
from hogan_middleware.config.logging import configure_logging


@contextlib.contextmanager
def restored_logging():
    """Put the root logger back the way it was after configure_logging replaces its handlers."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    try:
        yield
    finally:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(level)


def test_load_config_fills_defaults(tmp_path):
    config_file = tmp_path / 'hogan-config.yaml'
    config_file.write_text("views: templates\nserver:\n  port: 8080\n")

    config = load_config(str(config_file))
    assert config['views'] == 'templates'
    assert config['server'] == {'host': DEFAULTS['server']['host'], 'port': 8080}
    assert config['templates']['extension'] == '.mustache'
    assert config['templates']['watch'] is True
    assert config['static_url'] == '/'


def test_load_config_does_not_share_defaults(tmp_path):
    config_file = tmp_path / 'hogan-config.yaml'
    config_file.write_text("{}\n")

    config = load_config(str(config_file))
    config['server']['port'] = 1
    assert DEFAULTS['server']['port'] == 3000


def test_empty_config_file(tmp_path):
    config_file = tmp_path / 'hogan-config.yaml'
    config_file.write_text("")
    assert load_config(str(config_file))['views'] == 'views'


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / 'nope.yaml'))


def test_config_must_be_mapping(tmp_path):
    config_file = tmp_path / 'hogan-config.yaml'
    config_file.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(str(config_file))


def test_project_config_found():
    """The shipped config/hogan-config.yaml is found without a path."""
    config = load_config()
    assert config['routes']['/']['template'] == 'index'
    assert get_base_dir()


def test_configure_logging_with_file(tmp_path):
    log_file = tmp_path / 'logs' / 'hogan.log'
    with restored_logging():
        root_logger = configure_logging({'logging': {'level': 'debug', 'file': str(log_file), 'console': False}})

        assert root_logger.level == logging.DEBUG
        assert [type(h) for h in root_logger.handlers] == [logging.handlers.RotatingFileHandler]
        logging.getLogger('hogan_middleware.test').info('written')
        root_logger.handlers[0].flush()
        assert 'written' in log_file.read_text()


def test_configure_logging_console_only():
    with restored_logging():
        root_logger = configure_logging({'logging': {'level': 'WARNING'}})
        assert root_logger.level == logging.WARNING
        assert [type(h) for h in root_logger.handlers] == [logging.StreamHandler]
