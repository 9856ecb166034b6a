"""Tests for CLI configuration and logging setup."""

import logging

import pytest

from ..cli.config import Config
from ..cli.logging import setup_logging, get_logger, DebugFormatter


@pytest.fixture
def env(monkeypatch):
    for name in ('DATABASE_URL', 'LOG_LEVEL', 'OUTPUT_FORMAT', 'DEFAULT_MATERIAL_TAX_RATE'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv('DATABASE_URL', 'sqlite://')
    return monkeypatch


def test_defaults(env):
    config = Config.from_env()

    assert config.database_url == 'sqlite://'
    assert config.log_level == 'INFO'
    assert config.output_format == 'text'
    assert config.material_tax_fallback == pytest.approx(0.13)
    assert config.validate()


def test_env_overrides(env):
    env.setenv('OUTPUT_FORMAT', 'json')
    env.setenv('DEFAULT_MATERIAL_TAX_RATE', '15')

    config = Config.from_env()

    assert config.output_format == 'json'
    assert config.material_tax_fallback == pytest.approx(0.15)


def test_env_file(env, tmp_path):
    env.delenv('DATABASE_URL')
    env_file = tmp_path / '.env'
    env_file.write_text('DATABASE_URL=sqlite:///orders.db\n')

    assert Config.from_env(env_file).database_url == 'sqlite:///orders.db'


def test_database_url_required(env):
    env.delenv('DATABASE_URL')

    with pytest.raises(ValueError, match='DATABASE_URL'):
        Config.from_env()


def test_rate_must_be_numeric(env):
    env.setenv('DEFAULT_MATERIAL_TAX_RATE', 'thirteen')

    with pytest.raises(ValueError, match='DEFAULT_MATERIAL_TAX_RATE'):
        Config.from_env()


@pytest.mark.parametrize('changes, message', [
    ({'output_format': 'xml'}, 'output_format'),
    ({'default_material_tax_rate': -1}, 'negative'),
    ({'log_level': 'CHATTY'}, 'log level'),
])
def test_validate_rejects(changes, message):
    config = Config(database_url='sqlite://', **changes)

    with pytest.raises(ValueError, match=message):
        config.validate()


class TestLogging:
    """Tests for logging setup."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_debug_uses_debug_formatter(self):
        setup_logging(debug=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[-1].formatter, DebugFormatter)
        assert logging.getLogger('sqlalchemy.engine').level == logging.WARNING

    def test_level_from_config(self):
        setup_logging(level='warning')

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[-1].formatter, DebugFormatter)

    def test_get_logger_namespace(self):
        assert get_logger('cli').name == 'order_finance.cli'
        assert get_logger('order_finance.reports').name == 'order_finance.reports'
