from __future__ import annotations

import logging

import pytest

from txflow.utils import logging as logging_utils


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_env_level_wins(monkeypatch, restore_root_level):
    monkeypatch.setenv("TXFLOW_LOG_LEVEL", "warning")
    monkeypatch.delenv("TXFLOW_DEBUG", raising=False)

    assert logging_utils.configure_root(logging.DEBUG, verbose=True) == logging.WARNING
    assert restore_root_level.level == logging.WARNING


def test_debug_flag_and_verbose(monkeypatch, restore_root_level):
    monkeypatch.delenv("TXFLOW_LOG_LEVEL", raising=False)
    monkeypatch.setenv("TXFLOW_DEBUG", "yes")
    assert logging_utils.configure_root() == logging.DEBUG

    monkeypatch.delenv("TXFLOW_DEBUG")
    assert logging_utils.configure_root("error") == logging.ERROR
    assert logging_utils.configure_root(verbose=True) == logging.DEBUG
    assert logging_utils.level_name(logging.DEBUG) == "DEBUG"
