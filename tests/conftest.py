"""Pytest configuration and shared fixtures."""
import logging

import pytest

import declarativeconf.config as config_module


@pytest.fixture(autouse=True)
def restore_semantics_registry():
    """Restore explicit value/reference registrations after each test."""
    original = dict(config_module._semantics_registry)

    yield

    config_module._semantics_registry.clear()
    config_module._semantics_registry.update(original)


@pytest.fixture
def debug_logs(caplog):
    """Capture debug records from the library loggers."""
    caplog.set_level(logging.DEBUG, logger="declarativeconf")
    return caplog
