"""
Root-level conftest for pytest configuration
"""
import pytest

from scouty import config


@pytest.fixture(autouse=True)
def clear_config_cache():
    """Drop cached environment-based configuration around each test."""
    getters = (
        config.get_solana_config,
        config.get_scan_config,
        config.get_database_config,
        config.get_server_config,
    )
    for getter in getters:
        getter.cache_clear()
    yield
    for getter in getters:
        getter.cache_clear()
