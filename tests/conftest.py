"""Test configuration for pytest.

This module imports fixtures that should be available to all tests.
"""

# Import fixtures
from tests.fixtures.common import (  # noqa
    stub_chain_data,
    mock_solana_client,
    memory_store,
    price_provider,
    scan_service,
    test_config,
    app,
    client,
)
