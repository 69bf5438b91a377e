"""Common test fixtures for Scouty tests.

This module provides fixtures that can be reused across different test modules.
"""

from decimal import Decimal
from typing import List, Optional
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from scouty.app import create_application
from scouty.config import APIConfig, AppConfig, DatabaseConfig, ScanConfig, ServerConfig, SolanaConfig
from scouty.services.chain_data import ChainDataProvider
from scouty.services.pricing import FixedSolPriceProvider
from scouty.services.scan_service import WalletScanService
from scouty.services.scan_store import ScanStore
from scouty.solana_client import SolanaClient
from scouty.wallet_risk_scorer import WalletObservables

# Well-known mainnet addresses, valid 32-byte public keys
WALLET_ADDRESS = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
OTHER_WALLET_ADDRESS = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"
INVALID_WALLET_ADDRESS = "not-a-solana-wallet"

# Worked example: scores 53, MEDIUM
EXAMPLE_OBSERVABLES = WalletObservables(
    balance_sol=47.93,
    transaction_count=89,
    account_age_days=120,
    token_count=3,
)


class StubChainDataProvider(ChainDataProvider):
    """Chain-data provider returning canned observables."""

    def __init__(self, observables: WalletObservables = EXAMPLE_OBSERVABLES,
                 error: Optional[Exception] = None):
        self.observables = observables
        self.error = error
        self.calls: List[str] = []

    async def fetch_observables(self, address: str) -> WalletObservables:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.observables


@pytest.fixture
def stub_chain_data():
    """Create a chain-data provider with the worked-example observables."""
    return StubChainDataProvider()


@pytest.fixture
def mock_solana_client():
    """Create a mock Solana client."""
    client = AsyncMock(spec=SolanaClient)

    client.get_balance.return_value = 2_500_000_000  # 2.5 SOL in lamports
    client.get_signatures_for_address.return_value = [
        {"signature": "newest_signature", "slot": 200, "blockTime": 1_700_000_000, "err": None},
        {"signature": "oldest_signature", "slot": 100, "blockTime": 1_690_000_000, "err": None},
    ]
    client.get_token_accounts_by_owner.return_value = [
        {"pubkey": "token_account_1", "account": {"data": {"parsed": {"info": {"mint": "mint_1"}}}}},
        {"pubkey": "token_account_2", "account": {"data": {"parsed": {"info": {"mint": "mint_2"}}}}},
    ]

    return client


@pytest.fixture
def memory_store():
    """Create an in-memory scan store with its tables."""
    store = ScanStore.from_url("sqlite://")
    store.create_tables()
    yield store
    store.dispose()


@pytest.fixture
def price_provider():
    """Value SOL at 150 USD."""
    return FixedSolPriceProvider(Decimal("150"))


@pytest.fixture
def scan_service(stub_chain_data, price_provider, memory_store):
    """Create a WalletScanService over stub collaborators."""
    return WalletScanService(
        chain_data=stub_chain_data,
        price_provider=price_provider,
        store=memory_store,
    )


@pytest.fixture
def test_config():
    """Application configuration that never reads the environment."""
    return AppConfig(
        solana=SolanaConfig(rpc_url="https://rpc.test"),
        scan=ScanConfig(),
        database=DatabaseConfig(url="sqlite://"),
        server=ServerConfig(environment="testing", log_level="WARNING"),
        api=APIConfig(cors_origins=["*"]),
    )


@pytest.fixture
def app(test_config, stub_chain_data, price_provider, memory_store):
    """Create the application wired to stub collaborators."""
    return create_application(
        config=test_config,
        chain_data=stub_chain_data,
        price_provider=price_provider,
        store=memory_store,
    )


@pytest.fixture
def client(app):
    """Create a TestClient instance with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
