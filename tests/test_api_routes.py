"""Tests for the API routes functionality."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from scouty.app import create_application
from scouty.services.chain_data import SolanaChainDataProvider
from scouty.services.pricing import FixedSolPriceProvider
from scouty.services.scan_store import ScanStore
from scouty.utils.errors import DataFetchError, PersistenceError
from tests.fixtures.common import (
    INVALID_WALLET_ADDRESS,
    OTHER_WALLET_ADDRESS,
    WALLET_ADDRESS,
    StubChainDataProvider,
)


def test_health_check(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_scan_wallet(client):
    """Test the scan endpoint returns the full assessment."""
    response = client.post("/scan-wallet", json={"wallet": WALLET_ADDRESS})

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 53
    assert data["risk_level"] == "MEDIUM"
    assert data["wallet_address"] == WALLET_ADDRESS
    assert list(data["analysis"]) == [
        "transaction_history",
        "wallet_age",
        "token_diversity",
        "activity_patterns",
        "protocol_interactions",
        "balance_health",
    ]
    assert data["analysis"]["transaction_history"] == {"score": 20, "weight": 30}
    assert data["analysis"]["balance_health"] == {"score": 10, "weight": 10}
    assert data["metadata"]["total_value_usd"] == pytest.approx(7189.5)
    assert data["metadata"]["transaction_count"] == 89
    assert data["metadata"]["wallet_age_days"] == 120
    assert data["metadata"]["token_count"] == 3
    assert data["metadata"]["nft_count"] == 0
    assert data["ai_summary"] == (
        "This wallet has 89 transactions over 120 days with a balance of 47.9300 SOL. "
        "Risk assessment: MEDIUM."
    )
    assert data["findings"] == []
    assert response.headers["x-request-id"]


def test_scan_wallet_strips_whitespace(client, stub_chain_data):
    response = client.post("/scan-wallet", json={"wallet": f"  {WALLET_ADDRESS}\n"})

    assert response.status_code == 200
    assert stub_chain_data.calls == [WALLET_ADDRESS]


def test_scan_is_recorded_privately_by_default(client):
    client.post("/scan-wallet", json={"wallet": WALLET_ADDRESS})

    history = client.get(f"/scans/wallet/{WALLET_ADDRESS}").json()
    public = client.get("/scans/public").json()

    assert history["wallet_address"] == WALLET_ADDRESS
    assert len(history["scans"]) == 1
    assert history["scans"][0]["risk_score"] == 53
    assert history["scans"][0]["is_public"] is False
    assert public == {"scans": []}


def test_public_scan_appears_in_feed(client):
    client.post("/scan-wallet", json={"wallet": WALLET_ADDRESS, "is_public": True})

    scans = client.get("/scans/public").json()["scans"]

    assert len(scans) == 1
    assert scans[0]["wallet_address"] == WALLET_ADDRESS
    assert scans[0]["risk_level"] == "MEDIUM"
    assert scans[0]["ai_findings"] == []
    assert "scan_ip" not in scans[0]


def test_public_feed_limit(client):
    for _ in range(3):
        client.post("/scan-wallet", json={"wallet": WALLET_ADDRESS, "is_public": True})

    assert len(client.get("/scans/public").json()["scans"]) == 3
    assert len(client.get("/scans/public", params={"limit": 2}).json()["scans"]) == 2


def test_public_feed_rejects_invalid_limit(client):
    response = client.get("/scans/public", params={"limit": 0})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request parameters"}


def test_wallet_history_only_includes_that_wallet(client):
    client.post("/scan-wallet", json={"wallet": WALLET_ADDRESS})
    client.post("/scan-wallet", json={"wallet": OTHER_WALLET_ADDRESS})

    history = client.get(f"/scans/wallet/{OTHER_WALLET_ADDRESS}").json()

    assert [scan["wallet_address"] for scan in history["scans"]] == [OTHER_WALLET_ADDRESS]


def test_wallet_history_invalid_address(client):
    response = client.get(f"/scans/wallet/{INVALID_WALLET_ADDRESS}")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid Solana wallet address"}


@pytest.mark.parametrize("body", [{}, {"wallet": ""}, {"wallet": "   "}, {"wallet": None}])
def test_scan_wallet_requires_address(client, stub_chain_data, body):
    response = client.post("/scan-wallet", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Wallet address is required"}
    assert stub_chain_data.calls == []


def test_scan_wallet_invalid_body(client):
    response = client.post(
        "/scan-wallet",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_scan_wallet_invalid_address(client, stub_chain_data):
    """Test malformed addresses are rejected before any chain lookup."""
    response = client.post("/scan-wallet", json={"wallet": INVALID_WALLET_ADDRESS})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid Solana wallet address"}
    assert stub_chain_data.calls == []


def test_scan_wallet_fetch_failure(test_config, price_provider, memory_store):
    chain_data = StubChainDataProvider(error=DataFetchError(address=WALLET_ADDRESS))
    app = create_application(test_config, chain_data=chain_data,
                             price_provider=price_provider, store=memory_store)

    with TestClient(app) as client:
        response = client.post("/scan-wallet", json={"wallet": WALLET_ADDRESS})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch wallet data"}
    assert memory_store.list_wallet_scans(WALLET_ADDRESS) == []


def test_scan_wallet_survives_persistence_failure(test_config, stub_chain_data, price_provider):
    """Test a storage failure does not change the scan response."""
    store = MagicMock(spec=ScanStore)
    store.save_scan.side_effect = PersistenceError("Failed to save wallet scan")
    app = create_application(test_config, chain_data=stub_chain_data,
                             price_provider=price_provider, store=store)

    with TestClient(app) as client:
        response = client.post(
            "/scan-wallet",
            json={"wallet": WALLET_ADDRESS, "is_public": True},
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
        )

    assert response.status_code == 200
    assert response.json()["score"] == 53
    store.save_scan.assert_called_once()
    kwargs = store.save_scan.call_args.kwargs
    assert kwargs["scan_ip"] == "203.0.113.7"
    assert kwargs["is_public"] is True
    assert kwargs["risk_level"] == "MEDIUM"


def test_cors_preflight(client):
    response = client.options(
        "/scan-wallet",
        headers={
            "Origin": "https://scouty.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_default_collaborators_built_from_config(test_config, memory_store):
    """Test the application builds the RPC-backed provider when none is injected."""
    app = create_application(test_config, store=memory_store)

    with TestClient(app):
        service = app.state.scan_service
        assert isinstance(service.chain_data, SolanaChainDataProvider)
        assert service.chain_data.signature_limit == 1000
        assert service.chain_data.client.config.rpc_url == "https://rpc.test"
        assert isinstance(service.price_provider, FixedSolPriceProvider)
        assert service.price_provider.get_sol_price_usd() == test_config.scan.estimated_sol_price_usd


def test_uncaught_error_keeps_request_id(app):
    """Test unexpected failures return the generic error with a request id."""
    async def explode():
        raise RuntimeError("unexpected")

    app.add_api_route("/explode", explode, methods=["GET"])

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/explode")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers["x-request-id"]
