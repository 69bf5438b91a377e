"""Collaborators and orchestration for wallet scans."""

from scouty.services.chain_data import ChainDataProvider, SolanaChainDataProvider
from scouty.services.pricing import FixedSolPriceProvider, SolPriceProvider
from scouty.services.scan_service import WalletScanResult, WalletScanService
from scouty.services.scan_store import ScanStore

__all__ = [
    "ChainDataProvider",
    "SolanaChainDataProvider",
    "SolPriceProvider",
    "FixedSolPriceProvider",
    "ScanStore",
    "WalletScanResult",
    "WalletScanService",
]
