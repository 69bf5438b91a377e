"""Wallet scan orchestration: fetch, score, value, record."""

from dataclasses import dataclass
from typing import Any, Dict, List

from scouty.logging_config import get_logger, log_with_context
from scouty.services.chain_data import ChainDataProvider
from scouty.services.pricing import SolPriceProvider
from scouty.services.scan_store import ScanStore
from scouty.utils.errors import PersistenceError
from scouty.wallet_risk_scorer import RiskAssessment, WalletObservables, score_wallet

logger = get_logger(__name__)

# NFT holdings are not inspected; the field is kept for response compatibility
NFT_COUNT_PLACEHOLDER = 0


@dataclass(frozen=True)
class WalletScanResult:
    """Everything produced by one wallet scan."""

    wallet_address: str
    observables: WalletObservables
    assessment: RiskAssessment
    total_value_usd: float

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            "total_value_usd": self.total_value_usd,
            "transaction_count": self.observables.transaction_count,
            "wallet_age_days": self.observables.account_age_days,
            "token_count": self.observables.token_count,
            "nft_count": NFT_COUNT_PLACEHOLDER,
        }

    def to_response(self) -> Dict[str, Any]:
        """Response body of the scan endpoint."""
        return {
            "score": self.assessment.total_score,
            "risk_level": self.assessment.risk_tier.value,
            "wallet_address": self.wallet_address,
            "analysis": self.assessment.analysis(),
            "metadata": self.metadata,
            "ai_summary": self.assessment.summary,
            "findings": list(self.assessment.findings),
        }


class WalletScanService:
    """Runs wallet scans against injected collaborators."""

    def __init__(
        self,
        chain_data: ChainDataProvider,
        price_provider: SolPriceProvider,
        store: ScanStore
    ):
        self.chain_data = chain_data
        self.price_provider = price_provider
        self.store = store

    async def scan_wallet(self, wallet_address: str) -> WalletScanResult:
        """Fetch observables for a wallet and score them.

        Raises:
            DataFetchError: If the chain data cannot be fetched
        """
        observables = await self.chain_data.fetch_observables(wallet_address)
        assessment = score_wallet(observables)
        result = WalletScanResult(
            wallet_address=wallet_address,
            observables=observables,
            assessment=assessment,
            total_value_usd=self.price_provider.value_usd(observables.balance_sol),
        )
        log_with_context(
            logger,
            "info",
            "Wallet scan completed",
            wallet_address=wallet_address,
            score=assessment.total_score,
            risk_level=assessment.risk_tier.value
        )
        return result

    def record_scan(self, result: WalletScanResult, is_public: bool = False,
                    scan_ip: str = "unknown") -> bool:
        """Persist a scan result.

        Storage failures are logged and reported through the return value;
        they never affect the scan result already returned to the caller.
        """
        assessment = result.assessment
        try:
            self.store.save_scan(
                wallet_address=result.wallet_address,
                risk_score=assessment.total_score,
                risk_level=assessment.risk_tier.value,
                transaction_count=result.observables.transaction_count,
                wallet_age_days=result.observables.account_age_days,
                token_diversity=result.observables.token_count,
                total_value_usd=result.total_value_usd,
                ai_summary=assessment.summary,
                ai_findings=list(assessment.findings),
                metadata=result.metadata,
                is_public=is_public,
                scan_ip=scan_ip,
            )
        except PersistenceError as e:
            log_with_context(logger, "error", "Database error while recording scan",
                             wallet_address=result.wallet_address, error=e.message, details=e.details)
            return False
        return True

    def public_feed(self, limit: int) -> List[Dict[str, Any]]:
        return self.store.list_public_scans(limit=limit)

    def wallet_history(self, wallet_address: str) -> List[Dict[str, Any]]:
        return self.store.list_wallet_scans(wallet_address)
