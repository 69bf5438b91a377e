"""Chain-data collaborator: turns Solana RPC data into wallet observables."""

import asyncio
import json
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import httpx

from scouty.constants import LAMPORTS_PER_SOL, MAX_SIGNATURES_PER_REQUEST, SECONDS_PER_DAY
from scouty.logging_config import get_logger, log_with_context
from scouty.solana_client import SolanaClient, SolanaRpcError
from scouty.utils.errors import DataFetchError
from scouty.utils.validation import InvalidPublicKeyError, validate_public_key
from scouty.wallet_risk_scorer import WalletObservables

logger = get_logger(__name__)


class ChainDataProvider(ABC):
    """Source of on-chain observables for a wallet address."""

    @abstractmethod
    async def fetch_observables(self, address: str) -> WalletObservables:
        """Fetch the observables for ``address``.

        Raises:
            DataFetchError: If the address cannot be resolved or the chain
                cannot be reached
        """


def account_age_days(signatures: List[Dict[str, Any]], now: float) -> int:
    """Whole days since the oldest signature in a newest-first listing.

    Returns 0 when there is no history or the oldest entry has no block time.
    """
    if not signatures:
        return 0
    block_time = signatures[-1].get("blockTime")
    if not block_time:
        return 0
    return max(0, int((now - block_time) // SECONDS_PER_DAY))


class SolanaChainDataProvider(ChainDataProvider):
    """Reads balance, signature history and token accounts over Solana RPC."""

    def __init__(
        self,
        client: SolanaClient,
        signature_limit: int = MAX_SIGNATURES_PER_REQUEST,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Args:
            client: Solana RPC client
            signature_limit: Number of most recent signatures inspected
            clock: Returns the current Unix time; defaults to ``time.time``
        """
        self.client = client
        self.signature_limit = signature_limit
        self.clock = clock or time.time

    async def fetch_observables(self, address: str) -> WalletObservables:
        if not validate_public_key(address):
            log_with_context(logger, "warning", "Rejected invalid wallet address", address=address)
            raise DataFetchError(address=address, details={"reason": "invalid public key"})

        try:
            lamports, signatures, token_accounts = await asyncio.gather(
                self.client.get_balance(address),
                self.client.get_signatures_for_address(address, limit=self.signature_limit),
                self.client.get_token_accounts_by_owner(address),
            )
        except (SolanaRpcError, InvalidPublicKeyError, httpx.HTTPError, json.JSONDecodeError) as e:
            log_with_context(logger, "error", "Error fetching wallet data",
                             address=address, error_type=type(e).__name__, error=str(e))
            raise DataFetchError(address=address, details={"reason": str(e)}) from e

        try:
            observables = WalletObservables(
                balance_sol=lamports / LAMPORTS_PER_SOL,
                transaction_count=len(signatures),
                account_age_days=account_age_days(signatures, self.clock()),
                token_count=len(token_accounts),
            )
        except (TypeError, ValueError, KeyError, AttributeError) as e:
            log_with_context(logger, "error", "Malformed wallet data from RPC node",
                             address=address, error_type=type(e).__name__, error=str(e))
            raise DataFetchError(address=address, details={"reason": str(e)}) from e
        log_with_context(
            logger,
            "debug",
            "Fetched wallet observables",
            address=address,
            balance_sol=observables.balance_sol,
            transaction_count=observables.transaction_count,
            account_age_days=observables.account_age_days,
            token_count=observables.token_count
        )
        return observables
