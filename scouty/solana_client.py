"""Async Solana JSON-RPC client."""

# Standard library imports
import asyncio
import json
from typing import Any, Dict, List, Optional

# Third-party library imports
import httpx

# Internal imports
from scouty.config import SolanaConfig, get_solana_config
from scouty.constants import MAX_SIGNATURES_PER_REQUEST, TOKEN_PROGRAM_ID
from scouty.logging_config import get_logger, log_with_context
from scouty.utils.validation import require_public_key

# Get logger
logger = get_logger(__name__)

RETRIABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}
RPC_RATE_LIMIT_CODE = -32005


class SolanaRpcError(Exception):
    """Exception raised when a Solana RPC request fails."""

    def __init__(self, message: str, error_data: Optional[Dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Error message
            error_data: Optional error data from the RPC response
        """
        super().__init__(message)
        self.error_data = error_data or {}


class SolanaClient:
    """Client for the subset of the Solana RPC API used to profile wallets."""

    def __init__(
        self,
        config: Optional[SolanaConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        initial_retry_delay: float = 1.0,
        max_retry_delay: float = 10.0
    ):
        """Initialize the Solana client.

        Args:
            config: Solana configuration. Defaults to environment-based config.
            http_client: Optional pre-built httpx client, mainly for tests
            initial_retry_delay: First backoff delay in seconds
            max_retry_delay: Upper bound for a single backoff delay
        """
        self.config = config or get_solana_config()
        self.headers = {"Content-Type": "application/json"}
        self.initial_retry_delay = initial_retry_delay
        self.max_retry_delay = max_retry_delay
        self._http_client = http_client
        self._request_id = 0

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.config.timeout,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20)
            )
        return self._http_client

    def _backoff(self, retry_count: int) -> float:
        return min(self.initial_retry_delay * (2 ** retry_count), self.max_retry_delay)

    async def _make_request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Make a JSON-RPC request to the Solana node.

        Args:
            method: The RPC method to call
            params: The parameters to pass to the method

        Returns:
            The ``result`` member of the JSON-RPC response

        Raises:
            SolanaRpcError: If the RPC server returns an error
            httpx.HTTPError: If there's an HTTP or network error after all retries
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or []
        }
        client = self._get_http_client()
        max_retries = self.config.max_retries

        for retry_count in range(max_retries + 1):
            if retry_count > 0:
                log_with_context(logger, "info", "Retrying RPC request",
                                 method=method, attempt=retry_count, max_retries=max_retries)
            try:
                response = await client.post(self.config.rpc_url, headers=self.headers, json=payload)

                if response.status_code in RETRIABLE_STATUS_CODES and retry_count < max_retries:
                    wait_time = self._backoff(retry_count)
                    log_with_context(logger, "warning", "Retriable HTTP status from RPC node",
                                     method=method, status_code=response.status_code, wait=wait_time)
                    await asyncio.sleep(wait_time)
                    continue

                response.raise_for_status()
                result = response.json()
            except (httpx.TransportError, json.JSONDecodeError) as e:
                if retry_count >= max_retries:
                    log_with_context(logger, "error", "RPC request failed",
                                     method=method, attempts=retry_count + 1, error=str(e))
                    raise
                wait_time = self._backoff(retry_count)
                log_with_context(logger, "warning", "RPC request failed, retrying",
                                 method=method, wait=wait_time, error=str(e))
                await asyncio.sleep(wait_time)
                continue

            if "error" in result:
                error = result["error"] or {}
                message = f"Solana RPC error: {error.get('message', 'Unknown error')}"
                if "data" in error:
                    message += f" - {json.dumps(error['data'])}"

                rate_limited = error.get("code") == RPC_RATE_LIMIT_CODE or "rate limit" in message.lower()
                if rate_limited and retry_count < max_retries:
                    wait_time = self._backoff(retry_count)
                    log_with_context(logger, "warning", "Rate limited by RPC node",
                                     method=method, wait=wait_time)
                    await asyncio.sleep(wait_time)
                    continue

                raise SolanaRpcError(message, error)

            if "result" not in result:
                raise SolanaRpcError(f"Malformed RPC response for {method}", result)
            return result["result"]

        # Reached only with a negative max_retries
        raise SolanaRpcError(f"RPC request {method} was not attempted (max_retries={max_retries})")

    async def get_balance(self, account: str) -> int:
        """Get account balance.

        Args:
            account: The account public key

        Returns:
            Account balance in lamports

        Raises:
            InvalidPublicKeyError: If the account is not a valid Solana public key
        """
        require_public_key(account)

        result = await self._make_request(
            "getBalance", [account, {"commitment": self.config.commitment}]
        )
        if isinstance(result, dict):
            return int(result.get("value") or 0)
        return int(result or 0)

    async def get_signatures_for_address(
        self,
        address: str,
        before: Optional[str] = None,
        until: Optional[str] = None,
        limit: int = MAX_SIGNATURES_PER_REQUEST
    ) -> List[Dict[str, Any]]:
        """Get transaction signatures for an address, newest first.

        Args:
            address: The account address
            before: Signature to start searching backwards from
            until: Signature to search until (inclusive)
            limit: Maximum number of signatures to return (1-1000)

        Returns:
            List of signature entries with ``signature`` and ``blockTime`` keys

        Raises:
            InvalidPublicKeyError: If the address is not a valid Solana public key
        """
        require_public_key(address)

        options: Dict[str, Any] = {
            "limit": max(1, min(limit, MAX_SIGNATURES_PER_REQUEST)),
            "commitment": self.config.commitment,
        }
        if before:
            options["before"] = before
        if until:
            options["until"] = until

        return await self._make_request("getSignaturesForAddress", [address, options]) or []

    async def get_token_accounts_by_owner(
        self,
        owner: str,
        program_id: str = TOKEN_PROGRAM_ID
    ) -> List[Dict[str, Any]]:
        """Get the SPL token accounts owned by a wallet, zero balances included.

        Args:
            owner: The owner public key
            program_id: Token program to filter by

        Returns:
            List of token accounts in ``jsonParsed`` encoding

        Raises:
            InvalidPublicKeyError: If the owner or program_id is not a valid Solana public key
        """
        require_public_key(owner)
        require_public_key(program_id)

        result = await self._make_request(
            "getTokenAccountsByOwner",
            [owner, {"programId": program_id},
             {"encoding": "jsonParsed", "commitment": self.config.commitment}]
        )
        if isinstance(result, dict):
            return result.get("value") or []
        return result or []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the client and release resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

