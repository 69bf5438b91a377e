"""API routes for wallet risk scans."""

# Standard library imports
from typing import Optional

# Third-party library imports
from fastapi import APIRouter, BackgroundTasks, Body, Depends, Path, Query, Request

# Internal imports
from scouty.config import ScanConfig
from scouty.dependencies import get_scan_config, get_scan_service
from scouty.logging_config import get_logger, log_with_context
from scouty.models.requests import ScanWalletRequest
from scouty.models.responses import PublicScansResponse, ScanWalletResponse, WalletScansResponse
from scouty.services.scan_service import WalletScanService
from scouty.utils.errors import ErrorResponse, ValidationError
from scouty.utils.validation import validate_public_key

# Set up logging
logger = get_logger(__name__)

# Create router
router = APIRouter(
    tags=["wallet scans"],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)


def client_ip(request: Request) -> str:
    """Best-effort client address: first X-Forwarded-For hop, then the peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def require_wallet_address(wallet: Optional[str]) -> str:
    """Normalise a wallet address from user input.

    Raises:
        ValidationError: If the address is missing or not a Solana public key
    """
    wallet = (wallet or "").strip()
    if not wallet:
        raise ValidationError("Wallet address is required")
    if not validate_public_key(wallet):
        raise ValidationError("Invalid Solana wallet address", details={"wallet": wallet})
    return wallet


@router.post("/scan-wallet", response_model=ScanWalletResponse)
async def scan_wallet(
    request: Request,
    background_tasks: BackgroundTasks,
    payload: ScanWalletRequest = Body(...),
    service: WalletScanService = Depends(get_scan_service)
):
    """Score a wallet and record the scan.

    The scan is stored after the response is sent; a storage failure does
    not change the response.
    """
    request_id = getattr(request.state, "request_id", None)
    wallet = require_wallet_address(payload.wallet)

    log_with_context(
        logger,
        "info",
        f"Wallet scan requested for: {wallet}",
        request_id=request_id,
        wallet=wallet,
        is_public=payload.is_public
    )

    result = await service.scan_wallet(wallet)
    background_tasks.add_task(service.record_scan, result, payload.is_public, client_ip(request))

    return result.to_response()


@router.get("/scans/public", response_model=PublicScansResponse)
def public_scans(
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of scans to return"),
    service: WalletScanService = Depends(get_scan_service),
    scan_config: ScanConfig = Depends(get_scan_config)
):
    """Most recent public scans, newest first."""
    limit = min(limit or scan_config.public_feed_limit, scan_config.max_public_feed_limit)
    return {"scans": service.public_feed(limit)}


@router.get("/scans/wallet/{wallet_address}", response_model=WalletScansResponse)
def wallet_scans(
    wallet_address: str = Path(..., description="Solana wallet address"),
    service: WalletScanService = Depends(get_scan_service)
):
    """Every recorded scan of one wallet, newest first."""
    wallet = require_wallet_address(wallet_address)
    return {"wallet_address": wallet, "scans": service.wallet_history(wallet)}
