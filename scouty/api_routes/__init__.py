"""API routes package for the Scouty wallet scanner."""

from scouty.api_routes.wallet_scan import router as wallet_scan_router

__all__ = ["wallet_scan_router"]
