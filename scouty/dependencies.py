"""
FastAPI dependency providers.

Collaborators are built by the application factory and kept on
``app.state``; routes receive them through these providers.
"""

from fastapi import Request

from scouty.config import ScanConfig
from scouty.services.scan_service import WalletScanService


def get_scan_service(request: Request) -> WalletScanService:
    """Return the scan service wired into the running application."""
    return request.app.state.scan_service


def get_scan_config(request: Request) -> ScanConfig:
    """Return the scan configuration of the running application."""
    return request.app.state.config.scan
