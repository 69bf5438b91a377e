"""
FastAPI application for the Scouty wallet scanner.

This module builds the application, wires its collaborators and manages
their lifecycle.

Run with: uvicorn scouty.app:create_application --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scouty import __version__
from scouty.api_routes import wallet_scan_router
from scouty.config import AppConfig, get_app_config
from scouty.logging_config import RequestIdMiddleware, configure_logging, get_logger
from scouty.middleware import register_error_handlers
from scouty.services.chain_data import ChainDataProvider, SolanaChainDataProvider
from scouty.services.pricing import FixedSolPriceProvider, SolPriceProvider
from scouty.services.scan_service import WalletScanService
from scouty.services.scan_store import ScanStore
from scouty.solana_client import SolanaClient
from scouty.utils.errors import ConfigurationError

logger = get_logger(__name__)


def load_config() -> AppConfig:
    """Read the application configuration from the environment.

    Raises:
        ConfigurationError: If an environment variable holds an invalid value
    """
    try:
        return get_app_config()
    except ValueError as e:
        raise ConfigurationError("Invalid configuration", details={"error": str(e)}) from e


def create_application(
    config: Optional[AppConfig] = None,
    chain_data: Optional[ChainDataProvider] = None,
    price_provider: Optional[SolPriceProvider] = None,
    store: Optional[ScanStore] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Collaborators that are not supplied are built from ``config`` when the
    application starts.

    Args:
        config: Application configuration, defaults to the environment
        chain_data: Source of wallet observables
        price_provider: SOL/USD price source
        store: Scan history store
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config.server.log_level)

        solana_client = None
        provider = chain_data
        if provider is None:
            solana_client = SolanaClient(config.solana)
            provider = SolanaChainDataProvider(
                solana_client, signature_limit=config.scan.signature_limit
            )

        scan_store = store or ScanStore.from_url(config.database.url, echo=config.database.echo)
        scan_store.create_tables()

        app.state.config = config
        app.state.scan_service = WalletScanService(
            chain_data=provider,
            price_provider=price_provider or FixedSolPriceProvider(config.scan.estimated_sol_price_usd),
            store=scan_store,
        )
        logger.info("Application initialized", environment=config.server.environment)

        yield

        logger.info("Application shutting down")
        if solana_client is not None:
            await solana_client.close()
        if store is None:
            scan_store.dispose()

    app = FastAPI(
        title="Scouty Wallet Scanner",
        description="Risk scoring for Solana wallet addresses",
        version=__version__,
        debug=config.server.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(wallet_scan_router)

    @app.get("/health", tags=["system"])
    async def health_check():
        return {"status": "healthy"}

    return app
