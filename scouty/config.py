"""Configuration module for the Scouty wallet scanner."""

# Standard library imports
import os
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, Callable, List, Optional

# Third-party library imports
from dotenv import load_dotenv

# Internal imports
from scouty.constants import MAX_SIGNATURES_PER_REQUEST

# Load environment variables from .env file
load_dotenv()


def get_env_var(key: str, default: Any = None, required: bool = False,
                validator: Optional[Callable[[str], Any]] = None) -> Any:
    """Get and validate environment variable.

    Args:
        key: Environment variable name
        default: Default value if not present
        required: If True, raises ValueError when not found
        validator: Optional validation function

    Returns:
        The environment variable value or default

    Raises:
        ValueError: If required and not found, or fails validation
    """
    value = os.environ.get(key)

    if value is None:
        if required:
            raise ValueError(f"Required environment variable '{key}' not found")
        return default

    if validator is not None:
        try:
            return validator(value)
        except ValueError as e:
            raise ValueError(f"Invalid value for environment variable '{key}': {str(e)}")

    return value


def bool_validator(value: str) -> bool:
    """Convert a string to boolean."""
    return value.strip().lower() in ("true", "1", "yes", "y", "on")


def int_validator(value: str) -> int:
    """Validate and convert string to integer.

    Raises:
        ValueError: If not a valid integer
    """
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid integer")


def positive_int_validator(value: str) -> int:
    """Validate and convert string to a strictly positive integer."""
    number = int_validator(value)
    if number <= 0:
        raise ValueError(f"'{value}' must be a positive integer")
    return number


def url_validator(value: str) -> str:
    """Validate URL format.

    Raises:
        ValueError: If not a valid URL format
    """
    url_pattern = re.compile(
        r'^(https?):\/\/'  # http:// or https://
        r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+(?:[A-Z]{2,6}\.?|[A-Z0-9-]{2,}\.?)|'  # domain
        r'localhost|'  # localhost
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # or IPv4
        r'(?::\d+)?'  # optional port
        r'(?:/?|[/?]\S+)$', re.IGNORECASE)

    if not url_pattern.match(value):
        raise ValueError(f"'{value}' is not a valid URL")
    return value


def commitment_validator(value: str) -> str:
    """Validate Solana commitment level.

    Raises:
        ValueError: If not a valid commitment level
    """
    valid_commitments = ("processed", "confirmed", "finalized")
    if value.lower() not in valid_commitments:
        raise ValueError(f"Commitment must be one of: {', '.join(valid_commitments)}")
    return value.lower()


def log_level_validator(value: str) -> str:
    """Validate log level.

    Raises:
        ValueError: If not a valid log level
    """
    valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    upper_value = value.upper()
    if upper_value not in valid_levels:
        raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
    return upper_value


def environment_validator(value: str) -> str:
    """Validate environment name.

    Raises:
        ValueError: If not a valid environment name
    """
    valid_environments = ("development", "testing", "staging", "production")
    if value.lower() not in valid_environments:
        raise ValueError(f"Environment must be one of: {', '.join(valid_environments)}")
    return value.lower()


def decimal_validator(value: str) -> Decimal:
    """Validate and convert string to Decimal.

    Raises:
        ValueError: If not a valid decimal number
    """
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"'{value}' is not a valid decimal number")


@dataclass
class SolanaConfig:
    """Configuration for Solana RPC connection."""

    rpc_url: str = "https://api.mainnet-beta.solana.com"
    commitment: str = "confirmed"
    timeout: int = 30  # seconds
    max_retries: int = 3


@lru_cache()
def get_solana_config() -> SolanaConfig:
    """Get Solana configuration from environment variables.

    Raises:
        ValueError: If environment variables fail validation
    """
    return SolanaConfig(
        rpc_url=get_env_var("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com",
                            validator=url_validator),
        commitment=get_env_var("SOLANA_COMMITMENT", "confirmed",
                               validator=commitment_validator),
        timeout=get_env_var("SOLANA_TIMEOUT", 30, validator=positive_int_validator),
        max_retries=get_env_var("SOLANA_MAX_RETRIES", 3, validator=int_validator),
    )


@dataclass
class ScanConfig:
    """Configuration for wallet scanning."""

    signature_limit: int = MAX_SIGNATURES_PER_REQUEST
    estimated_sol_price_usd: Decimal = Decimal("150")
    public_feed_limit: int = 50
    max_public_feed_limit: int = 200

    def __post_init__(self):
        if not 1 <= self.signature_limit <= MAX_SIGNATURES_PER_REQUEST:
            raise ValueError(
                f"signature_limit must be between 1 and {MAX_SIGNATURES_PER_REQUEST}"
            )
        if self.estimated_sol_price_usd < 0:
            raise ValueError("estimated_sol_price_usd must not be negative")


@lru_cache()
def get_scan_config() -> ScanConfig:
    """Get scan configuration from environment variables."""
    return ScanConfig(
        signature_limit=get_env_var("SCAN_SIGNATURE_LIMIT", MAX_SIGNATURES_PER_REQUEST,
                                    validator=positive_int_validator),
        estimated_sol_price_usd=get_env_var("ESTIMATED_SOL_PRICE_USD", Decimal("150"),
                                            validator=decimal_validator),
        public_feed_limit=get_env_var("PUBLIC_FEED_LIMIT", 50, validator=positive_int_validator),
    )


@dataclass
class DatabaseConfig:
    """Configuration for the scan history database."""

    url: str = "sqlite:///wallet_scans.db"
    echo: bool = False


@lru_cache()
def get_database_config() -> DatabaseConfig:
    """Get database configuration from environment variables."""
    return DatabaseConfig(
        url=get_env_var("DATABASE_URL", "sqlite:///wallet_scans.db"),
        echo=get_env_var("DATABASE_ECHO", False, validator=bool_validator),
    )


@dataclass
class ServerConfig:
    """Configuration for the server."""

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def bind_address(self) -> str:
        """Get the bind address for the server."""
        return f"{self.host}:{self.port}"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.environment not in ("development", "testing", "staging", "production"):
            raise ValueError(f"Invalid environment: {self.environment}")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log_level: {self.log_level}")


@lru_cache()
def get_server_config() -> ServerConfig:
    """Get server configuration from environment variables.

    Raises:
        ValueError: If environment variables fail validation
    """
    return ServerConfig(
        host=get_env_var("HOST", "0.0.0.0"),
        port=get_env_var("PORT", 8000, validator=int_validator),
        debug=get_env_var("DEBUG", False, validator=bool_validator),
        environment=get_env_var("ENVIRONMENT", "development", validator=environment_validator),
        log_level=get_env_var("LOG_LEVEL", "INFO", validator=log_level_validator),
    )


def _cors_origins_from_env() -> List[str]:
    raw = get_env_var("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class APIConfig:
    """Configuration for API endpoints."""

    cors_origins: List[str] = field(default_factory=_cors_origins_from_env)


@dataclass
class AppConfig:
    """Comprehensive application configuration."""

    solana: SolanaConfig = field(default_factory=get_solana_config)
    scan: ScanConfig = field(default_factory=get_scan_config)
    database: DatabaseConfig = field(default_factory=get_database_config)
    server: ServerConfig = field(default_factory=get_server_config)
    api: APIConfig = field(default_factory=APIConfig)


def get_app_config() -> AppConfig:
    """Get the comprehensive application configuration."""
    return AppConfig()
