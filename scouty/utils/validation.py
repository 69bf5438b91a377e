"""Validation utilities for Solana addresses."""

import re

from solders.pubkey import Pubkey

# Solana public key validation pattern (base58 format)
PUBKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


class InvalidPublicKeyError(Exception):
    """Exception raised when an invalid public key is provided."""

    def __init__(self, pubkey: str):
        super().__init__(f"Invalid public key: {pubkey}")
        self.pubkey = pubkey


def validate_public_key(pubkey: str) -> bool:
    """Validate a Solana public key.

    The key must be base58 text that decodes to exactly 32 bytes.

    Args:
        pubkey: The public key to validate

    Returns:
        True if the public key is valid, False otherwise
    """
    if not pubkey or not isinstance(pubkey, str):
        return False
    if not PUBKEY_PATTERN.match(pubkey):
        return False
    try:
        Pubkey.from_string(pubkey)
    except ValueError:
        return False
    return True


def require_public_key(pubkey: str) -> str:
    """Return the key unchanged, raising InvalidPublicKeyError if it is invalid."""
    if not validate_public_key(pubkey):
        raise InvalidPublicKeyError(pubkey)
    return pubkey
