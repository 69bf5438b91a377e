"""Request validation models for the API."""

from typing import Optional

from pydantic import BaseModel, Field


class ScanWalletRequest(BaseModel):
    """Body of a wallet scan request.

    ``wallet`` is optional at the schema level so that a missing address is
    reported with the endpoint's own error message.
    """

    wallet: Optional[str] = Field(None, description="Solana wallet address to scan")
    is_public: bool = Field(False, description="Show the scan on the public feed")
