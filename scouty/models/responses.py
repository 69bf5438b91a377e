"""Response models for the API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CategoryScoreResponse(BaseModel):
    """Score earned in one risk category."""

    score: int = Field(..., description="Points earned in the category")
    weight: int = Field(..., description="Maximum points for the category")


class ScanMetadataResponse(BaseModel):
    """Raw wallet facts reported alongside a scan."""

    total_value_usd: float = Field(..., description="SOL balance valued in USD")
    transaction_count: int = Field(..., description="Signatures observed for the wallet")
    wallet_age_days: int = Field(..., description="Days since the oldest observed transaction")
    token_count: int = Field(..., description="SPL token accounts owned")
    nft_count: int = Field(0, description="NFT holdings (not inspected)")


class ScanWalletResponse(BaseModel):
    """Result of a wallet scan."""

    score: int = Field(..., description="Total score, 0-100, higher is safer")
    risk_level: str = Field(..., description="LOW, MEDIUM or HIGH")
    wallet_address: str = Field(..., description="Scanned wallet address")
    analysis: Dict[str, CategoryScoreResponse] = Field(..., description="Per-category scores")
    metadata: ScanMetadataResponse
    ai_summary: str = Field(..., description="One-sentence summary")
    findings: List[str] = Field(default_factory=list, description="Human-readable findings")


class ScanRecordResponse(BaseModel):
    """A recorded scan."""

    id: int
    wallet_address: str
    risk_score: int
    risk_level: str
    transaction_count: int
    wallet_age_days: int
    token_diversity: int
    total_value_usd: float
    ai_summary: str
    ai_findings: List[str]
    metadata: Dict[str, Any]
    is_public: bool
    created_at: Optional[str] = None


class PublicScansResponse(BaseModel):
    """Public scan feed, newest first."""

    scans: List[ScanRecordResponse]


class WalletScansResponse(BaseModel):
    """Scan history for one wallet, newest first."""

    wallet_address: str
    scans: List[ScanRecordResponse]
