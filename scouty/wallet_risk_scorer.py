"""Deterministic risk scoring for Solana wallets.

A wallet is described by four observables (SOL balance, transaction count,
account age in days, token account count). Six category scores are derived
from them, summed into a 0-100 total, and the total is mapped onto a risk
tier. Lower totals mean riskier wallets.

Everything in this module is pure: the same observables always produce an
identical :class:`RiskAssessment`.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from scouty.utils.errors import InvalidInputError


class RiskTier(str, Enum):
    """Risk classification derived from the total score."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Tier bands, inclusive lower bounds
LOW_RISK_MIN_SCORE = 75
MEDIUM_RISK_MIN_SCORE = 50


def _check_count(field_name: str, value) -> None:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(field_name, value, "must be an integer")
    if value < 0:
        raise InvalidInputError(field_name, value, "must not be negative")


@dataclass(frozen=True)
class WalletObservables:
    """Raw on-chain facts about one wallet, validated on construction."""

    balance_sol: float
    transaction_count: int
    account_age_days: int
    token_count: int

    def __post_init__(self):
        if isinstance(self.balance_sol, bool) or not isinstance(self.balance_sol, (int, float)):
            raise InvalidInputError("balance_sol", self.balance_sol, "must be a number")
        if not math.isfinite(self.balance_sol):
            raise InvalidInputError("balance_sol", self.balance_sol, "must be finite")
        if self.balance_sol < 0:
            raise InvalidInputError("balance_sol", self.balance_sol, "must not be negative")
        _check_count("transaction_count", self.transaction_count)
        _check_count("account_age_days", self.account_age_days)
        _check_count("token_count", self.token_count)


@dataclass(frozen=True)
class CategoryScore:
    """Score earned in one category, bounded by the category weight."""
    score: int
    weight: int

    def to_dict(self) -> Dict[str, int]:
        return {"score": self.score, "weight": self.weight}


@dataclass(frozen=True)
class ThresholdLadder:
    """Ordered breakpoint table: the first threshold strictly exceeded wins.

    ``steps`` holds ``(threshold, score)`` pairs sorted by descending
    threshold; ``floor`` is returned when no threshold is exceeded.
    """

    steps: Tuple[Tuple[float, int], ...]
    floor: int

    def __post_init__(self):
        thresholds = [threshold for threshold, _ in self.steps]
        if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError(f"Ladder thresholds must be strictly descending: {thresholds}")

    def lookup(self, value: float) -> int:
        for threshold, score in self.steps:
            if value > threshold:
                return score
        return self.floor

    @property
    def max_score(self) -> int:
        return max([self.floor] + [score for _, score in self.steps])


TRANSACTION_HISTORY_LADDER = ThresholdLadder(steps=((500, 30), (100, 25), (20, 20)), floor=10)
WALLET_AGE_LADDER = ThresholdLadder(steps=((365, 20), (180, 16), (90, 12)), floor=8)
TOKEN_DIVERSITY_LADDER = ThresholdLadder(steps=((10, 15), (5, 12), (2, 9)), floor=5)
BALANCE_HEALTH_LADDER = ThresholdLadder(steps=((10, 10), (1, 8), (0.1, 6)), floor=3)

ACTIVITY_TRANSACTIONS_PER_POINT = 50
PROTOCOL_TOKENS_PER_POINT = 2


@dataclass(frozen=True)
class ScoringCategory:
    """A named, weighted scoring rule over the observables."""

    name: str
    weight: int
    rule: Callable[[WalletObservables], int]

    def evaluate(self, observables: WalletObservables) -> CategoryScore:
        score = self.rule(observables)
        if not 0 <= score <= self.weight:
            raise ValueError(f"Category {self.name} produced {score}, outside [0, {self.weight}]")
        return CategoryScore(score=score, weight=self.weight)


# Evaluation order is also the order of RiskAssessment.categories
CATEGORIES: Tuple[ScoringCategory, ...] = (
    ScoringCategory(
        "transaction_history", 30,
        lambda obs: TRANSACTION_HISTORY_LADDER.lookup(obs.transaction_count),
    ),
    ScoringCategory(
        "wallet_age", 20,
        lambda obs: WALLET_AGE_LADDER.lookup(obs.account_age_days),
    ),
    ScoringCategory(
        "token_diversity", 15,
        lambda obs: TOKEN_DIVERSITY_LADDER.lookup(obs.token_count),
    ),
    ScoringCategory(
        "activity_patterns", 15,
        lambda obs: min(15, obs.transaction_count // ACTIVITY_TRANSACTIONS_PER_POINT),
    ),
    ScoringCategory(
        "protocol_interactions", 10,
        lambda obs: min(10, obs.token_count // PROTOCOL_TOKENS_PER_POINT),
    ),
    ScoringCategory(
        "balance_health", 10,
        lambda obs: BALANCE_HEALTH_LADDER.lookup(obs.balance_sol),
    ),
)


@dataclass(frozen=True)
class RiskAssessment:
    """Result of scoring one set of observables."""

    total_score: int
    risk_tier: RiskTier
    categories: Dict[str, CategoryScore]
    findings: Tuple[str, ...] = field(default_factory=tuple)
    summary: str = ""

    def analysis(self) -> Dict[str, Dict[str, int]]:
        """Category breakdown keyed by category name, in evaluation order."""
        return {name: category.to_dict() for name, category in self.categories.items()}


def classify_risk_tier(total_score: int) -> RiskTier:
    """Map a total score onto its risk tier."""
    if total_score >= LOW_RISK_MIN_SCORE:
        return RiskTier.LOW
    if total_score >= MEDIUM_RISK_MIN_SCORE:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def _pick(condition: bool, message: str, fallback_condition: bool,
          fallback_message: str) -> Optional[str]:
    if condition:
        return message
    if fallback_condition:
        return fallback_message
    return None


def generate_findings(observables: WalletObservables, total_score: int) -> List[str]:
    """Build the ordered list of human-readable findings (0 to 4 entries)."""
    candidates = [
        _pick(observables.transaction_count > 100, "Regular transaction activity detected",
              observables.transaction_count < 10, "Limited transaction history"),
        _pick(observables.account_age_days > 180, "Established wallet with long history",
              observables.account_age_days < 30, "Recently created wallet"),
        _pick(observables.token_count > 5, "Diversified token holdings",
              observables.token_count == 0, "No token holdings detected"),
        _pick(total_score >= LOW_RISK_MIN_SCORE, "No high-risk patterns detected",
              total_score < MEDIUM_RISK_MIN_SCORE, "Multiple risk indicators present"),
    ]
    return [finding for finding in candidates if finding is not None]


def build_summary(observables: WalletObservables, risk_tier: RiskTier) -> str:
    """One-sentence summary; the balance is fixed-point with 4 decimals."""
    return (
        f"This wallet has {observables.transaction_count} transactions over "
        f"{observables.account_age_days} days with a balance of "
        f"{observables.balance_sol:.4f} SOL. Risk assessment: {risk_tier.value}."
    )


def score_wallet(observables: WalletObservables) -> RiskAssessment:
    """Score a wallet.

    Args:
        observables: Validated on-chain observables for one address

    Returns:
        The risk assessment, with category breakdown, findings and summary
    """
    categories = {category.name: category.evaluate(observables) for category in CATEGORIES}
    total_score = sum(category.score for category in categories.values())
    risk_tier = classify_risk_tier(total_score)

    return RiskAssessment(
        total_score=total_score,
        risk_tier=risk_tier,
        categories=categories,
        findings=tuple(generate_findings(observables, total_score)),
        summary=build_summary(observables, risk_tier),
    )
