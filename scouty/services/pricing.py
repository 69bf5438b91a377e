"""SOL/USD price collaborators used to value wallet balances."""

from abc import ABC, abstractmethod
from decimal import Decimal


class SolPriceProvider(ABC):
    """Source of the SOL price in USD."""

    @abstractmethod
    def get_sol_price_usd(self) -> Decimal:
        """Return the current SOL price in USD."""

    def value_usd(self, balance_sol: float) -> float:
        """USD value of a SOL balance."""
        return balance_sol * float(self.get_sol_price_usd())


class FixedSolPriceProvider(SolPriceProvider):
    """Values SOL at a configured constant price (ESTIMATED_SOL_PRICE_USD)."""

    def __init__(self, price_usd: Decimal = Decimal("150")):
        if price_usd < 0:
            raise ValueError("SOL price must not be negative")
        self.price_usd = price_usd

    def get_sol_price_usd(self) -> Decimal:
        return self.price_usd
