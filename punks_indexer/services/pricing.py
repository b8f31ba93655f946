"""USD valuation of market actions"""
from typing import Protocol


class PriceOracle(Protocol):
    """Source of USD figures keyed by block time and height"""

    def usd_value(self, timestamp: int, block_number: int) -> int:
        ...


class StaticPriceOracle:
    """Returns the same USD figure for every block"""

    def __init__(self, usd: int = 0):
        self.usd = usd

    def usd_value(self, timestamp: int, block_number: int) -> int:
        return self.usd
