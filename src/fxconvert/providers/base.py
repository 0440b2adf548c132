"""
Base Rate Resolver Interface

A resolver is any callable (from_currency, to_currency, date) -> rate. The
classes here give the bundled resolvers a common shape.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from fxconvert.errors import RateProviderError

__all__ = ["BaseRateResolver", "RateProviderError"]


class BaseRateResolver(ABC):
    """
    Abstract base class for exchange rate resolvers.

    Instances are awaited by CurrencyConverter for each cache miss.
    """

    PROVIDER_NAME: str = "base"

    async def __call__(self, from_currency: str, to_currency: str, date: datetime) -> float:
        return await self.fetch_rate(from_currency.upper(), to_currency.upper(), date)

    @abstractmethod
    async def fetch_rate(self, from_currency: str, to_currency: str, date: datetime) -> float:
        """
        Return units of to_currency per 1 unit of from_currency on date.

        Raises:
            RateProviderError: If no rate can be produced
        """
        pass

    @staticmethod
    def _day(date: datetime) -> str:
        """ISO calendar day (UTC) used in provider requests."""
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        return date.astimezone(timezone.utc).date().isoformat()

    def _to_decimal(self, value: Any) -> Decimal:
        """Convert through str so binary float noise is not carried over."""
        if isinstance(value, Decimal):
            return value
        return Decimal(str(value))
