"""
Static Rate Resolver

Fixed table of rates quoted against a single base currency; cross rates are
derived through the base. Useful offline, in tests and as a last resort.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal

from fxconvert.providers.base import BaseRateResolver, RateProviderError

logger = logging.getLogger(__name__)


class StaticRateResolver(BaseRateResolver):
    """
    Resolve rates from a fixed table.

    Args:
        rates: Units of each currency per 1 unit of base, e.g. {"USD": 1.163}
        base: Base currency of the table (rate 1 implied)

    Example:
        >>> resolver = StaticRateResolver({"USD": 1.25, "GBP": 0.8})
        >>> # USD -> GBP = 0.8 / 1.25 = 0.64
    """

    PROVIDER_NAME = "static"

    def __init__(self, rates: Mapping[str, float | Decimal | str], base: str = "EUR"):
        self.base = base.upper()
        self.rates: dict[str, Decimal] = {self.base: Decimal("1")}
        for code, value in rates.items():
            rate = self._to_decimal(value)
            if rate <= 0:
                raise ValueError(f"rate for {code} must be positive, got {value}")
            self.rates[code.upper()] = rate

    def _lookup(self, currency: str) -> Decimal:
        try:
            return self.rates[currency]
        except KeyError:
            raise RateProviderError(
                message=f"No static rate for {currency}",
                provider=self.PROVIDER_NAME,
                error_type="MISSING_CURRENCY",
                details={"available": sorted(self.rates)}
            ) from None

    async def fetch_rate(self, from_currency: str, to_currency: str, date: datetime) -> float:
        if from_currency == to_currency:
            return 1.0
        rate = self._lookup(to_currency) / self._lookup(from_currency)
        logger.debug(f"Static rate {from_currency}->{to_currency} = {rate}")
        return float(rate)
