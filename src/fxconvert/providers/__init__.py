"""
fxconvert Rate Resolvers

Ready-made resolve_rate callables for CurrencyConverter.
"""

from fxconvert.providers.base import BaseRateResolver, RateProviderError
from fxconvert.providers.frankfurter import FrankfurterRateResolver
from fxconvert.providers.static import StaticRateResolver

__all__ = [
    "BaseRateResolver",
    "RateProviderError",
    "FrankfurterRateResolver",
    "StaticRateResolver",
]
