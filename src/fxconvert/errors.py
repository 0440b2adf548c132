"""
fxconvert Exceptions

Setup problems are raised to the caller; per-field conversion problems are
reported through the converter's error sink and never escape apply_conversions.
"""

from typing import Any


class ConfigurationError(ValueError):
    """Malformed converter setup (field mappings, rate resolver, options)."""


class ConversionFailed(Exception):
    """A field could not be converted because no usable rate was available."""

    def __init__(
        self,
        message: str,
        from_currency: str,
        to_currency: str,
        rate: Any = None
    ):
        super().__init__(message)
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.rate = rate


class RateProviderError(Exception):
    """Base exception for rate resolver errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        error_type: str = "UNKNOWN",
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.provider = provider
        self.error_type = error_type
        self.details = details or {}
