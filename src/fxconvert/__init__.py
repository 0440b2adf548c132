"""
fxconvert - field-level currency conversion for nested records.

Reads amounts and currency codes at dotted paths, resolves exchange rates
through an injected resolver (optionally cached) and writes converted values
back into the record.
"""

from fxconvert.cache import RateCache, SimpleCache
from fxconvert.converter import CurrencyConverter, apply_conversions
from fxconvert.currencies import ISO_4217_CODES, is_valid_currency_code
from fxconvert.errors import ConfigurationError, ConversionFailed, RateProviderError
from fxconvert.models import ConversionResult, ErrorContext, FieldMapping, FieldStatus
from fxconvert.money import round2
from fxconvert.paths import get_value, parse_path, set_value, unset_value

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "CurrencyConverter",
    "apply_conversions",
    "FieldMapping",
    "ConversionResult",
    "ErrorContext",
    "FieldStatus",
    "RateCache",
    "SimpleCache",
    "ConfigurationError",
    "ConversionFailed",
    "RateProviderError",
    "ISO_4217_CODES",
    "is_valid_currency_code",
    "round2",
    "parse_path",
    "get_value",
    "set_value",
    "unset_value",
]
