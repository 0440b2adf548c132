"""
Currency Code Validation

Codes are checked case-insensitively against a caller-supplied allow-list or,
when none is given, against the built-in ISO 4217 reference set.
"""

from collections.abc import Iterable
from typing import Any

ISO_4217_CODES: frozenset[str] = frozenset({
    "USD", "EUR", "GBP", "JPY", "CHF", "CAD", "AUD", "NZD", "CNY", "SEK",
    "NOK", "DKK", "RUB", "INR", "BRL", "ZAR", "SGD", "HKD", "MXN", "KRW",
    "TRY", "PLN", "CZK", "HUF", "ILS", "THB", "MYR", "IDR", "PHP", "TWD",
    "SAR", "AED", "COP", "CLP", "PEN", "ARS", "VND", "EGP", "UAH", "QAR",
    "KZT", "BGN", "RON", "HRK", "ISK", "LTL", "LVL", "EEK", "SKK", "YER",
    "OMR", "BHD", "JOD", "LBP", "KWD", "MAD", "DZD", "TND", "LYD", "SDG",
    "IQD", "SYP", "MRO", "CVE", "GMD", "GNF", "SLL", "XOF", "XAF", "XPF",
    "XCD", "XDR", "XUA", "XSU", "XTS",
    "XXX",  # no currency
})


def normalize_codes(codes: Iterable[str]) -> frozenset[str]:
    """Upper-case an allow-list, dropping anything that is not a string."""
    return frozenset(code.upper() for code in codes if isinstance(code, str))


def is_valid_currency_code(code: Any, allowed_codes: Iterable[str] | None = None) -> bool:
    """
    Check a currency code.

    Args:
        code: Value read from a record or configuration (any type)
        allowed_codes: Optional allow-list; an empty one rejects every code

    Returns:
        True only for a string whose upper-cased form is in the active list
    """
    if not isinstance(code, str):
        return False
    active = ISO_4217_CODES if allowed_codes is None else normalize_codes(allowed_codes)
    return code.upper() in active
