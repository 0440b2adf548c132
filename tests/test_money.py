"""
Rounding Tests
"""

import asyncio

import pytest

from fxconvert.converter import apply_conversions
from fxconvert.money import round2


class TestRound2:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (1.234, 1.23),
            (1.235, 1.24),
            (-2.567, -2.57),
            (5, 5),
            (0.005, 0.01),
            (84.99999, 85.0),
        ],
    )
    def test_half_up(self, value, expected):
        assert round2(value) == expected

    def test_returns_float(self):
        assert isinstance(round2(5), float)

    @pytest.mark.parametrize("value", [1e27, -3.5e40, 1.7e308])
    def test_large_magnitudes(self, value):
        assert round2(value) == value

    def test_large_amount_converts(self):
        async def double(from_currency, to_currency, date):
            return 2

        errors = []
        record = {"price": 1e27, "currency": "USD"}
        fields = [{"sourcePath": "price", "currencyPath": "currency", "targetPath": "result", "toCurrency": "EUR"}]
        asyncio.run(apply_conversions(record, fields, double, on_error=errors.append))

        assert errors == []
        assert record["result"]["amount"] == 2e27
