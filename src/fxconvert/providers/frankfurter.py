"""
Frankfurter API Rate Resolver

Historical ECB reference rates for any supported currency pair.
API Documentation: https://www.frankfurter.app/docs/
"""

import logging
from datetime import datetime

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from fxconvert.config import Settings, get_settings
from fxconvert.providers.base import BaseRateResolver, RateProviderError

logger = logging.getLogger(__name__)


class FrankfurterRateResolver(BaseRateResolver):
    """
    Resolver backed by Frankfurter.dev.

    Response format: {"amount": 1.0, "base": "USD", "date": "2025-10-01", "rates": {"EUR": 0.85}}

    Args:
        settings: Source of base URL, timeout and retry attempts
        client: Shared httpx.AsyncClient; when omitted a client is opened per request
        wait: tenacity wait strategy between attempts
    """

    PROVIDER_NAME = "frankfurter"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        wait: wait_base | None = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.frankfurter_base_url.rstrip("/")
        self.client = client
        self.wait = wait or wait_exponential(multiplier=1, min=1, max=10)

    async def fetch_rate(self, from_currency: str, to_currency: str, date: datetime) -> float:
        if from_currency == to_currency:
            return 1.0

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.settings.resolver_max_attempts),
            wait=self.wait,
            retry=retry_if_exception_type(RateProviderError),
            reraise=True,
        ):
            with attempt:
                return await self._request(from_currency, to_currency, self._day(date))

        raise RateProviderError(  # pragma: no cover
            message="No attempts made",
            provider=self.PROVIDER_NAME,
        )

    async def _get(self, url: str, params: dict[str, str]) -> httpx.Response:
        if self.client is not None:
            return await self.client.get(url, params=params)
        async with httpx.AsyncClient(timeout=self.settings.http_timeout_seconds) as client:
            return await client.get(url, params=params)

    async def _request(self, from_currency: str, to_currency: str, day: str) -> float:
        params = {"base": from_currency, "symbols": to_currency}

        try:
            response = await self._get(f"{self.base_url}/v1/{day}", params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RateProviderError(
                message=f"HTTP error: {e.response.status_code}",
                provider=self.PROVIDER_NAME,
                error_type=f"HTTP_{e.response.status_code}",
                details={"url": str(e.request.url)}
            ) from e
        except httpx.TimeoutException as e:
            raise RateProviderError(
                message="Request timeout",
                provider=self.PROVIDER_NAME,
                error_type="TIMEOUT",
                details={"timeout_seconds": self.settings.http_timeout_seconds}
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise RateProviderError(
                message=str(e),
                provider=self.PROVIDER_NAME,
                error_type="UNKNOWN",
                details={}
            ) from e

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise RateProviderError(
                message="Invalid response: missing 'rates' field",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"response": data}
            )

        value = rates.get(to_currency)
        if value is None:
            raise RateProviderError(
                message=f"Missing currency: {to_currency}",
                provider=self.PROVIDER_NAME,
                error_type="MISSING_CURRENCY",
                details={"available": list(rates)}
            )

        rate = self._to_decimal(value)
        logger.info(f"Frankfurter rate for {day}: {from_currency}/{to_currency}={rate}")
        return float(rate)
