"""
fxconvert Configuration Management

Defaults for converters, the in-process rate cache and the bundled HTTP
rate resolver, loaded from FXCONVERT_* environment variables or a .env file.
"""

from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fxconvert.cache import SimpleCache
from fxconvert.converter import CurrencyConverter, RateResolver
from fxconvert.models import FieldMapping


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # === Conversion Defaults ===
    fallback_rate: float | None = Field(
        default=None,
        description="Rate used when the resolver returns an unusable value"
    )
    rollback_on_error: bool = Field(
        default=False,
        description="Erase earlier targets and stop when a field fails"
    )
    allowed_currency_codes: list[str] | None = Field(
        default=None,
        description="Allow-list overriding the ISO 4217 reference set"
    )

    # === Rate Cache ===
    cache_ttl_minutes: float = Field(
        default=60,
        ge=0,
        description="SimpleCache TTL; 0 disables the default cache"
    )

    # === Frankfurter Resolver ===
    frankfurter_base_url: str = Field(
        default="https://api.frankfurter.dev",
        description="Frankfurter API base URL (ECB reference rates)"
    )
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    resolver_max_attempts: int = Field(default=3, ge=1)

    # === Logging ===
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="FXCONVERT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def build_converter(
    fields: Sequence[FieldMapping | Mapping[str, Any]],
    resolve_rate: RateResolver,
    settings: Settings | None = None,
    **overrides: Any,
) -> CurrencyConverter:
    """
    Create a CurrencyConverter whose defaults come from settings.

    Keyword overrides win over settings. A SimpleCache with the configured
    TTL is attached unless a cache is passed explicitly (cache=None opts out).
    """
    settings = settings or get_settings()

    options: dict[str, Any] = {
        "fallback_rate": settings.fallback_rate,
        "rollback_on_error": settings.rollback_on_error,
        "allowed_currency_codes": settings.allowed_currency_codes,
    }
    if settings.cache_ttl_minutes > 0:
        options["cache"] = SimpleCache(ttl_minutes=settings.cache_ttl_minutes)
    options.update(overrides)

    return CurrencyConverter(fields, resolve_rate, **options)
