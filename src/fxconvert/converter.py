"""
Currency Conversion Orchestrator

Runs a fixed list of field mappings over a plain record:

    read amount ─► read/validate currencies ─► resolve date
        ─► rate (cache ─► resolver ─► fallback) ─► round ─► write target

Fields are processed one at a time in mapping order. Missing data and bad
currency codes skip a field; a missing rate or a resolver error fails it.
Failures are reported to the error callback (or logged) and, when rollback
is enabled, erase every target written earlier in the same run and stop the
remaining fields.
"""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, time, timezone
from decimal import Decimal
from numbers import Real
from typing import Any, Awaitable, Callable, Protocol

from pydantic import TypeAdapter, ValidationError

from fxconvert.cache import RateCache, make_cache_key, maybe_await
from fxconvert.currencies import is_valid_currency_code, normalize_codes
from fxconvert.errors import ConfigurationError, ConversionFailed
from fxconvert.models import ConversionResult, ErrorContext, FieldMapping, FieldStatus
from fxconvert.money import round2
from fxconvert.paths import get_value, set_value, unset_value


_DATETIME = TypeAdapter(datetime)


# === Collaborator Interfaces ===

class RateResolver(Protocol):
    """Return the rate for from -> to on date; raise to signal failure."""

    def __call__(
        self, from_currency: str, to_currency: str, date: datetime
    ) -> float | Awaitable[float]: ...


Rounder = Callable[[float], float]
ErrorSink = Callable[[ErrorContext], None]
DateTransform = Callable[[datetime], datetime]
WritablePredicate = Callable[[str], bool]


# === Helpers ===

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def coerce_date(value: Any) -> datetime | None:
    """
    Interpret a record value as a conversion date.

    Accepts datetime, date, ISO 8601 strings and Unix timestamps (seconds
    or milliseconds). Returns None for anything else.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    if not isinstance(value, (str, int, float)):
        return None
    try:
        return _as_utc(_DATETIME.validate_python(value))
    except ValidationError:
        return None


def is_usable_rate(rate: Any) -> bool:
    """A rate is usable when it is a finite, non-zero real number."""
    if isinstance(rate, bool) or not isinstance(rate, (Real, Decimal)):
        return False
    try:
        as_float = float(rate)
    except (TypeError, ValueError, OverflowError):
        return False
    return math.isfinite(as_float) and as_float != 0


# === Orchestrator ===

class CurrencyConverter:
    """
    Applies currency conversions to records according to field mappings.

    All configuration is checked here, once; the same converter can then be
    used for any number of records.

    Args:
        fields: Non-empty list of FieldMapping (or dicts accepted by it)
        resolve_rate: Callable (from, to, date) -> rate, sync or async
        round: Rounding applied to amount * rate (default: round2)
        allowed_currency_codes: Allow-list overriding the ISO 4217 set
        on_error: Receives an ErrorContext for every failed field
        fallback_rate: Used when the resolver returns an unusable rate
        rollback_on_error: Erase earlier targets and stop on first failure
        cache: Object with get/set used before calling resolve_rate
        date_transform: Adjusts the conversion date before it is used
        is_writable: Predicate telling whether a target path may be written
        logger: Logger for warnings and errors (default: module logger)

    Raises:
        ConfigurationError: On empty/invalid fields or non-callable resolver
    """

    def __init__(
        self,
        fields: Sequence[FieldMapping | Mapping[str, Any]],
        resolve_rate: RateResolver,
        *,
        round: Rounder = round2,
        allowed_currency_codes: Iterable[str] | None = None,
        on_error: ErrorSink | None = None,
        fallback_rate: float | None = None,
        rollback_on_error: bool = False,
        cache: RateCache | None = None,
        date_transform: DateTransform | None = None,
        is_writable: WritablePredicate | None = None,
        logger: logging.Logger | None = None,
    ):
        if not isinstance(fields, (list, tuple)) or not fields:
            raise ConfigurationError('option "fields" must be a non-empty list')
        if not callable(resolve_rate):
            raise ConfigurationError('option "resolve_rate" must be callable')
        if not callable(round):
            raise ConfigurationError('option "round" must be callable')
        if fallback_rate is not None and not is_usable_rate(fallback_rate):
            raise ConfigurationError(f"fallback_rate must be a finite non-zero number, got {fallback_rate!r}")
        if cache is not None and not isinstance(cache, RateCache):
            raise ConfigurationError("cache must provide get() and set()")

        self.fields: tuple[FieldMapping, ...] = tuple(self._load_field(f) for f in fields)
        self.resolve_rate = resolve_rate
        self.round = round
        self.allowed_currency_codes = (
            None if allowed_currency_codes is None else normalize_codes(allowed_currency_codes)
        )
        self.on_error = on_error
        self.fallback_rate = fallback_rate
        self.rollback_on_error = rollback_on_error
        self.cache = cache
        self.date_transform = date_transform
        self.is_writable = is_writable
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _load_field(field: FieldMapping | Mapping[str, Any]) -> FieldMapping:
        if isinstance(field, FieldMapping):
            return field
        if not isinstance(field, Mapping):
            raise ConfigurationError(f"field mapping must be a mapping, got {type(field).__name__}")
        try:
            return FieldMapping.model_validate(dict(field))
        except ValidationError as e:
            raise ConfigurationError(f"invalid field mapping {dict(field)!r}: {e}") from e

    # Public API -----------------------------------------------
    async def apply_conversions(self, record: Any) -> None:
        """
        Convert every mapped field of record in place.

        Never raises because of a single field: failures go to on_error or
        the log, and show up as a missing target value.
        """
        statuses = [FieldStatus.PENDING] * len(self.fields)
        written: list[str] = []

        for idx, field in enumerate(self.fields):
            outcome = await self._convert_field(record, field)
            statuses[idx] = outcome

            if outcome is FieldStatus.CONVERTED:
                written.append(field.target_path)
            elif outcome is FieldStatus.FAILED and self.rollback_on_error:
                self._rollback(record, written, statuses)
                break

        self.logger.debug(
            "Conversion run finished: %s",
            ", ".join(f"{f.target_path}={s.value}" for f, s in zip(self.fields, statuses)),
        )

    # Internal --------------------------------------------------
    def _is_valid_code(self, code: Any) -> bool:
        return is_valid_currency_code(code, self.allowed_currency_codes)

    def _record_date(self, record: Any, field: FieldMapping) -> datetime:
        conversion_date = None
        if field.date_path:
            conversion_date = coerce_date(get_value(record, field.date_path))
        if conversion_date is None:
            conversion_date = datetime.now(timezone.utc)
        return conversion_date

    def _target_writable(self, target_path: str) -> bool:
        if self.is_writable is None:
            return True
        try:
            return bool(self.is_writable(target_path))
        except Exception as e:
            self.logger.debug("is_writable failed for %s: %s", target_path, e)
            return False

    async def _convert_field(self, record: Any, field: FieldMapping) -> FieldStatus:
        if not self._target_writable(field.target_path):
            self.logger.warning("targetPath '%s' does not exist in schema", field.target_path)
            return FieldStatus.SKIPPED

        amount = get_value(record, field.source_path)
        if amount is None:
            return FieldStatus.SKIPPED

        from_currency = get_value(record, field.currency_path)
        if not isinstance(from_currency, str) or not from_currency:
            self.logger.warning("Missing or invalid source currency at path: %s", field.currency_path)
            return FieldStatus.SKIPPED

        if not self._is_valid_code(from_currency):
            self.logger.warning("Invalid source currency code: %s", from_currency)
            return FieldStatus.SKIPPED

        if not self._is_valid_code(field.to_currency):
            self.logger.warning("Invalid target currency code: %s", field.to_currency)
            return FieldStatus.SKIPPED

        conversion_date = self._record_date(record, field)

        try:
            if self.date_transform is not None:
                conversion_date = self.date_transform(conversion_date)
            rate = await self._resolve(from_currency, field.to_currency, conversion_date)
            result = ConversionResult(
                amount=self.round(float(amount) * rate),
                currency=field.to_currency,
                date=conversion_date,
            )
        except Exception as e:
            self._report(field, from_currency, conversion_date, e)
            return FieldStatus.FAILED

        set_value(record, field.target_path, result.as_record())
        return FieldStatus.CONVERTED

    async def _resolve(self, from_currency: str, to_currency: str, conversion_date: datetime) -> float:
        key = make_cache_key(from_currency, to_currency, conversion_date)

        rate = None
        if self.cache is not None:
            rate = await maybe_await(self.cache.get(key))
            if rate is not None:
                self.logger.debug("Rate cache hit for %s", key)

        if rate is None:
            rate = await maybe_await(self.resolve_rate(from_currency, to_currency, conversion_date))
            if self.cache is not None and is_usable_rate(rate):
                await maybe_await(self.cache.set(key, rate))

        if not is_usable_rate(rate):
            if self.fallback_rate is None:
                raise ConversionFailed(
                    f"Invalid rate {rate!r} for {from_currency}->{to_currency}",
                    from_currency=from_currency,
                    to_currency=to_currency,
                    rate=rate,
                )
            self.logger.info(
                "Using fallback rate %s for %s (resolved %r)", self.fallback_rate, key, rate
            )
            rate = self.fallback_rate

        return float(rate)

    def _report(
        self,
        field: FieldMapping,
        from_currency: str,
        conversion_date: datetime,
        error: Exception,
    ) -> None:
        if self.on_error is None:
            self.logger.error("Error converting %s: %s", field.source_path, error)
            return
        self.on_error(ErrorContext(
            field=field.source_path,
            from_currency=from_currency,
            to_currency=field.to_currency,
            date=conversion_date,
            error=error,
        ))

    def _rollback(self, record: Any, written: list[str], statuses: list[FieldStatus]) -> None:
        for target_path in written:
            unset_value(record, target_path)
        for idx, status in enumerate(statuses):
            if status is FieldStatus.CONVERTED:
                statuses[idx] = FieldStatus.ROLLED_BACK
        self.logger.warning("Rolled back %d converted field(s) after a failure", len(written))


async def apply_conversions(
    record: Any,
    fields: Sequence[FieldMapping | Mapping[str, Any]],
    resolve_rate: RateResolver,
    **config: Any,
) -> None:
    """Build a CurrencyConverter from fields/config and run it once over record."""
    converter = CurrencyConverter(fields, resolve_rate, **config)
    await converter.apply_conversions(record)
