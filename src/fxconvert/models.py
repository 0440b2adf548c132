"""
fxconvert Data Models

Field mappings are static configuration validated once when a converter is
built. Results and error contexts live for a single conversion run.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


# === Enums ===

class FieldStatus(str, Enum):
    """Outcome of one field mapping within a conversion run."""
    PENDING = "PENDING"
    SKIPPED = "SKIPPED"          # missing data, bad currency code, unwritable target
    CONVERTED = "CONVERTED"
    FAILED = "FAILED"            # no usable rate or resolver error
    ROLLED_BACK = "ROLLED_BACK"  # written, then erased when a later field failed


# === Configuration ===

class FieldMapping(BaseModel):
    """
    Where to read an amount, its currency and date, and where to write the result.

    Accepts the snake_case field names as well as the camelCase keys used by
    JSON configuration files (sourcePath, currencyPath, datePath, targetPath,
    toCurrency).
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    source_path: str = Field(min_length=1, description="Dotted path to the numeric amount")
    currency_path: str = Field(min_length=1, description="Dotted path to the source currency code")
    date_path: str | None = Field(
        default=None,
        min_length=1,
        description="Dotted path to the conversion date (defaults to now)"
    )
    target_path: str = Field(min_length=1, description="Dotted path the result is written to")
    to_currency: str = Field(min_length=1, description="Destination currency code")


# === Conversion Output ===

class ConversionResult(BaseModel):
    """Value written at a mapping's target path."""
    amount: float
    currency: str
    date: datetime

    def as_record(self) -> dict[str, Any]:
        """Plain dict form stored in the converted record."""
        return self.model_dump()


class ErrorContext(BaseModel):
    """Details handed to the error callback when a field fails to convert."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    field: str = Field(description="Source path of the failing mapping")
    from_currency: str
    to_currency: str
    date: datetime
    error: BaseException


# === Cache ===

@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: float
