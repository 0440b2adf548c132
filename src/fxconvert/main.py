"""
fxconvert Command Line Entry Point

Usage:
    # Convert one record with live Frankfurter rates
    python -m fxconvert --fields fields.json --input order.json

    # Offline, with a static rate table and rollback on the first failure
    python -m fxconvert --fields fields.json --rates rates.json --rollback < orders.json

fields.json holds a list of mappings:
    [{"sourcePath": "price.amount", "currencyPath": "price.currency",
      "targetPath": "price.eur", "toCurrency": "EUR"}]

rates.json holds a base-quoted table:
    {"base": "EUR", "rates": {"USD": 1.163, "GBP": 0.86}}
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from fxconvert import __version__
from fxconvert.config import build_converter, get_settings
from fxconvert.errors import ConfigurationError
from fxconvert.providers import FrankfurterRateResolver, StaticRateResolver

logger = logging.getLogger(__name__)


def _load_json(path: str | None) -> Any:
    if path is None or path == "-":
        return json.load(sys.stdin)
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _make_resolver(rates_path: str | None):
    if rates_path is None:
        return FrankfurterRateResolver()
    table = _load_json(rates_path)
    if "rates" in table:
        return StaticRateResolver(table["rates"], base=table.get("base", "EUR"))
    return StaticRateResolver(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fxconvert",
        description="Convert currency amounts inside JSON records"
    )
    parser.add_argument(
        "--fields", "-f",
        required=True,
        help="JSON file with the list of field mappings"
    )
    parser.add_argument(
        "--input", "-i",
        default="-",
        help="JSON record or list of records (default: stdin)"
    )
    parser.add_argument(
        "--rates", "-r",
        help="Static rate table; without it rates come from Frankfurter"
    )
    parser.add_argument(
        "--rollback",
        action="store_true",
        default=None,
        help="Erase converted targets of a record when one of its fields fails"
    )
    parser.add_argument(
        "--fallback-rate",
        type=float,
        help="Rate used when the resolver returns an unusable value"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(args: argparse.Namespace) -> list[dict[str, Any]] | dict[str, Any]:
    """Convert the input records and return them."""
    fields = _load_json(args.fields)
    overrides: dict[str, Any] = {}
    if args.rollback is not None:
        overrides["rollback_on_error"] = args.rollback
    if args.fallback_rate is not None:
        overrides["fallback_rate"] = args.fallback_rate

    converter = build_converter(fields, _make_resolver(args.rates), **overrides)

    payload = _load_json(args.input)
    records = payload if isinstance(payload, list) else [payload]
    for idx, record in enumerate(records, start=1):
        logger.debug(f"Converting record {idx}/{len(records)}")
        await converter.apply_conversions(record)

    return payload


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run(args))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    json.dump(result, sys.stdout, indent=2, default=_json_default, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
