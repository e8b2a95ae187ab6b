"""Command-line entry point.

Examples::

    patch-tuesday --date 2024-Mar --severity critical
    patch-tuesday --year 2022,2023 --product All --title "remote code"
    patch-tuesday --date 2024-Mar --format markdown > march.md
"""

import argparse
import sys
from pathlib import Path
from typing import Sequence

import requests
import yaml

from . import __version__
from .async_downloaders import download_years_parallel
from .config import PatchTuesdayConfig, find_config, load_config
from .cvrf import DocumentDecodeError
from .downloaders import MONTHS, default_period, fetch_period
from .filters import VulnerabilityFilter
from .models import Product, Severity, resolve_product
from .report import render_markdown, render_text


def _years(value: str) -> list[int]:
    """Parse a comma-separated list of years."""
    years: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit() or len(part) != 4:
            raise argparse.ArgumentTypeError(f"invalid year: {part!r}")
        years.append(int(part))
    if not years:
        raise argparse.ArgumentTypeError("at least one year is required")
    return years


def _severity(value: str) -> Severity:
    severity = Severity.parse(value)
    if severity is not Severity.NONE or value.strip().lower() == Severity.NONE.value.lower():
        return severity
    choices = ", ".join(m.value for m in Severity)
    raise argparse.ArgumentTypeError(f"invalid severity {value!r} (choose from {choices})")


def _product(value: str) -> str:
    try:
        return resolve_product(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _period_sort_key(token: str) -> tuple[int, int]:
    year, _, month = token.partition("-")
    return int(year), MONTHS.index(month) if month in MONTHS else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patch-tuesday",
        description="Parse info from Microsoft's monthly Security Updates.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    period = parser.add_mutually_exclusive_group()
    period.add_argument(
        "-d",
        "--date",
        help="Month to fetch, as YYYY-Mon (default: current month)",
        default=None,
    )
    period.add_argument(
        "--year",
        type=_years,
        help="Year(s) to fetch, separated by commas (e.g. 2022,2023)",
    )

    products = ", ".join(m.name for m in Product)
    parser.add_argument(
        "-p",
        "--product",
        type=_product,
        help=f"Product to filter on: {products}, or a numeric product ID "
        "(default: default_product from the config file, Win10_1809_x64)",
    )
    parser.add_argument("--severity", type=_severity, help="Filter by given severity")
    parser.add_argument("--title", help="Filter by given text contained in title")
    parser.add_argument("--acknowledgement", help="Filter by given text contained in acknowledgements")
    parser.add_argument("--format", choices=("text", "markdown"), default="text", help="Output format")
    parser.add_argument("--config", type=Path, help="Path to a YAML/JSON config file")
    return parser


def _load_config(path: Path | None) -> PatchTuesdayConfig:
    path = path or find_config()
    if path is None:
        return PatchTuesdayConfig()
    return load_config(path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(f"invalid configuration: {e}")

    if args.year:
        results = download_years_parallel(args.year, config)
        vulns = results.vulnerabilities
        periods = sorted(results.succeeded, key=_period_sort_key)
    else:
        token = args.date or default_period()
        try:
            found = fetch_period(token, config)
        except (requests.RequestException, DocumentDecodeError) as e:
            print(f"Error: {token}: {e}", file=sys.stderr)
            return 1
        if found is None:
            print(f"No Security Update found for {token}")
            return 0
        vulns = found
        periods = [token]

    selected = VulnerabilityFilter(
        severity=args.severity,
        title=args.title,
        acknowledgement=args.acknowledgement,
        product=args.product or resolve_product(config.default_product),
    ).apply(vulns)

    if args.format == "markdown":
        print(render_markdown(selected, periods))
    elif selected:
        print(render_text(selected))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
