"""Async download orchestrator for multi-year requests.

Uses ``aiohttp`` to fetch every monthly Security Update of the requested
years concurrently, with at most ``parallel_requests`` requests in flight.
A month that fails (network error, missing update, bad payload) is
reported and skipped; it never stops the other months.

Usage from synchronous code::

    from patchtuesday.async_downloaders import download_years_parallel
    results = download_years_parallel(years=[2022, 2023])
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from typing import Iterable

import aiohttp

from .config import PatchTuesdayConfig
from .cvrf import CvrfDocument, DocumentDecodeError, parse_document
from .downloaders import MONTHS, is_success, period_token, period_url
from .models import Vulnerability
from .parsers import normalize_document


@dataclass
class DownloadResults:
    """Container for the aggregated multi-month download.

    Attributes:
        vulnerabilities: Normalized vulnerabilities of every month that
            succeeded.  Months arrive in no particular order; within a
            month the document order is kept.
        succeeded: Period tokens that contributed to ``vulnerabilities``.
        errors: Human-readable messages for months that were skipped.
    """

    vulnerabilities: list[Vulnerability] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def period_tokens(years: Iterable[int]) -> list[str]:
    """Expand years into monthly period tokens.

    Args:
        years: Years to expand; duplicates are dropped, order is kept.

    Returns:
        Twelve ``YYYY-Mon`` tokens per year.
    """
    return [period_token(year, month) for year in dict.fromkeys(years) for month in range(1, len(MONTHS) + 1)]


def _headers(config: PatchTuesdayConfig) -> dict[str, str]:
    return {
        "User-Agent": config.user_agent,
        "Accept": "application/json",
    }


def _warn(results: DownloadResults, msg: str) -> None:
    print(f"Warning: {msg}", file=sys.stderr)
    results.errors.append(msg)


# ─── Fetching ────────────────────────────────────────────────────────────────


async def _fetch_document(session: aiohttp.ClientSession, url: str) -> CvrfDocument | None:
    """Fetch and decode one CVRF document; None on a non-success status."""
    async with session.get(url) as resp:
        if not is_success(resp.status):
            return None
        raw = await resp.read()
    return parse_document(raw)


async def _collect(
    session: aiohttp.ClientSession,
    tokens: list[str],
    base_url: str,
    parallel: int,
) -> DownloadResults:
    """Fetch all ``tokens`` concurrently and aggregate what succeeds.

    Args:
        session: Open aiohttp session.
        tokens: Period tokens to fetch.
        base_url: CVRF endpoint the tokens are appended to.
        parallel: Maximum number of requests in flight.

    Returns:
        ``DownloadResults`` with the vulnerabilities of successful months
        and one error per skipped month.
    """
    results = DownloadResults()
    slots = asyncio.Semaphore(parallel)
    lock = asyncio.Lock()

    async def _one(token: str) -> None:
        try:
            async with slots:
                doc = await _fetch_document(session, period_url(base_url, token))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            _warn(results, f"{token} download failed: {str(e) or type(e).__name__}")
            return
        except DocumentDecodeError as e:
            _warn(results, f"{token} could not be decoded: {e}")
            return

        if doc is None:
            _warn(results, f"No Security Update found for {token}")
            return

        vulns = normalize_document(doc)
        async with lock:
            results.vulnerabilities.extend(vulns)
            results.succeeded.append(token)

    await asyncio.gather(*(_one(t) for t in tokens))
    return results


async def _download_all(tokens: list[str], config: PatchTuesdayConfig) -> DownloadResults:
    kwargs = {}
    if config.timeout is not None:
        kwargs["timeout"] = aiohttp.ClientTimeout(total=config.timeout)

    async with aiohttp.ClientSession(headers=_headers(config), **kwargs) as session:
        return await _collect(session, tokens, config.cvrf_url, config.parallel_requests)


def download_years_parallel(
    years: Iterable[int],
    config: PatchTuesdayConfig | None = None,
) -> DownloadResults:
    """Synchronous wrapper that fetches every month of ``years`` in parallel.

    This is the main entry point for year requests.  It creates an event
    loop, runs all downloads concurrently, and returns the results.

    Args:
        years: Years whose twelve monthly updates should be fetched.
        config: Settings; defaults apply when None.

    Returns:
        ``DownloadResults`` containing all vulnerabilities and any errors.

    Example::

        results = download_years_parallel([2023, 2024])
        print(f"Vulnerabilities: {len(results.vulnerabilities)}")
        if results.errors:
            print(f"Skipped: {results.errors}")
    """
    config = config or PatchTuesdayConfig()
    return asyncio.run(_download_all(period_tokens(years), config))
