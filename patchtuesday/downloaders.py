"""HTTP helpers for fetching a single Security Update document.

All synchronous network I/O is isolated here.  There are no retries: one
request per period, and a non-success status simply means Microsoft has
not published anything for that period.
"""

import datetime as dt

import requests

from .config import PatchTuesdayConfig
from .cvrf import CvrfDocument, parse_document
from .models import Vulnerability
from .parsers import normalize_document

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def period_token(year: int, month: int) -> str:
    """Build a period token such as ``2021-Jan``.

    Month names are fixed English abbreviations, independent of locale.
    """
    return f"{year}-{MONTHS[month - 1]}"


def default_period(today: dt.date | None = None) -> str:
    """Period token for the current month."""
    today = today or dt.date.today()
    return period_token(today.year, today.month)


def period_url(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/{token}"


def is_success(status: int) -> bool:
    """Only 2xx answers carry a document; anything else means no data."""
    return 200 <= status < 300


def requests_session(config: PatchTuesdayConfig | None = None) -> requests.Session:
    """Create a requests session with JSON and user-agent headers.

    Args:
        config: Settings supplying the ``User-Agent``; defaults apply when None.

    Returns:
        Configured ``requests.Session``.
    """
    config = config or PatchTuesdayConfig()
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
    )
    return s


def fetch_document(
    session: requests.Session,
    url: str,
    timeout: float | None = None,
) -> CvrfDocument | None:
    """Fetch and decode one CVRF document.

    Args:
        session: Requests session.
        url: Document URL.
        timeout: Seconds before giving up, or None for no explicit limit.

    Returns:
        The decoded document, or None if the server answered with a
        non-success status.

    Raises:
        requests.RequestException: On connection failures and timeouts.
        DocumentDecodeError: If the body is not a valid CVRF document.
    """
    r = session.get(url, timeout=timeout)
    if not is_success(r.status_code):
        return None
    return parse_document(r.content)


def fetch_period(
    token: str,
    config: PatchTuesdayConfig | None = None,
    session: requests.Session | None = None,
) -> list[Vulnerability] | None:
    """Fetch one month's Security Update and normalize its vulnerabilities.

    Args:
        token: Period token, e.g. ``2024-Mar``.
        config: Settings; defaults apply when None.
        session: Optional session to reuse.

    Returns:
        Vulnerabilities in document order, or None when no update exists
        for ``token``.
    """
    config = config or PatchTuesdayConfig()
    own_session = session is None
    session = session or requests_session(config)
    try:
        doc = fetch_document(session, period_url(config.cvrf_url, token), timeout=config.timeout)
    finally:
        if own_session:
            session.close()
    if doc is None:
        return None
    return normalize_document(doc)
