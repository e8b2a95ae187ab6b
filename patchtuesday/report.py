"""Rendering of vulnerabilities using Jinja2 templates.

Two outputs are supported: the plain-text block per vulnerability printed
by default, and a Markdown summary.  Templates live in
``patchtuesday/templates/``.
"""

import datetime as dt
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import Severity, Vulnerability

_TEMPLATES_DIR = Path(__file__).parent / "templates"


def _md_cell(value: Any) -> str:
    """Make a value safe to place inside a Markdown table cell."""
    text = " ".join(str(value or "").split())
    return text.replace("|", "\\|")


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=select_autoescape(default_for_string=False, default=False),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["md_cell"] = _md_cell
    return env


_env = _environment()


def _now_utc_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat()


def risk_sort_key(v: Vulnerability) -> float:
    """Sort key for the Markdown table; higher means more urgent.

    Exploited > publicly disclosed > CVSS.
    """
    exploited = 1.0 if v.exploited else 0.0
    public = 1.0 if v.public else 0.0
    return exploited * 1000.0 + public * 100.0 + (v.cvss or 0.0)


def format_vulnerability(v: Vulnerability) -> str:
    """Render one vulnerability as a text block ending in a dashed line."""
    return _env.get_template("vulnerability.txt.j2").render(v=v)


def render_text(vulns: Sequence[Vulnerability]) -> str:
    """Render every vulnerability as text blocks, one after another."""
    return "\n".join(format_vulnerability(v) for v in vulns)


def render_markdown(vulns: Sequence[Vulnerability], periods: Sequence[str] = ()) -> str:
    """Render a Markdown summary of ``vulns``.

    Args:
        vulns: Vulnerabilities to report on.
        periods: Period tokens the data came from, listed in the header.

    Returns:
        The rendered Markdown document.
    """
    severity_counts = []
    for severity in Severity:
        count = sum(1 for v in vulns if v.severity is severity)
        if count:
            severity_counts.append((severity.value, count))

    return _env.get_template("report.md.j2").render(
        generated_at=_now_utc_iso(),
        periods=list(periods),
        total=len(vulns),
        exploited_count=sum(1 for v in vulns if v.exploited),
        public_count=sum(1 for v in vulns if v.public),
        severity_counts=severity_counts,
        items=sorted(vulns, key=risk_sort_key, reverse=True),
    )
