"""Filtering of normalized vulnerabilities.

Each predicate returns a new list holding the surviving records (the same
objects, in the same order).  Predicates are independent of each other, so
applying them in any order gives the same result.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import ALL_PRODUCTS, Severity, Vulnerability


def by_severity(vulns: list[Vulnerability], severity: Severity) -> list[Vulnerability]:
    return [v for v in vulns if v.severity == severity]


def by_title(vulns: list[Vulnerability], text: str) -> list[Vulnerability]:
    """Keep vulnerabilities whose title contains ``text`` (case-insensitive)."""
    needle = text.lower()
    return [v for v in vulns if needle in v.title.lower()]


def by_acknowledgement(vulns: list[Vulnerability], text: str) -> list[Vulnerability]:
    """Keep vulnerabilities whose credited names contain ``text``.

    Case-insensitive.  Records without acknowledgement text never match.
    """
    needle = text.lower()
    return [v for v in vulns if v.acknowledgements is not None and needle in v.acknowledgements.lower()]


def by_product(vulns: list[Vulnerability], product: str) -> list[Vulnerability]:
    """Keep vulnerabilities listing ``product`` as affected.

    Args:
        vulns: Vulnerabilities to filter.
        product: Numeric product ID as a string, or ``"All"`` to keep
            everything.
    """
    if product == ALL_PRODUCTS:
        return list(vulns)
    return [v for v in vulns if product in v.affected_products]


@dataclass(frozen=True)
class VulnerabilityFilter:
    """User-selected filters; unset ones are skipped.

    Attributes:
        severity: Exact severity to keep.
        title: Substring the title must contain.
        acknowledgement: Substring the acknowledgement text must contain.
        product: Product ID that must be affected, or ``"All"``.
    """

    severity: Severity | None = None
    title: str | None = None
    acknowledgement: str | None = None
    product: str = ALL_PRODUCTS

    def apply(self, vulns: list[Vulnerability]) -> list[Vulnerability]:
        out = list(vulns)
        if self.severity is not None:
            out = by_severity(out, self.severity)
        if self.title is not None:
            out = by_title(out, self.title)
        if self.acknowledgement is not None:
            out = by_acknowledgement(out, self.acknowledgement)
        return by_product(out, self.product)
