"""Normalized domain types shared by the parser, filters, and report."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Severity(str, enum.Enum):
    """Microsoft severity rating of a vulnerability."""

    CRITICAL = "Critical"
    IMPORTANT = "Important"
    MODERATE = "Moderate"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NONE = "None"

    @classmethod
    def parse(cls, text: str | None) -> Severity:
        """Case-insensitive lookup; unknown or missing text gives ``NONE``."""
        wanted = (text or "").strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return cls.NONE

    @property
    def display(self) -> str:
        return "" if self is Severity.NONE else self.value

    def __str__(self) -> str:
        return self.value


class Product(enum.Enum):
    """Well-known product IDs used by the Security Update Guide.

    Add more as needed; any numeric ID is also accepted on the command line.
    """

    All = 0
    Win10_1809_x64 = 11569
    Win11_22H2_x64 = 12086


ALL_PRODUCTS = "All"


def resolve_product(text: str) -> str:
    """Turn a product name or numeric ID into a product filter token.

    Args:
        text: A ``Product`` member name (any case) or a numeric product ID.

    Returns:
        ``"All"`` or the product ID as a string.

    Raises:
        ValueError: If ``text`` is neither a known name nor numeric.
    """
    value = (text or "").strip()
    if value.isdigit():
        return str(int(value))
    for member in Product:
        if member.name.lower() == value.lower():
            return ALL_PRODUCTS if member is Product.All else str(member.value)
    names = ", ".join(m.name for m in Product)
    raise ValueError(f"Invalid product {text!r} (expected one of {names} or a numeric product ID)")


@dataclass(frozen=True)
class Vulnerability:
    """A vulnerability flattened out of a CVRF document.

    Attributes:
        title: Vulnerability title (empty when upstream omits it).
        cve: CVE identifier (empty when upstream omits it).
        severity: Microsoft severity rating, ``Severity.NONE`` if unknown.
        cvss: Base score of the first CVSS score set, if any.
        impact: Impact text such as ``Remote Code Execution``.
        description: Text of the ``Description`` note, if any.
        acknowledgements: Credited finders, ``None`` unless every name resolved.
        public: Whether the vulnerability was publicly disclosed.
        exploited: Whether exploitation was detected.
        affected_products: Product IDs listed as affected.
    """

    title: str
    cve: str
    severity: Severity = Severity.NONE
    cvss: float | None = None
    impact: str = ""
    description: str | None = None
    acknowledgements: str | None = None
    public: bool = False
    exploited: bool = False
    affected_products: tuple[str, ...] = field(default_factory=tuple)
