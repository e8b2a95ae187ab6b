"""CVRF vulnerability normalization.

Pure functions that turn the loosely-typed upstream entries into
``Vulnerability`` records.  No I/O, and nothing here raises: upstream data
is inconsistent between releases, so every missing or odd sub-field falls
back to a default instead.
"""

from __future__ import annotations

from .cvrf import (
    PRODUCT_STATUS_AFFECTED,
    THREAT_EXPLOITABILITY,
    THREAT_IMPACT,
    THREAT_SEVERITY,
    CvrfDocument,
    RawVulnerability,
)
from .models import Severity, Vulnerability


def threat_text(raw: RawVulnerability, type_code: int) -> str | None:
    """Description value of the first threat with ``type_code``."""
    threat = raw.first_threat(type_code)
    return threat.text if threat is not None else None


def parse_exploitability(text: str | None) -> tuple[bool, bool]:
    """Read the (publicly disclosed, exploited) flags from a threat description.

    Upstream writes e.g. ``Publicly Disclosed:No;Exploited:Yes;Latest
    Software Release:...``.  The flags are positional: the first field is
    disclosure, the second exploitation.  A field counts as true when it
    contains ``Yes``.  Entries such as ``DOS:N/A`` simply give
    ``(False, False)``; a reordered upstream format gives wrong flags
    rather than an error.

    Args:
        text: Description of the exploitability threat (may be None).

    Returns:
        Tuple of (public, exploited).
    """
    fields = (text or "").split(";")
    public = "Yes" in fields[0]
    exploited = len(fields) > 1 and "Yes" in fields[1]
    return public, exploited


def collect_acknowledgements(raw: RawVulnerability) -> str | None:
    """Join the names of everyone credited for the vulnerability.

    Names are concatenated as upstream lists them.  A single name without
    a value voids the whole field; there is no partial result.  With no
    names at all the text is present but empty.

    Returns:
        The concatenated names, or None.
    """
    names: list[str] = []
    for ack in raw.acknowledgments:
        for name in ack.name:
            if name.value is None:
                return None
            names.append(name.value)
    return "".join(names)


def affected_products(raw: RawVulnerability) -> tuple[str, ...]:
    status = raw.first_product_status(PRODUCT_STATUS_AFFECTED)
    if status is None or not status.product_id:
        return ()
    return tuple(status.product_id)


def normalize_vulnerability(raw: RawVulnerability) -> Vulnerability:
    """Map one raw CVRF entry to a ``Vulnerability``.

    Args:
        raw: Decoded ``Vulnerability`` entry of a CVRF document.

    Returns:
        Best-effort ``Vulnerability``; defaulted fields are not an error.
    """
    public, exploited = parse_exploitability(threat_text(raw, THREAT_EXPLOITABILITY))
    note = raw.first_note("Description")

    return Vulnerability(
        title=raw.title.value or "",
        cve=raw.cve,
        severity=Severity.parse(threat_text(raw, THREAT_SEVERITY)),
        cvss=raw.cvss_score_sets[0].base_score if raw.cvss_score_sets else None,
        impact=threat_text(raw, THREAT_IMPACT) or "",
        description=note.value if note is not None else None,
        acknowledgements=collect_acknowledgements(raw),
        public=public,
        exploited=exploited,
        affected_products=affected_products(raw),
    )


def normalize_document(doc: CvrfDocument) -> list[Vulnerability]:
    """Normalize every vulnerability of a document, keeping source order."""
    return [normalize_vulnerability(v) for v in doc.vulnerabilities]
