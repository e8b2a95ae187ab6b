"""Typed model of Microsoft's CVRF v2.0 JSON documents.

Mirrors the payload returned by
``GET https://api.msrc.microsoft.com/cvrf/v2.0/cvrf/<YYYY-Mon>``.  Field
names follow Python conventions; the wire names are kept as aliases.

``ProductTree`` is deliberately not modelled.  Microsoft changes its shape
every so often and the rest of the pipeline never reads it, so it is left
out and ignored like any other unknown key.

Many values are wrapped in ``{"Value": ...}`` objects that upstream leaves
out or sets to ``null``.  Those are kept as ``ValueField`` with an optional
``value`` so callers can tell "missing" from "empty".
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Threat type codes
THREAT_IMPACT = 0
THREAT_EXPLOITABILITY = 1
THREAT_SEVERITY = 3

# Product status type codes
PRODUCT_STATUS_AFFECTED = 3


class DocumentDecodeError(ValueError):
    """A payload could not be decoded into a ``CvrfDocument``.

    Attributes:
        field: Dotted wire path of the offending field
            (e.g. ``Vulnerability.0.Threats.1.Type``), or ``""`` when the
            payload as a whole is unusable (not JSON, not an object).
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


class _CvrfModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ValueField(_CvrfModel):
    value: str | None = Field(default=None, alias="Value")


# ─── Document header ─────────────────────────────────────────────────────────


class DocumentPublisher(_CvrfModel):
    contact_details: ValueField = Field(default_factory=ValueField, alias="ContactDetails")
    issuing_authority: ValueField = Field(default_factory=ValueField, alias="IssuingAuthority")
    type: int = Field(default=0, alias="Type")


class Identification(_CvrfModel):
    id: ValueField = Field(default_factory=ValueField, alias="ID")
    alias: ValueField = Field(default_factory=ValueField, alias="Alias")


class Revision(_CvrfModel):
    number: str = Field(default="", alias="Number")
    date: str = Field(default="", alias="Date")
    description: ValueField = Field(default_factory=ValueField, alias="Description")


class DocumentTracking(_CvrfModel):
    identification: Identification = Field(default_factory=Identification, alias="Identification")
    status: int = Field(default=0, alias="Status")
    version: str = Field(default="", alias="Version")
    revision_history: list[Revision] = Field(default_factory=list, alias="RevisionHistory")
    initial_release_date: str = Field(default="", alias="InitialReleaseDate")
    current_release_date: str = Field(default="", alias="CurrentReleaseDate")


class DocumentNote(_CvrfModel):
    title: str = Field(default="", alias="Title")
    audience: str = Field(default="", alias="Audience")
    type: int = Field(default=0, alias="Type")
    ordinal: str = Field(default="", alias="Ordinal")
    value: str = Field(default="", alias="Value")


# ─── Vulnerability entries ───────────────────────────────────────────────────


class Note(_CvrfModel):
    title: str = Field(default="", alias="Title")
    type: int = Field(default=0, alias="Type")
    ordinal: str = Field(default="", alias="Ordinal")
    value: str | None = Field(default=None, alias="Value")


class ProductStatus(_CvrfModel):
    product_id: list[str] | None = Field(default=None, alias="ProductID")
    type: int = Field(alias="Type")


class Threat(_CvrfModel):
    description: ValueField | None = Field(default=None, alias="Description")
    product_id: list[str] | None = Field(default=None, alias="ProductID")
    type: int = Field(alias="Type")
    date_specified: bool = Field(default=False, alias="DateSpecified")

    @property
    def text(self) -> str | None:
        """The description value, ``None`` when either layer is missing."""
        return self.description.value if self.description is not None else None


class CVSSScoreSet(_CvrfModel):
    base_score: float = Field(alias="BaseScore")
    temporal_score: float | None = Field(default=None, alias="TemporalScore")
    vector: str = Field(default="", alias="Vector")
    product_id: list[str] = Field(default_factory=list, alias="ProductID")


class AffectedFile(_CvrfModel):
    file_name: str = Field(default="", alias="FileName")
    file_last_modified: str = Field(default="", alias="FileLastModified")


class Remediation(_CvrfModel):
    description: ValueField = Field(default_factory=ValueField, alias="Description")
    url: str | None = Field(default=None, alias="URL")
    product_id: list[str] | None = Field(default=None, alias="ProductID")
    type: int = Field(default=0, alias="Type")
    date_specified: bool = Field(default=False, alias="DateSpecified")
    affected_files: list[AffectedFile] = Field(default_factory=list, alias="AffectedFiles")
    restart_required: ValueField | None = Field(default=None, alias="RestartRequired")
    sub_type: str | None = Field(default=None, alias="SubType")
    fixed_build: str | None = Field(default=None, alias="FixedBuild")


class Acknowledgment(_CvrfModel):
    name: list[ValueField] = Field(default_factory=list, alias="Name")
    url: list[str] = Field(default_factory=list, alias="URL")


class RawVulnerability(_CvrfModel):
    """One entry of the document's ``Vulnerability`` array."""

    title: ValueField = Field(default_factory=ValueField, alias="Title")
    notes: list[Note] = Field(default_factory=list, alias="Notes")
    discovery_date_specified: bool = Field(default=False, alias="DiscoveryDateSpecified")
    release_date_specified: bool = Field(default=False, alias="ReleaseDateSpecified")
    cve: str = Field(default="", alias="CVE")
    product_statuses: list[ProductStatus] = Field(default_factory=list, alias="ProductStatuses")
    threats: list[Threat] = Field(default_factory=list, alias="Threats")
    cvss_score_sets: list[CVSSScoreSet] = Field(default_factory=list, alias="CVSSScoreSets")
    remediations: list[Remediation] = Field(default_factory=list, alias="Remediations")
    acknowledgments: list[Acknowledgment] = Field(default_factory=list, alias="Acknowledgments")
    ordinal: str = Field(default="", alias="Ordinal")
    revision_history: list[Revision] = Field(default_factory=list, alias="RevisionHistory")

    def first_threat(self, type_code: int) -> Threat | None:
        """Return the first threat carrying ``type_code``, if any."""
        return next((t for t in self.threats if t.type == type_code), None)

    def first_product_status(self, type_code: int) -> ProductStatus | None:
        """Return the first product status carrying ``type_code``, if any."""
        return next((s for s in self.product_statuses if s.type == type_code), None)

    def first_note(self, title: str) -> Note | None:
        return next((n for n in self.notes if n.title == title), None)


class CvrfDocument(_CvrfModel):
    """A monthly Security Update document."""

    document_title: ValueField = Field(alias="DocumentTitle")
    document_type: ValueField = Field(default_factory=ValueField, alias="DocumentType")
    document_publisher: DocumentPublisher = Field(default_factory=DocumentPublisher, alias="DocumentPublisher")
    document_tracking: DocumentTracking = Field(alias="DocumentTracking")
    document_notes: list[DocumentNote] = Field(default_factory=list, alias="DocumentNotes")
    vulnerabilities: list[RawVulnerability] = Field(alias="Vulnerability")


def parse_document(payload: bytes | str | dict[str, Any]) -> CvrfDocument:
    """Decode a CVRF payload into a ``CvrfDocument``.

    Args:
        payload: Raw response body (bytes or text) or already-loaded JSON.

    Returns:
        The decoded document.

    Raises:
        DocumentDecodeError: If the payload is not JSON or a field outside
            ``ProductTree`` has the wrong shape.  The first offending field
            is named in the message.
    """
    try:
        if isinstance(payload, (bytes, bytearray, str)):
            return CvrfDocument.model_validate_json(payload)
        return CvrfDocument.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise DocumentDecodeError(field, first.get("msg", str(e))) from e
