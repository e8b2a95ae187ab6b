"""Shared fixtures: CVRF payloads shaped like the MSRC API responses."""

import json
from typing import Any, Callable

import pytest

DEFAULT_TITLE = "Windows Kernel Remote Code Execution Vulnerability"
DEFAULT_EXPLOITABILITY = "Publicly Disclosed:No;Exploited:Yes;Latest Software Release:Exploitation Detected"


def build_raw_vulnerability(
    cve: str = "CVE-2021-1234",
    title: str | None = DEFAULT_TITLE,
    severity: str | None = "Critical",
    impact: str | None = "Remote Code Execution",
    exploitability: str | None = DEFAULT_EXPLOITABILITY,
    products: tuple[str, ...] = ("11569",),
    acknowledgments: tuple[tuple[str | None, ...], ...] = (("Jane Doe", "John Roe"),),
    cvss: tuple[float, ...] = (8.8,),
    description: str | None = "<p>A remote code execution vulnerability exists.</p>",
) -> dict[str, Any]:
    """Build one ``Vulnerability`` entry as it appears on the wire."""
    threats: list[dict[str, Any]] = []
    if impact is not None:
        threats.append({"Description": {"Value": impact}, "ProductID": list(products), "Type": 0, "DateSpecified": False})
    if exploitability is not None:
        threats.append({"Description": {"Value": exploitability}, "Type": 1, "DateSpecified": False})
    if severity is not None:
        threats.append({"Description": {"Value": severity}, "ProductID": list(products), "Type": 3, "DateSpecified": False})

    notes: list[dict[str, Any]] = [
        {"Title": "FAQ", "Type": 4, "Ordinal": "10", "Value": "<p>How could an attacker exploit this?</p>"},
    ]
    if description is not None:
        notes.append({"Title": "Description", "Type": 2, "Ordinal": "20", "Value": description})

    return {
        "Title": {"Value": title},
        "Notes": notes,
        "DiscoveryDateSpecified": False,
        "ReleaseDateSpecified": False,
        "CVE": cve,
        "ProductStatuses": [
            {"ProductID": ["12086"], "Type": 0},
            {"ProductID": list(products), "Type": 3},
        ],
        "Threats": threats,
        "CVSSScoreSets": [
            {
                "BaseScore": score,
                "TemporalScore": round(score - 0.5, 1),
                "Vector": "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H/E:F/RL:O/RC:C",
                "ProductID": list(products),
            }
            for score in cvss
        ],
        "Remediations": [
            {
                "Description": {"Value": "5009557"},
                "URL": "https://catalog.update.microsoft.com/v7/site/Search.aspx?q=KB5009557",
                "ProductID": list(products),
                "Type": 2,
                "DateSpecified": False,
                "AffectedFiles": [],
                "RestartRequired": {"Value": "Yes"},
                "SubType": "Security Update",
                "FixedBuild": "10.0.17763.2452",
            }
        ],
        "Acknowledgments": [{"Name": [{"Value": n} for n in names], "URL": [""]} for names in acknowledgments],
        "Ordinal": "1",
        "RevisionHistory": [
            {"Number": "1.0", "Date": "2021-01-12T08:00:00", "Description": {"Value": "<p>Information published.</p>"}}
        ],
    }


def build_document(vulnerabilities: list[dict[str, Any]], alias: str = "2021-Jan") -> dict[str, Any]:
    """Build a whole CVRF document around ``vulnerabilities``."""
    return {
        "DocumentTitle": {"Value": f"{alias} Security Updates"},
        "DocumentType": {"Value": "Security Update"},
        "DocumentPublisher": {
            "ContactDetails": {"Value": "secure@microsoft.com"},
            "IssuingAuthority": {"Value": "The Microsoft Security Response Center (MSRC)."},
            "Type": 0,
        },
        "DocumentTracking": {
            "Identification": {"ID": {"Value": alias}, "Alias": {"Value": alias}},
            "Status": 2,
            "Version": "1.0",
            "RevisionHistory": [{"Number": "1.0", "Date": "2021-01-12T08:00:00", "Description": {"Value": "Initial"}}],
            "InitialReleaseDate": "2021-01-12T08:00:00",
            "CurrentReleaseDate": "2021-01-12T08:00:00",
        },
        "DocumentNotes": [
            {"Title": "Release Notes", "Audience": "Public", "Type": 1, "Ordinal": "1", "Value": "<p>Notes</p>"}
        ],
        # Shape intentionally wrong: this branch is never parsed.
        "ProductTree": {"Branch": "not-a-list", "FullProductName": [{"ProductID": 11569}]},
        "Vulnerability": vulnerabilities,
    }


@pytest.fixture
def make_raw_vulnerability() -> Callable[..., dict[str, Any]]:
    return build_raw_vulnerability


@pytest.fixture
def make_document() -> Callable[..., dict[str, Any]]:
    return build_document


@pytest.fixture
def sample_cvrf() -> dict[str, Any]:
    """A two-vulnerability January 2021 document."""
    return build_document(
        [
            build_raw_vulnerability(),
            build_raw_vulnerability(
                cve="CVE-2021-1700",
                title="Windows Spoofing Vulnerability",
                severity="Important",
                impact="Spoofing",
                exploitability="Publicly Disclosed:Yes;Exploited:No;Latest Software Release:Exploitation Less Likely",
                products=("12086",),
                acknowledgments=(("Alice", None),),
                cvss=(),
                description=None,
            ),
        ]
    )


@pytest.fixture
def sample_cvrf_bytes(sample_cvrf: dict[str, Any]) -> bytes:
    return json.dumps(sample_cvrf).encode()
