"""Unit tests for patchtuesday.report — Jinja2 rendering."""

import pytest

from patchtuesday.models import Severity, Vulnerability
from patchtuesday.report import (
    format_vulnerability,
    render_markdown,
    render_text,
    risk_sort_key,
)


@pytest.fixture
def full() -> Vulnerability:
    return Vulnerability(
        title="Windows Kernel Remote Code Execution Vulnerability",
        cve="CVE-2021-1234",
        severity=Severity.CRITICAL,
        cvss=8.8,
        impact="Remote Code Execution",
        description="A remote code execution vulnerability exists.",
        acknowledgements="Jane Doe, John Roe",
        public=False,
        exploited=True,
        affected_products=("11569",),
    )


@pytest.fixture
def bare() -> Vulnerability:
    return Vulnerability(title="Untitled", cve="CVE-2021-0002")


# ── format_vulnerability ─────────────────────────────────────────────────────


class TestFormatVulnerability:
    def test_all_fields(self, full):
        assert format_vulnerability(full) == (
            "Windows Kernel Remote Code Execution Vulnerability\n"
            "CVE-2021-1234\n"
            "Severity: Critical\n"
            "CVSS: 8.8\n"
            "Impact: Remote Code Execution\n"
            "Description: A remote code execution vulnerability exists.\n"
            "Publicly Disclosed: false\n"
            "Exploited: true\n"
            "Acknowledgments: Jane Doe, John Roe\n"
            "--------"
        )

    def test_optional_lines_omitted(self, bare):
        assert format_vulnerability(bare) == (
            "Untitled\n"
            "CVE-2021-0002\n"
            "Severity: \n"
            "Impact: \n"
            "Publicly Disclosed: false\n"
            "Exploited: false\n"
            "--------"
        )

    def test_html_not_escaped(self, bare):
        from dataclasses import replace

        out = format_vulnerability(replace(bare, description="<p>x & y</p>"))
        assert "Description: <p>x & y</p>" in out


class TestRenderText:
    def test_blocks_joined(self, full, bare):
        out = render_text([full, bare])
        assert out.count("--------") == 2
        assert out.index("CVE-2021-1234") < out.index("CVE-2021-0002")

    def test_empty(self):
        assert render_text([]) == ""


# ── render_markdown ──────────────────────────────────────────────────────────


class TestRenderMarkdown:
    def test_summary_counts(self, full, bare):
        md = render_markdown([full, bare], periods=["2021-Jan"])
        assert "# Microsoft Security Updates" in md
        assert "Periods: 2021-Jan" in md
        assert "| Vulnerabilities | 2 |" in md
        assert "| Exploited | 1 |" in md
        assert "| Publicly disclosed | 0 |" in md
        assert "| Critical | 1 |" in md
        assert "| None | 1 |" in md

    def test_rows(self, full):
        md = render_markdown([full])
        assert "| CVE-2021-1234 | Windows Kernel Remote Code Execution Vulnerability | Critical | 8.8 |" in md

    def test_pipe_escaped(self, bare):
        from dataclasses import replace

        md = render_markdown([replace(bare, title="A | B")])
        assert "A \\| B" in md

    def test_riskiest_first(self, full, bare):
        md = render_markdown([bare, full])
        assert md.index("CVE-2021-1234") < md.index("CVE-2021-0002")

    def test_empty(self):
        md = render_markdown([])
        assert "No vulnerabilities matched." in md
        assert "| Vulnerabilities | 0 |" in md


class TestRiskSortKey:
    def test_exploited_beats_cvss(self, full, bare):
        from dataclasses import replace

        high_cvss = replace(bare, cvss=10.0)
        assert risk_sort_key(full) > risk_sort_key(high_cvss)

    def test_missing_cvss(self, bare):
        assert risk_sort_key(bare) == 0.0
