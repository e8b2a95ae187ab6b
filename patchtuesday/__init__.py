"""Patch Tuesday — Microsoft Security Update (CVRF) reader.

This package provides the core logic for downloading Microsoft's monthly
Security Update documents, flattening their vulnerabilities, and filtering
and reporting on them.
"""

__version__ = "0.3.0"
