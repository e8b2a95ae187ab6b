"""Runtime configuration using Pydantic.

Every setting has a default, so a config file is optional.  When present,
``patchtuesday.yaml`` (or ``.yml`` / ``.json``) in the working directory is
picked up automatically; ``--config`` points at any other file.
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from . import __version__
from .models import resolve_product

CVRF_URL = "https://api.msrc.microsoft.com/cvrf/v2.0/cvrf/"
PARALLEL_REQUESTS = 12


class PatchTuesdayConfig(BaseModel):
    """Validated settings for fetching Security Update documents.

    Example YAML::

        cvrf_url: https://api.msrc.microsoft.com/cvrf/v2.0/cvrf/
        parallel_requests: 12
        timeout: 60
        default_product: Win11_22H2_x64

    Attributes:
        cvrf_url: Base endpoint; the period token is appended to it.
        parallel_requests: Maximum requests in flight when fetching years;
            may be lowered but never raised above ``PARALLEL_REQUESTS``.
        timeout: Total seconds per request.  ``None`` keeps the HTTP
            library's default.
        user_agent: ``User-Agent`` header sent with every request.
        default_product: Product filter applied when none is given on the
            command line (name, numeric ID, or ``All``).
    """

    cvrf_url: str = CVRF_URL
    parallel_requests: int = Field(default=PARALLEL_REQUESTS, ge=1, le=PARALLEL_REQUESTS)
    timeout: float | None = Field(default=None, gt=0)
    user_agent: str = f"patch-tuesday/{__version__}"
    default_product: str = "Win10_1809_x64"

    @field_validator("cvrf_url")
    @classmethod
    def _trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("cvrf_url must be an http(s) URL")
        return v if v.endswith("/") else v + "/"

    @field_validator("default_product")
    @classmethod
    def _known_product(cls, v: str) -> str:
        resolve_product(v)
        return v


def load_config(path: Path) -> PatchTuesdayConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        path: Path to the config file.

    Returns:
        Validated ``PatchTuesdayConfig`` instance.

    Raises:
        FileNotFoundError: if the file doesn't exist.
        pydantic.ValidationError: if content fails validation.
    """
    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    raw: Any
    if suffix in (".yaml", ".yml"):
        raw = yaml.safe_load(content) or {}
    elif suffix == ".json":
        raw = json.loads(content)
    else:
        try:
            raw = yaml.safe_load(content) or {}
        except yaml.YAMLError:
            raw = json.loads(content)

    return PatchTuesdayConfig.model_validate(raw)


def find_config() -> Path | None:
    """Find a config file in the working directory, preferring YAML.

    Returns:
        Path of the first existing config file, or None.
    """
    for name in ("patchtuesday.yaml", "patchtuesday.yml", "patchtuesday.json"):
        if Path(name).exists():
            return Path(name)
    return None
