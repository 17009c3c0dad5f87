"""
Run configuration for the webslider → PDF pipeline.

Everything the pipeline reads from the process environment is collected
here once, at startup, into a RenderConfig that gets passed down to each
stage explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from webslider_pdf.errors import ConfigError

# ── Environment variables ─────────────────────────────────────────────
ENV_CHROME_PATH = "CHROME_PATH"
ENV_SLIDE_WAIT_MS = "SLIDE_WAIT_MS"
ENV_JPEG_QUALITY = "JPEG_QUALITY"

# ── Defaults ──────────────────────────────────────────────────────────
DEFAULT_SLIDE_WIDTH = 1280
DEFAULT_SLIDE_HEIGHT = 720
DEFAULT_SETTLE_MS = 250
DEFAULT_JPEG_QUALITY = 90
NAVIGATION_TIMEOUT_MS = 30000
PROBE_TIMEOUT_S = 5.0
PDF_DPI = 96

# ── Archive layout ────────────────────────────────────────────────────
MANIFEST_NAME = "manifest.json"
SLIDES_DIR_NAME = "slides"
SLIDE_INDEX_NAME = "index.html"
WORKDIR_PREFIX = "webslider-"


@dataclass(frozen=True)
class RenderConfig:
    chrome_path: Optional[str] = None
    settle_ms: int = DEFAULT_SETTLE_MS
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS
    probe_timeout_s: float = PROBE_TIMEOUT_S
    dpi: int = PDF_DPI

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RenderConfig:
        """Build a config from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            chrome_path=env.get(ENV_CHROME_PATH) or None,
            settle_ms=_env_int(env, ENV_SLIDE_WAIT_MS, DEFAULT_SETTLE_MS),
            jpeg_quality=_env_int(env, ENV_JPEG_QUALITY, DEFAULT_JPEG_QUALITY),
        )

    def with_overrides(self, **overrides) -> RenderConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
