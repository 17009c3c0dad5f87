"""
Manifest resolution — reads the optional ``manifest.json`` for slide size.

A missing or malformed manifest is not an error: resolution falls back to
the default canvas and records why in the returned ManifestResolution.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from webslider_pdf.config import DEFAULT_SLIDE_HEIGHT, DEFAULT_SLIDE_WIDTH, MANIFEST_NAME

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlideSize:
    width: int  # px
    height: int  # px

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


DEFAULT_SLIDE_SIZE = SlideSize(DEFAULT_SLIDE_WIDTH, DEFAULT_SLIDE_HEIGHT)


@dataclass(frozen=True)
class ManifestResolution:
    size: SlideSize
    from_manifest: bool
    # Why the default was used; None when the manifest was honored.
    fallback_reason: Optional[str] = None

    @classmethod
    def default(cls, reason: str) -> ManifestResolution:
        return cls(size=DEFAULT_SLIDE_SIZE, from_manifest=False, fallback_reason=reason)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value) -> bool:
    # json reads 1e400 as inf and accepts NaN; ints are always finite
    return not isinstance(value, float) or math.isfinite(value)


def parse_slide_size(payload) -> ManifestResolution:
    """Pick ``slideSize.width/height`` out of a decoded manifest payload."""
    if not isinstance(payload, dict):
        return ManifestResolution.default("manifest is not a JSON object")

    slide_size = payload.get("slideSize")
    if not isinstance(slide_size, dict):
        return ManifestResolution.default("manifest has no slideSize object")

    width = slide_size.get("width")
    height = slide_size.get("height")
    if not (_is_number(width) and _is_number(height)):
        return ManifestResolution.default("slideSize width/height are not numbers")
    if not (_is_finite(width) and _is_finite(height)):
        return ManifestResolution.default("slideSize width/height must be finite")

    size = SlideSize(int(width), int(height))
    if size.width <= 0 or size.height <= 0:
        return ManifestResolution.default("slideSize width/height must be at least 1px")

    return ManifestResolution(size=size, from_manifest=True)


def resolve_slide_size(staged_dir: Path) -> ManifestResolution:
    """Resolve the slide canvas for an extracted archive. Never raises."""
    manifest_path = Path(staged_dir) / MANIFEST_NAME
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        resolution = ManifestResolution.default("no manifest.json")
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        resolution = ManifestResolution.default(f"unreadable manifest.json ({e})")
    else:
        resolution = parse_slide_size(payload)

    if resolution.from_manifest:
        log.info("📐 Slide size from manifest: %s", resolution.size)
    else:
        log.info("📐 Using default slide size: %s", resolution.size)
        log.debug("Manifest ignored: %s", resolution.fallback_reason)
    return resolution
