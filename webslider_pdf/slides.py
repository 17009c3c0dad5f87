"""
Slide enumeration — finds slide folders under ``slides/`` in page order.

Numerically-named folders win and are ordered by value (``2`` before
``10``). Only when there are none does any folder holding an
``index.html`` count, ordered by name.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from webslider_pdf.config import SLIDE_INDEX_NAME, SLIDES_DIR_NAME
from webslider_pdf.errors import NoSlidesFoundError

log = logging.getLogger(__name__)

_NUMERIC_RE = re.compile(r"[0-9]+")


def _list_subdirs(root: Path) -> list[Path]:
    """Immediate subdirectories of *root*; a listing failure counts as none."""
    try:
        return [p for p in root.iterdir() if p.is_dir()]
    except OSError:
        return []


def numeric_slide_folders(slides_dir: Path) -> list[str]:
    names = [p.name for p in _list_subdirs(slides_dir) if _NUMERIC_RE.fullmatch(p.name)]
    return sorted(names, key=lambda n: (int(n), n))


def indexed_slide_folders(slides_dir: Path) -> list[str]:
    names = [p.name for p in _list_subdirs(slides_dir) if (p / SLIDE_INDEX_NAME).is_file()]
    return sorted(names)


def enumerate_slides(staged_dir: Path) -> tuple[str, ...]:
    """Return the ordered slide ids for an extracted archive.

    Raises:
        NoSlidesFoundError: neither strategy found a slide.
    """
    slides_dir = Path(staged_dir) / SLIDES_DIR_NAME

    slide_ids = numeric_slide_folders(slides_dir)
    if not slide_ids:
        log.warning("⚠️  No numeric slide folders found, scanning for alternatives...")
        slide_ids = indexed_slide_folders(slides_dir)

    if not slide_ids:
        raise NoSlidesFoundError(slides_dir)

    log.info("📊 Found %d slide(s)", len(slide_ids))
    return tuple(slide_ids)
