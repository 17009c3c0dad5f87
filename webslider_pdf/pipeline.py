"""
End-to-end conversion: .webslider archive → PDF.

Stages run strictly in sequence:
  1. Stage archive into a scratch directory
  2. Resolve slide size from manifest.json
  3. Enumerate slide folders
  4. Render each slide to JPEG
  5. Compose the PDF

The scratch directory is removed on every exit path; the renderer owns
its browser and HTTP server and releases them before that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from webslider_pdf.archive import stage_archive, working_directory
from webslider_pdf.compose import compose_pdf
from webslider_pdf.config import RenderConfig
from webslider_pdf.manifest import SlideSize, resolve_slide_size
from webslider_pdf.render import render_slides
from webslider_pdf.slides import enumerate_slides

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    output_path: Path
    pages: int
    size_bytes: int
    slide_size: SlideSize
    skipped: tuple[str, ...] = ()


def convert(
    archive_path: Path,
    output_path: Path,
    config: Optional[RenderConfig] = None,
) -> ConversionResult:
    """Convert *archive_path* to a PDF at *output_path*.

    Raises:
        WebsliderError: any fatal stage failure. No PDF is written then.
    """
    config = config or RenderConfig()
    archive_path = Path(archive_path).resolve()
    output_path = Path(output_path).resolve()

    with working_directory() as tmp:
        staged = stage_archive(archive_path, tmp)
        size = resolve_slide_size(staged).size
        slide_ids = enumerate_slides(staged)

        rendered = render_slides(staged, slide_ids, size, config, image_dir=tmp)
        size_bytes = compose_pdf(rendered, output_path, dpi=config.dpi)

    done = {r.slide_id for r in rendered}
    result = ConversionResult(
        output_path=output_path,
        pages=len(rendered),
        size_bytes=size_bytes,
        slide_size=size,
        skipped=tuple(s for s in slide_ids if s not in done),
    )
    log.info("✅ PDF written to: %s", result.output_path)
    log.info("   Pages: %d", result.pages)
    log.info("   Size: %.2f MB", result.size_bytes / 1024 / 1024)
    if result.skipped:
        log.warning("   Skipped: %s", ", ".join(result.skipped))
    return result
