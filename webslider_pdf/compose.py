"""Assemble rendered slide JPEGs into a single PDF file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import img2pdf

from webslider_pdf.config import PDF_DPI
from webslider_pdf.errors import ImageReadFailedError, NoRenderableSlidesError, OutputWriteFailedError
from webslider_pdf.render import RenderedSlide

log = logging.getLogger(__name__)


def px_to_points(px: float, dpi: int = PDF_DPI) -> float:
    return px * 72 / dpi


def _page_layout(slides: Sequence[RenderedSlide], dpi: int):
    """img2pdf layout function giving each page its slide's canvas size.

    img2pdf calls the layout function once per embedded image, in order,
    so pages are matched to slides by position.
    """
    sizes = iter([(px_to_points(s.width, dpi), px_to_points(s.height, dpi)) for s in slides])

    def layout(imgwidthpx, imgheightpx, ndpi):
        width_pt, height_pt = next(sizes)
        # full bleed: image box == page box
        return width_pt, height_pt, width_pt, height_pt

    return layout


def compose_pdf(slides: Sequence[RenderedSlide], output_path: Path, dpi: int = PDF_DPI) -> int:
    """Write one full-bleed page per slide to *output_path*.

    Args:
        slides: Rendered slides in page order.
        output_path: Destination PDF; parent directories are created.
        dpi: Pixel density used to convert canvas pixels to points.

    Returns:
        Size of the written PDF in bytes.

    Raises:
        NoRenderableSlidesError: *slides* is empty.
        ImageReadFailedError: an image is missing or not a usable JPEG.
        OutputWriteFailedError: the PDF can't be written.
    """
    if not slides:
        raise NoRenderableSlidesError("No slides to compose.")

    log.info("📄 Composing PDF...")
    images: list[bytes] = []
    for s in slides:
        try:
            images.append(Path(s.image_path).read_bytes())
        except OSError as e:
            raise ImageReadFailedError(f"Cannot read slide image {s.image_path}: {e}") from e

    try:
        pdf_bytes = img2pdf.convert(images, layout_fun=_page_layout(slides, dpi))
    except (img2pdf.ImageOpenError, img2pdf.PdfTooLargeError, ValueError, OSError) as e:
        raise ImageReadFailedError(f"Cannot embed slide images: {e}") from e

    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(pdf_bytes)
    except OSError as e:
        raise OutputWriteFailedError(f"Cannot write PDF to {output_path}: {e}") from e

    return len(pdf_bytes)
