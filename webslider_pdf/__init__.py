"""
webslider-pdf

Converts a .webslider slide-deck archive into a PDF, one page per slide,
by screenshotting each slide in headless Chromium.
"""

from webslider_pdf.config import RenderConfig
from webslider_pdf.errors import WebsliderError
from webslider_pdf.manifest import SlideSize
from webslider_pdf.pipeline import ConversionResult, convert

__all__ = [
    "RenderConfig",
    "WebsliderError",
    "SlideSize",
    "ConversionResult",
    "convert",
]
