"""
Exception types raised by the webslider → PDF pipeline.

Every fatal condition derives from WebsliderError so the CLI can turn it
into a one-line diagnostic and exit code 1.
"""

from __future__ import annotations


class WebsliderError(Exception):
    """Base class for pipeline failures."""


class ConfigError(WebsliderError):
    pass


class ArchiveNotFoundError(WebsliderError):
    def __init__(self, path):
        super().__init__(f"Archive not found: {path}")
        self.path = path


class ExtractionFailedError(WebsliderError):
    pass


class NoSlidesFoundError(WebsliderError):
    def __init__(self, slides_dir):
        super().__init__(f"No slides found in the archive (looked in {slides_dir})")
        self.slides_dir = slides_dir


class BrowserNotFoundError(WebsliderError):
    """No Chrome/Chromium binary was found; the message carries install hints."""

    def __init__(self, guidance: list[str]):
        lines = [
            "No Chrome/Chromium binary found.",
            "   Set CHROME_PATH environment variable or install Chrome/Chromium.",
        ]
        if guidance:
            lines.append("")
            lines.append("   Installation guides:")
            lines.extend(f"   - {g}" for g in guidance)
        super().__init__("\n".join(lines))
        self.guidance = guidance


class SlideUrlUnresolvedError(WebsliderError):
    """A slide had no reachable URL. Non-fatal: the renderer skips it."""

    def __init__(self, slide_id: str, tried: list[str]):
        super().__init__(f"Couldn't find index URL for slide '{slide_id}'")
        self.slide_id = slide_id
        self.tried = tried


class NoRenderableSlidesError(WebsliderError):
    def __init__(self, message: str = "No slides were rendered."):
        super().__init__(message)


class ImageReadFailedError(WebsliderError):
    pass


class OutputWriteFailedError(WebsliderError):
    pass
