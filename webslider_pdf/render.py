"""
Slide rendering — serves the extracted deck locally and screenshots each
slide with a headless Chromium driven by Playwright.

Slides are visited one at a time, in order, on a single page. A slide
whose URL can't be found, or whose navigation times out, is skipped with
a warning; everything else aborts the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import quote

import requests
from playwright.sync_api import Page, sync_playwright
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from webslider_pdf.browser import find_browser
from webslider_pdf.config import RenderConfig
from webslider_pdf.errors import NoRenderableSlidesError, SlideUrlUnresolvedError
from webslider_pdf.manifest import SlideSize
from webslider_pdf.server import StaticServer, serve_directory

log = logging.getLogger(__name__)

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-software-rasterizer",
]


@dataclass(frozen=True)
class RenderedSlide:
    slide_id: str
    image_path: Path
    width: int  # px
    height: int  # px


def candidate_url_paths(slide_id: str) -> list[str]:
    """URL paths a slide may live at, most specific first."""
    s = quote(slide_id)
    return [
        f"/slides/{s}/index.html",
        f"/slides/{s}",
        f"/{s}/index.html",
        f"/{s}",
        f"/slides/{s}.html",
    ]


def resolve_slide_url(
    server: StaticServer,
    slide_id: str,
    session: requests.Session,
    timeout: float = 5.0,
) -> str:
    """Return the first candidate URL that answers 200.

    Raises:
        SlideUrlUnresolvedError: no candidate answered.
    """
    tried = candidate_url_paths(slide_id)
    for path in tried:
        url = server.url_for(path)
        try:
            resp = session.get(url, timeout=timeout)
        except requests.RequestException as e:
            log.debug("Probe %s failed: %s", url, e)
            continue
        with resp:
            if resp.status_code == 200:
                return url
        log.debug("Probe %s -> %d", url, resp.status_code)
    raise SlideUrlUnresolvedError(slide_id, tried)


def capture_slide(page: Page, url: str, image_path: Path, size: SlideSize, config: RenderConfig) -> Path:
    """Load *url*, let it settle, and save a JPEG clipped to the canvas."""
    page.goto(url, wait_until="networkidle", timeout=config.navigation_timeout_ms)
    page.wait_for_timeout(config.settle_ms)
    page.screenshot(
        path=str(image_path),
        type="jpeg",
        quality=config.jpeg_quality,
        clip={"x": 0, "y": 0, "width": size.width, "height": size.height},
    )
    return image_path


def image_name(index: int) -> str:
    return f"slide-{index:04d}.jpg"


def _render_on_page(
    page: Page,
    server: StaticServer,
    slide_ids: Sequence[str],
    size: SlideSize,
    config: RenderConfig,
    image_dir: Path,
) -> list[RenderedSlide]:
    rendered: list[RenderedSlide] = []
    total = len(slide_ids)

    with requests.Session() as session:
        for i, slide_id in enumerate(slide_ids):
            try:
                url = resolve_slide_url(server, slide_id, session, config.probe_timeout_s)
            except SlideUrlUnresolvedError as e:
                log.warning("⚠️  Skipping slide '%s' — couldn't find index URL", e.slide_id)
                continue

            log.info("🎨 Rendering slide %d/%d: %s", i + 1, total, slide_id)
            image_path = image_dir / image_name(i)
            try:
                capture_slide(page, url, image_path, size, config)
            except PlaywrightTimeoutError:
                log.warning(
                    "⚠️  Skipping slide '%s' — navigation timed out after %d ms",
                    slide_id, config.navigation_timeout_ms,
                )
                continue

            rendered.append(RenderedSlide(slide_id, image_path, size.width, size.height))

    return rendered


def render_slides(
    staged_dir: Path,
    slide_ids: Sequence[str],
    size: SlideSize,
    config: RenderConfig,
    image_dir: Path,
    browser_path: Optional[str] = None,
) -> list[RenderedSlide]:
    """
    Screenshot every slide in *slide_ids* order.

    Args:
        staged_dir: Extracted archive root, served over HTTP.
        slide_ids: Ordered slide folder names.
        size: Canvas size; used as viewport and screenshot clip.
        config: Run configuration (settle delay, JPEG quality, timeouts).
        image_dir: Where slide-NNNN.jpg files are written.
        browser_path: Browser executable; discovered when omitted.

    Returns:
        One RenderedSlide per captured slide, in slide order.

    Raises:
        BrowserNotFoundError: no browser to launch.
        NoRenderableSlidesError: every slide was skipped.
    """
    browser_path = browser_path or find_browser(config.chrome_path)
    image_dir.mkdir(parents=True, exist_ok=True)

    with serve_directory(staged_dir) as server, sync_playwright() as p:
        browser = p.chromium.launch(
            executable_path=browser_path,
            headless=True,
            args=CHROMIUM_ARGS,
        )
        try:
            page = browser.new_page(viewport={"width": size.width, "height": size.height})
            rendered = _render_on_page(page, server, slide_ids, size, config, image_dir)
        finally:
            browser.close()

    if not rendered:
        raise NoRenderableSlidesError()
    return rendered
