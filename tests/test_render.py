"""Tests for slide URL resolution and the capture loop (Playwright mocked)."""

import contextlib
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from conftest import build_deck, write_jpeg
from webslider_pdf import render
from webslider_pdf.config import RenderConfig
from webslider_pdf.errors import NoRenderableSlidesError, SlideUrlUnresolvedError
from webslider_pdf.manifest import SlideSize
from webslider_pdf.render import (
    CHROMIUM_ARGS,
    candidate_url_paths,
    render_slides,
    resolve_slide_url,
)
from webslider_pdf.server import serve_directory


def test_candidate_url_paths_order():
    assert candidate_url_paths("3") == [
        "/slides/3/index.html",
        "/slides/3",
        "/3/index.html",
        "/3",
        "/slides/3.html",
    ]


def test_candidate_url_paths_are_quoted():
    assert candidate_url_paths("my slide")[0] == "/slides/my%20slide/index.html"


def test_resolve_prefers_index_html(tmp_path):
    build_deck(tmp_path, ["0"])
    with serve_directory(tmp_path) as server, requests.Session() as session:
        url = resolve_slide_url(server, "0", session)
    assert url.endswith("/slides/0/index.html")


def test_resolve_falls_back_to_directory_url(tmp_path):
    # only index.htm: /slides/a/index.html 404s, the bare directory URL works
    build_deck(tmp_path, ["a"], index_name="index.htm")
    with serve_directory(tmp_path) as server, requests.Session() as session:
        url = resolve_slide_url(server, "a", session)
    assert url.endswith("/slides/a")


def test_resolve_flat_html_file(tmp_path):
    (tmp_path / "slides").mkdir()
    (tmp_path / "slides" / "intro.html").write_text("<h1>intro</h1>")
    with serve_directory(tmp_path) as server, requests.Session() as session:
        url = resolve_slide_url(server, "intro", session)
    assert url.endswith("/slides/intro.html")


def test_resolve_unreachable_raises(tmp_path):
    with serve_directory(tmp_path) as server, requests.Session() as session:
        with pytest.raises(SlideUrlUnresolvedError) as excinfo:
            resolve_slide_url(server, "ghost", session)
    assert excinfo.value.slide_id == "ghost"
    assert len(excinfo.value.tried) == 5


@pytest.fixture
def fake_playwright():
    """Patch sync_playwright; screenshots write real JPEGs to the requested path."""
    page = MagicMock()
    page.visited = []

    def goto(url, **kwargs):
        page.visited.append(url)

    def screenshot(path, clip, **kwargs):
        write_jpeg(Path(path), clip["width"], clip["height"])

    page.goto.side_effect = goto
    page.screenshot.side_effect = screenshot

    with patch("webslider_pdf.render.sync_playwright") as sync_playwright:
        p = sync_playwright.return_value.__enter__.return_value
        browser = p.chromium.launch.return_value
        browser.new_page.return_value = page
        yield p, browser, page


def test_render_slides_in_order(tmp_path, fake_playwright):
    p, browser, page = fake_playwright
    staged = build_deck(tmp_path / "project", ["0", "1", "2"])
    config = RenderConfig(settle_ms=123, jpeg_quality=55)

    rendered = render_slides(staged, ("0", "1", "2"), SlideSize(800, 600), config, tmp_path, "/fake/chrome")

    assert [r.slide_id for r in rendered] == ["0", "1", "2"]
    assert [r.image_path.name for r in rendered] == ["slide-0000.jpg", "slide-0001.jpg", "slide-0002.jpg"]
    assert all((r.width, r.height) == (800, 600) for r in rendered)
    assert all(r.image_path.is_file() for r in rendered)
    assert [u.rsplit("/slides/", 1)[1] for u in page.visited] == ["0/index.html", "1/index.html", "2/index.html"]

    p.chromium.launch.assert_called_once_with(executable_path="/fake/chrome", headless=True, args=CHROMIUM_ARGS)
    browser.new_page.assert_called_once_with(viewport={"width": 800, "height": 600})
    page.wait_for_timeout.assert_called_with(123)
    _, kwargs = page.screenshot.call_args
    assert kwargs["type"] == "jpeg"
    assert kwargs["quality"] == 55
    assert kwargs["clip"] == {"x": 0, "y": 0, "width": 800, "height": 600}
    _, goto_kwargs = page.goto.call_args
    assert goto_kwargs == {"wait_until": "networkidle", "timeout": 30000}
    browser.close.assert_called_once()


def test_out_of_range_quality_is_passed_through(tmp_path, fake_playwright):
    _, _, page = fake_playwright
    staged = build_deck(tmp_path / "project", ["0"])
    render_slides(staged, ("0",), SlideSize(320, 240), RenderConfig(jpeg_quality=150), tmp_path, "/fake/chrome")
    assert page.screenshot.call_args.kwargs["quality"] == 150


def test_unresolved_slide_is_skipped(tmp_path, fake_playwright, caplog):
    staged = build_deck(tmp_path / "project", ["0", "2"])
    rendered = render_slides(staged, ("0", "1", "2"), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")

    assert [r.slide_id for r in rendered] == ["0", "2"]
    # image names follow slide position, not success count
    assert [r.image_path.name for r in rendered] == ["slide-0000.jpg", "slide-0002.jpg"]
    assert "Skipping slide '1'" in caplog.text


def test_navigation_timeout_skips_slide(tmp_path, fake_playwright, caplog):
    _, _, page = fake_playwright
    visited = []

    def goto(url, **kwargs):
        visited.append(url)
        if "/slides/1/" in url:
            raise PlaywrightTimeoutError("Timeout 30000ms exceeded.")

    page.goto.side_effect = goto
    staged = build_deck(tmp_path / "project", ["0", "1", "2"])

    rendered = render_slides(staged, ("0", "1", "2"), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")

    assert [r.slide_id for r in rendered] == ["0", "2"]
    assert len(visited) == 3
    assert "navigation timed out" in caplog.text


def test_no_rendered_slides_raises_and_closes_browser(tmp_path, fake_playwright):
    _, browser, _ = fake_playwright
    staged = build_deck(tmp_path / "project", [])
    with pytest.raises(NoRenderableSlidesError):
        render_slides(staged, ("0", "1"), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")
    browser.close.assert_called_once()


def test_browser_closed_when_capture_fails(tmp_path, fake_playwright):
    _, browser, page = fake_playwright
    page.screenshot.side_effect = RuntimeError("renderer crashed")
    staged = build_deck(tmp_path / "project", ["0"])
    with pytest.raises(RuntimeError, match="renderer crashed"):
        render_slides(staged, ("0",), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")
    browser.close.assert_called_once()


def test_browser_discovered_from_config(tmp_path, fake_playwright):
    p, _, _ = fake_playwright
    staged = build_deck(tmp_path / "project", ["0"])
    with patch("webslider_pdf.render.find_browser", return_value="/found/chrome") as find:
        render_slides(staged, ("0",), SlideSize(320, 240), RenderConfig(chrome_path="/env/chrome"), tmp_path)
    find.assert_called_once_with("/env/chrome")
    assert p.chromium.launch.call_args.kwargs["executable_path"] == "/found/chrome"


@pytest.fixture
def teardown_log():
    """Record when the HTTP listener is torn down, alongside browser.close."""
    events = []
    servers = []
    real_serve = render.serve_directory

    @contextlib.contextmanager
    def recording_serve(root, port=0):
        try:
            with real_serve(root, port) as server:
                servers.append(server)
                yield server
        finally:
            events.append("server.shutdown")

    with patch("webslider_pdf.render.serve_directory", recording_serve):
        yield events, servers


def test_listener_stopped_after_browser_on_capture_failure(tmp_path, fake_playwright, teardown_log):
    _, browser, page = fake_playwright
    events, servers = teardown_log
    browser.close.side_effect = lambda: events.append("browser.close")
    page.screenshot.side_effect = RuntimeError("renderer crashed")
    staged = build_deck(tmp_path / "project", ["0"])

    with pytest.raises(RuntimeError):
        render_slides(staged, ("0",), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")

    assert events == ["browser.close", "server.shutdown"]
    assert not servers[0].thread.is_alive()
    with pytest.raises(requests.ConnectionError):
        requests.get(servers[0].url_for("/"), timeout=1)


def test_listener_stopped_when_nothing_renders(tmp_path, fake_playwright, teardown_log):
    _, browser, _ = fake_playwright
    events, servers = teardown_log
    browser.close.side_effect = lambda: events.append("browser.close")
    staged = build_deck(tmp_path / "project", [])

    with pytest.raises(NoRenderableSlidesError):
        render_slides(staged, ("0",), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")

    assert events == ["browser.close", "server.shutdown"]
    assert not servers[0].thread.is_alive()


def test_listener_stopped_after_successful_run(tmp_path, fake_playwright, teardown_log):
    _, browser, _ = fake_playwright
    events, servers = teardown_log
    browser.close.side_effect = lambda: events.append("browser.close")
    staged = build_deck(tmp_path / "project", ["0"])

    render_slides(staged, ("0",), SlideSize(320, 240), RenderConfig(), tmp_path, "/fake/chrome")

    assert events == ["browser.close", "server.shutdown"]
    assert not servers[0].thread.is_alive()
