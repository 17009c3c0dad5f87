"""
Chrome/Chromium discovery.

Candidate install locations live in per-OS tables so the search order is
data, not branching. ``find_browser`` walks the explicit override first,
then the table for the current platform, and returns the first path that
exists.
"""

from __future__ import annotations

import logging
import ntpath
import os
import sys
from pathlib import Path
from typing import Callable, Mapping, Optional

from webslider_pdf.errors import BrowserNotFoundError

log = logging.getLogger(__name__)

WINDOWS = "windows"
MACOS = "macos"
LINUX = "linux"

# Windows: (base folder key, path parts). Base folders come from the
# environment with the defaults below.
_WINDOWS_CANDIDATES: list[tuple[str, tuple[str, ...]]] = [
    # Google Chrome
    ("PROGRAMFILES", ("Google", "Chrome", "Application", "chrome.exe")),
    ("PROGRAMFILES(X86)", ("Google", "Chrome", "Application", "chrome.exe")),
    ("LOCALAPPDATA", ("Google", "Chrome", "Application", "chrome.exe")),
    # Chrome Canary
    ("LOCALAPPDATA", ("Google", "Chrome SxS", "Application", "chrome.exe")),
    # Chromium
    ("PROGRAMFILES", ("Chromium", "Application", "chrome.exe")),
    ("PROGRAMFILES(X86)", ("Chromium", "Application", "chrome.exe")),
    ("LOCALAPPDATA", ("Chromium", "Application", "chrome.exe")),
    # Microsoft Edge
    ("PROGRAMFILES", ("Microsoft", "Edge", "Application", "msedge.exe")),
    ("PROGRAMFILES(X86)", ("Microsoft", "Edge", "Application", "msedge.exe")),
    # Brave
    ("PROGRAMFILES", ("BraveSoftware", "Brave-Browser", "Application", "brave.exe")),
    ("PROGRAMFILES(X86)", ("BraveSoftware", "Brave-Browser", "Application", "brave.exe")),
    ("LOCALAPPDATA", ("BraveSoftware", "Brave-Browser", "Application", "brave.exe")),
]

# macOS: app bundle executables, checked in /Applications and ~/Applications.
_MACOS_APPS: list[tuple[str, bool]] = [
    # (bundle-relative executable, also look under ~/Applications)
    ("Google Chrome.app/Contents/MacOS/Google Chrome", True),
    ("Google Chrome Canary.app/Contents/MacOS/Google Chrome Canary", True),
    ("Chromium.app/Contents/MacOS/Chromium", True),
    ("Brave Browser.app/Contents/MacOS/Brave Browser", True),
    ("Microsoft Edge.app/Contents/MacOS/Microsoft Edge", False),
]
_MACOS_EXTRA = [
    # Homebrew
    "/opt/homebrew/bin/chromium",
    "/usr/local/bin/chromium",
]

_LINUX_CANDIDATES = [
    "/usr/bin/google-chrome",
    "/usr/bin/google-chrome-stable",
    "/usr/bin/chromium",
    "/usr/bin/chromium-browser",
    "/opt/google/chrome/chrome",
    "/opt/google/chrome/google-chrome",
    "/snap/bin/chromium",
    "/snap/bin/google-chrome",
    # Flatpak
    "/var/lib/flatpak/exports/bin/com.google.Chrome",
    "/var/lib/flatpak/exports/bin/org.chromium.Chromium",
    # Brave
    "/usr/bin/brave-browser",
    "/usr/bin/brave",
    "/opt/brave.com/brave/brave-browser",
]

INSTALL_GUIDANCE: dict[str, list[str]] = {
    WINDOWS: ["Download from: https://www.google.com/chrome/"],
    MACOS: [
        "Download from: https://www.google.com/chrome/",
        "Or via Homebrew: brew install --cask google-chrome",
    ],
    LINUX: [
        "Ubuntu/Debian: sudo apt install chromium-browser",
        "Fedora: sudo dnf install chromium",
        "Arch: sudo pacman -S chromium",
    ],
}


def current_platform(sys_platform: str = sys.platform) -> str:
    """Map ``sys.platform`` onto one of WINDOWS / MACOS / LINUX."""
    if sys_platform.startswith("win") or sys_platform == "cygwin":
        return WINDOWS
    if sys_platform == "darwin":
        return MACOS
    return LINUX


def _windows_paths(env: Mapping[str, str], home: Path) -> list[str]:
    bases = {
        "PROGRAMFILES": env.get("PROGRAMFILES") or r"C:\Program Files",
        "PROGRAMFILES(X86)": env.get("PROGRAMFILES(X86)") or r"C:\Program Files (x86)",
        "LOCALAPPDATA": env.get("LOCALAPPDATA") or str(home / "AppData" / "Local"),
    }
    return [ntpath.join(bases[key], *parts) for key, parts in _WINDOWS_CANDIDATES]


def _macos_paths(env: Mapping[str, str], home: Path) -> list[str]:
    paths: list[str] = []
    for bundle_exe, in_home in _MACOS_APPS:
        paths.append(f"/Applications/{bundle_exe}")
        if in_home:
            paths.append(str(home / "Applications" / bundle_exe))
    return paths + _MACOS_EXTRA


def _linux_paths(env: Mapping[str, str], home: Path) -> list[str]:
    return list(_LINUX_CANDIDATES)


_CANDIDATE_BUILDERS: dict[str, Callable[[Mapping[str, str], Path], list[str]]] = {
    WINDOWS: _windows_paths,
    MACOS: _macos_paths,
    LINUX: _linux_paths,
}


def candidate_paths(
    platform: str,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> list[str]:
    """Ordered well-known browser locations for *platform*."""
    env = os.environ if env is None else env
    home = Path.home() if home is None else home
    builder = _CANDIDATE_BUILDERS.get(platform, _linux_paths)
    return builder(env, home)


def _safe_exists(exists: Callable[[str], bool], path: str) -> bool:
    try:
        return bool(exists(path))
    except OSError:
        return False


def find_browser(
    override: Optional[str] = None,
    platform: str | None = None,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
    exists: Callable[[str], bool] = os.path.exists,
) -> str:
    """Return the first existing browser executable.

    Args:
        override: Explicit path (CHROME_PATH); checked before the table.
        platform: WINDOWS / MACOS / LINUX; defaults to the running OS.
        env: Environment used to expand Windows base folders.
        home: Home directory used for per-user installs.
        exists: Existence check, swappable for tests.

    Raises:
        BrowserNotFoundError: nothing on the list exists.
    """
    platform = platform or current_platform()

    if override:
        if _safe_exists(exists, override):
            log.info("🌍 Using browser: %s", override)
            return override
        log.warning("⚠️  Browser override not found: %s, searching default locations", override)

    for candidate in candidate_paths(platform, env, home):
        if _safe_exists(exists, candidate):
            log.info("🌍 Using browser: %s", candidate)
            return candidate
        log.debug("Browser candidate missing: %s", candidate)

    raise BrowserNotFoundError(INSTALL_GUIDANCE.get(platform, []))
