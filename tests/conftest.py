"""Shared fixtures: build .webslider archives and JPEGs on the fly."""

import io
import json
import tarfile
from pathlib import Path

import pytest
from PIL import Image

SLIDE_HTML = "<!doctype html><html><body style='margin:0;background:{color}'><h1>{name}</h1></body></html>"


def write_jpeg(path: Path, width: int, height: int, color=(200, 30, 30)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (width, height), color=color).save(path, format="JPEG", quality=80)
    return path


def build_deck(root: Path, slide_names, manifest=None, index_name: str = "index.html") -> Path:
    """Lay out an extracted deck under *root*."""
    slides_dir = root / "slides"
    slides_dir.mkdir(parents=True, exist_ok=True)
    for name in slide_names:
        d = slides_dir / name
        d.mkdir()
        (d / index_name).write_text(SLIDE_HTML.format(color="#fff", name=name), encoding="utf-8")
    if manifest is not None:
        payload = manifest if isinstance(manifest, str) else json.dumps(manifest)
        (root / "manifest.json").write_text(payload, encoding="utf-8")
    return root


def pack_deck(deck_root: Path, archive_path: Path) -> Path:
    with tarfile.open(archive_path, "w") as tar:
        for p in sorted(deck_root.rglob("*")):
            tar.add(p, arcname=str(p.relative_to(deck_root)), recursive=False)
    return archive_path


@pytest.fixture
def make_archive(tmp_path):
    """Factory: make_archive(["0", "1"], manifest={...}) -> Path to .webslider."""
    counter = {"n": 0}

    def _make(slide_names, manifest=None, index_name="index.html") -> Path:
        counter["n"] += 1
        deck = build_deck(tmp_path / f"deck{counter['n']}", slide_names, manifest, index_name)
        return pack_deck(deck, tmp_path / f"deck{counter['n']}.webslider")

    return _make


@pytest.fixture
def evil_archive(tmp_path):
    """Archive with a member that climbs out of the extraction directory."""
    archive = tmp_path / "evil.webslider"
    data = b"pwned"
    with tarfile.open(archive, "w") as tar:
        info = tarfile.TarInfo("../escape.txt")
        info.size = len(data)
        tar.addfile(info, io.BytesIO(data))
    return archive
