"""
Archive staging — unpacks a .webslider (tar) archive into a scratch directory.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Iterator

from webslider_pdf.config import WORKDIR_PREFIX
from webslider_pdf.errors import ArchiveNotFoundError, ExtractionFailedError

log = logging.getLogger(__name__)


@contextlib.contextmanager
def working_directory(prefix: str = WORKDIR_PREFIX) -> Iterator[Path]:
    """Create a private temp directory and remove it (best-effort) on exit."""
    tmp = Path(tempfile.mkdtemp(prefix=prefix))
    log.debug("Working directory: %s", tmp)
    try:
        yield tmp
    finally:
        try:
            shutil.rmtree(tmp)
        except OSError as e:
            log.warning("⚠️  Could not clean up temp directory %s: %s", tmp, e)


def stage_archive(source: Path, workdir: Path) -> Path:
    """
    Extract *source* into ``workdir/project`` and return that directory.

    Raises:
        ArchiveNotFoundError: *source* cannot be stat'ed.
        ExtractionFailedError: not a tar archive, corrupt, or a member would
            land outside the destination.
    """
    source = Path(source)
    try:
        source.stat()
    except OSError:
        raise ArchiveNotFoundError(source) from None

    dest = workdir / "project"
    dest.mkdir(parents=True, exist_ok=True)

    log.info("📦 Extracting archive to %s", dest)
    try:
        with tarfile.open(source, mode="r:*") as tar:
            tar.extractall(dest, filter="data")
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ExtractionFailedError(f"Failed to extract tar: {e}") from e

    return dest
