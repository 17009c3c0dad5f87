"""
Command-line entry point.

Usage:
    webslider-pdf deck.webslider deck.pdf
    webslider-pdf deck.webslider out/deck.pdf --wait-ms 1000
    CHROME_PATH=/usr/bin/chromium webslider-pdf deck.webslider deck.pdf
"""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from pathlib import Path

from webslider_pdf.config import RenderConfig
from webslider_pdf.errors import WebsliderError
from webslider_pdf.pipeline import convert

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webslider-pdf",
        description="Convert a .webslider archive into a PDF by screenshotting each slide.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  CHROME_PATH      Custom path to Chrome/Chromium executable
  SLIDE_WAIT_MS    Milliseconds to wait for slide animations (default: 250)
  JPEG_QUALITY     JPEG quality 1-100 (default: 90)
""",
    )
    parser.add_argument("input", type=Path, help="Path to the .webslider archive file")
    parser.add_argument("output", type=Path, help="Path for the generated PDF file")
    parser.add_argument("--chrome-path", help="Browser executable (overrides CHROME_PATH)")
    parser.add_argument("--wait-ms", type=int, help="Settle delay per slide (overrides SLIDE_WAIT_MS)")
    parser.add_argument("--jpeg-quality", type=int, help="JPEG quality (overrides JPEG_QUALITY)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    # argparse prints usage to stderr and exits 2 on bad arguments
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    log.info("Platform: %s (%s)", sys.platform, platform.machine())
    log.info("Python version: %s", platform.python_version())

    try:
        config = RenderConfig.from_env().with_overrides(
            chrome_path=args.chrome_path,
            settle_ms=args.wait_ms,
            jpeg_quality=args.jpeg_quality,
        )
        convert(args.input, args.output, config)
    except WebsliderError as e:
        log.error("❌ %s", e)
        return EXIT_FAILURE
    except Exception as e:
        log.debug("Unhandled error", exc_info=True)
        log.error("💥 Fatal error: %s", e)
        return EXIT_FAILURE

    log.info("🎉 Done!")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
