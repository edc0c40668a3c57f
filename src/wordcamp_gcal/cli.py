"""
Command-line interface: add calendar links to a WordCamp page and export.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import requests

from . import __version__
from .sites import PROFILES
from .wordcamp_gcal import WordCampGcal


def _output_path(output: str, fmt: str) -> Path:
    ext = {"html": ".html", "ics": ".ics"}[fmt]
    p = Path(output)
    return p if p.suffix else Path(output + ext)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Add 'Add to Google Calendar' links to a WordCamp schedule or session page.\n"
            "The page is fetched from URL unless --html-file points to a saved copy."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("url", help="Schedule or session page URL.")
    parser.add_argument(
        "--html-file",
        metavar="HTML_PATH",
        help="Read the page from a saved HTML file instead of fetching URL.",
    )
    parser.add_argument(
        "--site",
        choices=sorted(PROFILES),
        help="Force a site profile instead of matching URL.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="wordcamp_gcal",
        help="Output path (extension added if missing). Default: wordcamp_gcal",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["html", "ics", "links"],
        default="html",
        help="html: annotated page, ics: calendar file, links: print URLs. Default: html",
    )
    parser.add_argument(
        "--skip-existing",
        action="store_true",
        help="Do not add a link where one is already present (for re-processed pages).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    profile = PROFILES[args.site] if args.site else None
    try:
        page = WordCampGcal(args.url, profile=profile, skip_existing=args.skip_existing)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    html = None
    if args.html_file:
        p = Path(args.html_file)
        if not p.exists():
            print(f"Error: --html-file not found: {p}", file=sys.stderr)
            return 1
        html = p.read_text(encoding="utf-8")

    try:
        annotated = page.annotate(html)
    except requests.RequestException as e:
        print(f"Error fetching page: {e}", file=sys.stderr)
        return 1

    if args.format == "links":
        for link in annotated.links:
            print(f"{link.session.title}\t{link.url}")
        return 0

    out_path = _output_path(args.output, args.format)
    if args.format == "ics":
        page.write_ics(out_path)
    else:
        page.write_html(out_path)
    print(f"Added {len(annotated.links)} calendar link(s); wrote {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
