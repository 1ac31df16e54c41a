"""Render a single colorblock PNG from the command line.

Usage (from backend/):
    python -m scripts.render_colorblock --statement "Text" [--heading "Title"] [--footer "Footer"] \
        [--align left|center|right] [--background-color "#4CAF50"] [--background-image URL] --out out.png

    python -m scripts.render_colorblock --statement-id <id> --out out.png

Useful for checking wrapping and zone placement without the editor. With
--ops, the canvas draw operations are printed as JSON instead of writing a PNG.
"""

from __future__ import annotations

import argparse
import hashlib
import json
import logging
import sys
from pathlib import Path

from domain.models import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_FONT_COLOR,
    DEFAULT_FOOTER_FONT_SIZE,
    DEFAULT_HEADING_FONT_SIZE,
    DEFAULT_STATEMENT_FONT_SIZE,
    RenderSpec,
    TextAlignment,
)
from services.compositor import render_colorblock
from services.drawing import RecordingSurface

logger = logging.getLogger("render_colorblock")


def _spec_from_statement_id(statement_id: str) -> RenderSpec:
    from db import SessionLocal, init_db
    from repositories import StatementsRepository

    init_db()
    with SessionLocal() as session:
        statement = StatementsRepository().get_statement(session, statement_id)
    if statement is None:
        raise SystemExit(f"Statement not found: {statement_id}")
    return RenderSpec.from_statement(statement)


def _spec_from_args(args: argparse.Namespace) -> RenderSpec:
    return RenderSpec(
        statement=args.statement or "",
        heading=args.heading,
        footer=args.footer,
        heading_font_size=args.heading_size,
        statement_font_size=args.statement_size,
        footer_font_size=args.footer_size,
        text_alignment=TextAlignment(args.align),
        background_color=args.background_color,
        background_image_url=args.background_image,
        heading_font_color=args.font_color,
        statement_font_color=args.font_color,
        footer_font_color=args.font_color,
    )


def main() -> int:
    if not logger.handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Render a 1080x1080 colorblock.")
    parser.add_argument("--statement-id", default=None, help="Render a stored statement instead of inline text.")
    parser.add_argument("--statement", default="", help="Statement text; use \\n for explicit line breaks.")
    parser.add_argument("--heading", default=None)
    parser.add_argument("--footer", default=None)
    parser.add_argument("--heading-size", type=int, default=DEFAULT_HEADING_FONT_SIZE)
    parser.add_argument("--statement-size", type=int, default=DEFAULT_STATEMENT_FONT_SIZE)
    parser.add_argument("--footer-size", type=int, default=DEFAULT_FOOTER_FONT_SIZE)
    parser.add_argument("--align", choices=[a.value for a in TextAlignment], default=TextAlignment.CENTER.value)
    parser.add_argument("--background-color", default=DEFAULT_BACKGROUND_COLOR)
    parser.add_argument("--background-image", default=None, help="Absolute URL or data: URI.")
    parser.add_argument("--font-color", default=DEFAULT_FONT_COLOR, help="Color for all three zones.")
    parser.add_argument("--out", default="colorblock.png")
    parser.add_argument("--ops", action="store_true", help="Print canvas draw ops as JSON instead of a PNG.")
    args = parser.parse_args()

    if args.statement_id:
        spec = _spec_from_statement_id(args.statement_id)
    else:
        # Shells pass "\n" literally; treat it as a line break.
        args.statement = args.statement.replace("\\n", "\n")
        spec = _spec_from_args(args)

    if args.ops:
        surface = RecordingSurface()
        render_colorblock(spec, surface=surface)
        json.dump(surface.ops, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    rendered = render_colorblock(spec)
    png = rendered.encode_png()
    out_path = Path(args.out).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(png)

    for zone in rendered.layout.zones:
        logger.info("%s: %s line(s) from y=%.1f", zone.zone.value, len(zone.lines), zone.start_y)
    if rendered.used_fallback:
        logger.info("background image unavailable (%s); used %s", rendered.background.reason, rendered.background.color)
    logger.info("wrote %s (%s bytes, sha=%s)", out_path, len(png), hashlib.sha256(png).hexdigest()[:12])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
