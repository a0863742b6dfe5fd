#!/usr/bin/env python3
"""One-off script to render an application PDF from a JSON file of form values."""

import argparse
import asyncio
import json
import os
import sys
from dotenv import load_dotenv

HERE = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(HERE, "backend", ".env"))
sys.path.insert(0, os.path.join(HERE, "backend"))

import fitz

from app.pdf.assembler import render_application_pdf
from app.pdf.surface import BUILTIN_FONTS
from app.services.fonts import build_font_cache, load_font_set
from app.services.intake import parse_application


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("form", help="JSON object with the form field names as keys")
    parser.add_argument("-o", "--output", default="application.pdf")
    parser.add_argument("--photo", help="image file to place in the photo slot")
    parser.add_argument("--builtin-fonts", action="store_true",
                        help="use Helvetica instead of Sarabun (no Thai glyphs, no download)")
    args = parser.parse_args()

    with open(args.form, encoding="utf-8") as f:
        form = {k: "" if v is None else str(v) for k, v in json.load(f).items()}

    photo = None
    if args.photo:
        with open(args.photo, "rb") as f:
            photo = f.read()

    # the photo check only matters for web submissions
    result = parse_application(form, has_photo=True)
    if not result.ok:
        print(f"Rejected: {result.error.kind.value} - {result.error.message}")
        if result.error.fields:
            print(f"  fields: {', '.join(result.error.fields)}")
        sys.exit(1)

    fonts = BUILTIN_FONTS if args.builtin_fonts else asyncio.run(load_font_set(build_font_cache()))
    document = render_application_pdf(result.application, photo, fonts)

    with open(args.output, "wb") as f:
        f.write(document)

    with fitz.open(stream=document, filetype="pdf") as doc:
        pages = doc.page_count
    print(f"Application {result.application.id}: {pages} page(s), {len(document)} bytes -> {args.output}")


if __name__ == "__main__":
    main()
