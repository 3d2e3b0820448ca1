#!/usr/bin/env python3
"""
Populate a static page offline.

Usage:
    python -m storefront populate index.html --catalog data/mock-cms-data.json
    python -m storefront populate detail_product.html --url "/detail_product.html?product=yami" -o out.html
"""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from storefront.app import Storefront
from storefront.config import get_settings
from storefront.context import build_context
from storefront.db import MemoryStore
from storefront.render.page import Page


def _populate(args: argparse.Namespace) -> int:
    settings = replace(get_settings(), catalog_url=args.catalog)
    page = Page.from_file(args.page, url=args.url or f"/{Path(args.page).name}")
    ctx = build_context(page, settings=settings, store=MemoryStore())
    storefront = Storefront(ctx)

    if not asyncio.run(storefront.load_catalog()):
        print(f"❌ Could not load catalog from {args.catalog}", file=sys.stderr)
        return 1

    kind = storefront.populate()
    storefront.init_cart()

    html = page.html()
    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        print(f"✅ {kind.value} page written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(html)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="storefront", description="Storefront page tools")
    sub = parser.add_subparsers(dest="command", required=True)

    populate = sub.add_parser("populate", help="Bind catalog data into a page shell")
    populate.add_argument("page", help="Path to the HTML page shell")
    populate.add_argument("--catalog", default=get_settings().catalog_url, help="Catalog JSON path or URL")
    populate.add_argument("--url", help="URL the page is served under (path and query)")
    populate.add_argument("-o", "--output", help="Write result here instead of stdout")

    args = parser.parse_args(argv)
    if args.command == "populate":
        return _populate(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
