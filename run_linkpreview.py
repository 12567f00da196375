#!/usr/bin/env python3
"""
Command-line script to render link previews.

Fetches each URL (or reads its cached metadata), then prints the rendered
HTML fragment. With --json, prints the extracted metadata records instead.

Usage:
    python run_linkpreview.py https://example.com
    python run_linkpreview.py https://a.test https://b.test --cache-dir _cache
    python run_linkpreview.py https://example.com --json -o previews.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Load .env file automatically (LINKPREVIEW_* settings)
from dotenv import load_dotenv
load_dotenv()

from linkpreview.config import LinkPreviewConfig
from linkpreview.exceptions import LinkPreviewError
from linkpreview.logger import setup_logger
from linkpreview.main import LinkPreviewResolver


def main():
    parser = argparse.ArgumentParser(description="Render link preview HTML for URLs")
    parser.add_argument("urls", nargs="+", help="URLs to preview")
    parser.add_argument("--cache-dir", help="Metadata cache directory (must already exist)")
    parser.add_argument("--includes-dir", help="Directory holding linkpreview.html / linkpreview_nog.html")
    parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")
    parser.add_argument("--json", action="store_true", help="Output metadata records instead of HTML")
    parser.add_argument("--output", "-o", help="Output file (default: print to stdout)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    setup_logger(level=logging.DEBUG if args.verbose else logging.INFO)

    # Command-line flags override LINKPREVIEW_* environment settings
    settings = LinkPreviewConfig.from_env().model_dump()
    if args.cache_dir:
        settings["cache_dir"] = args.cache_dir
    if args.includes_dir:
        settings["includes_dir"] = args.includes_dir
    if args.timeout is not None:
        settings["timeout"] = args.timeout
    config = LinkPreviewConfig(**settings)

    resolver = LinkPreviewResolver(config=config)

    results = []
    failures = 0

    for url in args.urls:
        print(f"Previewing: {url}", file=sys.stderr)

        # One bad URL shouldn't stop the rest of the batch
        try:
            if args.json:
                record = resolver.get_properties(url)
                results.append({"url": url, "status": "success", "record": record.model_dump()})
            else:
                results.append(resolver.resolve(url))
            print("  ✓ done", file=sys.stderr)
        except LinkPreviewError as e:
            failures += 1
            if args.json:
                results.append({"url": url, "status": "error", "error": e.message})
            print(f"  ✗ Error: {e.message}", file=sys.stderr)

    if args.json:
        output = json.dumps(results, indent=2, ensure_ascii=False)
    else:
        output = "\n".join(results)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"\nSaved to: {args.output}", file=sys.stderr)
    else:
        print(output)

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
