from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

# Make local `src` importable when running from repo checkout
ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from region_search.api import (  # noqa: E402
    ExclusionZone,
    PatternConfig,
    PatternSyntaxError,
    RegionStore,
    write_regions_parquet,
)
from region_search.io.pdf_source import PdfTextSource  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find the page regions of a PDF lying between a begin and an end regex.",
    )
    parser.add_argument(
        "--pdf",
        type=Path,
        default=os.environ.get("REGION_SEARCH_PDF"),
        help="PDF to search (can set REGION_SEARCH_PDF env var).",
    )
    parser.add_argument("--begin", required=True, help="Regex marking the start of a region.")
    parser.add_argument("--end", required=True, help="Regex marking the end of a region.")
    parser.add_argument(
        "--include-begin",
        default="false",
        help="Include the begin match in the region (true/false).",
    )
    parser.add_argument(
        "--include-end",
        default="false",
        help="Include the end match in the region (true/false).",
    )
    parser.add_argument("--header", type=float, default=0.0, help="Header fraction of page height to skip.")
    parser.add_argument("--footer", type=float, default=0.0, help="Footer fraction of page height to skip.")
    parser.add_argument("--out", type=Path, help="Optional parquet path for the region rows.")
    parser.add_argument("--compression", type=str, default="zstd")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    if not args.pdf:
        raise SystemExit("pdf is required (arg or REGION_SEARCH_PDF env var).")
    pdf_path = Path(args.pdf)
    if not pdf_path.exists():
        raise SystemExit(f"pdf not found: {pdf_path}")

    try:
        patterns = PatternConfig.from_strings(args.begin, args.include_begin, args.end, args.include_end)
        zone = ExclusionZone(header_fraction=args.header, footer_fraction=args.footer)
    except (PatternSyntaxError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc

    with PdfTextSource(pdf_path) as source:
        store = RegionStore(source, patterns, zone)

    print(f"[search] {pdf_path.name}: {patterns.begin_text!r} .. {patterns.end_text!r}")
    for event in store.events:
        print(f"\t{event.message}")

    df = store.regions_frame()
    for row in df.iter_rows(named=True):
        print(
            f"  page {row['page']}: top={row['top']:.1f} left={row['left']:.1f} "
            f"width={row['width']:.1f} height={row['height']:.1f}"
        )

    if args.out:
        out_path = write_regions_parquet(df, args.out, compression=args.compression)
        print(f"[regions] {df.height} rows -> {out_path}")


if __name__ == "__main__":
    main()
