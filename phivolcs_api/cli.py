# phivolcs_api/cli.py
from __future__ import annotations
import argparse, json, sys
from typing import List, Optional

from phivolcs_api.config import MAX_COUNT, Settings
from phivolcs_api.errors import EmptyDatasetError, NetworkError, ParseError
from phivolcs_api.extract import extract_records
from phivolcs_api.fetch import Fetcher
from phivolcs_api.logging_setup import setup_logging
from phivolcs_api.query import compute_stats, top_by_magnitude
from phivolcs_api.records import Record


def _count(raw: str) -> int:
    n = int(raw)
    if not 1 <= n <= MAX_COUNT:
        raise argparse.ArgumentTypeError(f"count must be between 1 and {MAX_COUNT}")
    return n


def _limit(raw: str) -> int:
    n = int(raw)
    if n < 0:
        raise argparse.ArgumentTypeError("limit must not be negative")
    return n


def _scrape(settings: Settings, url: Optional[str]) -> List[Record]:
    fetcher = Fetcher.from_settings(settings)
    return extract_records(fetcher.fetch(url))


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="phivolcs_api", description="One-shot PHIVOLCS scrape")
    p.add_argument("--url", default=None, help="Override the PHIVOLCS page URL")
    sub = p.add_subparsers(dest="cmd", required=True)

    scrapep = sub.add_parser("scrape", help="Print every record as JSON")
    scrapep.add_argument("--limit", type=_limit, default=None)

    topp = sub.add_parser("top", help="Print the strongest earthquakes")
    topp.add_argument("--count", type=_count, default=10)

    sub.add_parser("stats", help="Print summary statistics")

    args = p.parse_args(argv)
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    try:
        records = _scrape(settings, args.url)
        if args.cmd == "scrape":
            shown = records if args.limit is None else records[:args.limit]
            print(f"Fetched {len(records)} earthquakes from {args.url or settings.source_url}")
            print(json.dumps([r.to_dict() for r in shown], indent=2))
        elif args.cmd == "top":
            for r in top_by_magnitude(records, args.count):
                print(f"M{r.magnitude:<5} {r.date} {r.time}  {r.location}")
        elif args.cmd == "stats":
            print(json.dumps(compute_stats(records).to_dict(), indent=2))
    except (NetworkError, ParseError, EmptyDatasetError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
