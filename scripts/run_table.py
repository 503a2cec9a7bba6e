#!/usr/bin/env python3
"""
P2D REGIME scenario reference table.

Usage:
    python scripts/run_table.py
    python scripts/run_table.py --bias bullish --strength "very strong"
    python scripts/run_table.py --sort bullish --limit 20
    python scripts/run_table.py --json
    python scripts/run_table.py --export data/output -v
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure p2d_regime is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from p2d_regime.explain.renderer import band_label, price_label, render_row
from p2d_regime.pipeline.table import ReferenceTable, SortKey, resolve_query

BIAS_HELP = "all|bullish|bearish|neutral"
STRENGTH_HELP = "all|very_strong|strong|moderate|weak|conflicted"


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Print the P2D volume-rising scenario reference table",
    )
    parser.add_argument("--bias", "-b", type=str, default="all", help="Bias filter")
    parser.add_argument("--strength", "-s", type=str, default="all", help="Strength filter")
    parser.add_argument(
        "--sort",
        type=str,
        default=SortKey.SCORE.value,
        help="Sort key: score | bullish | bearish | none (default: score)",
    )
    parser.add_argument("--limit", "-n", type=int, default=None, help="Max rows to print")
    parser.add_argument("--json", "-j", action="store_true", help="Output JSON only")
    parser.add_argument("--export", "-e", type=str, default=None, help="Write JSON + Parquet to DIR")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        bias, strength, sort_by = resolve_query(args.bias, args.strength, args.sort)
    except ValueError as exc:
        print(f"Error: {exc}.")
        print(f"Use bias {BIAS_HELP}, strength {STRENGTH_HELP}, sort score|bullish|bearish|none.")
        return 1
    if args.limit is not None and args.limit < 0:
        print(f"Error: Invalid limit '{args.limit}'. Must be >= 0.")
        return 1

    table = ReferenceTable()
    rows = table.query(bias=bias, strength=strength, sort_by=sort_by)
    if args.limit is not None:
        rows = rows[: args.limit]

    if args.export:
        table.export(Path(args.export))

    if args.json:
        print(json.dumps([render_row(r) for r in rows], indent=2))
        return 0

    stats = table.stats()
    print()
    print("=" * 78)
    print("P2D REGIME ANALYZER - Volume Rising Scenario Explorer")
    print("=" * 78)
    print(
        f"Total: {stats.total}  Bullish: {stats.bullish}  Bearish: {stats.bearish}  "
        f"Neutral: {stats.neutral}  Tradeable: {stats.tradeable}  Conflicts: {stats.conflicted}"
    )
    print("-" * 78)
    for row in rows:
        s, a = row.scenario, row.analysis
        print(
            f"#{s.id:<4} {a.bias.value:<8} {a.strength.value:<11} "
            f"{a.trade_action.value:<15} bull={a.bullish_score:<2} bear={a.bearish_score:<2} | "
            f"{band_label(s.band1, 1)}, {band_label(s.band2, 2)}, ST {s.trend.value}, "
            f"{s.containment.value}, {price_label(s.price_position)}"
        )
    print("-" * 78)
    print(f"Showing {len(rows)} of {stats.total} scenarios")
    print("=" * 78)

    return 0


if __name__ == "__main__":
    sys.exit(main())
