#!/usr/bin/env python3
"""
Print availability statistics (buckets, member and team summaries) for a window.

Usage: python scripts/print_statistics.py 2026-10-19 2026-10-26 [--unit WOL] [--json]
Dates without a time or offset are midnight in TIME_ZONE (default Australia/Sydney).
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from wol_availability.core.dates import parse_local
from wol_availability.core.errors import AvailabilityError
from wol_availability.services.availability import AvailabilityStore
from wol_availability.services.members import MembersDb


def main():
    parser = argparse.ArgumentParser(description="Print availability statistics for a window")
    parser.add_argument("start", help="Window start (ISO date or datetime)")
    parser.add_argument("end", help="Window end, exclusive (ISO date or datetime)")
    parser.add_argument("--unit", default=None, help="Unit code to scope storm counts and teams")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        stats = AvailabilityStore().fetch_statistics(parse_local(args.start), parse_local(args.end), args.unit, MembersDb())
    except AvailabilityError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(stats.model_dump_json(indent=2))
        return

    print(f"Statistics {stats.start.isoformat()} → {stats.end.isoformat()} unit={stats.unit or 'all'}")
    print(f"{'start':<26} {'storm':>5} {'vr i/s':>7} {'L3 i/s':>7} {'L2 i/s':>7} {'L1 i/s':>7}")
    for b in stats.counts:
        print(
            f"{b.start.isoformat():<26} {b.storm:>5} "
            f"{b.vr.immediate:>3}/{b.vr.support:<3} "
            f"{b.fr_in_water.immediate:>3}/{b.fr_in_water.support:<3} "
            f"{b.fr_on_water.immediate:>3}/{b.fr_on_water.support:<3} "
            f"{b.fr_on_land.immediate:>3}/{b.fr_on_land.support:<3}"
        )
    print(f"\nMembers with availability: {len(stats.members)}")
    for t in stats.teams:
        print(f"  {t.team or '(no team)'}: {t.entered_storm}/{t.members} entered storm availability")


if __name__ == "__main__":
    main()
