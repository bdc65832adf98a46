#!/usr/bin/env python3
"""
Apply a member's default availability template to the week (or --days) starting at a date.

Usage: python scripts/apply_default_availability.py 41234 2026-10-19 [--days 7] [--unit WOL]
"""
import argparse
import logging
import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from wol_availability.config import settings
from wol_availability.core.dates import parse_local
from wol_availability.core.errors import AvailabilityError
from wol_availability.services.availability import AvailabilityStore, DefaultAvailabilities


def main():
    parser = argparse.ArgumentParser(description="Apply a member's default availability template")
    parser.add_argument("member", type=int, help="Member number")
    parser.add_argument("start", help="Target window start (ISO date or datetime)")
    parser.add_argument("--days", type=int, default=settings.default_apply_days, help="Length of the target window")
    parser.add_argument("--unit", default=None, help="Unit code when templates are kept per unit")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    start = parse_local(args.start)
    end = start + timedelta(days=args.days)
    defaults = DefaultAvailabilities(AvailabilityStore())
    try:
        applied = defaults.apply_default_availability(args.member, start, end, unit=args.unit)
    except AvailabilityError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not applied:
        print(f"Member {args.member} has no default availability.")
        sys.exit(2)
    print(f"Applied default availability for {args.member}: {start.isoformat()} → {end.isoformat()}")


if __name__ == "__main__":
    main()
