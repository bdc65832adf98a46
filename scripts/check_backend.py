#!/usr/bin/env python3
"""
Quick checks so the availability core can run against the configured database:
  python scripts/check_backend.py
"""
import os
import sys
from pathlib import Path

# Run from the repository root
root_dir = Path(__file__).resolve().parent.parent
os.chdir(root_dir)
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))


def main():
    errors = []

    # 1) .env
    env_file = root_dir / ".env"
    if not env_file.exists():
        print("WARN .env missing; using environment variables and defaults (DATABASE_URL, ...)")
    else:
        print("OK  .env exists")

    # 2) DB connection
    try:
        from sqlalchemy import inspect, text

        from wol_availability.db.session import engine
        from wol_availability.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")

        # 3) Tables from migrations
        existing = set(inspect(engine).get_table_names())
        missing = [t for t in ALL_TABLE_NAMES if t not in existing]
        if missing:
            errors.append(f"Missing tables: {', '.join(missing)}. Run: alembic upgrade head")
            print("FAIL Tables missing:", ", ".join(missing))
        else:
            print(f"OK  All {len(ALL_TABLE_NAMES)} tables exist")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 4) Package import (catches missing deps, bad imports)
    try:
        from wol_availability.services import AvailabilityStore  # noqa: F401
        print("OK  Package import (wol_availability.services)")
    except Exception as e:
        errors.append(f"Package import: {e}")
        print("FAIL Package import:", e)

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
