"""
Single source of truth for database tables that exist after migrations (001–003).

Use these names when writing raw SQL (e.g. TRUNCATE) and in scripts/check_backend.py.
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "availability_intervals",
    "default_availabilities",
    "members",
    "member_units",
)

# Tables owned by the availability store (cleared together when resetting availability data).
AVAILABILITY_TABLE_NAMES = (
    "availability_intervals",
    "default_availabilities",
)
