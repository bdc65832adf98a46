"""
Availability interval engine.

- store: per-member non-overlapping timelines (transactional write path, reads).
- loader: per-tick coalescing of per-member reads sharing a window.
- statistics: sweep-line bucket counts and window summaries.
- defaults: default availability templates projected onto a target window.
"""
from wol_availability.services.availability.defaults import DefaultAvailabilities, project_template
from wol_availability.services.availability.loader import AvailabilityLoader
from wol_availability.services.availability.statistics import compute_statistics
from wol_availability.services.availability.store import AvailabilityStore
from wol_availability.services.availability.types import (
    Availability,
    DefaultTemplate,
    PartitionKey,
    Statistics,
    TemplateEntry,
)

__all__ = [
    "Availability",
    "AvailabilityLoader",
    "AvailabilityStore",
    "DefaultAvailabilities",
    "DefaultTemplate",
    "PartitionKey",
    "Statistics",
    "TemplateEntry",
    "compute_statistics",
    "project_template",
]
