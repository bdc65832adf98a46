"""
Default availability templates: a member's reusable pattern, stored as offsets from an origin and
re-projected onto any target window through the store's write path.
"""
import json
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from wol_availability.config import settings
from wol_availability.core.errors import ConflictError, ValidationError
from wol_availability.models.default_availability import DefaultAvailability
from wol_availability.services.availability.intervals import TimeRange, find_overlap, intersection, shift
from wol_availability.services.availability.store import AvailabilityStore
from wol_availability.services.availability.types import Availability, DefaultTemplate, PartitionKey, TemplateEntry, as_utc

logger = logging.getLogger(__name__)


def _parse_entries_json(js: str | None) -> list[TemplateEntry]:
    if not js:
        return []
    try:
        return [TemplateEntry.from_json(e) for e in json.loads(js)]
    except (TypeError, KeyError, json.JSONDecodeError):
        logger.warning("Ignoring malformed default availability entries: %r", js)
        return []


def _template_filter(query, key: PartitionKey):
    query = query.filter(DefaultAvailability.member == key.member)
    if key.unit is None:
        return query.filter(DefaultAvailability.unit.is_(None))
    return query.filter(DefaultAvailability.unit == key.unit)


def project_template(template: DefaultTemplate, start: datetime, end: datetime) -> list[Availability]:
    """
    Shift each entry from the template origin to start, clip to [start, end), drop empty results.
    """
    start, end = as_utc(start), as_utc(end)
    bounds = TimeRange(start, end)
    out = []
    for entry in template.entries:
        absolute = TimeRange(template.origin + entry.offset_start, template.origin + entry.offset_end)
        clipped = intersection(shift(absolute, template.origin, start), bounds)
        if clipped is None:
            continue
        out.append(Availability(
            member=template.member,
            unit=template.unit,
            start=clipped.start,
            end=clipped.end,
            storm=entry.storm,
            rescue=entry.rescue,
        ))
    return out


class DefaultAvailabilities:
    def __init__(self, store: AvailabilityStore, session_factory: Callable[[], Session] | None = None):
        self.store = store
        self.session_factory = session_factory or store.session_factory

    def fetch_default_availabilities(self, member: int, unit: str | None = None) -> DefaultTemplate | None:
        key = PartitionKey(member, unit)
        with self.session_factory() as db:
            row = _template_filter(db.query(DefaultAvailability), key).first()
            if row is None:
                return None
            return DefaultTemplate(
                member=row.member,
                unit=row.unit,
                origin=row.origin,
                entries=_parse_entries_json(row.entries_json),
            )

    def set_default_availabilities(
        self,
        member: int,
        origin: datetime,
        entries: Sequence[TemplateEntry],
        unit: str | None = None,
    ) -> DefaultTemplate:
        """Replace the member's template wholesale."""
        key = PartitionKey(member, unit)
        origin = as_utc(origin)
        for e in entries:
            if e.offset_start >= e.offset_end:
                raise ValidationError("Template entry must start before it ends")
        if find_overlap(e.range for e in entries):
            raise ConflictError("Template entries overlap")
        entries_json = json.dumps([e.to_json() for e in entries])

        def write(db: Session) -> None:
            row = _template_filter(db.query(DefaultAvailability), key).with_for_update().first()
            if row:
                row.origin = origin
                row.entries_json = entries_json
            else:
                db.add(DefaultAvailability(member=member, unit=unit, origin=origin, entries_json=entries_json))

        self.store.run_in_transaction(write)
        logger.info("Set default availability for member=%s unit=%s (%s entries)", member, unit, len(entries))
        return DefaultTemplate(member=member, unit=unit, origin=origin, entries=list(entries))

    def apply_default_availability(
        self,
        member: int,
        start: datetime,
        end: datetime | None = None,
        unit: str | None = None,
    ) -> bool:
        """
        Write the member's template into [start, end) (default: settings.default_apply_days from start).
        Returns False when the member has no template. Re-applying yields the same final state.
        """
        start = as_utc(start)
        end = as_utc(end) if end is not None else start + timedelta(days=settings.default_apply_days)
        template = self.fetch_default_availabilities(member, unit)
        if template is None:
            return False
        availabilities = project_template(template, start, end)
        self.store.set_availabilities(PartitionKey(member, unit), availabilities, start=start, end=end)
        logger.info(
            "Applied default availability for member=%s to %s..%s (%s intervals)",
            member,
            start.isoformat(),
            end.isoformat(),
            len(availabilities),
        )
        return True
