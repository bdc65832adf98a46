"""
Availability store: owns availability_intervals and keeps each partition's timeline free of overlaps.

Write path (per partition key and resolution window [ws, we), all inside one transaction):
  1. delete rows fully inside [ws, we)
  2. split a row that strictly engulfs [ws, we): truncate it to end at ws, re-insert the tail [we, end)
  3. trim rows whose end falls in (ws, we] to end at ws
  4. trim rows whose start falls in [ws, we) to start at we
  5. insert the new intervals
Without an explicit write range each new interval is its own window; with one, the range is
resolved once and the new intervals are inserted into the cleared space.

Validation happens before the transaction starts. Retryable aborts are retried with
exponential backoff (settings.transaction_max_attempts, settings.transaction_backoff_seconds).
"""
import logging
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import TypeVar

from sqlalchemy import or_
from sqlalchemy.orm import Session

from wol_availability.config import settings
from wol_availability.core.constants import RESCUE_AVAILABLE, Storm
from wol_availability.core.errors import ConflictError, TransactionError, ValidationError
from wol_availability.db.session import SessionLocal, transaction
from wol_availability.models.availability_interval import AvailabilityInterval
from wol_availability.services.availability.intervals import TimeRange, contains, find_overlap
from wol_availability.services.availability.statistics import compute_statistics
from wol_availability.services.availability.types import Availability, PartitionKey, Statistics, as_utc
from wol_availability.services.members.types import MemberDirectory, MemberFilter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _check_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    if start is None or end is None:
        raise ValidationError("Both start and end are required")
    start, end = as_utc(start), as_utc(end)
    if start >= end:
        raise ValidationError(f"Invalid range: start {start.isoformat()} is not before end {end.isoformat()}")
    return start, end


def _partition_filter(query, key: PartitionKey):
    query = query.filter(AvailabilityInterval.member == key.member)
    if key.unit is None:
        return query.filter(AvailabilityInterval.unit.is_(None))
    return query.filter(AvailabilityInterval.unit == key.unit)


class AvailabilityStore:
    """Read and write availability intervals through an injected session factory."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        *,
        max_attempts: int | None = None,
        backoff_seconds: float | None = None,
        isolation_level: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.session_factory = session_factory
        self.max_attempts = max(1, max_attempts if max_attempts is not None else settings.transaction_max_attempts)
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.transaction_backoff_seconds
        self.isolation_level = isolation_level if isolation_level is not None else settings.write_isolation_level
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def run_in_transaction(self, fn: Callable[[Session], T]) -> T:
        """Run fn(session) in a write transaction, retrying retryable aborts with backoff."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                with transaction(self.session_factory, self.isolation_level) as db:
                    return fn(db)
            except TransactionError as e:
                e.attempts = attempt
                if attempt == self.max_attempts:
                    logger.error("Write transaction failed after %s attempts: %s", attempt, e)
                    raise
                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.warning("Write transaction conflict (attempt %s/%s), retrying in %.3fs: %s", attempt, self.max_attempts, delay, e)
                self._sleep(delay)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_member_availabilities(
        self, member: int, start: datetime, end: datetime, unit: str | None = None
    ) -> list[Availability]:
        return self.fetch_members_availabilities([member], start, end, unit=unit)

    def fetch_members_availabilities(
        self, members: Iterable[int], start: datetime, end: datetime, unit: str | None = None
    ) -> list[Availability]:
        """All intervals of the given members that overlap [start, end), in no particular order."""
        start, end = _check_range(start, end)
        members = list(dict.fromkeys(members))
        if not members:
            return []
        with self.session_factory() as db:
            q = db.query(AvailabilityInterval).filter(
                AvailabilityInterval.member.in_(members),
                AvailabilityInterval.start < end,
                AvailabilityInterval.end > start,
            )
            if unit is not None:
                q = q.filter(AvailabilityInterval.unit == unit)
            return [Availability.model_validate(r) for r in q.all()]

    def fetch_available_at(self, instant: datetime, members: Iterable[int] | None = None) -> list[Availability]:
        """Intervals covering instant in which the member is storm available or rescue immediate/support."""
        instant = as_utc(instant)
        with self.session_factory() as db:
            q = db.query(AvailabilityInterval).filter(
                AvailabilityInterval.start <= instant,
                AvailabilityInterval.end > instant,
                or_(
                    AvailabilityInterval.storm == Storm.AVAILABLE.value,
                    AvailabilityInterval.rescue.in_([r.value for r in RESCUE_AVAILABLE]),
                ),
            )
            if members is not None:
                members = list(members)
                if not members:
                    return []
                q = q.filter(AvailabilityInterval.member.in_(members))
            return [Availability.model_validate(r) for r in q.all()]

    def fetch_statistics_records(self, start: datetime, end: datetime) -> list[Availability]:
        """Intervals overlapping [start, end) with storm or rescue set (input for statistics)."""
        start, end = _check_range(start, end)
        with self.session_factory() as db:
            rows = (
                db.query(AvailabilityInterval)
                .filter(
                    AvailabilityInterval.start < end,
                    AvailabilityInterval.end > start,
                    or_(AvailabilityInterval.storm.isnot(None), AvailabilityInterval.rescue.isnot(None)),
                )
                .all()
            )
            return [Availability.model_validate(r) for r in rows]

    def fetch_statistics(
        self, start: datetime, end: datetime, unit: str | None, directory: MemberDirectory
    ) -> Statistics:
        """Sweep-line statistics for [start, end); member data comes from the directory collaborator."""
        start, end = _check_range(start, end)
        records = self.fetch_statistics_records(start, end)
        numbers = sorted({r.member for r in records})
        members = [m for m in directory.fetch_members(numbers) if m is not None] if numbers else []
        roster = directory.fetch_all_members(MemberFilter(units_any=[unit]) if unit else None)
        return compute_statistics(start, end, records, members, unit=unit, roster=roster)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_availabilities(
        self,
        key: PartitionKey | int,
        availabilities: Sequence[Availability],
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> None:
        """
        Atomically write availabilities for one partition key, resolving overlaps with stored rows.
        With start/end every interval must lie inside [start, end) and the whole range is replaced.
        """
        key = PartitionKey.of(key)
        rows = self._validate_batch(key, availabilities)
        if (start is None) != (end is None):
            raise ValidationError("start and end must be given together")
        if start is not None:
            window = TimeRange(*_check_range(start, end))
            self._check_inside(window, rows)
            windows = [window]
        else:
            if not rows:
                return
            windows = [r.range for r in rows]

        def write(db: Session) -> None:
            for w in windows:
                self._resolve(db, key, w)
            self._insert(db, rows)

        self.run_in_transaction(write)
        logger.info("Set %s availabilities for member=%s unit=%s", len(rows), key.member, key.unit)

    def set_range_availabilities(
        self,
        start: datetime,
        end: datetime,
        availabilities: Mapping[PartitionKey | int, Sequence[Availability]],
    ) -> None:
        """Replace [start, end) for several partition keys in one transaction."""
        window = TimeRange(*_check_range(start, end))
        batches: dict[PartitionKey, list[Availability]] = {}
        for raw_key, items in availabilities.items():
            key = PartitionKey.of(raw_key)
            rows = self._validate_batch(key, items)
            self._check_inside(window, rows)
            batches.setdefault(key, []).extend(rows)
        for key, rows in batches.items():
            if find_overlap(r.range for r in rows):
                raise ConflictError(f"Overlapping availabilities for member {key.member}")
        if not batches:
            return

        def write(db: Session) -> None:
            for key, rows in batches.items():
                self._resolve(db, key, window)
                self._insert(db, rows)

        self.run_in_transaction(write)
        logger.info(
            "Set range %s..%s for %s members (%s availabilities)",
            window.start.isoformat(),
            window.end.isoformat(),
            len(batches),
            sum(len(r) for r in batches.values()),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_batch(key: PartitionKey, availabilities: Sequence[Availability]) -> list[Availability]:
        rows = []
        for a in availabilities:
            if a.start >= a.end:
                raise ValidationError(f"Invalid availability: start {a.start.isoformat()} is not before end {a.end.isoformat()}")
            if a.member != key.member:
                raise ValidationError(f"Availability for member {a.member} written under member {key.member}")
            if a.unit not in (None, key.unit):
                raise ValidationError(f"Availability for unit {a.unit} written under unit {key.unit}")
            rows.append(a.model_copy(update={"id": None, "unit": key.unit}))
        pair = find_overlap(r.range for r in rows)
        if pair:
            first, second = pair
            raise ConflictError(
                f"Availabilities overlap: {first.start.isoformat()}–{first.end.isoformat()} and "
                f"{second.start.isoformat()}–{second.end.isoformat()}"
            )
        return rows

    @staticmethod
    def _check_inside(window: TimeRange, rows: Iterable[Availability]) -> None:
        for r in rows:
            if not contains(window, r.range):
                raise ValidationError("Availability is not between start and end")

    @staticmethod
    def _resolve(db: Session, key: PartitionKey, window: TimeRange) -> None:
        ws, we = window

        def rows():
            return _partition_filter(db.query(AvailabilityInterval), key)

        # Lock the partition's rows touching the window so concurrent writers serialize on them
        rows().filter(AvailabilityInterval.start < we, AvailabilityInterval.end > ws).with_for_update().all()

        # 1) Fully superseded
        rows().filter(AvailabilityInterval.start >= ws, AvailabilityInterval.end <= we).delete(synchronize_session=False)

        # 2) Engulfing row: keep the head, copy the tail after the window
        for engulfing in rows().filter(AvailabilityInterval.start < ws, AvailabilityInterval.end > we).all():
            db.add(AvailabilityInterval(
                member=engulfing.member,
                unit=engulfing.unit,
                start=we,
                end=engulfing.end,
                storm=engulfing.storm,
                rescue=engulfing.rescue,
            ))
            engulfing.end = ws
        db.flush()

        # 3) Overlaps the start of the window
        rows().filter(AvailabilityInterval.end > ws, AvailabilityInterval.end <= we).update(
            {AvailabilityInterval.end: ws}, synchronize_session=False
        )
        # 4) Overlaps the end of the window
        rows().filter(AvailabilityInterval.start >= ws, AvailabilityInterval.start < we).update(
            {AvailabilityInterval.start: we}, synchronize_session=False
        )

    @staticmethod
    def _insert(db: Session, rows: Iterable[Availability]) -> None:
        db.add_all([AvailabilityInterval(**r.to_row()) for r in rows])
        db.flush()
