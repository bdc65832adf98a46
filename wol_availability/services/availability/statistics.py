"""
Availability statistics over a window [start, end).

- Inflection points: window bounds plus every record start/end inside [start, end), sorted.
  Each consecutive pair is one bucket; no bucket is ever omitted, empty ones are all zeros.
- A record is active in a bucket when it covers the bucket start (record.start <= a < record.end).
  Records enter a heap-ordered active set as the sweep passes their start and leave once their end
  is reached, so each bucket only looks at the records covering it. Counts are of members: a member
  active in several unit partitions at once is counted once per category (IMMEDIATE beats SUPPORT).
- Storm counts respect the unit scope. Rescue counts are by qualification: vertical rescue is counted
  independently, flood rescue once per member in the highest tier held (L3 > L2 > L1).
- Member summaries are duration weighted over the whole window, not per bucket.
- Team summaries: members per team within the unit, and how many set any storm value in the window.
Members missing from the directory (resigned) are skipped.
"""
import heapq
import logging
from collections.abc import Iterable
from datetime import datetime

from wol_availability.core.constants import FLOOD_RESCUE_TIERS, VERTICAL_RESCUE, Rescue, Storm
from wol_availability.services.availability.intervals import TimeRange, overlap_seconds
from wol_availability.services.availability.types import (
    Availability,
    MemberSummary,
    Statistics,
    StatisticsBucket,
    TeamSummary,
    as_utc,
)
from wol_availability.services.members.types import Member

logger = logging.getLogger(__name__)


def inflection_points(start: datetime, end: datetime, records: Iterable[Availability]) -> list[datetime]:
    points = {start, end}
    for r in records:
        for t in (r.start, r.end):
            if start <= t < end:
                points.add(t)
    return sorted(points)


def _in_scope(record: Availability, member: Member, unit: str | None) -> bool:
    if unit is None:
        return True
    if record.unit is not None:
        return record.unit == unit
    return member.belongs_to(unit)


def _tally(bucket: StatisticsBucket, records: list[Availability], member: Member, unit: str | None) -> None:
    """Count a member once per category, however many of their partitions are active."""
    if any(r.storm == Storm.AVAILABLE and _in_scope(r, member, unit) for r in records):
        bucket.storm += 1

    rescues = {r.rescue for r in records}
    if Rescue.IMMEDIATE in rescues:
        kind = "immediate"
    elif Rescue.SUPPORT in rescues:
        kind = "support"
    else:
        return

    if member.has_qualification(VERTICAL_RESCUE):
        setattr(bucket.vr, kind, getattr(bucket.vr, kind) + 1)

    for tier, code in FLOOD_RESCUE_TIERS:
        if member.has_qualification(code):
            count = getattr(bucket, tier)
            setattr(count, kind, getattr(count, kind) + 1)
            break


def compute_buckets(
    start: datetime,
    end: datetime,
    records: Iterable[Availability],
    members: dict[int, Member],
    unit: str | None = None,
) -> list[StatisticsBucket]:
    records = list(records)
    points = inflection_points(start, end, records)
    counted = sorted((r for r in records if r.is_available and r.member in members), key=lambda r: r.start)

    buckets = []
    active: dict[int, Availability] = {}
    ends: list[tuple[datetime, int]] = []
    idx = 0
    for a, b in zip(points, points[1:]):
        while idx < len(counted) and counted[idx].start <= a:
            r = counted[idx]
            if r.end > a:
                active[idx] = r
                heapq.heappush(ends, (r.end, idx))
            idx += 1
        while ends and ends[0][0] <= a:
            _, i = heapq.heappop(ends)
            del active[i]

        by_member: dict[int, list[Availability]] = {}
        for r in active.values():
            by_member.setdefault(r.member, []).append(r)
        bucket = StatisticsBucket(start=a, end=b)
        for number, member_records in by_member.items():
            _tally(bucket, member_records, members[number], unit)
        buckets.append(bucket)
    return buckets


def summarize_members(
    start: datetime,
    end: datetime,
    records: Iterable[Availability],
    members: dict[int, Member],
    unit: str | None = None,
) -> list[MemberSummary]:
    window = TimeRange(start, end)
    summaries: dict[int, MemberSummary] = {}
    for r in records:
        member = members.get(r.member)
        if member is None or not _in_scope(r, member, unit):
            continue
        seconds = overlap_seconds(r.range, window)
        s = summaries.setdefault(r.member, MemberSummary(member=r.member))
        if r.storm == Storm.AVAILABLE:
            s.storm += seconds
        if r.rescue == Rescue.IMMEDIATE:
            s.rescue_immediate += seconds
        elif r.rescue == Rescue.SUPPORT:
            s.rescue_support += seconds
        elif r.rescue == Rescue.UNAVAILABLE:
            s.rescue_unavailable += seconds
    return [summaries[n] for n in sorted(summaries)]


def summarize_teams(
    records: Iterable[Availability],
    members: dict[int, Member],
    roster: Iterable[Member],
    unit: str | None = None,
) -> list[TeamSummary]:
    entered = {
        r.member
        for r in records
        if r.storm is not None and r.member in members and _in_scope(r, members[r.member], unit)
    }
    teams: dict[str | None, TeamSummary] = {}
    for m in roster:
        if not m.belongs_to(unit):
            continue
        team = m.team_for(unit)
        t = teams.setdefault(team, TeamSummary(team=team))
        t.members += 1
        if m.number in entered:
            t.entered_storm += 1
    return sorted(teams.values(), key=lambda t: (t.team is None, t.team or ""))


def compute_statistics(
    start: datetime,
    end: datetime,
    records: Iterable[Availability],
    members: Iterable[Member],
    *,
    unit: str | None = None,
    roster: Iterable[Member] | None = None,
) -> Statistics:
    """Buckets, member summaries and team summaries for [start, end). roster defaults to members."""
    start, end = as_utc(start), as_utc(end)
    records = list(records)
    by_number = {m.number: m for m in members}
    skipped = {r.member for r in records if r.member not in by_number}
    if skipped:
        logger.debug("Statistics: skipping %s members not in the directory", len(skipped))

    return Statistics(
        start=start,
        end=end,
        unit=unit,
        counts=compute_buckets(start, end, records, by_number, unit),
        members=summarize_members(start, end, records, by_number, unit),
        teams=summarize_teams(records, by_number, by_number.values() if roster is None else roster, unit),
    )
