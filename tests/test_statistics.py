"""Tests for wol_availability/services/availability/statistics.py

Sweep-line buckets, qualification tiers, unit scope, window summaries and team summaries.
"""

import pytest

from tests.conftest import avail, h
from wol_availability.core.constants import Rescue, Storm
from wol_availability.services.availability.statistics import compute_statistics, inflection_points
from wol_availability.services.members.types import Member, UnitMembership

A = Storm.AVAILABLE


def member(number, qualifications=(), units=(("WOL", "Alpha"),)):
    return Member(
        number=number,
        first_name=f"First{number}",
        last_name=f"Last{number}",
        qualifications=list(qualifications),
        units=[UnitMembership(code=c, team=t) for c, t in units],
    )


def bucket_spans(stats):
    return [((b.start - h(0)).total_seconds() / 3600, (b.end - h(0)).total_seconds() / 3600) for b in stats.counts]


class TestBuckets:
    def test_two_records_two_buckets(self):
        records = [avail(1, 0, 10, storm=A), avail(2, 5, 10, storm=A)]

        stats = compute_statistics(h(0), h(10), records, [member(1), member(2)])

        assert bucket_spans(stats) == [(0, 5), (5, 10)]
        assert [b.storm for b in stats.counts] == [1, 2]

    def test_empty_window_yields_single_zero_bucket(self):
        stats = compute_statistics(h(0), h(10), [], [])

        assert bucket_spans(stats) == [(0, 10)]
        assert stats.counts[0].storm == 0
        assert stats.counts[0].vr.immediate == 0

    def test_gap_bucket_is_emitted_with_zero_counts(self):
        records = [avail(1, 0, 2, storm=A), avail(1, 4, 6, storm=A)]

        stats = compute_statistics(h(0), h(6), records, [member(1)])

        assert bucket_spans(stats) == [(0, 2), (2, 4), (4, 6)]
        assert [b.storm for b in stats.counts] == [1, 0, 1]

    def test_records_beyond_window_are_clipped(self):
        records = [avail(1, -5, 3, storm=A), avail(2, 8, 20, storm=A)]

        stats = compute_statistics(h(0), h(10), records, [member(1), member(2)])

        assert bucket_spans(stats) == [(0, 3), (3, 8), (8, 10)]
        assert [b.storm for b in stats.counts] == [1, 0, 1]

    def test_inflection_points_sorted_and_deduplicated(self):
        records = [avail(1, 0, 5), avail(2, 5, 15), avail(3, 5, 7)]

        points = inflection_points(h(0), h(10), records)

        assert points == [h(0), h(5), h(7), h(10)]

    def test_unavailable_records_do_not_count(self):
        records = [
            avail(1, 0, 10, storm=Storm.UNAVAILABLE),
            avail(2, 0, 10, rescue=Rescue.UNAVAILABLE),
        ]

        stats = compute_statistics(h(0), h(10), records, [member(1, ["VR-ACC"]), member(2, ["VR-ACC"])])

        assert stats.counts[0].storm == 0
        assert stats.counts[0].vr.immediate == 0
        assert stats.counts[0].vr.support == 0


class TestQualifications:
    def test_vertical_rescue_counted_independently_of_flood_tiers(self):
        records = [avail(1, 0, 10, rescue=Rescue.IMMEDIATE)]

        stats = compute_statistics(h(0), h(10), records, [member(1, ["VR-ACC", "FRL3-ACC"])])

        b = stats.counts[0]
        assert b.vr.immediate == 1
        assert b.fr_in_water.immediate == 1

    def test_highest_flood_tier_wins(self):
        records = [
            avail(1, 0, 10, rescue=Rescue.IMMEDIATE),
            avail(2, 0, 10, rescue=Rescue.SUPPORT),
            avail(3, 0, 10, rescue=Rescue.SUPPORT),
        ]
        members = [
            member(1, ["FRL3-ACC", "FRL2-ARCC", "FRL1-ACC"]),
            member(2, ["FRL2-ARCC", "FRL1-ACC"]),
            member(3, ["FRL1-ACC"]),
        ]

        b = compute_statistics(h(0), h(10), records, members).counts[0]

        assert (b.fr_in_water.immediate, b.fr_in_water.support) == (1, 0)
        assert (b.fr_on_water.immediate, b.fr_on_water.support) == (0, 1)
        assert (b.fr_on_land.immediate, b.fr_on_land.support) == (0, 1)

    def test_unqualified_member_only_counts_for_storm(self):
        records = [avail(1, 0, 10, storm=A, rescue=Rescue.IMMEDIATE)]

        b = compute_statistics(h(0), h(10), records, [member(1)]).counts[0]

        assert b.storm == 1
        assert b.vr.immediate == 0
        assert b.fr_in_water.immediate == b.fr_on_water.immediate == b.fr_on_land.immediate == 0


class TestScope:
    def test_resigned_members_skipped(self):
        records = [avail(1, 0, 10, storm=A), avail(99, 0, 10, storm=A, rescue=Rescue.IMMEDIATE)]

        stats = compute_statistics(h(0), h(10), records, [member(1)])

        assert stats.counts[0].storm == 1
        assert [s.member for s in stats.members] == [1]

    def test_storm_count_respects_unit_membership(self):
        records = [avail(1, 0, 10, storm=A), avail(2, 0, 10, storm=A)]
        members = [member(1, units=[("WOL", "Alpha")]), member(2, units=[("KMA", "Charlie")])]

        stats = compute_statistics(h(0), h(10), records, members, unit="WOL")

        assert stats.counts[0].storm == 1

    def test_record_unit_overrides_membership(self):
        records = [avail(1, 0, 10, storm=A, unit="KMA")]
        members = [member(1, units=[("WOL", "Alpha"), ("KMA", "Charlie")])]

        assert compute_statistics(h(0), h(10), records, members, unit="WOL").counts[0].storm == 0
        assert compute_statistics(h(0), h(10), records, members, unit="KMA").counts[0].storm == 1

    def test_member_active_in_two_units_counted_once(self):
        records = [
            avail(1, 0, 10, storm=A, rescue=Rescue.IMMEDIATE, unit="WOL"),
            avail(1, 0, 10, storm=A, rescue=Rescue.IMMEDIATE, unit="KMA"),
        ]
        members = [member(1, ["VR-ACC", "FRL1-ACC"], units=[("WOL", "Alpha"), ("KMA", "Charlie")])]

        b = compute_statistics(h(0), h(10), records, members).counts[0]

        assert b.storm == 1
        assert b.vr.immediate == 1
        assert b.fr_on_land.immediate == 1
        assert compute_statistics(h(0), h(10), records, members, unit="WOL").counts[0].vr.immediate == 1

    def test_immediate_in_one_unit_beats_support_in_another(self):
        records = [
            avail(1, 0, 10, rescue=Rescue.SUPPORT, unit="WOL"),
            avail(1, 5, 10, rescue=Rescue.IMMEDIATE, unit="KMA"),
        ]
        members = [member(1, ["VR-ACC"], units=[("WOL", "Alpha"), ("KMA", "Charlie")])]

        stats = compute_statistics(h(0), h(10), records, members)

        assert [(c.vr.immediate, c.vr.support) for c in stats.counts] == [(0, 1), (1, 0)]

    def test_rescue_counts_are_not_unit_scoped(self):
        records = [avail(2, 0, 10, rescue=Rescue.IMMEDIATE)]
        members = [member(2, ["VR-ACC"], units=[("KMA", "Charlie")])]

        assert compute_statistics(h(0), h(10), records, members, unit="WOL").counts[0].vr.immediate == 1


class TestSummaries:
    def test_member_seconds_weighted_over_window(self):
        records = [
            avail(1, -2, 2, storm=A, rescue=Rescue.IMMEDIATE),
            avail(1, 2, 5, rescue=Rescue.SUPPORT),
            avail(1, 5, 12, rescue=Rescue.UNAVAILABLE),
        ]

        [summary] = compute_statistics(h(0), h(10), records, [member(1)]).members

        assert summary.storm == pytest.approx(2 * 3600)
        assert summary.rescue_immediate == pytest.approx(2 * 3600)
        assert summary.rescue_support == pytest.approx(3 * 3600)
        assert summary.rescue_unavailable == pytest.approx(5 * 3600)

    def test_member_summaries_sorted(self):
        records = [avail(3, 0, 1, storm=A), avail(1, 0, 1, storm=A), avail(2, 0, 1, storm=A)]

        stats = compute_statistics(h(0), h(10), records, [member(1), member(2), member(3)])

        assert [s.member for s in stats.members] == [1, 2, 3]

    def test_team_summaries(self):
        roster = [
            member(1, units=[("WOL", "Alpha")]),
            member(2, units=[("WOL", "Alpha")]),
            member(3, units=[("WOL", "Bravo")]),
            member(4, units=[("WOL", None)]),
            member(5, units=[("KMA", "Charlie")]),
        ]
        records = [
            avail(1, 0, 5, storm=Storm.UNAVAILABLE),  # entered, regardless of value
            avail(3, 0, 5, rescue=Rescue.IMMEDIATE),  # rescue only: not entered
            avail(5, 0, 5, storm=A),  # other unit
        ]

        stats = compute_statistics(h(0), h(10), records, roster, unit="WOL", roster=roster)

        teams = {t.team: (t.members, t.entered_storm) for t in stats.teams}
        assert teams == {"Alpha": (2, 1), "Bravo": (1, 0), None: (1, 0)}
        assert stats.teams[-1].team is None


class TestFetchStatistics:
    def test_store_and_directory_integration(self, store, members_db):
        store.set_availabilities(1, [avail(1, 0, 10, storm=A, rescue=Rescue.IMMEDIATE)])
        store.set_availabilities(2, [avail(2, 5, 10, storm=A)])
        store.set_availabilities(4, [avail(4, 0, 10, storm=A)])  # KMA member
        store.set_availabilities(77, [avail(77, 0, 10, storm=A)])  # not in directory

        stats = store.fetch_statistics(h(0), h(10), "WOL", members_db)

        assert bucket_spans(stats) == [(0, 5), (5, 10)]
        assert [b.storm for b in stats.counts] == [1, 2]
        assert stats.counts[0].vr.immediate == 1
        assert stats.counts[0].fr_in_water.immediate == 1
        assert [s.member for s in stats.members] == [1, 2]
        teams = {t.team: (t.members, t.entered_storm) for t in stats.teams}
        assert teams == {"Alpha": (2, 2), "Bravo": (1, 0), None: (1, 0)}
