"""Shared test fixtures.

- In-memory SQLite engine with every table created (no live PostgreSQL needed)
- Store / template / directory services bound to that engine
- Time helpers: h(n) is n hours after a fixed UTC instant
"""

import os

# Before any wol_availability import: keep the module-level engine off PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite://")

import json
from collections.abc import Generator
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wol_availability.db.base import Base
from wol_availability.models.member import Member as MemberRow
from wol_availability.models.member import MemberUnit
from wol_availability.services.availability import AvailabilityStore, DefaultAvailabilities
from wol_availability.services.availability.types import Availability
from wol_availability.services.members import MembersDb

T0 = datetime(2026, 10, 19, tzinfo=timezone.utc)


def h(n: float) -> datetime:
    return T0 + timedelta(hours=n)


def avail(member: int, start: float, end: float, storm=None, rescue=None, unit=None) -> Availability:
    """Availability for member over hours [start, end) after T0."""
    return Availability(member=member, unit=unit, start=h(start), end=h(end), storm=storm, rescue=rescue)


def spans(rows) -> list[tuple]:
    """Sorted (start hour, end hour, storm, rescue) tuples for easy comparison."""
    out = []
    for r in rows:
        out.append((
            (r.start - T0) / timedelta(hours=1),
            (r.end - T0) / timedelta(hours=1),
            r.storm.value if r.storm else None,
            r.rescue.value if r.rescue else None,
        ))
    return sorted(out)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff delays requested by the store (no real sleeping in tests)."""
    return []


@pytest.fixture
def store(session_factory, sleeps) -> AvailabilityStore:
    return AvailabilityStore(session_factory, max_attempts=3, backoff_seconds=0.01, sleep=sleeps.append)


@pytest.fixture
def defaults(store) -> DefaultAvailabilities:
    return DefaultAvailabilities(store)


# ─────────────────────────────────────────────────────────────────────────────
# Member Directory Fixtures
# ─────────────────────────────────────────────────────────────────────────────


ROSTER = [
    # number, first, last, qualifications, [(unit, team)]
    (1, "Ada", "Lovelace", ["VR-ACC", "FRL3-ACC", "FRL2-ARCC", "FRL1-ACC"], [("WOL", "Alpha")]),
    (2, "Grace", "Hopper", ["FRL2-ARCC", "FRL1-ACC"], [("WOL", "Alpha")]),
    (3, "Alan", "Turing", ["FRL1-ACC", "CL1-ACC"], [("WOL", "Bravo")]),
    (4, "Edsger", "Dijkstra", [], [("KMA", "Charlie")]),
    (5, "Barbara", "Liskov", ["VR-ACC"], [("WOL", None), ("KMA", "Charlie")]),
]


@pytest.fixture
def members_db(session_factory) -> MembersDb:
    with session_factory() as db:
        for number, first, last, quals, units in ROSTER:
            db.add(MemberRow(number=number, first_name=first, last_name=last, qualifications_json=json.dumps(quals)))
            for code, team in units:
                db.add(MemberUnit(member=number, code=code, team=team))
        db.commit()
    return MembersDb(session_factory)
