"""
Member directory backed by the members / member_units tables (read-only here; HR sync writes them).
"""
import json
import logging
from collections.abc import Callable, Sequence

from sqlalchemy.orm import Session

from wol_availability.core.constants import QUALIFICATION_NAMES
from wol_availability.db.session import SessionLocal
from wol_availability.models.member import Member as MemberRow
from wol_availability.models.member import MemberUnit
from wol_availability.services.members.types import Member, MemberFilter, UnitMembership

logger = logging.getLogger(__name__)


def _parse_qualifications_json(js: str | None) -> list[str]:
    if not js:
        return []
    try:
        return [str(q) for q in json.loads(js) if q]
    except (TypeError, json.JSONDecodeError):
        logger.warning("Ignoring malformed qualifications_json: %r", js)
        return []


def _to_member(row: MemberRow) -> Member:
    return Member(
        number=row.number,
        first_name=row.first_name,
        last_name=row.last_name,
        rank=row.rank,
        mobile=row.mobile,
        qualifications=_parse_qualifications_json(row.qualifications_json),
        units=[UnitMembership.model_validate(u) for u in row.units],
    )


class MembersDb:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def fetch_all_members(self, filter: MemberFilter | None = None) -> list[Member]:
        with self.session_factory() as db:
            q = db.query(MemberRow)
            if filter and filter.units_any:
                q = q.filter(MemberRow.units.any(MemberUnit.code.in_(filter.units_any)))
            members = [_to_member(r) for r in q.order_by(MemberRow.number).all()]
        if filter and filter.qualifications_any:
            wanted = set(filter.qualifications_any)
            members = [m for m in members if wanted.intersection(m.qualifications)]
        return members

    def fetch_members(self, numbers: Sequence[int]) -> list[Member | None]:
        """Order matches numbers; None for numbers not in the directory."""
        if not numbers:
            return []
        with self.session_factory() as db:
            rows = db.query(MemberRow).filter(MemberRow.number.in_(sorted(set(numbers)))).all()
            by_number = {r.number: _to_member(r) for r in rows}
        return [by_number.get(n) for n in numbers]

    def fetch_member(self, number: int) -> Member | None:
        return self.fetch_members([number])[0]

    def fetch_teams(self, unit: str | None = None) -> list[str]:
        with self.session_factory() as db:
            q = db.query(MemberUnit.team).filter(MemberUnit.team.isnot(None))
            if unit is not None:
                q = q.filter(MemberUnit.code == unit)
            return sorted({t for (t,) in q.distinct().all()})

    def fetch_qualifications(self) -> list[dict[str, str]]:
        """Qualifications held by at least one member: [{code, name}] sorted by code."""
        with self.session_factory() as db:
            rows = db.query(MemberRow.qualifications_json).all()
        codes = set()
        for (js,) in rows:
            codes.update(_parse_qualifications_json(js))
        return [{"code": c, "name": QUALIFICATION_NAMES.get(c, c)} for c in sorted(codes)]
