"""Member directory shapes consumed by the availability core (statistics, available-at filters)."""
from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from wol_availability.core.constants import PERMISSION_EDIT_SELF


class UnitMembership(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    team: str | None = None
    permission: str = PERMISSION_EDIT_SELF


class Member(BaseModel):
    number: int
    first_name: str
    last_name: str
    rank: str | None = None
    mobile: str | None = None
    qualifications: list[str] = Field(default_factory=list)
    units: list[UnitMembership] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def has_qualification(self, code: str) -> bool:
        return code in self.qualifications

    def belongs_to(self, unit: str | None) -> bool:
        """True for any member when unit is None."""
        return unit is None or any(u.code == unit for u in self.units)

    def team_for(self, unit: str | None) -> str | None:
        """Team within unit; with no unit, the team of the member's first unit."""
        for u in self.units:
            if unit is None or u.code == unit:
                return u.team
        return None


class MemberFilter(BaseModel):
    units_any: list[str] | None = None
    qualifications_any: list[str] | None = None


class MemberDirectory(Protocol):
    def fetch_all_members(self, filter: MemberFilter | None = None) -> list[Member]:
        ...

    def fetch_members(self, numbers: Sequence[int]) -> list[Member | None]:
        """Same order as numbers; None where a number is unknown (e.g. resigned)."""
        ...
