"""Value types for the availability core. Same shape whether the data came from the store or a caller.

ORM rows never leave a session; reads convert them to these models (from_attributes).
All instants are timezone-aware UTC.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wol_availability.core.constants import Rescue, Storm
from wol_availability.services.availability.intervals import TimeRange


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (e.g. read back from SQLite) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PartitionKey(NamedTuple):
    """Independent timeline: a member, or a member within one unit."""

    member: int
    unit: str | None = None

    @classmethod
    def of(cls, key: "PartitionKey | int | tuple") -> "PartitionKey":
        if isinstance(key, PartitionKey):
            return key
        if isinstance(key, int) and not isinstance(key, bool):
            return cls(key)
        if isinstance(key, tuple) and len(key) == 2:
            return cls(int(key[0]), key[1])
        raise TypeError(f"Not a partition key: {key!r}")


class Availability(BaseModel):
    """One interval [start, end) of a member's timeline."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int | None = None
    member: int
    unit: str | None = None
    start: datetime
    end: datetime
    storm: Storm | None = None
    rescue: Rescue | None = None

    @field_validator("start", "end", mode="after")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @property
    def key(self) -> PartitionKey:
        return PartitionKey(self.member, self.unit)

    @property
    def range(self) -> TimeRange:
        return TimeRange(self.start, self.end)

    @property
    def is_available(self) -> bool:
        return self.storm == Storm.AVAILABLE or self.rescue in (Rescue.IMMEDIATE, Rescue.SUPPORT)

    def to_row(self) -> dict[str, Any]:
        """Column values for an availability_intervals insert (id left to the database)."""
        return {
            "member": self.member,
            "unit": self.unit,
            "start": self.start,
            "end": self.end,
            "storm": self.storm.value if self.storm else None,
            "rescue": self.rescue.value if self.rescue else None,
        }


class TemplateEntry(BaseModel):
    """One template interval, as offsets from the template origin."""

    model_config = ConfigDict(frozen=True)

    offset_start: timedelta
    offset_end: timedelta
    storm: Storm | None = None
    rescue: Rescue | None = None

    @classmethod
    def from_interval(
        cls,
        origin: datetime,
        start: datetime,
        end: datetime,
        storm: Storm | None = None,
        rescue: Rescue | None = None,
    ) -> "TemplateEntry":
        origin = as_utc(origin)
        return cls(
            offset_start=as_utc(start) - origin,
            offset_end=as_utc(end) - origin,
            storm=storm,
            rescue=rescue,
        )

    @property
    def range(self) -> TimeRange:
        return TimeRange(self.offset_start, self.offset_end)

    def to_json(self) -> dict[str, Any]:
        return {
            "offset_start": self.offset_start.total_seconds(),
            "offset_end": self.offset_end.total_seconds(),
            "storm": self.storm.value if self.storm else None,
            "rescue": self.rescue.value if self.rescue else None,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TemplateEntry":
        return cls(
            offset_start=timedelta(seconds=data["offset_start"]),
            offset_end=timedelta(seconds=data["offset_end"]),
            storm=data.get("storm"),
            rescue=data.get("rescue"),
        )


class DefaultTemplate(BaseModel):
    member: int
    unit: str | None = None
    origin: datetime
    entries: list[TemplateEntry] = Field(default_factory=list)

    @field_validator("origin", mode="after")
    @classmethod
    def to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


# ---------------------------------------------------------------------------
# Statistics results (derived, never persisted)
# ---------------------------------------------------------------------------


class RescueCount(BaseModel):
    immediate: int = 0
    support: int = 0


class StatisticsBucket(BaseModel):
    start: datetime
    end: datetime
    storm: int = 0
    vr: RescueCount = Field(default_factory=RescueCount)
    fr_in_water: RescueCount = Field(default_factory=RescueCount)  # FR L3
    fr_on_water: RescueCount = Field(default_factory=RescueCount)  # FR L2
    fr_on_land: RescueCount = Field(default_factory=RescueCount)  # FR L1 only


class MemberSummary(BaseModel):
    """Seconds within the window spent in each state."""

    member: int
    storm: float = 0.0
    rescue_immediate: float = 0.0
    rescue_support: float = 0.0
    rescue_unavailable: float = 0.0


class TeamSummary(BaseModel):
    team: str | None
    members: int = 0
    entered_storm: int = 0


class Statistics(BaseModel):
    start: datetime
    end: datetime
    unit: str | None = None
    counts: list[StatisticsBucket] = Field(default_factory=list)
    members: list[MemberSummary] = Field(default_factory=list)
    teams: list[TeamSummary] = Field(default_factory=list)
