"""One row per availability interval [start, end) of a member (optionally scoped to a unit).
Rows for the same partition key never overlap; only the store's write path creates, trims or splits them."""
from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String

from wol_availability.db.base import Base


class AvailabilityInterval(Base):
    __tablename__ = "availability_intervals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member = Column(Integer, nullable=False)
    unit = Column(String(16), nullable=True)  # NULL = member-wide timeline
    start = Column(DateTime(timezone=True), nullable=False)
    end = Column(DateTime(timezone=True), nullable=False)
    storm = Column(String(16), nullable=True)  # AVAILABLE / UNAVAILABLE / NULL = unset
    rescue = Column(String(16), nullable=True)  # IMMEDIATE / SUPPORT / UNAVAILABLE / NULL = unset

    __table_args__ = (
        CheckConstraint('"start" < "end"', name="ck_availability_intervals_range"),
        Index("ix_availability_intervals_member_range", "member", "start", "end"),
        Index("ix_availability_intervals_range", "start", "end"),
    )
