"""
Default availability template: one row per member (or member + unit). Entries are offsets from
origin, stored as JSON so the template is always replaced wholesale.
"""
from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.sql import func

from wol_availability.db.base import Base


class DefaultAvailability(Base):
    __tablename__ = "default_availabilities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member = Column(Integer, nullable=False, index=True)
    unit = Column(String(16), nullable=True)
    origin = Column(DateTime(timezone=True), nullable=False)
    entries_json = Column(Text, nullable=False, default="[]")  # [{offset_start, offset_end, storm, rescue}] in seconds
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (UniqueConstraint("member", "unit", name="uq_default_availabilities_member_unit"),)
