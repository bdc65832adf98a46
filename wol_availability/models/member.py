"""
Member directory read model. Rows are written by the HR sync (outside this package);
the availability core only reads them.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from wol_availability.db.base import Base


class Member(Base):
    __tablename__ = "members"

    number = Column(Integer, primary_key=True, autoincrement=False)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    rank = Column(String(64), nullable=True)
    mobile = Column(String(32), nullable=True)
    qualifications_json = Column(Text, nullable=True)  # JSON list of qualification codes

    units = relationship("MemberUnit", back_populates="member_row", lazy="selectin", order_by="MemberUnit.id")


class MemberUnit(Base):
    __tablename__ = "member_units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    member = Column(Integer, ForeignKey("members.number", ondelete="CASCADE"), nullable=False, index=True)
    code = Column(String(16), nullable=False, index=True)
    team = Column(String(64), nullable=True)
    permission = Column(String(16), nullable=False, default="EDIT_SELF")

    member_row = relationship("Member", back_populates="units")
