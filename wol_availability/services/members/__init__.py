"""
Member directory: the roster read model used for statistics and available-at filters.
"""
from wol_availability.services.members.directory import MembersDb
from wol_availability.services.members.types import Member, MemberDirectory, MemberFilter, UnitMembership

__all__ = ["Member", "MemberDirectory", "MemberFilter", "MembersDb", "UnitMembership"]
