from wol_availability.models.availability_interval import AvailabilityInterval
from wol_availability.models.default_availability import DefaultAvailability
from wol_availability.models.member import Member, MemberUnit

__all__ = [
    "AvailabilityInterval",
    "DefaultAvailability",
    "Member",
    "MemberUnit",
]
