from wol_availability.services.availability import (
    AvailabilityLoader,
    AvailabilityStore,
    DefaultAvailabilities,
)
from wol_availability.services.members import MembersDb

__all__ = ["AvailabilityLoader", "AvailabilityStore", "DefaultAvailabilities", "MembersDb"]
