"""
Centralized constants for availability values and qualifications (Encapsulate What Changes).

Change qualification codes or enum values here instead of scattering literals across the
store, statistics and member directory.
"""
from enum import Enum


class Storm(str, Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"


class Rescue(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    SUPPORT = "SUPPORT"
    UNAVAILABLE = "UNAVAILABLE"


# Rescue values that make a member count as available (fetch_available_at, statistics)
RESCUE_AVAILABLE = (Rescue.IMMEDIATE, Rescue.SUPPORT)

# Qualification codes (member_units / members.qualifications_json store codes)
VERTICAL_RESCUE = "VR-ACC"
FLOOD_RESCUE_L1 = "FRL1-ACC"
FLOOD_RESCUE_L2 = "FRL2-ARCC"
FLOOD_RESCUE_L3 = "FRL3-ACC"

# Display names for every code the roster knows about
QUALIFICATION_NAMES = {
    VERTICAL_RESCUE: "Vertical Rescue (PUASAR004B/PUASAR032A)",
    "CL1-ACC": "Chainsaw Operator (Cross-Cut & Limb)",
    "CL2-ACC": "Chainsaw Operator (Tree Felling)",
    "SWDG-ACC": "Storm and Water Damage Operation",
    "SAR1-ACC": "Land Search Team Member",
    FLOOD_RESCUE_L1: "Swiftwater Rescue Awareness (FR L1)",
    FLOOD_RESCUE_L2: "Flood Rescue Boat Operator (FR L2)",
    FLOOD_RESCUE_L3: "Swiftwater Rescue Technician (FR L3)",
}

# Flood rescue tiers, highest first. A member is counted once, in the first tier they hold.
FLOOD_RESCUE_TIERS = (
    ("fr_in_water", FLOOD_RESCUE_L3),
    ("fr_on_water", FLOOD_RESCUE_L2),
    ("fr_on_land", FLOOD_RESCUE_L1),
)

# Member unit permissions (carried on the directory read model; enforced outside the core)
PERMISSION_EDIT_SELF = "EDIT_SELF"
PERMISSION_EDIT_TEAM = "EDIT_TEAM"
PERMISSION_EDIT_UNIT = "EDIT_UNIT"
