"""
British Parliamentary roles, teams and benches.

BP FORMAT:
==========
Four teams of two speakers, eight speeches in a fixed order:

    PM  (OG)  →  LO  (OO)  →  DPM (OG)  →  DLO (OO)
    MG  (CG)  →  MO  (CO)  →  GW  (CG)  →  OW  (CO)

OG/CG sit on the Government bench, OO/CO on the Opposition bench.

These tables never change at runtime, so they are exposed as read-only
mappings. Every service looks roles up here instead of keeping its own copy.
"""

from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    """The eight speaker roles."""
    PM = "PM"
    LO = "LO"
    DPM = "DPM"
    DLO = "DLO"
    MG = "MG"
    MO = "MO"
    GW = "GW"
    OW = "OW"


class Team(str, Enum):
    """The four BP teams."""
    OG = "OG"
    OO = "OO"
    CG = "CG"
    CO = "CO"


class Side(str, Enum):
    """The two benches. Values double as display names."""
    GOVERNMENT = "Government"
    OPPOSITION = "Opposition"


# =============================================================================
# LOOKUP TABLES
# =============================================================================

SPEAKING_ORDER: tuple[Role, ...] = (
    Role.PM, Role.LO, Role.DPM, Role.DLO, Role.MG, Role.MO, Role.GW, Role.OW,
)

# Insertion order here is also the ranking tie-break order
TEAM_ORDER: tuple[Team, ...] = (Team.OG, Team.OO, Team.CG, Team.CO)

ROLE_TEAMS = MappingProxyType({
    Role.PM: Team.OG,
    Role.DPM: Team.OG,
    Role.LO: Team.OO,
    Role.DLO: Team.OO,
    Role.MG: Team.CG,
    Role.GW: Team.CG,
    Role.MO: Team.CO,
    Role.OW: Team.CO,
})

ROLE_NAMES = MappingProxyType({
    Role.PM: "Prime Minister",
    Role.LO: "Leader of Opposition",
    Role.DPM: "Deputy Prime Minister",
    Role.DLO: "Deputy Leader of Opposition",
    Role.MG: "Member of Government",
    Role.MO: "Member of Opposition",
    Role.GW: "Government Whip",
    Role.OW: "Opposition Whip",
})

TEAM_NAMES = MappingProxyType({
    Team.OG: "Opening Government",
    Team.OO: "Opening Opposition",
    Team.CG: "Closing Government",
    Team.CO: "Closing Opposition",
})

TEAM_SIDES = MappingProxyType({
    Team.OG: Side.GOVERNMENT,
    Team.CG: Side.GOVERNMENT,
    Team.OO: Side.OPPOSITION,
    Team.CO: Side.OPPOSITION,
})

# The team directly across the floor (same half of the room)
OPPOSING_TEAMS = MappingProxyType({
    Team.OG: Team.OO,
    Team.OO: Team.OG,
    Team.CG: Team.CO,
    Team.CO: Team.CG,
})

GOVERNMENT_ROLES = frozenset(r for r, t in ROLE_TEAMS.items() if TEAM_SIDES[t] is Side.GOVERNMENT)
OPPOSITION_ROLES = frozenset(r for r, t in ROLE_TEAMS.items() if TEAM_SIDES[t] is Side.OPPOSITION)


# =============================================================================
# HELPERS
# =============================================================================

def parse_role(code: str | None) -> Role | None:
    """Return the Role for a code like "PM", or None if it is not a BP role."""
    if not code:
        return None
    try:
        return Role(code)
    except ValueError:
        return None


def role_name(code: str) -> str:
    """Full role name, falling back to the raw code for unknown roles."""
    role = parse_role(code)
    return ROLE_NAMES[role] if role else code


def team_for(code: str | None, default: Team = Team.OG) -> Team:
    role = parse_role(code)
    return ROLE_TEAMS[role] if role else default


def side_for(code: str | None) -> Side | None:
    role = parse_role(code)
    if role is None:
        return None
    return TEAM_SIDES[ROLE_TEAMS[role]]


def is_government(code: str | None) -> bool:
    return side_for(code) is Side.GOVERNMENT


def is_opposition(code: str | None) -> bool:
    return side_for(code) is Side.OPPOSITION


def same_bench(a: str, b: str) -> bool:
    side_a, side_b = side_for(a), side_for(b)
    return side_a is not None and side_a is side_b


def opposing_benches(a: str, b: str) -> bool:
    side_a, side_b = side_for(a), side_for(b)
    return side_a is not None and side_b is not None and side_a is not side_b
