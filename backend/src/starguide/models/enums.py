"""Closed vocabularies shared by the catalog, roster and scoring models."""

from enum import Enum


class Role(str, Enum):
    """Combat role a character can fill in a team."""

    DPS = "DPS"
    SUPPORT_DPS = "Support DPS"
    AMPLIFIER = "Amplifier"
    SUSTAIN = "Sustain"


class TeammateRating(str, Enum):
    """Letter rating for a teammate recommendation."""

    S_PLUS = "S+"
    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class GranularRating(str, Enum):
    """Finer letter rating used for whole-team scores."""

    S_PLUS = "S+"
    S = "S"
    S_MINUS = "S-"
    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D = "D"


class TierRating(str, Enum):
    """Catalog tier, T-1 (best) through T5 (worst)."""

    T_MINUS_1 = "T-1"
    T_MINUS_HALF = "T-0.5"
    T0 = "T0"
    T0_5 = "T0.5"
    T1 = "T1"
    T1_5 = "T1.5"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"
    T5 = "T5"


class GameMode(str, Enum):
    """Endgame modes with independent tier lists."""

    MOC = "moc"  # Memory of Chaos
    PF = "pf"  # Pure Fiction
    AS = "as"  # Apocalyptic Shadow


class Element(str, Enum):
    PHYSICAL = "Physical"
    FIRE = "Fire"
    ICE = "Ice"
    LIGHTNING = "Lightning"
    WIND = "Wind"
    QUANTUM = "Quantum"
    IMAGINARY = "Imaginary"


class CharacterPath(str, Enum):
    DESTRUCTION = "Destruction"
    HUNT = "Hunt"
    ERUDITION = "Erudition"
    HARMONY = "Harmony"
    NIHILITY = "Nihility"
    PRESERVATION = "Preservation"
    ABUNDANCE = "Abundance"
    REMEMBRANCE = "Remembrance"


class Ownership(str, Enum):
    """Roster ownership status."""

    OWNED = "owned"
    CONCEPT = "concept"  # Planning to pull, treated as owned for team building
    NONE = "none"


class LightConeSource(str, Enum):
    SIGNATURE = "signature"
    STANDARD = "standard"
    EVENT = "event"
    HERTA_STORE = "herta-store"
    BATTLE_PASS = "battle-pass"
    CRAFTABLE = "craftable"


class TeamStructure(str, Enum):
    """Fixed team-shape templates."""

    HYPERCARRY = "hypercarry"  # 1 DPS + 2 Amplifier + 1 Sustain
    DUAL_CARRY = "dual-carry"  # 2 DPS + 1 Amplifier + 1 Sustain
    SUSTAINLESS = "sustainless"  # 1 DPS + 3 Amplifier


class TeamStatusType(str, Enum):
    """How much a candidate helps one team."""

    FILLS = "fills"
    UPGRADES = "upgrades"
    SIDEGRADE = "sidegrade"
    LOW = "low"


class BuildStatusType(str, Enum):
    """How ready a roster is to field a candidate DPS."""

    READY = "ready"
    ALMOST = "almost"
    PARTIAL = "partial"
    HARD = "hard"


class VerdictLevel(str, Enum):
    """Pull-advisor verdict buckets (support and DPS framings)."""

    CRITICAL = "critical"
    STRONG = "strong"
    FLEX = "flex"
    SKIP = "skip"
    READY = "ready"
    VIABLE = "viable"
    WEAK = "weak"


class SynergyConfidence(str, Enum):
    """Which sides of a pair hold an explicit rating of the other."""

    MUTUAL = "mutual"
    FOCAL_ONLY = "focal-only"
    TEAMMATE_ONLY = "teammate-only"
    NONE = "none"


class ModalId(str, Enum):
    AUTH = "auth"
    FEEDBACK_NOTIFICATION = "feedback-notification"
    CHANGELOG = "changelog"
    ONBOARDING = "onboarding"
    SURVEY = "survey"
