"""Data models for the Starguide team engine."""

from starguide.models.enums import (
    BuildStatusType,
    CharacterPath,
    Element,
    GameMode,
    GranularRating,
    LightConeSource,
    ModalId,
    Ownership,
    Role,
    SynergyConfidence,
    TeammateRating,
    TeamStatusType,
    TeamStructure,
    TierRating,
    VerdictLevel,
)
from starguide.models.character import (
    Character,
    CharacterInvestment,
    CharacterTiers,
    Composition,
    CompositionStructure,
    CuratedTeam,
    EidolonDefinition,
    LightConeDefinition,
    TeammateRec,
    Teammates,
)
from starguide.models.roster import (
    Roster,
    UserInvestment,
    create_default_investment,
    migrate_roster,
    needs_migration,
)
from starguide.models.teams import (
    BidirectionalScore,
    EnrichedTeammate,
    GeneratedTeam,
    ModeTeamRating,
    SupportTeamResult,
    TeamMemberContribution,
    TeamSynergy,
)
from starguide.models.analysis import (
    DPSTeamBuildingAnalysis,
    PullVerdict,
    TeamAnalysis,
    WantedByEntry,
)

__all__ = [
    "BuildStatusType",
    "CharacterPath",
    "Element",
    "GameMode",
    "GranularRating",
    "LightConeSource",
    "ModalId",
    "Ownership",
    "Role",
    "SynergyConfidence",
    "TeammateRating",
    "TeamStatusType",
    "TeamStructure",
    "TierRating",
    "VerdictLevel",
    "Character",
    "CharacterInvestment",
    "CharacterTiers",
    "Composition",
    "CompositionStructure",
    "CuratedTeam",
    "EidolonDefinition",
    "LightConeDefinition",
    "TeammateRec",
    "Teammates",
    "Roster",
    "UserInvestment",
    "create_default_investment",
    "migrate_roster",
    "needs_migration",
    "BidirectionalScore",
    "EnrichedTeammate",
    "GeneratedTeam",
    "ModeTeamRating",
    "SupportTeamResult",
    "TeamMemberContribution",
    "TeamSynergy",
    "DPSTeamBuildingAnalysis",
    "PullVerdict",
    "TeamAnalysis",
    "WantedByEntry",
]
