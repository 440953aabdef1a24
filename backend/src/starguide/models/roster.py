"""Player roster: per-character ownership and investment."""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from starguide.models.enums import Ownership


class UserInvestment(BaseModel):
    """What the player actually has for one character."""

    model_config = ConfigDict(frozen=True)

    ownership: Ownership = Ownership.OWNED
    eidolon_level: int = Field(default=0, ge=0, le=6)
    # None or "generic" means no recommended light cone is equipped
    light_cone_id: Optional[str] = None
    light_cone_superimposition: Optional[int] = Field(default=None, ge=1, le=5)

    @property
    def is_owned(self) -> bool:
        return self.ownership != Ownership.NONE


# Roster snapshot: character id -> investment
Roster = Mapping[str, UserInvestment]


def create_default_investment(ownership: Ownership | str = Ownership.OWNED) -> UserInvestment:
    """Investment for a character just added to the roster: E0, no light cone."""
    return UserInvestment(ownership=Ownership(ownership))


def is_legacy_ownership(value: Any) -> bool:
    """True for the old roster format, a bare ownership string."""
    return isinstance(value, str) and value in {o.value for o in Ownership}


def needs_migration(entries: Mapping[str, Any]) -> bool:
    """Check the first roster entry for the legacy string format."""
    if not entries:
        return False
    first = next(iter(entries.values()))
    return isinstance(first, str)


def migrate_roster(entries: Mapping[str, Any]) -> dict[str, UserInvestment]:
    """Convert a legacy roster to investment records.

    Safe to call repeatedly: entries already in the new format are kept,
    dict payloads are validated into UserInvestment.
    """
    migrated: dict[str, UserInvestment] = {}
    for character_id, value in entries.items():
        if is_legacy_ownership(value):
            migrated[character_id] = create_default_investment(value)
        elif isinstance(value, UserInvestment):
            migrated[character_id] = value
        else:
            migrated[character_id] = UserInvestment.model_validate(value)
    return migrated


def owned_ids_from_roster(roster: Roster) -> set[str]:
    """Ids the player owns or plans to pull."""
    return {character_id for character_id, inv in roster.items() if inv.is_owned}
