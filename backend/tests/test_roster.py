"""Tests for roster models and legacy migration."""
import pytest
from pydantic import ValidationError

from starguide.models.enums import Ownership
from starguide.models.roster import (
    UserInvestment,
    create_default_investment,
    migrate_roster,
    needs_migration,
    owned_ids_from_roster,
)


def test_default_investment_is_e0_without_light_cone():
    investment = create_default_investment("concept")
    assert investment.ownership == Ownership.CONCEPT
    assert investment.eidolon_level == 0
    assert investment.light_cone_id is None
    assert investment.is_owned


def test_eidolon_level_is_bounded():
    with pytest.raises(ValidationError):
        UserInvestment(eidolon_level=7)


def test_needs_migration_checks_first_entry():
    assert needs_migration({"seele": "owned"})
    assert not needs_migration({"seele": {"ownership": "owned", "eidolon_level": 2}})
    assert not needs_migration({})


def test_migrate_roster_converts_legacy_entries():
    """Legacy strings become default investments, dicts are validated."""
    migrated = migrate_roster({
        "seele": "owned",
        "sparkle": {"ownership": "owned", "eidolon_level": 1, "light_cone_id": "earthly-escapade"},
        "natasha": "none",
    })
    assert migrated["seele"] == create_default_investment()
    assert migrated["sparkle"].eidolon_level == 1
    assert migrated["natasha"].ownership == Ownership.NONE


def test_migrate_roster_is_idempotent():
    once = migrate_roster({"seele": "owned", "fu-xuan": "concept"})
    assert migrate_roster(once) == once


def test_owned_ids_include_concept():
    roster = migrate_roster({"seele": "owned", "fu-xuan": "concept", "natasha": "none"})
    assert owned_ids_from_roster(roster) == {"seele", "fu-xuan"}
