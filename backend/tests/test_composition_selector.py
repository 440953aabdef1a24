"""Tests for composition selection."""
import pytest

from starguide.models.character import Character
from starguide.models.enums import GameMode, TeammateRating
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.composition_selector import CompositionSelector


@pytest.fixture
def selector():
    return CompositionSelector()


@pytest.fixture
def catalog():
    return CharacterCatalog()


@pytest.fixture
def override_character():
    return Character.model_validate({
        "id": "carry",
        "name": "Carry",
        "path": "Hunt",
        "roles": ["DPS"],
        "base_teammates": {
            "amplifiers": [
                {"id": "amp-a", "rating": "A", "reason": "Buffs"},
                {"id": "amp-b", "rating": "B"},
            ],
            "sustains": [{"id": "healer", "rating": "S"}],
        },
        "compositions": [{
            "id": "special",
            "name": "Special",
            "core": [{"character_id": "amp-a"}],
            "teammate_overrides": {
                "amplifiers": [
                    {"id": "amp-b", "rating": "S+"},
                    {"id": "amp-new", "rating": "A", "reason": "Only here"},
                    {"id": "amp-ghost"},
                ],
                "sustains": [{"id": "healer", "excluded": True}],
            },
        }],
    })


def test_teammates_without_composition_are_base(selector, override_character):
    teammates = selector.teammates_for_composition(override_character)
    assert teammates is override_character.base_teammates


def test_overrides_modify_append_and_exclude(selector, override_character):
    teammates = selector.teammates_for_composition(override_character, "special")

    amplifiers = {rec.id: rec for rec in teammates.amplifiers}
    assert list(amplifiers) == ["amp-a", "amp-b", "amp-new"]
    assert amplifiers["amp-b"].rating == TeammateRating.S_PLUS
    assert amplifiers["amp-new"].reason == "Only here"
    assert teammates.sustains == []


def test_unknown_composition_falls_back_to_base(selector, override_character):
    teammates = selector.teammates_for_composition(override_character, "missing")
    assert teammates is override_character.base_teammates


def test_override_keeps_reason_when_unset(selector, catalog):
    """acheron-flex raises Sparkle from B to A with its own reason."""
    acheron = catalog.get_character("acheron")
    flex = selector.teammates_for_composition(acheron, "acheron-flex")
    sparkle = next(rec for rec in flex.amplifiers if rec.id == "sparkle")
    assert sparkle.rating == TeammateRating.A
    assert sparkle.reason == "Skill points for Pela and Silver Wolf"

    base = next(rec for rec in acheron.base_teammates.amplifiers if rec.id == "sparkle")
    assert base.rating == TeammateRating.B


def test_find_teammate_rec(selector, catalog):
    kafka = catalog.get_character("kafka")
    assert selector.find_teammate_rec(kafka, "black-swan").rating == TeammateRating.S_PLUS
    assert selector.find_teammate_rec(kafka, "sparkle") is None


def test_excluded_ids(selector, override_character):
    special = selector.composition_by_id(override_character, "special")
    assert selector.excluded_ids(special) == {"healer"}
    assert selector.excluded_ids(None) == set()


def test_meets_requirements_counts_paths(selector, catalog):
    """Double Nihility needs two Nihility characters, Acheron included."""
    acheron = catalog.get_character("acheron")
    primary = selector.primary_composition(acheron)

    assert not selector.meets_requirements(primary, catalog.characters_by_ids(["acheron", "sparkle"]))
    assert selector.meets_requirements(primary, catalog.characters_by_ids(["acheron", "pela"]))


def test_meets_requirements_core(selector, override_character):
    special = selector.composition_by_id(override_character, "special")
    amp = Character(id="amp-a", name="Amp A", path="Harmony", roles=["Amplifier"])
    assert selector.meets_requirements(special, [amp])
    assert not selector.meets_requirements(special, [])


def test_find_accessible_composition_prefers_eligible_primary(selector, catalog):
    acheron = catalog.get_character("acheron")
    owned = catalog.characters_by_ids(["acheron", "pela", "jiaoqiu"])
    assert selector.find_accessible_composition(acheron, owned).id == "acheron-nihility"


def test_find_accessible_composition_falls_back(selector, catalog):
    acheron = catalog.get_character("acheron")
    owned = catalog.characters_by_ids(["acheron", "sparkle"])
    assert selector.find_accessible_composition(acheron, owned).id == "acheron-flex"


def test_find_accessible_composition_none(selector, catalog, override_character):
    assert selector.find_accessible_composition(override_character, []) is None
    assert selector.find_accessible_composition(catalog.get_character("seele"), []) is None


def test_weak_mode_penalty(selector, catalog):
    flex = selector.composition_by_id(catalog.get_character("acheron"), "acheron-flex")
    assert selector.weak_mode_penalty(flex, GameMode.PF) == pytest.approx(0.85)
    assert selector.weak_mode_penalty(flex, "moc") == 1.0
    assert selector.weak_mode_penalty(None, GameMode.PF) == 1.0


def test_structure_defaults_to_hypercarry(selector, catalog):
    structure = selector.structure_for(None)
    assert structure.matches(1, 2, 1)
    kafka_dot = selector.primary_composition(catalog.get_character("kafka"))
    assert selector.structure_for(kafka_dot).matches(2, 1, 1)


def test_is_support_in_composition(selector, catalog):
    acheron = catalog.get_character("acheron")
    nihility = selector.composition_by_id(acheron, "acheron-nihility")
    flex = selector.composition_by_id(acheron, "acheron-flex")

    assert selector.is_support_in_composition(catalog.get_character("jiaoqiu"), acheron, nihility)
    assert selector.is_support_in_composition(catalog.get_character("sparkle"), acheron, flex)
    assert not selector.is_support_in_composition(catalog.get_character("robin"), acheron, flex)
