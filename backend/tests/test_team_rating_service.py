"""Tests for team rating service."""
import pytest

from starguide.models.enums import GameMode, GranularRating, TeammateRating, TierRating
from starguide.models.teams import GeneratedTeam, ModeTeamRating
from starguide.repositories.catalog_repository import CharacterCatalog
from starguide.services.team_rating_service import TeamRatingService


@pytest.fixture
def catalog():
    return CharacterCatalog.from_records(
        [
            {
                "id": "carry",
                "name": "Carry",
                "path": "Hunt",
                "roles": ["DPS"],
                "base_teammates": {
                    "amplifiers": [{"id": "amp", "rating": "S", "reason": "Buff"}],
                    "sustains": [{"id": "healer", "rating": "A"}],
                },
            },
            {"id": "carry-two", "name": "Carry Two", "path": "Erudition", "roles": ["DPS"]},
            {
                "id": "amp",
                "name": "Amp",
                "path": "Harmony",
                "roles": ["Amplifier"],
                "base_teammates": {"dps": [{"id": "carry", "rating": "S", "reason": "Target"}]},
            },
            {"id": "amp-two", "name": "Amp Two", "path": "Nihility", "roles": ["Amplifier"]},
            {"id": "healer", "name": "Healer", "path": "Abundance", "roles": ["Sustain"]},
        ],
        tiers={
            "carry": {"moc": {"DPS": "T1"}},
            "carry-two": {"moc": {"DPS": "T0"}},
            "amp": {"moc": {"Amplifier": "T0"}},
            "amp-two": {"moc": {"Amplifier": "T1"}},
            "healer": {"moc": {"Sustain": "T1"}},
        },
    )


@pytest.fixture
def service(catalog):
    return TeamRatingService(catalog)


@pytest.fixture
def hypercarry(catalog):
    return catalog.characters_by_ids(["carry", "amp", "amp-two", "healer"])


def test_mode_rating_empty_team(service):
    rating = service.calculate_mode_team_rating([], GameMode.MOC)
    assert rating.tier == TierRating.T5
    assert rating.score == 0
    assert rating.label == "Memory of Chaos"


def test_mode_rating_single_member_uses_empty_side_default(service, catalog):
    """1 * 0.6 + 2.5 * 0.4 = 1.6 with no synergy penalty."""
    rating = service.calculate_mode_team_rating([catalog.get_character("carry")], GameMode.MOC)
    assert rating.tier == TierRating.T1_5
    assert rating.score == pytest.approx(68)


def test_mode_rating_includes_synergy_penalty(service, hypercarry):
    """Weighted tiers 0.867 plus (5 - 2.867) * 0.35 from pair scores 5.0, 0 and 3.6."""
    rating = service.calculate_mode_team_rating(hypercarry, GameMode.MOC)
    assert rating.score == pytest.approx(100 - (4.84 / 3) * 20)
    assert rating.tier == TierRating.T1_5


def test_all_mode_ratings_cover_every_mode(service, hypercarry):
    ratings = service.calculate_all_mode_ratings(hypercarry)
    assert [r.mode for r in ratings] == [GameMode.MOC, GameMode.PF, GameMode.AS]
    assert ratings[1].label == "Pure Fiction"


def test_calculate_team_score(service, catalog):
    """Inverted tiers plus ratings: 80 + (100 + 100) + (80 + 60)."""
    score = service.calculate_team_score(
        catalog.get_character("carry"),
        [(catalog.get_character("amp"), None), (catalog.get_character("healer"), TeammateRating.B)],
        GameMode.MOC,
    )
    assert score == pytest.approx(420)


def test_calculate_team_score_unrated_teammate_adds_tier_only(service, catalog):
    score = service.calculate_team_score(
        catalog.get_character("carry"), [(catalog.get_character("amp-two"), None)], GameMode.MOC
    )
    assert score == pytest.approx(80 + 80)


def test_team_synergy_single_carry(service, hypercarry):
    """Tier total 340 plus pair scores (5.0 + 0 + 3.6) * 20."""
    synergy = service.calculate_team_synergy(hypercarry)

    assert synergy.score == pytest.approx(512)
    assert synergy.rating == GranularRating.S
    assert synergy.key_synergies == ["Amp: Buff"]
    assert synergy.team_summary == "Built around Carry"
    assert synergy.contributions[0].role == "Main DPS"
    assert synergy.contributions[0].reason == "Primary damage dealer"
    assert "Amp Two: Amplifier for the team" in synergy.reasoning


def test_team_synergy_dual_carry(service, catalog):
    team = catalog.characters_by_ids(["carry", "carry-two", "amp", "healer"])
    synergy = service.calculate_team_synergy(team)
    assert synergy.team_summary == "Dual-carry composition"
    assert [c.role for c in synergy.contributions[:2]] == ["Main DPS", "Sub DPS"]


def test_team_synergy_needs_two_members(service, catalog):
    synergy = service.calculate_team_synergy([catalog.get_character("carry")])
    assert synergy.score == 0
    assert synergy.rating == GranularRating.D


def test_generate_team_name(catalog):
    carry = catalog.get_character("carry")
    name = TeamRatingService.generate_team_name

    assert name(catalog.characters_by_ids(["carry", "amp", "amp-two", "healer"]), carry) == "Carry Hypercarry"
    assert name(catalog.characters_by_ids(["carry", "amp", "amp-two"]), carry) == "Carry Sustainless"
    assert name(catalog.characters_by_ids(["carry", "carry-two", "amp", "healer"]), carry) == "Carry/Carry Two Dual DPS"
    assert name(catalog.characters_by_ids(["carry", "amp", "healer"]), carry) == "Carry Team"


def test_order_team_by_role(catalog):
    team = [catalog.get_character(i) for i in ("healer", "amp-two", "carry", "amp")]
    ordered = TeamRatingService.order_team_by_role(team)
    assert [c.id for c in ordered] == ["carry", "amp", "amp-two", "healer"]


def test_canonical_primary_dps_prefers_better_tier(service, catalog):
    team = catalog.characters_by_ids(["carry", "carry-two", "amp", "healer"])
    assert service.canonical_primary_dps(team, GameMode.MOC).id == "carry-two"
    assert service.canonical_primary_dps(catalog.characters_by_ids(["amp", "healer"]), GameMode.MOC) is None


def test_is_dual_carry_team(catalog):
    assert TeamRatingService.is_dual_carry_team(catalog.characters_by_ids(["carry", "carry-two"]))
    assert not TeamRatingService.is_dual_carry_team(catalog.characters_by_ids(["carry", "amp"]))


def test_ranking_score_curated_s_bonus(service, hypercarry):
    def team(curated, rating):
        return GeneratedTeam(
            characters=hypercarry,
            name="Team",
            rating=rating,
            structure="hypercarry",
            score=0,
            mode_ratings=[ModeTeamRating(GameMode.MOC, TierRating.T1, 80, "Memory of Chaos")],
            curated=curated,
        )

    assert service.ranking_score(team(True, GranularRating.S), GameMode.MOC) == 85
    assert service.ranking_score(team(False, GranularRating.S), GameMode.MOC) == 80
    assert service.ranking_score(team(True, GranularRating.A), GameMode.MOC) == 80
    assert service.ranking_score(team(False, GranularRating.S), GameMode.PF) == 50
