"""Tests for pull advisor."""
import pytest

from starguide.models.analysis import MissingRecommendation, RatedCharacter, TeamAnalysis, TeamStatus
from starguide.models.enums import (
    BuildStatusType,
    TeammateRating,
    TeamStatusType,
    TierRating,
    VerdictLevel,
)
from starguide.repositories.catalog_repository import CharacterNotFoundError
from starguide.services.pull_advisor import PullAdvisor


@pytest.fixture
def advisor():
    return PullAdvisor()


@pytest.fixture
def catalog(advisor):
    return advisor.catalog


def _analysis(catalog, dps_id, status_type, rating, candidate_id="jiaoqiu"):
    """An analysis with two amplifiers and a sustain owned."""
    dps = catalog.get_character(dps_id)
    composition = dps.compositions[0]
    return TeamAnalysis(
        dps=dps,
        composition=composition,
        structure=composition.structure,
        owned_amplifiers=[
            RatedCharacter(catalog.get_character(candidate_id), rating),
            RatedCharacter(catalog.get_character("pela"), TeammateRating.A),
        ],
        owned_sustains=[RatedCharacter(catalog.get_character("aventurine"), TeammateRating.S)],
        owned_sub_dps=[],
        recommended_category="amplifiers",
        recommended_rating=rating,
        status=TeamStatus(status_type, ""),
    )


def test_dps_tier(advisor):
    assert advisor.dps_tier("acheron", "moc") == TierRating.T0
    assert advisor.dps_tier("acheron", "MoC") == TierRating.T0
    assert advisor.dps_tier("seele", "pf") == TierRating.T3
    assert advisor.dps_tier("nobody", "moc") is None


def test_single_critical_gap_verdict(advisor, catalog):
    """Fills for a T0 carry at S with full coverage: 10 * 2.0 * 1.2 * 1.3."""
    analysis = _analysis(catalog, "acheron", TeamStatusType.FILLS, TeammateRating.S)

    verdict = advisor.compute_pull_verdict(
        [analysis], candidate_owned=True, tier_lookup=lambda _: TierRating.T0
    )

    assert verdict.team_scores[0].score == pytest.approx(31.2)
    assert verdict.score == pytest.approx(31.2 * 1.1)
    assert verdict.level == VerdictLevel.CRITICAL
    assert verdict.reason == "Critical for Acheron"


def test_verdict_diminishing_returns_and_breadth(advisor, catalog):
    """31.2 + 9.9 / 2 (Kafka covers 2 of 3 slots), then +20% for two high-rated memberships."""
    fills = _analysis(catalog, "acheron", TeamStatusType.FILLS, TeammateRating.S)
    upgrades = _analysis(catalog, "kafka", TeamStatusType.UPGRADES, TeammateRating.A)
    tiers = {"acheron": TierRating.T0, "kafka": TierRating.T1}

    verdict = advisor.compute_pull_verdict([upgrades, fills], candidate_owned=True, tier_lookup=tiers.get)

    assert [t.dps_name for t in verdict.team_scores] == ["Acheron", "Kafka"]
    assert verdict.score == pytest.approx((31.2 + 9.9 / 2) * 1.2)
    assert verdict.reason == "Critical for Acheron, Upgrades Kafka"


def test_verdict_unknown_tier_weight(advisor, catalog):
    analysis = _analysis(catalog, "acheron", TeamStatusType.SIDEGRADE, TeammateRating.B)
    verdict = advisor.compute_pull_verdict([analysis], candidate_owned=True, tier_lookup=lambda _: None)
    # 2 * 0.5 * 0.7 * 1.3, no breadth bonus for B
    assert verdict.score == pytest.approx(0.91)
    assert verdict.level == VerdictLevel.SKIP
    assert verdict.reason == "Adds flexibility for Acheron"
    assert verdict.team_scores[0].tier is None


def test_verdict_low_status_is_excluded(advisor, catalog):
    analysis = _analysis(catalog, "acheron", TeamStatusType.LOW, TeammateRating.S)
    verdict = advisor.compute_pull_verdict([analysis], tier_lookup=lambda _: TierRating.T0)
    assert verdict.team_scores == []
    assert verdict.score == 0
    assert verdict.level == VerdictLevel.SKIP
    assert verdict.reason == "Low priority for your roster"


def test_verdict_without_analyses(advisor):
    verdict = advisor.compute_pull_verdict([])
    assert verdict.level == VerdictLevel.SKIP
    assert verdict.reason == "No teams benefit from this character"


def test_team_coverage_discounts_unowned_candidate(catalog):
    analysis = _analysis(catalog, "acheron", TeamStatusType.FILLS, TeammateRating.S)
    assert PullAdvisor.team_coverage(analysis, candidate_owned=True) == pytest.approx(100)
    assert PullAdvisor.team_coverage(analysis, candidate_owned=False) == pytest.approx(200 / 3)


def test_find_dps_wanting(advisor):
    wanting = advisor.find_dps_wanting("sparkle", ["seele", "acheron", "jing-yuan", "sparkle", "robin"])
    assert [(w.dps_id, w.rating) for w in wanting] == [
        ("seele", TeammateRating.S),
        ("acheron", TeammateRating.A),
        ("jing-yuan", TeammateRating.A),
    ]
    assert all(w.category == "amplifiers" for w in wanting)


def test_find_dps_wanting_skips_unowned_carries(advisor):
    assert advisor.find_dps_wanting("sparkle", ["bronya"]) == []


def test_find_role_overlap(advisor):
    overlaps = advisor.find_role_overlap("sparkle", ["seele", "bronya", "silver-wolf", "tingyun"])

    assert len(overlaps) == 1
    overlap = overlaps[0]
    assert overlap.dps_id == "seele"
    assert overlap.category == "amplifiers"
    assert [(a.character_id, a.relationship) for a in overlap.alternatives] == [
        ("bronya", "sidegrade"),
        ("silver-wolf", "upgrade"),
    ]


def test_select_best_composition(advisor, catalog):
    acheron = catalog.get_character("acheron")
    analysis = advisor.select_best_composition(acheron, ["acheron", "pela", "aventurine"], "jiaoqiu")

    assert analysis.composition_id == "acheron-nihility"
    assert analysis.recommended_category == "amplifiers"
    assert analysis.coverage_percent == pytest.approx(200 / 3)
    assert set(analysis.slot_analysis) == {"amplifiers", "sustains"}


def test_select_best_composition_skips_filled_slots(advisor, catalog):
    """Two owned high-rated amplifiers leave no open slot for Sparkle."""
    acheron = catalog.get_character("acheron")
    owned = ["acheron", "pela", "jiaoqiu", "aventurine"]
    assert advisor.select_best_composition(acheron, owned, "sparkle") is None


def test_find_slot_based_gaps(advisor):
    gaps = advisor.find_slot_based_gaps("jiaoqiu", ["acheron", "pela", "aventurine"])

    assert len(gaps) == 1
    gap = gaps[0]
    assert gap.dps_id == "acheron"
    assert gap.category_label == "amplifier"
    assert (gap.slots_needed, gap.slots_filled) == (2, 1)
    assert [o.id for o in gap.owned_options] == ["pela"]
    assert gap.recommended_rating == TeammateRating.S_PLUS


def test_analyze_teams_and_verdict(advisor):
    """Jiaoqiu completes Acheron's Double Nihility and is critical."""
    owned = ["acheron", "pela", "aventurine"]
    analyses = advisor.analyze_teams_for_recommendation("jiaoqiu", owned)

    assert len(analyses) == 1
    analysis = analyses[0]
    assert analysis.composition_id == "acheron-nihility"
    assert analysis.status.type == TeamStatusType.FILLS
    assert analysis.status.message == "Completes Double Nihility (need 2 amplifiers, you have 1)"

    verdict = advisor.compute_pull_verdict(analyses, "moc")
    # 10 * 2.0 * 1.5 * 1.1 with 2 of 3 slots filled, then +10% breadth
    assert verdict.score == pytest.approx(33 * 1.1)
    assert verdict.level == VerdictLevel.CRITICAL


def test_analyze_team_for_composition(advisor, catalog):
    acheron = catalog.get_character("acheron")
    analysis = advisor.analyze_team_for_composition(
        acheron, "acheron-flex", "sparkle", TeammateRating.A, ["acheron", "pela", "jiaoqiu"]
    )
    assert analysis.composition_name == "Flexible"
    assert analysis.recommended_category == "amplifiers"
    assert advisor.analyze_team_for_composition(acheron, "missing", "sparkle", TeammateRating.A, []) is None


def _rated(catalog, *pairs):
    return [RatedCharacter(catalog.get_character(cid), rating) for cid, rating in pairs]


def test_team_status_no_owned(catalog):
    status = PullAdvisor.calculate_team_status(
        _rated(catalog, ("sparkle", TeammateRating.S)), 2, "sparkle", TeammateRating.S, "amplifiers", "Comp", set()
    )
    assert status.type == TeamStatusType.FILLS
    assert status.message == "Fills critical gap (need 2 amplifiers, you have none)"


def test_team_status_only_one(catalog):
    status = PullAdvisor.calculate_team_status(
        _rated(catalog, ("sparkle", TeammateRating.S)), 2, "sparkle", TeammateRating.S,
        "amplifiers", "Comp", {"sparkle"},
    )
    assert status.message == "Fills critical gap (need 2 amplifiers, this is your only one)"


def test_team_status_significant_upgrade(catalog):
    in_category = _rated(catalog, ("sparkle", TeammateRating.S), ("tingyun", TeammateRating.B))
    status = PullAdvisor.calculate_team_status(
        in_category, 1, "sparkle", TeammateRating.S, "amplifiers", "Comp", {"tingyun"}
    )
    assert status.type == TeamStatusType.UPGRADES
    assert status.message == "Significant upgrade over Tingyun (B → S)"


def test_team_status_already_covered(catalog):
    in_category = _rated(catalog, ("bronya", TeammateRating.S), ("sparkle", TeammateRating.A))
    status = PullAdvisor.calculate_team_status(
        in_category, 1, "sparkle", TeammateRating.A, "amplifiers", "Comp", {"bronya"}
    )
    assert status.type == TeamStatusType.LOW
    assert status.message == "Already covered (Bronya fills this role)"


def test_team_status_same_tier_alternative(catalog):
    in_category = _rated(catalog, ("bronya", TeammateRating.A), ("sparkle", TeammateRating.A))
    status = PullAdvisor.calculate_team_status(
        in_category, 1, "sparkle", TeammateRating.A, "amplifiers", "Comp", {"bronya"}
    )
    assert status.type == TeamStatusType.SIDEGRADE
    assert status.message == "Alternative option (same tier as Bronya)"


def test_dps_building_ready(advisor):
    analysis = advisor.analyze_team_building_for_dps("acheron", ["jiaoqiu", "pela", "aventurine"])

    assert analysis.composition_id == "acheron-nihility"
    assert analysis.total_coverage == 100
    assert analysis.quality_score == pytest.approx(0.9)
    assert analysis.status.type == BuildStatusType.READY
    assert analysis.status.message == "Ready to build with strong teammates!"

    verdict = advisor.compute_dps_pull_verdict(analysis, advisor.dps_tier("acheron", "moc"))
    # 1.0 * 0.9 * 10 * 2.0
    assert verdict.score == pytest.approx(18)
    assert verdict.level == VerdictLevel.READY
    assert verdict.reason == "Ready to build (T0)"


def test_dps_building_missing_teammates(advisor):
    analysis = advisor.analyze_team_building_for_dps("acheron", ["sparkle"])

    assert analysis.total_coverage == 33
    assert analysis.status.type == BuildStatusType.HARD
    assert analysis.status.message == "Missing key teammates. Consider pulling Jiaoqiu, Pela, Silver Wolf."
    assert [m.name for m in analysis.missing_recommendations] == [
        "Jiaoqiu", "Pela", "Silver Wolf", "Aventurine", "Fu Xuan",
    ]
    assert advisor.compute_dps_pull_verdict(analysis).reason == "Missing key supports"


def test_dps_building_without_compositions(advisor):
    assert advisor.analyze_team_building_for_dps("seele", ["sparkle"]) is None
    with pytest.raises(CharacterNotFoundError):
        advisor.analyze_team_building_for_dps("nobody", [])


def test_dps_build_status_messages():
    needed = {"amplifiers": 2, "sustains": 1, "sub_dps": 0}
    status = PullAdvisor.calculate_dps_build_status

    assert status(100, 0.75, needed, needed, []).message == "Ready to build with decent teammates."
    weak = status(100, 0.5, needed, needed, [])
    assert weak.type == BuildStatusType.PARTIAL
    assert weak.message == "Can build, but your teammates are weak. Consider upgrading."

    almost = status(85, 0.9, {"amplifiers": 1, "sustains": 1, "sub_dps": 0}, needed, [])
    assert almost.type == BuildStatusType.ALMOST
    assert almost.message == "Almost ready: need 1 amplifier"

    partial = status(
        67, 0.9, {"amplifiers": 2, "sustains": 0, "sub_dps": 0}, needed,
        [MissingRecommendation("Fu Xuan", TeammateRating.S, "sustain")],
    )
    assert partial.message == "Partially ready: need 1 sustain (Fu Xuan recommended)"

    assert status(0, 0, {"amplifiers": 0, "sustains": 0, "sub_dps": 0}, needed, []).message == "Missing key teammates."


def test_dps_verdict_edge_cases(advisor):
    assert advisor.compute_dps_pull_verdict(None).reason == "No team data available"
    analysis = advisor.analyze_team_building_for_dps("acheron", ["jiaoqiu", "pela", "aventurine"])
    owned = advisor.compute_dps_pull_verdict(analysis, TierRating.T0, is_owned=True)
    assert owned.level == VerdictLevel.SKIP
    assert owned.reason == "Already owned"


def test_teams_with_character(advisor):
    teams = advisor.teams_with_character("jiaoqiu", ["acheron", "pela", "aventurine"], "moc")
    assert len(teams) == 1
    assert "jiaoqiu" in teams[0].character_ids
    assert teams[0].curated


def test_teams_with_character_max_teams_zero(advisor):
    assert advisor.teams_with_character("jiaoqiu", ["acheron", "pela", "aventurine"], "moc", max_teams=0) == []


def test_teams_with_character_accepts_upper_case_mode(advisor):
    teams = advisor.teams_with_character("jiaoqiu", ["acheron", "pela", "aventurine"], "MOC")
    assert [t.character_ids for t in teams] == [["acheron", "jiaoqiu", "pela", "aventurine"]]


def test_teams_with_character_unknown_raises(advisor):
    with pytest.raises(CharacterNotFoundError):
        advisor.teams_with_character("nobody", ["acheron"])
