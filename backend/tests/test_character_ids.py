"""Tests for character identity helpers."""
import pytest

from starguide.models.enums import GameMode
from starguide.utils.character_ids import (
    base_character_id,
    has_base_conflict,
    parse_game_mode,
    parse_game_mode_strict,
    team_key,
)


def test_base_character_id_collapses_variants():
    assert base_character_id("trailblazer-harmony") == "trailblazer"
    assert base_character_id("trailblazer-remembrance") == "trailblazer"
    assert base_character_id("seele") == "seele"


def test_has_base_conflict():
    """Two forms of one character, or a repeated id, conflict."""
    assert has_base_conflict(["seele", "trailblazer-harmony", "trailblazer-remembrance"])
    assert has_base_conflict(["seele", "seele"])
    assert not has_base_conflict(["seele", "sparkle", "trailblazer-harmony", "fu-xuan"])


def test_team_key_is_order_independent():
    assert team_key(["sparkle", "seele"]) == team_key(["seele", "sparkle"])
    assert team_key(["b", "a", "c"]) == "a,b,c"


def test_parse_game_mode():
    assert parse_game_mode(" PF ") == GameMode.PF
    assert parse_game_mode(GameMode.AS) == GameMode.AS
    assert parse_game_mode("arena") is None
    assert parse_game_mode(None) is None


def test_parse_game_mode_strict_raises():
    with pytest.raises(ValueError):
        parse_game_mode_strict("arena")
