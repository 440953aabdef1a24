"""Character identity helpers."""

from typing import Iterable, Optional

from starguide.models.enums import GameMode

# Ids sharing one of these prefixes are alternate forms of the same character
# and cannot appear on one team together.
EXCLUSIVE_VARIANT_PREFIXES: dict[str, str] = {
    "trailblazer-": "trailblazer",
}


def base_character_id(character_id: str) -> str:
    """Collapse mutually exclusive variants to their shared base id."""
    for prefix, base in EXCLUSIVE_VARIANT_PREFIXES.items():
        if character_id.startswith(prefix):
            return base
    return character_id


def has_base_conflict(character_ids: Iterable[str]) -> bool:
    """True when two ids map to the same base identity (or repeat)."""
    seen: set[str] = set()
    for character_id in character_ids:
        base = base_character_id(character_id)
        if base in seen:
            return True
        seen.add(base)
    return False


def team_key(character_ids: Iterable[str]) -> str:
    """Order-independent key for deduplicating teams."""
    return ",".join(sorted(character_ids))


def parse_game_mode(mode: Optional[str]) -> Optional[GameMode]:
    """Parse a game mode label, returning None when unknown."""
    if mode is None:
        return None
    if isinstance(mode, GameMode):
        return mode
    try:
        return GameMode(mode.strip().lower())
    except ValueError:
        return None


def parse_game_mode_strict(mode: str) -> GameMode:
    """Parse a game mode label, raising ValueError when unknown."""
    parsed = parse_game_mode(mode)
    if parsed is None:
        raise ValueError(f"Unknown game mode: {mode!r}")
    return parsed
