"""Immutable character catalog loaded from the knowledge directory."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from starguide.config import settings
from starguide.models.character import Character, CharacterTiers
from starguide.models.enums import Role

logger = logging.getLogger(__name__)


class CharacterNotFoundError(KeyError):
    """Raised when an explicitly requested character id is not in the catalog."""

    def __init__(self, character_id: str):
        super().__init__(character_id)
        self.character_id = character_id

    def __str__(self) -> str:
        return f"Unknown character: {self.character_id}"


class CharacterCatalog:
    """Read-only lookup over character definitions and the tier table.

    Loads ``characters.json`` and ``tier_list.json`` from the knowledge
    directory. Missing files leave the catalog empty rather than failing.
    """

    def __init__(self, knowledge_dir: Optional[Path] = None):
        if knowledge_dir is None:
            knowledge_dir = settings.knowledge_path or Path(__file__).parents[4] / "knowledge"
        self.knowledge_dir = knowledge_dir
        self._characters: dict[str, Character] = {}
        self._tiers: dict[str, dict[str, dict[str, str]]] = {}
        self._load_data()

    @classmethod
    def from_records(
        cls,
        characters: Iterable[Character | dict],
        tiers: Optional[Mapping[str, Mapping[str, Mapping[str, str]]]] = None,
    ) -> "CharacterCatalog":
        """Build a catalog from in-memory records (dicts are validated)."""
        catalog = cls.__new__(cls)
        catalog.knowledge_dir = None
        catalog._characters = {}
        catalog._tiers = {}
        catalog._index(characters, tiers or {})
        return catalog

    def _load_data(self):
        """Load character definitions and tier data."""
        characters: list = []
        tiers: dict = {}

        characters_path = self.knowledge_dir / "characters.json"
        if characters_path.exists():
            with open(characters_path) as f:
                characters = json.load(f).get("characters", [])
        else:
            logger.warning(f"characters.json not found at {characters_path}")

        tiers_path = self.knowledge_dir / "tier_list.json"
        if tiers_path.exists():
            with open(tiers_path) as f:
                tiers = json.load(f).get("tiers", {})
        else:
            logger.warning(f"tier_list.json not found at {tiers_path}")

        self._index(characters, tiers)
        logger.info(
            f"Loaded catalog from {self.knowledge_dir}: "
            f"{len(self._characters)} characters, {len(self._tiers)} tier entries"
        )

    def _index(self, characters: Iterable[Character | dict], tiers: Mapping):
        for record in characters:
            character = record if isinstance(record, Character) else Character.model_validate(record)
            self._characters[character.id] = character
        for character_id, modes in tiers.items():
            self._tiers[character_id] = {
                mode: dict(role_tiers) for mode, role_tiers in modes.items()
            }

    def __len__(self) -> int:
        return len(self._characters)

    def __contains__(self, character_id: object) -> bool:
        return character_id in self._characters

    def get_character(self, character_id: str) -> Character:
        """Get a character by id, raising CharacterNotFoundError if unknown."""
        character = self._characters.get(character_id)
        if character is None:
            raise CharacterNotFoundError(character_id)
        return character

    def find_character(self, character_id: str) -> Optional[Character]:
        return self._characters.get(character_id)

    def all_characters(self) -> list[Character]:
        """All characters in catalog order."""
        return list(self._characters.values())

    def characters_by_ids(self, character_ids: Iterable[str]) -> list[Character]:
        """Resolve ids in catalog order, skipping (and logging) unknown ones."""
        wanted = set(character_ids)
        unknown = wanted - self._characters.keys()
        if unknown:
            logger.warning(f"Ignoring unknown character ids: {sorted(unknown)}")
        return [c for c in self._characters.values() if c.id in wanted]

    def characters_with_role(self, role: Role) -> list[Character]:
        return [c for c in self._characters.values() if role in c.roles]

    def dps_characters(self) -> list[Character]:
        """Characters that can carry a team (DPS or Support DPS)."""
        return [c for c in self._characters.values() if c.is_dps_capable]

    def get_tier_data(self, character_id: str) -> Optional[Mapping[str, Mapping[str, str]]]:
        """Tier labels for a character: mode -> role -> tier."""
        modes = self._tiers.get(character_id)
        if modes is None:
            return None
        return MappingProxyType(modes)

    def tier_table(self) -> CharacterTiers:
        """Copy of the full tier table."""
        return {cid: {mode: dict(roles) for mode, roles in modes.items()} for cid, modes in self._tiers.items()}
