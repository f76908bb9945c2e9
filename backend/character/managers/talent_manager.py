"""
Talent Manager - handles key talents granted by paths and talents picked by the player
Key talents always mirror the active paths and sit at the front of the list;
everything else is the player's own pick and survives path changes.
"""

import re
from typing import Dict, List, Any, Optional, Iterable, Tuple, TYPE_CHECKING
from loguru import logger

from ..events import TalentsChangedEvent
from ..models import HeroicPath, Talent

if TYPE_CHECKING:
    from gamedata.catalogue import GameDataCatalogue, PathTalents


KEY_TALENT_MARKER = 'Key Talent'
KEY_TALENT_PATTERN = re.compile(r'^(.+?)\s*\(Key Talent\)')


def resolve_key_talent(path: HeroicPath, talents_by_path: Dict[str, 'PathTalents']) -> Optional[Talent]:
    """
    Key talent granted by one path

    The catalogue's declared key talent wins; paths without one fall back to
    a "<Name> (Key Talent)" entry in their key attributes.
    """
    path_data = talents_by_path.get(path.name)

    if path_data is not None and path_data.key_talent:
        entry = path_data.get(path_data.key_talent)
        return Talent(
            id=entry.id if entry else None,
            name=path_data.key_talent,
            path=path.name,
            is_key_talent=True,
            description=(entry.description if entry else None) or "",
        )

    for attribute_text in path.key_attributes:
        if KEY_TALENT_MARKER not in attribute_text:
            continue
        match = KEY_TALENT_PATTERN.match(attribute_text)
        if not match:
            continue
        name = match.group(1).strip()
        entry = path_data.get(name) if path_data is not None else None
        return Talent(
            id=entry.id if entry else None,
            name=name,
            path=path.name,
            is_key_talent=True,
            description=(entry.description if entry else None) or attribute_text,
        )

    return None


def required_key_talents(paths: Iterable[HeroicPath], talents_by_path: Dict[str, 'PathTalents']) -> List[Talent]:
    required = []
    for path in paths:
        talent = resolve_key_talent(path, talents_by_path)
        if talent is not None:
            required.append(talent)
    return required


def _key_signature(talents: Iterable[Talent]) -> List[Tuple[str, str]]:
    return sorted((t.name, t.path) for t in talents)


def reconcile_talents(
    talents: List[Talent],
    paths: Iterable[HeroicPath],
    talents_by_path: Dict[str, 'PathTalents'],
) -> Optional[List[Talent]]:
    """
    Talent list with key talents matching the active paths

    Returns:
        New list (required key talents first, then current non-key talents),
        or None when the key talent set already matches
    """
    required = required_key_talents(paths, talents_by_path)
    current_keys = [t for t in talents if t.is_key_talent]

    if _key_signature(current_keys) == _key_signature(required):
        return None

    non_key = [t for t in talents if not t.is_key_talent]
    return [*required, *non_key]


class TalentManager:
    """Manages key talent membership, player-picked talents and the radiant ideal reset"""

    def __init__(self, character_manager):
        """
        Initialize the TalentManager

        Args:
            character_manager: Reference to parent CharacterManager
        """
        self.character_manager = character_manager
        self.catalogue: 'GameDataCatalogue' = character_manager.catalogue

    @property
    def character(self):
        return self.character_manager.character

    def has_radiant_path(self) -> bool:
        return any(self.catalogue.is_radiant_path(path.name) for path in self.character.paths)

    def reconcile(self) -> bool:
        """
        Re-derive key talents from the active paths and reset the ideal if no Radiant path remains

        Returns:
            True if anything on the snapshot changed
        """
        character = self.character
        changed = False

        reconciled = reconcile_talents(character.talents, character.paths, self.catalogue.talents)
        if reconciled is not None:
            keys = [t.name for t in reconciled if t.is_key_talent]
            logger.info(f"Key talents reconciled: {keys}")
            character.talents = reconciled
            changed = True

        if not self.has_radiant_path() and character.radiant_ideal != 0:
            logger.debug("No Radiant path active, resetting radiant ideal")
            character.radiant_ideal = 0
            changed = True

        if changed:
            self.character_manager.emit(TalentsChangedEvent(source_manager='TalentManager'))
        return changed

    def get_talents(self) -> List[Talent]:
        return list(self.character.talents)

    def get_key_talents(self) -> List[Talent]:
        return [t for t in self.character.talents if t.is_key_talent]

    def has_talent(self, path_name: str, talent_name: str) -> bool:
        return any(t.name == talent_name and t.path == path_name for t in self.character.talents)

    def add_talent(self, path_name: str, talent_name: str) -> Talent:
        """
        Add an optional talent from an active path

        Raises:
            ValueError: Path not active, talent not in the catalogue, or already taken
        """
        if path_name not in self.character.path_names():
            raise ValueError(f"Path '{path_name}' is not active on this character")

        path_data = self.catalogue.get_path_talents(path_name)
        entry = path_data.get(talent_name) if path_data is not None else None
        if entry is None:
            raise ValueError(f"Talent '{talent_name}' not found under path '{path_name}'")

        if self.has_talent(path_name, talent_name):
            raise ValueError(f"Talent '{talent_name}' ({path_name}) is already taken")

        talent = Talent(
            id=entry.id,
            name=entry.name,
            path=path_name,
            is_key_talent=False,
            description=entry.description,
        )
        self.character.talents.append(talent)
        self.character_manager.mark_dirty()
        self.character_manager.emit(TalentsChangedEvent(
            source_manager='TalentManager', action='added', talent_name=talent_name, path=path_name
        ))
        logger.info(f"Added talent {talent_name} ({path_name})")
        return talent

    def remove_talent(self, path_name: str, talent_name: str) -> None:
        """
        Remove an optional talent

        Raises:
            ValueError: Talent not present, or it is a key talent
        """
        for talent in self.character.talents:
            if talent.name == talent_name and talent.path == path_name:
                if talent.is_key_talent:
                    raise ValueError(f"Key talent '{talent_name}' is granted by {path_name} and cannot be removed")
                break
        else:
            raise ValueError(f"Talent '{talent_name}' ({path_name}) not found on character")

        self.character.talents = [
            t for t in self.character.talents
            if t.name != talent_name or t.path != path_name
        ]
        self.character_manager.mark_dirty()
        self.character_manager.emit(TalentsChangedEvent(
            source_manager='TalentManager', action='removed', talent_name=talent_name, path=path_name
        ))
        logger.info(f"Removed talent {talent_name} ({path_name})")

    def available_talents(self) -> Dict[str, List[Dict[str, Any]]]:
        """Catalogue talents under active paths that the character has not taken yet"""
        available = {}
        for path_name in self.character.path_names():
            path_data = self.catalogue.get_path_talents(path_name)
            if path_data is None:
                continue
            available[path_name] = [
                entry.model_dump(exclude_none=True)
                for entry in path_data.talents
                if not self.has_talent(path_name, entry.name)
            ]
        return available
