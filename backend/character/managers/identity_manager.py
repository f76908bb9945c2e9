"""Identity Manager - handles names, level, ancestry, path selection and the Radiant bond."""

from typing import Dict, Any, Optional, List
from loguru import logger

from ..events import PathsChangedEvent
from ..models import MAX_RADIANT_IDEAL, MIN_BOND_RANGE, MAX_BOND_RANGE
from gamedata.lookup import find_by_id_or_name, ANCESTRY_PREFIX, PATH_PREFIX

BOND_RANGE_STEP = 10


class IdentityManager:
    """Manages character identity, path selection and Radiant details."""

    def __init__(self, character_manager):
        """Initialize IdentityManager with parent CharacterManager."""
        self.character_manager = character_manager
        self.catalogue = character_manager.catalogue

    @property
    def character(self):
        return self.character_manager.character

    def set_names(self, player_name: Optional[str] = None, character_name: Optional[str] = None) -> Dict[str, str]:
        """Set player and/or character name."""
        if player_name is not None:
            self.character.player_name = player_name
        if character_name is not None:
            self.character.character_name = character_name
        self.character_manager.mark_dirty()
        return {'playerName': self.character.player_name, 'characterName': self.character.character_name}

    def set_level(self, level: int) -> int:
        """Set character level, never below 1."""
        self.character.level = max(1, int(level))
        self.character_manager.mark_dirty()
        return self.character.level

    def set_ancestry(self, identifier: Optional[str]) -> Optional[str]:
        """Select an ancestry by id or name; None clears it."""
        if identifier is None:
            self.character.ancestry = None
        else:
            ancestry = find_by_id_or_name(self.catalogue.ancestries, identifier, ANCESTRY_PREFIX)
            if ancestry is None:
                raise ValueError(f"Unknown ancestry '{identifier}'")
            self.character.ancestry = ancestry.model_copy(deep=True)
        self.character_manager.mark_dirty()
        return self.character.ancestry.name if self.character.ancestry else None

    def set_marks(self, marks: int) -> int:
        self.character.marks = max(0, int(marks))
        self.character_manager.mark_dirty()
        return self.character.marks

    def set_appearance(self, text: str) -> None:
        self.character.appearance = text
        self.character_manager.mark_dirty()

    def set_spren_name(self, name: str) -> None:
        self.character.spren_name = name
        self.character_manager.mark_dirty()

    def has_radiant_path(self) -> bool:
        return any(self.catalogue.is_radiant_path(p.name) for p in self.character.paths)

    def toggle_heroic_path(self, identifier: str) -> List[str]:
        """
        Select or deselect a Heroic path; Heroic paths combine freely

        Returns:
            Active path names after the change
        """
        path = find_by_id_or_name(self.catalogue.heroic_paths, identifier, PATH_PREFIX)
        if path is None:
            raise ValueError(f"Unknown heroic path '{identifier}'")

        current = list(self.character.paths)
        if any(p.name == path.name for p in current):
            new_paths = [p for p in current if p.name != path.name]
            event = PathsChangedEvent(source_manager='IdentityManager', removed=[path.name])
        else:
            new_paths = [*current, path.model_copy(deep=True)]
            event = PathsChangedEvent(source_manager='IdentityManager', added=[path.name])

        self.character_manager.update_data(paths=new_paths)
        self.character_manager.emit(event)
        return self.character.path_names()

    def toggle_radiant_path(self, identifier: str) -> List[str]:
        """
        Select or deselect a Radiant path

        Only one Radiant path can be active: selecting one replaces any
        previous Radiant path, deselecting clears the radiant path name.
        """
        path = find_by_id_or_name(self.catalogue.radiant_paths, identifier, PATH_PREFIX)
        if path is None:
            raise ValueError(f"Unknown radiant path '{identifier}'")

        current = list(self.character.paths)
        was_selected = any(p.name == path.name for p in current)
        previous_radiant = [p.name for p in current if self.catalogue.is_radiant_path(p.name)]
        keep = [p for p in current if not self.catalogue.is_radiant_path(p.name)]

        if was_selected:
            self.character_manager.update_data(paths=keep, radiant_path="")
            event = PathsChangedEvent(source_manager='IdentityManager', removed=[path.name])
        else:
            self.character_manager.update_data(paths=[*keep, path.model_copy(deep=True)], radiant_path=path.name)
            event = PathsChangedEvent(source_manager='IdentityManager', added=[path.name], removed=previous_radiant)

        logger.info(f"Radiant path now: {self.character.radiant_path or 'none'}")
        self.character_manager.emit(event)
        return self.character.path_names()

    def set_radiant_ideal(self, level: int) -> int:
        """
        Click an ideal checkbox: selecting the current level steps back one

        Raises:
            ValueError: No Radiant path active, or level outside 0-5
        """
        if not self.has_radiant_path():
            raise ValueError("Radiant ideals require an active Radiant path")
        if not (0 <= level <= MAX_RADIANT_IDEAL):
            raise ValueError(f"Radiant ideal must be between 0 and {MAX_RADIANT_IDEAL}")

        current = self.character.radiant_ideal
        self.character.radiant_ideal = level - 1 if current == level and level > 0 else level
        self.character_manager.mark_dirty()
        return self.character.radiant_ideal

    def set_bond_range(self, value: int) -> int:
        """Set spren bond range, clamped to 30-100 ft."""
        self.character.bond_range = max(MIN_BOND_RANGE, min(MAX_BOND_RANGE, int(value)))
        self.character_manager.mark_dirty()
        return self.character.bond_range

    def adjust_bond_range(self, steps: int) -> int:
        """Step bond range up or down in 10 ft. increments."""
        return self.set_bond_range(self.character.bond_range + steps * BOND_RANGE_STEP)

    def get_identity(self) -> Dict[str, Any]:
        """Identity block for display."""
        character = self.character
        return {
            'playerName': character.player_name,
            'characterName': character.character_name,
            'level': character.level,
            'ancestry': character.ancestry.name if character.ancestry else None,
            'paths': character.path_names(),
            'radiantPath': character.radiant_path,
            'radiantIdeal': character.radiant_ideal,
            'sprenName': character.spren_name,
            'bondRange': character.bond_range,
            'hasRadiantPath': self.has_radiant_path(),
        }
