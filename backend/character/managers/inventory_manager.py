"""
Inventory Manager - handles weapons, armor, equipment, resources and the sheet's text lists
Catalogue gear is added by id or name; custom gear is carried as full objects
and written inline on save.
"""

from typing import Dict, List, Any, Optional, Union
from loguru import logger

from ..events import EventType
from ..models import Armor, EquipmentItem, Goal, Weapon
from gamedata.lookup import find_by_id_or_name, WEAPON_PREFIX, ARMOR_PREFIX, EQUIPMENT_PREFIX


RESOURCES = ('health', 'focus', 'investiture')
RESOURCE_FIELDS = ('current', 'max')

# Snapshot attribute -> sheet label
TEXT_LISTS = {
    'purpose': 'purpose',
    'obstacle': 'obstacle',
    'notes': 'notes',
    'connections': 'connections',
    'conditions': 'conditions',
    'other_talents': 'otherTalents',
    'expertises': 'expertises',
}

MAX_GOAL_LEVEL = 3


class InventoryManager:
    """Manages gear, resources, goals and free-text lists"""

    def __init__(self, character_manager):
        """
        Initialize the InventoryManager

        Args:
            character_manager: Reference to parent CharacterManager
        """
        self.character_manager = character_manager
        self.catalogue = character_manager.catalogue

    @property
    def character(self):
        return self.character_manager.character

    def _changed(self, event_type: EventType):
        self.character_manager.mark_dirty()
        self.character_manager.emit(event_type)

    # ----------------------------------------------------------------
    # Gear
    # ----------------------------------------------------------------

    def add_weapon(self, weapon: Union[str, Weapon]) -> Weapon:
        """
        Add a catalogue weapon (by id or name) or a custom Weapon object

        Raises:
            ValueError: Unknown catalogue weapon, or a weapon of that name is already carried
        """
        if isinstance(weapon, str):
            found = find_by_id_or_name(self.catalogue.weapons, weapon, WEAPON_PREFIX)
            if found is None:
                raise ValueError(f"Unknown weapon '{weapon}'")
            weapon = found.model_copy(deep=True)
        if any(w.name == weapon.name for w in self.character.weapons):
            raise ValueError(f"Weapon '{weapon.name}' is already carried")
        self.character.weapons.append(weapon)
        logger.debug(f"Added weapon {weapon.name}")
        self._changed(EventType.ITEM_ADDED)
        return weapon

    def add_armor(self, armor: Union[str, Armor]) -> Armor:
        """Add catalogue armor (by id or name) or a custom Armor object"""
        if isinstance(armor, str):
            found = find_by_id_or_name(self.catalogue.armor, armor, ARMOR_PREFIX)
            if found is None:
                raise ValueError(f"Unknown armor '{armor}'")
            armor = found.model_copy(deep=True)
        self.character.armor.append(armor)
        logger.debug(f"Added armor {armor.name}")
        self._changed(EventType.ITEM_ADDED)
        return armor

    def add_equipment(self, item: Union[str, EquipmentItem]) -> EquipmentItem:
        """Add a catalogue equipment item (by id or name) or a custom EquipmentItem"""
        if isinstance(item, str):
            found = find_by_id_or_name(self.catalogue.equipment, item, EQUIPMENT_PREFIX)
            if found is None:
                raise ValueError(f"Unknown equipment '{item}'")
            item = found.model_copy(deep=True)
        self.character.equipment.append(item)
        logger.debug(f"Added equipment {item.name}")
        self._changed(EventType.ITEM_ADDED)
        return item

    def add_custom_equipment(self, name: str) -> EquipmentItem:
        """Add a free-form equipment item by name only"""
        name = name.strip()
        if not name:
            raise ValueError("Custom item name cannot be empty")
        return self.add_equipment(EquipmentItem(name=name, price="0", weight="0", description="Custom item"))

    def _remove_at(self, items: list, index: int, kind: str):
        if not (0 <= index < len(items)):
            raise ValueError(f"No {kind} at index {index}")
        removed = items.pop(index)
        logger.debug(f"Removed {kind} {removed.name}")
        self._changed(EventType.ITEM_REMOVED)
        return removed

    def remove_weapon(self, index: int) -> Weapon:
        return self._remove_at(self.character.weapons, index, 'weapon')

    def remove_armor(self, index: int) -> Armor:
        return self._remove_at(self.character.armor, index, 'armor')

    def remove_equipment(self, index: int) -> EquipmentItem:
        return self._remove_at(self.character.equipment, index, 'equipment')

    # ----------------------------------------------------------------
    # Resources
    # ----------------------------------------------------------------

    def set_resource(self, resource: str, field: str, value: int) -> Dict[str, int]:
        """
        Set current or max of health, focus or investiture

        Raises:
            ValueError: Unknown resource or field
        """
        if resource not in RESOURCES:
            raise ValueError(f"Unknown resource '{resource}'. Valid resources: {', '.join(RESOURCES)}")
        if field not in RESOURCE_FIELDS:
            raise ValueError(f"Unknown resource field '{field}'")
        pair = getattr(self.character, resource)
        setattr(pair, field, int(value))
        self.character_manager.mark_dirty()
        return pair.model_dump()

    # ----------------------------------------------------------------
    # Text lists and goals
    # ----------------------------------------------------------------

    def _text_list(self, list_name: str) -> List[str]:
        if list_name not in TEXT_LISTS:
            raise ValueError(f"Unknown list '{list_name}'. Valid lists: {', '.join(TEXT_LISTS)}")
        return getattr(self.character, list_name)

    def add_text(self, list_name: str, text: str) -> List[str]:
        """Append trimmed text to a sheet list; blank text is ignored"""
        items = self._text_list(list_name)
        text = text.strip()
        if text:
            items.append(text)
            self.character_manager.mark_dirty()
        return list(items)

    def remove_text(self, list_name: str, index: int) -> List[str]:
        items = self._text_list(list_name)
        if not (0 <= index < len(items)):
            raise ValueError(f"No {TEXT_LISTS[list_name]} entry at index {index}")
        items.pop(index)
        self.character_manager.mark_dirty()
        return list(items)

    def add_goal(self, text: str) -> Optional[Goal]:
        text = text.strip()
        if not text:
            return None
        goal = Goal(text=text, level=0)
        self.character.goals.append(goal)
        self.character_manager.mark_dirty()
        return goal

    def set_goal_level(self, index: int, level: int) -> Goal:
        """Set progress on a goal (0-3)"""
        if not (0 <= index < len(self.character.goals)):
            raise ValueError(f"No goal at index {index}")
        if not (0 <= level <= MAX_GOAL_LEVEL):
            raise ValueError(f"Goal level must be between 0 and {MAX_GOAL_LEVEL}")
        goal = self.character.goals[index]
        goal.level = level
        self.character_manager.mark_dirty()
        return goal

    def remove_goal(self, index: int) -> Goal:
        if not (0 <= index < len(self.character.goals)):
            raise ValueError(f"No goal at index {index}")
        goal = self.character.goals.pop(index)
        self.character_manager.mark_dirty()
        return goal

    def get_inventory_summary(self) -> Dict[str, Any]:
        character = self.character
        return {
            'weapons': [w.model_dump(exclude_none=True) for w in character.weapons],
            'armor': [a.model_dump(exclude_none=True) for a in character.armor],
            'equipment': [e.model_dump(exclude_none=True) for e in character.equipment],
            'deflect': character.defenses.deflect,
        }
