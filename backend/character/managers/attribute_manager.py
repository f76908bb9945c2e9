"""
Attribute Manager - handles the six attribute scores and every stat derived from them
Defenses, lifting/carrying capacity, movement, senses range and recovery die
are recomputed in full whenever an attribute changes; none of them is
independently settable (deflect excepted, which comes from armor).
"""

from typing import Dict, List, Tuple, TypeVar
from loguru import logger
from pydantic import BaseModel, ConfigDict

from ..events import AttributeChangedEvent
from ..models import Attributes, ATTRIBUTE_NAMES

V = TypeVar('V')

DEFENSE_BASE = 10

# Breakpoint tables, highest threshold first: the first threshold <= value wins
CAPACITY_TABLE: List[Tuple[int, Tuple[str, str]]] = [
    (9, ("10,000 lb.", "5,000 lb.")),
    (7, ("5,000 lb.", "2,500 lb.")),
    (5, ("1,000 lb.", "500 lb.")),
    (3, ("500 lb.", "250 lb.")),
    (1, ("200 lb.", "100 lb.")),
]
CAPACITY_FLOOR = ("100 lb.", "50 lb.")

SENSES_TABLE: List[Tuple[int, str]] = [
    (9, "Unobscured"),
    (7, "100 ft."),
    (5, "50 ft."),
    (3, "20 ft."),
    (1, "10 ft."),
]
SENSES_FLOOR = "5 ft."

MOVEMENT_TABLE: List[Tuple[int, int]] = [
    (9, 80),
    (7, 60),
    (5, 40),
    (3, 30),
    (1, 25),
]
MOVEMENT_FLOOR = 20

RECOVERY_DIE_TABLE: List[Tuple[int, str]] = [
    (7, "1d12"),
    (5, "1d10"),
    (3, "1d8"),
    (1, "1d6"),
]
RECOVERY_DIE_FLOOR = "1d4"


class DerivedStats(BaseModel):
    """Everything the attribute set determines"""
    model_config = ConfigDict(frozen=True)

    physical: int
    cognitive: int
    spiritual: int
    lifting_capacity: str
    carrying_capacity: str
    movement: int
    senses_range: str
    recovery_die: str


def lookup_breakpoint(table: List[Tuple[int, V]], value: int, floor: V) -> V:
    """Value of the greatest breakpoint <= value, or the floor below the lowest one"""
    for threshold, result in table:
        if value >= threshold:
            return result
    return floor


def derive_stats(attributes: Attributes) -> DerivedStats:
    """
    Compute every derived stat from the attribute set

    Total over all integers: negative scores simply fall through to the
    floor of each table.
    """
    lifting, carrying = lookup_breakpoint(CAPACITY_TABLE, attributes.strength, CAPACITY_FLOOR)
    return DerivedStats(
        physical=DEFENSE_BASE + attributes.strength + attributes.speed,
        cognitive=DEFENSE_BASE + attributes.intellect + attributes.willpower,
        spiritual=DEFENSE_BASE + attributes.awareness + attributes.presence,
        lifting_capacity=lifting,
        carrying_capacity=carrying,
        movement=lookup_breakpoint(MOVEMENT_TABLE, attributes.speed, MOVEMENT_FLOOR),
        senses_range=lookup_breakpoint(SENSES_TABLE, attributes.awareness, SENSES_FLOOR),
        recovery_die=lookup_breakpoint(RECOVERY_DIE_TABLE, attributes.willpower, RECOVERY_DIE_FLOOR),
    )


class AttributeManager:
    """Manages attribute scores and keeps the derived fields in step with them"""

    ATTRIBUTES = ATTRIBUTE_NAMES

    def __init__(self, character_manager):
        """
        Initialize the AttributeManager

        Args:
            character_manager: Reference to parent CharacterManager
        """
        self.character_manager = character_manager

    @property
    def character(self):
        return self.character_manager.character

    def get_attributes(self) -> Dict[str, int]:
        """
        Get all character attributes

        Returns:
            Dict mapping attribute names to values
        """
        return self.character.attributes.model_dump()

    def set_attribute(self, attribute: str, value: int) -> DerivedStats:
        """
        Set one attribute and rewrite every derived stat

        Args:
            attribute: Attribute name (strength, speed, ...)
            value: New score; no bounds are enforced

        Returns:
            The freshly derived stats

        Raises:
            ValueError: Unknown attribute name
        """
        attribute = attribute.lower()
        if attribute not in self.ATTRIBUTES:
            raise ValueError(f"Unknown attribute '{attribute}'. Valid attributes: {', '.join(self.ATTRIBUTES)}")

        old_value = getattr(self.character.attributes, attribute)
        setattr(self.character.attributes, attribute, int(value))
        logger.debug(f"Attribute {attribute}: {old_value} -> {value}")

        derived = self.apply_derived_stats()
        self.character_manager.mark_dirty()
        self.character_manager.emit(AttributeChangedEvent(
            source_manager='AttributeManager',
            attribute=attribute,
            old_value=old_value,
            new_value=int(value),
        ))
        return derived

    def set_attributes(self, values: Dict[str, int]) -> DerivedStats:
        """Set several attributes at once; derived stats are computed once from the final set"""
        unknown = [name for name in values if name.lower() not in self.ATTRIBUTES]
        if unknown:
            raise ValueError(f"Unknown attributes: {', '.join(unknown)}")
        changes = []
        for name, value in values.items():
            attribute = name.lower()
            old_value = getattr(self.character.attributes, attribute)
            setattr(self.character.attributes, attribute, int(value))
            if old_value != int(value):
                changes.append((attribute, old_value, int(value)))

        derived = self.apply_derived_stats()
        self.character_manager.mark_dirty()
        # Emitted after the full set is applied so listeners see final scores
        for attribute, old_value, new_value in changes:
            self.character_manager.emit(AttributeChangedEvent(
                source_manager='AttributeManager',
                attribute=attribute,
                old_value=old_value,
                new_value=new_value,
            ))
        return derived

    def apply_derived_stats(self) -> DerivedStats:
        """Overwrite defenses, capacities, movement, senses and recovery die from current attributes"""
        character = self.character
        derived = derive_stats(character.attributes)

        character.defenses.physical = derived.physical
        character.defenses.cognitive = derived.cognitive
        character.defenses.spiritual = derived.spiritual
        character.lifting_capacity = derived.lifting_capacity
        character.carrying_capacity = derived.carrying_capacity
        character.movement = derived.movement
        character.senses_range = derived.senses_range
        character.recovery_die = derived.recovery_die
        return derived

    def set_deflect(self, value: int) -> int:
        """Deflect is the one defense the player sets by hand"""
        if value < 0:
            raise ValueError("Deflect cannot be negative")
        self.character.defenses.deflect = int(value)
        self.character_manager.mark_dirty()
        return self.character.defenses.deflect

    def get_derived_stats(self) -> DerivedStats:
        """Derived stats for the current attributes, without touching the snapshot"""
        return derive_stats(self.character.attributes)
