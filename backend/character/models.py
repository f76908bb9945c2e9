"""
Pydantic models for the in-memory character snapshot
Catalogue-shaped entities keep the dataset keys (snake_case); the snapshot
itself keeps the camelCase keys the sheet has always used, so an old
full-snapshot save validates against it directly.
"""

from typing import Dict, Any, Optional, List, Literal, TYPE_CHECKING
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from gamedata.catalogue import GameDataCatalogue


ATTRIBUTE_NAMES = ['strength', 'speed', 'intellect', 'willpower', 'awareness', 'presence']

STANDARD_SKILL_NAMES = frozenset([
    "Agility", "Athletics", "Heavy Weaponry", "Light Weaponry", "Stealth", "Thievery",
    "Crafting", "Deduction", "Discipline", "Intimidation", "Lore", "Medicine",
    "Deception", "Insight", "Leadership", "Perception", "Persuasion", "Survival",
])

MAX_SKILL_RANK = 5
MAX_RADIANT_IDEAL = 5
MIN_BOND_RANGE = 30
MAX_BOND_RANGE = 100


def attribute_abbreviation(attribute: str) -> str:
    """Sheet abbreviation for an attribute name (SPD is the one irregular case)"""
    if attribute == 'Speed':
        return 'SPD'
    return attribute[:3].upper()


def is_standard_skill(name: str) -> bool:
    return name in STANDARD_SKILL_NAMES


# ============================================================
# Catalogue entities
# ============================================================

class CatalogueModel(BaseModel):
    """Base for entities that come from the static datasets"""
    model_config = ConfigDict(extra='ignore')

    id: Optional[str] = None
    name: str


class Skill(CatalogueModel):
    """A skill row; standard skills and surge skills share this shape"""
    attribute: str
    attr_abbrev: str
    rank: int = Field(0, ge=0, le=MAX_SKILL_RANK)
    description: Optional[str] = None


class HeroicPath(CatalogueModel):
    """Heroic or Radiant path"""
    description: str = ""
    key_attributes: List[str] = Field(default_factory=list)
    associated_orders: Optional[List[str]] = None


class Ancestry(CatalogueModel):
    description: str = ""
    innate_abilities: List[str] = Field(default_factory=list)


class Weapon(CatalogueModel):
    category: str = ""
    damage: str = ""
    range: str = ""
    properties: List[str] = Field(default_factory=list)
    weight: str = ""
    price: str = ""


class Armor(CatalogueModel):
    category: str = ""
    deflect: str = ""
    properties: List[str] = Field(default_factory=list)
    price: str = ""
    weight: str = ""


class EquipmentItem(CatalogueModel):
    price: str = ""
    weight: str = ""
    description: Optional[str] = None


class Talent(CatalogueModel):
    """A talent held by the character, tagged with its owning path"""
    model_config = ConfigDict(extra='ignore', alias_generator=to_camel, populate_by_name=True)

    path: str
    is_key_talent: bool = False
    description: Optional[str] = None


# ============================================================
# Snapshot value groups
# ============================================================

class Attributes(BaseModel):
    strength: int = 2
    speed: int = 2
    intellect: int = 2
    willpower: int = 2
    awareness: int = 2
    presence: int = 2

    def get(self, name: str, default: int = 0) -> int:
        """Look up an attribute by case-insensitive name"""
        return getattr(self, name.lower(), default) if name.lower() in ATTRIBUTE_NAMES else default


class Defenses(BaseModel):
    physical: int = 10
    cognitive: int = 10
    spiritual: int = 10
    deflect: int = 0


class Resource(BaseModel):
    current: int = 0
    max: int = 0


class Goal(BaseModel):
    text: str
    level: Literal[0, 1, 2, 3] = 0


class Surge(BaseModel):
    """Derived surge view of a surge skill; never edited directly"""
    name: str
    attribute: str
    attr_abbrev: str
    rank: int
    modifier: int
    die: str
    size: str


# ============================================================
# Snapshot
# ============================================================

class CharacterData(BaseModel):
    """The aggregate character snapshot owned by one session"""
    model_config = ConfigDict(extra='ignore', alias_generator=to_camel, populate_by_name=True)

    # Core info
    player_name: str = ""
    character_name: str = ""
    level: int = Field(1, ge=1)
    ancestry: Optional[Ancestry] = None
    paths: List[HeroicPath] = Field(default_factory=list)
    radiant_ideal: int = Field(0, ge=0, le=MAX_RADIANT_IDEAL)
    radiant_path: str = ""
    spren_name: str = ""
    bond_range: int = MIN_BOND_RANGE
    surges: List[Surge] = Field(default_factory=list)

    attributes: Attributes = Field(default_factory=Attributes)
    marks: int = 0
    skills: List[Skill] = Field(default_factory=list)
    defenses: Defenses = Field(default_factory=Defenses)

    # Resources
    health: Resource = Field(default_factory=lambda: Resource(current=10, max=10))
    focus: Resource = Field(default_factory=lambda: Resource(current=2, max=2))
    investiture: Resource = Field(default_factory=Resource)

    # Derived details
    movement: int = 20
    senses_range: str = "5 ft."
    recovery_die: str = "1d4"
    lifting_capacity: str = ""
    carrying_capacity: str = ""

    expertises: List[str] = Field(default_factory=list)
    weapons: List[Weapon] = Field(default_factory=list)
    armor: List[Armor] = Field(default_factory=list)
    equipment: List[EquipmentItem] = Field(default_factory=list)
    talents: List[Talent] = Field(default_factory=list)
    other_talents: List[str] = Field(default_factory=list)

    # Free text
    purpose: List[str] = Field(default_factory=list)
    obstacle: List[str] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    connections: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    appearance: str = ""

    def path_names(self) -> List[str]:
        return [p.name for p in self.paths]

    def find_skill(self, name: str) -> Optional[Skill]:
        for skill in self.skills:
            if skill.name == name:
                return skill
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot in its external (camelCase) shape"""
        return self.model_dump(by_alias=True)


def default_character(catalogue: Optional['GameDataCatalogue'] = None) -> CharacterData:
    """
    Build the canonical new-character snapshot

    Args:
        catalogue: Catalogue providing the standard skill list; without one
            the skill list starts empty

    Returns:
        Fresh CharacterData at level 1 with every attribute at 2
    """
    skills = []
    if catalogue is not None:
        skills = [skill.model_copy(update={'rank': 0}) for skill in catalogue.skills]
    return CharacterData(skills=skills)
