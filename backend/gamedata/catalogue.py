"""
Game Data Catalogue - read-only reference datasets for the character builder
Paths, talents, surges, skills and gear are loaded once from JSON files and
handed to the managers and the serializer at call time.
"""

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

from loguru import logger
from pydantic import BaseModel, Field, ConfigDict, TypeAdapter

from character.models import (
    Ancestry,
    Armor,
    CatalogueModel,
    EquipmentItem,
    HeroicPath,
    Skill,
    Weapon,
    attribute_abbreviation,
)


class CatalogueTalent(CatalogueModel):
    """Talent entry as listed under a path in the talent datasets"""
    description: Optional[str] = None
    specialty: Optional[str] = None
    activation: Optional[str] = None
    prerequisites: Optional[str] = None


class PathTalents(BaseModel):
    """All talents of one path plus its optional declared key talent"""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    key_talent: Optional[str] = Field(None, alias='keyTalent')
    talents: List[CatalogueTalent] = Field(default_factory=list)

    def get(self, name: str) -> Optional[CatalogueTalent]:
        for talent in self.talents:
            if talent.name == name:
                return talent
        return None


class SurgeDefinition(BaseModel):
    """A surge and the radiant paths that grant it"""
    name: str
    attribute: str
    radiant_paths: List[str] = Field(default_factory=list)

    @property
    def attr_abbrev(self) -> str:
        return attribute_abbreviation(self.attribute)


DATA_FILES = {
    'ancestries': 'ancestries.json',
    'heroic_paths': 'heroic_paths.json',
    'radiant_paths': 'radiant_paths.json',
    'weapons': 'weapons.json',
    'armor': 'armor.json',
    'equipment': 'equipment.json',
    'heroic_talents': 'heroic_talents.json',
    'radiant_talents': 'radiant_talents.json',
    'surges': 'surges.json',
    'skills': 'skills.json',
    'expertises': 'expertises.json',
}

DEFAULT_DATA_DIR = Path(__file__).parent / 'data'


@dataclass
class GameDataCatalogue:
    """Every static dataset the engines and the serializer consult"""
    ancestries: List[Ancestry] = field(default_factory=list)
    heroic_paths: List[HeroicPath] = field(default_factory=list)
    radiant_paths: List[HeroicPath] = field(default_factory=list)
    weapons: List[Weapon] = field(default_factory=list)
    armor: List[Armor] = field(default_factory=list)
    equipment: List[EquipmentItem] = field(default_factory=list)
    talents: Dict[str, PathTalents] = field(default_factory=dict)
    surges: List[SurgeDefinition] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    expertises: List[str] = field(default_factory=list)

    @property
    def all_paths(self) -> List[HeroicPath]:
        return [*self.heroic_paths, *self.radiant_paths]

    @property
    def surge_names(self) -> set:
        return {surge.name for surge in self.surges}

    def is_radiant_path(self, name: str) -> bool:
        return any(path.name == name for path in self.radiant_paths)

    def is_heroic_path(self, name: str) -> bool:
        return any(path.name == name for path in self.heroic_paths)

    def get_surge(self, name: str) -> Optional[SurgeDefinition]:
        for surge in self.surges:
            if surge.name == name:
                return surge
        return None

    def get_path_talents(self, path_name: str) -> Optional[PathTalents]:
        return self.talents.get(path_name)


def _read_json(data_dir: Path, filename: str) -> Any:
    file_path = data_dir / filename
    if not file_path.exists():
        logger.warning(f"Catalogue file missing: {file_path}")
        return None
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_catalogue(data_dir: Optional[Union[str, Path]] = None) -> GameDataCatalogue:
    """
    Load every dataset from a directory of JSON files

    Missing files produce empty datasets so a partial data directory still
    loads; malformed files raise.

    Args:
        data_dir: Directory holding the dataset files (bundled data by default)

    Returns:
        Populated GameDataCatalogue
    """
    data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
    logger.info(f"Loading game data catalogue from {data_dir}")

    raw = {key: _read_json(data_dir, filename) for key, filename in DATA_FILES.items()}

    talents_adapter = TypeAdapter(Dict[str, PathTalents])
    talents: Dict[str, PathTalents] = {}
    talents.update(talents_adapter.validate_python(raw['heroic_talents'] or {}))
    talents.update(talents_adapter.validate_python(raw['radiant_talents'] or {}))

    surges_raw = raw['surges'] or {}
    if isinstance(surges_raw, dict):
        surges_raw = surges_raw.get('surges', [])

    catalogue = GameDataCatalogue(
        ancestries=TypeAdapter(List[Ancestry]).validate_python(raw['ancestries'] or []),
        heroic_paths=TypeAdapter(List[HeroicPath]).validate_python(raw['heroic_paths'] or []),
        radiant_paths=TypeAdapter(List[HeroicPath]).validate_python(raw['radiant_paths'] or []),
        weapons=TypeAdapter(List[Weapon]).validate_python(raw['weapons'] or []),
        armor=TypeAdapter(List[Armor]).validate_python(raw['armor'] or []),
        equipment=TypeAdapter(List[EquipmentItem]).validate_python(raw['equipment'] or []),
        talents=talents,
        surges=TypeAdapter(List[SurgeDefinition]).validate_python(surges_raw),
        skills=TypeAdapter(List[Skill]).validate_python(raw['skills'] or []),
        expertises=list(raw['expertises'] or []),
    )

    logger.info(
        f"Catalogue loaded: {len(catalogue.all_paths)} paths, {len(catalogue.talents)} talent groups, "
        f"{len(catalogue.surges)} surges, {len(catalogue.skills)} skills"
    )
    return catalogue


_catalogue: Optional[GameDataCatalogue] = None
_catalogue_lock = threading.Lock()


def get_game_data_catalogue() -> GameDataCatalogue:
    """Process-wide catalogue, loaded on first use from the configured data directory"""
    global _catalogue
    with _catalogue_lock:
        if _catalogue is None:
            from config.builder_settings import CHARACTER_DATA_DIR
            _catalogue = load_catalogue(CHARACTER_DATA_DIR)
        return _catalogue


def reset_game_data_catalogue():
    """Drop the cached catalogue (tests, data reloads)"""
    global _catalogue
    with _catalogue_lock:
        _catalogue = None
