"""
Character Serializer - compact, versioned JSON for character saves

Version 2 references catalogue entities by id (falling back to a derived
slug) and writes custom gear inline. Version 1 saves referenced entities by
display name and stored the senses range as a bare number; they still load.
Anything else that parses as a JSON object is treated as a full snapshot
from before the compact format existed and merged over the defaults.
"""

import json
import re
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Union, TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from character.models import (
    Armor,
    Attributes,
    CharacterData,
    Defenses,
    EquipmentItem,
    Goal,
    HeroicPath,
    Resource,
    Skill,
    Talent,
    Weapon,
    default_character,
    MAX_SKILL_RANK,
)
from fastapi_models.save_models import CompactSaveBase, CompactSaveV1, CompactSaveV2
from gamedata.lookup import (
    entity_id,
    find_by_id_or_name,
    find_talent,
    ANCESTRY_PREFIX,
    ARMOR_PREFIX,
    EQUIPMENT_PREFIX,
    PATH_PREFIX,
    SKILL_PREFIX,
    TALENT_PREFIX,
    WEAPON_PREFIX,
)

if TYPE_CHECKING:
    from gamedata.catalogue import GameDataCatalogue


SUPPORTED_VERSIONS = (1, 2)
DEFAULT_FILENAME = "character"
# Path separators and characters Windows rejects in file names
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


class CharacterLoadError(Exception):
    """Raised when a save file cannot be turned into a character"""
    pass


@dataclass
class LoadedCharacter:
    """A deserialized character and the name to report for it"""
    character: CharacterData
    display_name: str
    version: Optional[int] = None


# ============================================================
# Serialization
# ============================================================

def _serialize_item(item, catalogue_items: List, prefix: str) -> Union[str, Dict[str, Any]]:
    """Catalogue gear becomes its identifier; custom gear is written whole"""
    for static_item in catalogue_items:
        if (item.id and static_item.id == item.id) or static_item.name == item.name:
            return entity_id(static_item, prefix)
    return item.model_dump(exclude_none=True)


def serialize_character(data: CharacterData, catalogue: 'GameDataCatalogue') -> CompactSaveV2:
    """
    Serialize a snapshot to the current compact format

    Only ranked skills are stored; surges and other caches are left out and
    rebuilt on load.

    Args:
        data: Snapshot to save
        catalogue: Catalogue used to decide which gear is stock

    Returns:
        CompactSaveV2 model
    """
    attrs = data.attributes
    defenses = data.defenses
    return CompactSaveV2(
        v=2,
        p=data.player_name,
        c=data.character_name,
        l=data.level,
        a=entity_id(data.ancestry, ANCESTRY_PREFIX) if data.ancestry else None,
        h=[entity_id(path, PATH_PREFIX) for path in data.paths],
        ri=data.radiant_ideal,
        rp=data.radiant_path or "",
        sn=data.spren_name or "",
        br=data.bond_range or 30,
        at=(attrs.strength, attrs.speed, attrs.intellect, attrs.willpower, attrs.awareness, attrs.presence),
        m=data.marks,
        sk=[(entity_id(skill, SKILL_PREFIX), skill.rank) for skill in data.skills if skill.rank > 0],
        df=(defenses.physical, defenses.cognitive, defenses.spiritual, defenses.deflect),
        hp=(data.health.current, data.health.max),
        fo=(data.focus.current, data.focus.max),
        iv=(data.investiture.current, data.investiture.max),
        mv=data.movement,
        sr=data.senses_range,
        rd=data.recovery_die,
        lc=data.lifting_capacity,
        cc=data.carrying_capacity,
        ex=list(data.expertises),
        wp=[_serialize_item(w, catalogue.weapons, WEAPON_PREFIX) for w in data.weapons],
        ar=[_serialize_item(a, catalogue.armor, ARMOR_PREFIX) for a in data.armor],
        eq=[_serialize_item(e, catalogue.equipment, EQUIPMENT_PREFIX) for e in data.equipment],
        ta=[(entity_id(t, TALENT_PREFIX), t.path, t.is_key_talent) for t in data.talents],
        ot=list(data.other_talents),
        pu=list(data.purpose),
        ob=list(data.obstacle),
        go=[(goal.text, goal.level) for goal in data.goals],
        no=list(data.notes),
        cn=list(data.connections),
        co=list(data.conditions),
        ap=data.appearance,
    )


def serialize_to_json(data: CharacterData, catalogue: 'GameDataCatalogue', indent: Optional[int] = 2) -> str:
    """Compact save as JSON text, ready to write to a .json file"""
    compact = serialize_character(data, catalogue)
    return json.dumps(compact.model_dump(mode='json'), indent=indent)


def save_filename(data: CharacterData) -> str:
    """`<character name>.json`, reduced to a single path component"""
    name = _UNSAFE_FILENAME_CHARS.sub('_', data.character_name).strip(' .')
    return f"{name or DEFAULT_FILENAME}.json"


# ============================================================
# Deserialization
# ============================================================

def _resolve_list(entries: List, catalogue_items: List, prefix: str, model: type, kind: str) -> List:
    """References resolve against the catalogue (unresolved ones are dropped); inline objects are validated"""
    resolved = []
    for entry in entries:
        if isinstance(entry, str):
            found = find_by_id_or_name(catalogue_items, entry, prefix)
            if found is None:
                logger.debug(f"Dropping unresolved {kind} reference '{entry}'")
                continue
            resolved.append(found.model_copy(deep=True))
        else:
            resolved.append(model.model_validate(entry))
    return resolved


def _resolve_skills(saved_ranks: List, catalogue: 'GameDataCatalogue') -> List[Skill]:
    """
    Standard skill list overlaid with saved ranks

    Ranks saved for a surge are kept as surge skills; path reconciliation
    on load decides whether they stay.
    """
    remaining = list(saved_ranks)

    def take_rank(item, prefix: str) -> int:
        for index, (reference, rank) in enumerate(remaining):
            if find_by_id_or_name([item], reference, prefix) is not None:
                remaining.pop(index)
                return max(0, min(MAX_SKILL_RANK, rank))
        return 0

    skills = [
        skill.model_copy(update={'rank': take_rank(skill, SKILL_PREFIX)})
        for skill in catalogue.skills
    ]

    for surge in catalogue.surges:
        surge_skill = Skill(name=surge.name, attribute=surge.attribute, attr_abbrev=surge.attr_abbrev, rank=0)
        rank = take_rank(surge_skill, SKILL_PREFIX)
        if rank > 0:
            skills.append(surge_skill.model_copy(update={'rank': rank}))

    for reference, _ in remaining:
        logger.debug(f"Dropping rank for unknown skill '{reference}'")
    return skills


def _resolve_talents(saved: List, catalogue: 'GameDataCatalogue') -> List[Talent]:
    talents = []
    for reference, path_name, is_key in saved:
        found = find_talent(reference, path_name, catalogue.talents)
        if found is not None:
            owner_path, entry = found
            talents.append(Talent(
                id=entry.id,
                name=entry.name,
                path=owner_path or path_name,
                is_key_talent=is_key,
                description=entry.description,
            ))
            continue
        # Custom or since-removed talent: keep what the save knows
        talents.append(Talent(
            id=reference if reference.startswith(f"{TALENT_PREFIX}_") else None,
            name=reference,
            path=path_name,
            is_key_talent=is_key,
        ))
    return talents


def _apply_common(save: CompactSaveBase, catalogue: 'GameDataCatalogue') -> CharacterData:
    """Fields whose shape is the same in every version"""
    data = default_character(catalogue)

    data.player_name = save.p
    data.character_name = save.c
    data.level = save.l
    data.ancestry = None
    if save.a:
        ancestry = find_by_id_or_name(catalogue.ancestries, save.a, ANCESTRY_PREFIX)
        data.ancestry = ancestry.model_copy(deep=True) if ancestry else None

    data.paths = _resolve_list(save.h, catalogue.all_paths, PATH_PREFIX, HeroicPath, 'path')
    data.radiant_ideal = save.ri
    data.radiant_path = save.rp
    data.spren_name = save.sn
    data.bond_range = save.br

    strength, speed, intellect, willpower, awareness, presence = save.at
    data.attributes = Attributes(
        strength=strength, speed=speed, intellect=intellect,
        willpower=willpower, awareness=awareness, presence=presence,
    )
    data.marks = save.m
    data.skills = _resolve_skills(save.sk, catalogue)

    physical, cognitive, spiritual, deflect = save.df
    data.defenses = Defenses(physical=physical, cognitive=cognitive, spiritual=spiritual, deflect=deflect)

    data.health = Resource(current=save.hp[0], max=save.hp[1])
    data.focus = Resource(current=save.fo[0], max=save.fo[1])
    data.investiture = Resource(current=save.iv[0], max=save.iv[1])

    data.movement = save.mv
    data.recovery_die = save.rd
    data.lifting_capacity = save.lc
    data.carrying_capacity = save.cc

    data.expertises = list(save.ex)
    data.talents = _resolve_talents(save.ta, catalogue)
    data.other_talents = list(save.ot)

    data.purpose = list(save.pu)
    data.obstacle = list(save.ob)
    data.goals = [Goal(text=text, level=level) for text, level in save.go]
    data.notes = list(save.no)
    data.connections = list(save.cn)
    data.conditions = list(save.co)
    data.appearance = save.ap

    # Rebuilt by reconciliation once paths are applied
    data.surges = []
    return data


def _apply_gear(data: CharacterData, save: CompactSaveBase, catalogue: 'GameDataCatalogue'):
    data.weapons = _resolve_list(save.wp, catalogue.weapons, WEAPON_PREFIX, Weapon, 'weapon')
    data.armor = _resolve_list(save.ar, catalogue.armor, ARMOR_PREFIX, Armor, 'armor')
    data.equipment = _resolve_list(save.eq, catalogue.equipment, EQUIPMENT_PREFIX, EquipmentItem, 'equipment')


def _format_senses(value: Union[int, float, str]) -> str:
    if isinstance(value, str):
        return value
    if float(value).is_integer():
        value = int(value)
    return f"{value} ft."


def deserialize_v1(save: CompactSaveV1, catalogue: 'GameDataCatalogue') -> CharacterData:
    """Legacy name-based save"""
    data = _apply_common(save, catalogue)
    data.senses_range = _format_senses(save.sr)
    _apply_gear(data, save, catalogue)
    return data


def deserialize_v2(save: CompactSaveV2, catalogue: 'GameDataCatalogue') -> CharacterData:
    """Current id-based save"""
    data = _apply_common(save, catalogue)
    data.senses_range = save.sr
    _apply_gear(data, save, catalogue)
    return data


# Version tag -> (wire model, deserializer)
DESERIALIZERS: Dict[int, tuple] = {
    1: (CompactSaveV1, deserialize_v1),
    2: (CompactSaveV2, deserialize_v2),
}


def is_compact_format(obj: Any) -> bool:
    """True for a dict carrying a supported numeric version tag and a string player name"""
    if not isinstance(obj, dict):
        return False
    version = obj.get('v')
    if isinstance(version, bool) or not isinstance(version, (int, float)):
        return False
    return version in SUPPORTED_VERSIONS and isinstance(obj.get('p'), str)


def deserialize_character(raw: Dict[str, Any], catalogue: 'GameDataCatalogue') -> CharacterData:
    """
    Dispatch a compact save to the deserializer for its version

    Raises:
        CharacterLoadError: Unsupported version
        pydantic.ValidationError: Fields of the wrong shape
    """
    version = raw.get('v')
    entry = DESERIALIZERS.get(int(version)) if isinstance(version, (int, float)) else None
    if entry is None:
        raise CharacterLoadError(f"Unsupported save version: {version!r}")
    model, deserializer = entry
    return deserializer(model.model_validate({**raw, 'v': int(version)}), catalogue)


def merge_full_snapshot(raw: Dict[str, Any], catalogue: 'GameDataCatalogue') -> CharacterData:
    """Pre-compact saves stored the whole snapshot; present keys replace the defaults"""
    defaults = default_character(catalogue).to_dict()
    return CharacterData.model_validate({**defaults, **raw})


def load_character_json(text: str, catalogue: 'GameDataCatalogue') -> LoadedCharacter:
    """
    Parse save file text into a snapshot

    Args:
        text: File contents
        catalogue: Catalogue used to resolve references

    Returns:
        LoadedCharacter with the snapshot and the name to report

    Raises:
        CharacterLoadError: Not JSON, not an object, or fields of the wrong shape
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise CharacterLoadError(f"Save file is not valid JSON: {e}") from e

    try:
        if is_compact_format(parsed):
            character = deserialize_character(parsed, catalogue)
            return LoadedCharacter(character=character, display_name=character.character_name, version=int(parsed['v']))

        if isinstance(parsed, dict):
            character = merge_full_snapshot(parsed, catalogue)
            return LoadedCharacter(character=character, display_name=parsed.get('characterName') or DEFAULT_FILENAME)
    except ValidationError as e:
        raise CharacterLoadError(f"Save file has invalid fields: {e.error_count()} error(s)") from e

    raise CharacterLoadError("Save file does not contain a character")
