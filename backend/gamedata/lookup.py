"""
Identifier helpers shared by every catalogue reference
One place resolves "id or name" so the serializer, the managers and the
routers all agree on what a saved reference points at.
"""

import re
from typing import Iterable, Optional, TypeVar, Protocol, Dict, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from gamedata.catalogue import PathTalents


class Named(Protocol):
    id: Optional[str]
    name: str


N = TypeVar('N', bound=Named)

_NON_ALNUM = re.compile(r'[^a-z0-9]+')

# Identifier prefixes used when an entity has no declared id
ANCESTRY_PREFIX = 'anc'
PATH_PREFIX = 'path'
TALENT_PREFIX = 'tal'
WEAPON_PREFIX = 'wpn'
ARMOR_PREFIX = 'arm'
EQUIPMENT_PREFIX = 'eqp'
SKILL_PREFIX = 'skill'


def slugify(name: str, prefix: str) -> str:
    """Deterministic identifier: prefix_ + lower-cased name, non-alphanumeric runs collapsed to _"""
    return f"{prefix}_{_NON_ALNUM.sub('_', name.lower())}"


def entity_id(item: Named, prefix: str) -> str:
    """Declared id if present, else the derived slug"""
    return item.id or slugify(item.name, prefix)


def matches(item: Named, identifier: str, prefix: Optional[str] = None) -> bool:
    """True when the identifier names this item by id, name or (with a prefix) derived slug"""
    if item.id and item.id == identifier:
        return True
    if item.name == identifier:
        return True
    return prefix is not None and slugify(item.name, prefix) == identifier


def find_by_id_or_name(items: Iterable[N], identifier: str, prefix: Optional[str] = None) -> Optional[N]:
    """
    Resolve a saved reference against a catalogue list

    Args:
        items: Catalogue entries
        identifier: Saved id, display name, or derived slug
        prefix: Slug prefix for the entity kind; enables slug matching

    Returns:
        First matching entry or None
    """
    if not identifier:
        return None
    for item in items:
        if matches(item, identifier, prefix):
            return item
    return None


def find_talent(
    identifier: str,
    path_name: str,
    talents_by_path: Dict[str, 'PathTalents'],
) -> Optional[Tuple[str, Named]]:
    """
    Locate a talent, preferring the declared path and falling back to a full scan

    Returns:
        (owning path name, catalogue talent) or None
    """
    path_data = talents_by_path.get(path_name)
    if path_data is not None:
        found = find_by_id_or_name(path_data.talents, identifier, TALENT_PREFIX)
        if found is not None:
            return path_name, found

    for other_path, other_data in talents_by_path.items():
        found = find_by_id_or_name(other_data.talents, identifier, TALENT_PREFIX)
        if found is not None:
            return other_path, found

    return None
