"""
Skill Manager - handles skill ranks and the surge skills granted by Radiant paths
Standard skills always exist; a surge skill exists exactly while one of the
paths that grants it is active. The surge list on the snapshot is a cache of
(skills x attributes) and is rebuilt from them, never edited directly.
"""

from typing import Dict, List, Any, Iterable, Optional, Set, TYPE_CHECKING
from loguru import logger

from ..events import EventType, SkillUpdatedEvent
from ..models import (
    Attributes,
    HeroicPath,
    Skill,
    Surge,
    MAX_SKILL_RANK,
    is_standard_skill,
)

if TYPE_CHECKING:
    from gamedata.catalogue import SurgeDefinition


# Rank 1..5 -> (die, area size)
SURGE_RANK_TABLE = [
    ("d4", "2.5 ft"),
    ("d6", "5 ft"),
    ("d8", "10 ft"),
    ("d10", "15 ft"),
    ("d12", "20 ft"),
]
NO_SURGE_DIE = ("-", "-")


def active_surge_names(paths: Iterable[HeroicPath], surges: Iterable['SurgeDefinition']) -> Set[str]:
    """Surges granted by at least one active path"""
    path_names = {path.name for path in paths}
    return {surge.name for surge in surges if path_names.intersection(surge.radiant_paths)}


def reconcile_surge_skills(
    skills: List[Skill],
    paths: Iterable[HeroicPath],
    surges: List['SurgeDefinition'],
) -> List[Skill]:
    """
    Bring surge skill membership in line with the active paths

    Surge skills whose granting paths are all inactive are dropped, newly
    granted surges are appended at rank 0. Standard skills and ranks of
    surviving skills are untouched.
    """
    active = active_surge_names(paths, surges)
    all_surges = {surge.name for surge in surges}

    kept = [skill for skill in skills if skill.name not in all_surges or skill.name in active]
    present = {skill.name for skill in kept}

    for surge in surges:
        if surge.name in active and surge.name not in present:
            kept.append(Skill(
                name=surge.name,
                attribute=surge.attribute,
                attr_abbrev=surge.attr_abbrev,
                rank=0,
            ))
            present.add(surge.name)
    return kept


def surge_die_and_size(rank: int) -> tuple:
    if 1 <= rank <= MAX_SKILL_RANK:
        return SURGE_RANK_TABLE[rank - 1]
    return NO_SURGE_DIE


def compute_surges(skills: Iterable[Skill], attributes: Attributes) -> List[Surge]:
    """Surge view for every non-standard skill"""
    surges = []
    for skill in skills:
        if is_standard_skill(skill.name):
            continue
        rank = skill.rank or 0
        die, size = surge_die_and_size(rank)
        surges.append(Surge(
            name=skill.name,
            attribute=skill.attribute,
            attr_abbrev=skill.attr_abbrev,
            rank=rank,
            modifier=0 if rank == 0 else attributes.get(skill.attribute) + rank,
            die=die,
            size=size,
        ))
    return surges


class SkillManager:
    """Manages skill ranks, surge membership and the derived surge list"""

    def __init__(self, character_manager):
        """
        Initialize the SkillManager

        Args:
            character_manager: Reference to parent CharacterManager
        """
        self.character_manager = character_manager
        self.catalogue = character_manager.catalogue

        # Attribute changes move surge modifiers
        self.character_manager.on(EventType.ATTRIBUTE_CHANGED, self._on_attribute_changed)

    @property
    def character(self):
        return self.character_manager.character

    def _on_attribute_changed(self, event):
        self.refresh_surges()

    def get_skill(self, name: str) -> Optional[Skill]:
        return self.character.find_skill(name)

    def set_skill_rank(self, name: str, rank: int) -> Skill:
        """
        Set a skill rank, clamped to 0-5

        Raises:
            ValueError: Skill not on the character
        """
        skill = self.get_skill(name)
        if skill is None:
            raise ValueError(f"Skill '{name}' not found on character")

        old_rank = skill.rank
        skill.rank = max(0, min(MAX_SKILL_RANK, int(rank)))
        logger.debug(f"Skill {name}: rank {old_rank} -> {skill.rank}")

        self.refresh_surges()
        self.character_manager.mark_dirty()
        self.character_manager.emit(SkillUpdatedEvent(
            source_manager='SkillManager',
            skill_name=name,
            old_rank=old_rank,
            new_rank=skill.rank,
        ))
        return skill

    def reconcile(self) -> bool:
        """
        Re-derive surge skill membership from the active paths

        Returns:
            True if the skill list changed
        """
        character = self.character
        reconciled = reconcile_surge_skills(character.skills, character.paths, self.catalogue.surges)
        if reconciled == character.skills:
            return False

        before = {skill.name for skill in character.skills}
        after = {skill.name for skill in reconciled}
        logger.info(f"Surge skills reconciled: +{sorted(after - before)} -{sorted(before - after)}")
        character.skills = reconciled
        return True

    def refresh_surges(self) -> bool:
        """
        Rebuild the cached surge list when its projection differs

        Returns:
            True if the cache was replaced
        """
        character = self.character
        computed = compute_surges(character.skills, character.attributes)
        if computed == character.surges:
            return False
        character.surges = computed
        self.character_manager.emit(EventType.SURGES_CHANGED)
        return True

    def get_skill_summary(self) -> Dict[str, Any]:
        """
        Skills split into standard and surge groups, surges with their derived view

        Returns:
            Dict with 'standard', 'surges' and 'total_ranks'
        """
        character = self.character
        return {
            'standard': [s.model_dump() for s in character.skills if is_standard_skill(s.name)],
            'surges': [s.model_dump() for s in character.surges],
            'total_ranks': sum(s.rank for s in character.skills),
        }
