"""
Factory functions for creating properly configured CharacterManager instances.
"""

from typing import Optional, TYPE_CHECKING
from loguru import logger

from .character_manager import CharacterManager
from .manager_registry import get_all_manager_specs
from .models import CharacterData

if TYPE_CHECKING:
    from gamedata.catalogue import GameDataCatalogue


def create_character_manager(
    character: Optional[CharacterData] = None,
    catalogue: Optional['GameDataCatalogue'] = None,
) -> CharacterManager:
    """
    Create a CharacterManager with every manager registered and the snapshot reconciled

    Args:
        character: Snapshot to edit; a default character when omitted
        catalogue: Game data catalogue; the shared singleton when omitted

    Returns:
        Fully configured CharacterManager
    """
    manager = CharacterManager(character, catalogue=catalogue)

    for name, manager_class in get_all_manager_specs():
        manager.register_manager(name, manager_class)

    # Derived fields of a fresh or supplied snapshot may be stale
    manager.reconcile()
    manager.mark_clean()

    logger.debug(f"Created CharacterManager with {len(manager.get_all_managers())} managers")
    return manager
