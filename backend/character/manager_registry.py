"""
Central registry for all character managers.
Defines the standard set of managers and their registration order.
"""

from typing import Type, List, Tuple, Optional
from .managers import (
    AttributeManager,
    SkillManager,
    TalentManager,
    IdentityManager,
    InventoryManager,
)

# Order matters for event setup - managers that emit events come before listeners
MANAGER_REGISTRY: List[Tuple[str, Type]] = [
    ('attribute', AttributeManager),  # Emits ATTRIBUTE_CHANGED events
    ('skill', SkillManager),          # Listens to ATTRIBUTE_CHANGED, owns surge membership
    ('talent', TalentManager),        # Key talents follow the active paths
    ('identity', IdentityManager),    # Path selection drives skill and talent reconciliation
    ('inventory', InventoryManager),
]


def get_all_manager_specs() -> List[Tuple[str, Type]]:
    """
    Get all manager specifications for registration.

    Returns:
        List of (name, class) tuples in proper registration order
    """
    return MANAGER_REGISTRY.copy()


def get_manager_names() -> List[str]:
    return [name for name, _ in MANAGER_REGISTRY]


def get_manager_class(name: str) -> Optional[Type]:
    """
    Get the manager class for a given name.

    Returns:
        Manager class or None if not found
    """
    for mgr_name, mgr_class in MANAGER_REGISTRY:
        if mgr_name == name:
            return mgr_class
    return None
