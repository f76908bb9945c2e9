from .attribute_manager import AttributeManager
from .skill_manager import SkillManager
from .talent_manager import TalentManager
from .identity_manager import IdentityManager
from .inventory_manager import InventoryManager

__all__ = [
    'AttributeManager',
    'SkillManager',
    'TalentManager',
    'IdentityManager',
    'InventoryManager',
]
