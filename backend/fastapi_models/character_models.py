"""
Pydantic models for the character editing endpoints
Requests carry only what the managers need; responses wrap the finalized
snapshot so the client can re-render from one payload.
"""

from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field, ConfigDict

from .shared_models import BaseResponse


class CharacterStateResponse(BaseModel):
    """Finalized character snapshot from CharacterManager.get_character_state()"""
    model_config = ConfigDict(populate_by_name=True)

    character_id: int = Field(..., alias='characterId')
    version: int = Field(..., description="Bumped whenever the character is reset or loaded")
    character: Dict[str, Any] = Field(..., description="Snapshot in its camelCase shape")
    has_radiant_path: bool = Field(False, alias='hasRadiantPath')
    available_talents: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict, alias='availableTalents')
    has_unsaved_changes: bool = Field(False, alias='hasUnsavedChanges')


class AttributeUpdateRequest(BaseModel):
    value: int = Field(..., description="New attribute score; no bounds are enforced")


class DeflectUpdateRequest(BaseModel):
    value: int = Field(..., ge=0, description="Deflect from worn armor")


class PathToggleRequest(BaseModel):
    """Select or deselect one path"""
    path: str = Field(..., description="Path id or name")
    radiant: bool = Field(False, description="True for a Radiant order, False for a Heroic path")


class SkillRankRequest(BaseModel):
    rank: int = Field(..., description="New rank, clamped to 0-5")


class SkillRankResponse(BaseModel):
    """Skill after a rank change plus the refreshed surge list"""
    skill: Dict[str, Any]
    surges: List[Dict[str, Any]] = Field(default_factory=list)
    has_unsaved_changes: bool = True


class TalentRequest(BaseModel):
    path: str = Field(..., description="Owning path name")
    talent: str = Field(..., description="Talent name")


class TalentListResponse(BaseModel):
    talents: List[Dict[str, Any]]
    available_talents: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)


class SaveResponse(BaseModel):
    """Compact save payload and the file name to store it under"""
    filename: str
    content: Dict[str, Any] = Field(..., description="Compact v2 save")


class LoadRequest(BaseModel):
    content: str = Field(..., description="Save file text (compact v1/v2 or a full snapshot)")


class LoadResponse(BaseResponse):
    character_name: Optional[str] = None
    save_version: Optional[int] = None
