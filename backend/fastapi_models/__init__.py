"""
FastAPI Pydantic models
Wire format for save files plus request/response models for the routers
"""

from .shared_models import (
    BaseResponse,
    ErrorResponse,
    HealthResponse,
    SessionInfo,
)

from .save_models import (
    CompactSaveBase,
    CompactSaveV1,
    CompactSaveV2,
)

from .character_models import (
    CharacterStateResponse,
    AttributeUpdateRequest,
    DeflectUpdateRequest,
    PathToggleRequest,
    SkillRankRequest,
    SkillRankResponse,
    TalentRequest,
    TalentListResponse,
    SaveResponse,
    LoadRequest,
    LoadResponse,
)

__all__ = [
    'BaseResponse',
    'ErrorResponse',
    'HealthResponse',
    'SessionInfo',
    'CompactSaveBase',
    'CompactSaveV1',
    'CompactSaveV2',
    'CharacterStateResponse',
    'AttributeUpdateRequest',
    'DeflectUpdateRequest',
    'PathToggleRequest',
    'SkillRankRequest',
    'SkillRankResponse',
    'TalentRequest',
    'TalentListResponse',
    'SaveResponse',
    'LoadRequest',
    'LoadResponse',
]
