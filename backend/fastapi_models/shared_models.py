"""
Shared Pydantic models used across routers
Base models, common responses, and cross-cutting concerns
"""

from typing import Dict, Any, Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field


# ============================================================
# Base Response Models
# ============================================================

class BaseResponse(BaseModel):
    """Base response model for all API responses"""
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.now)


# ============================================================
# System/Health Models
# ============================================================

class HealthResponse(BaseModel):
    """Service health check response"""
    status: Literal['healthy', 'degraded', 'unhealthy']
    service: str
    active_sessions: int = 0
    checks: Dict[str, bool] = Field(default_factory=dict)


# ============================================================
# Session Models
# ============================================================

class SessionInfo(BaseModel):
    """Session information"""
    character_id: int
    character_name: Optional[str] = None
    version: int = 0
    has_unsaved_changes: bool = False
    last_saved: Optional[str] = None
    last_loaded: Optional[str] = None
