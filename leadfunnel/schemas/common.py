"""
Common schemas used across multiple endpoints.
"""
import uuid
from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Simple message response."""
    message: str
    timestamp: Optional[datetime] = None

    class Config:
        json_schema_extra = {"example": {"message": "Operation successful"}}


class ActivityResponse(BaseModel):
    """Activity feed entry."""
    id: uuid.UUID
    actor_id: Optional[str]
    action: str
    entity_type: str
    entity_id: Optional[uuid.UUID]
    description: Optional[str]
    meta_data: Dict[str, Any]
    created_at: datetime

    class Config:
        from_attributes = True
