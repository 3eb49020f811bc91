"""
Activity log model - audit trail for pipeline mutations.
"""
import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import SQLModel, Field

from leadfunnel.models.lead import json_column


class ActivityLog(SQLModel, table=True):
    """
    Activity log for tracking ingestion, qualification, dispatch and activation.
    Feeds the dashboard activity feed.
    """
    __tablename__ = "activity_log"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    company_id: uuid.UUID = Field(foreign_key="company.id", index=True)
    actor_id: Optional[str] = Field(default=None, index=True)  # operator or integration name

    # Action details
    action: str = Field(index=True)
    entity_type: str = Field(index=True)  # lead, profile
    entity_id: Optional[uuid.UUID] = None

    # Human-readable description
    description: Optional[str] = None

    # Additional metadata
    meta_data: Dict[str, Any] = Field(default={}, sa_column=json_column())
    # Example: {"old_status": "in_contact", "new_status": "qualified"}

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)


# Action constants for consistency
class Actions:
    # Lead actions
    LEAD_INGESTED = "lead_ingested"
    LEAD_QUALIFIED = "lead_qualified"
    LEADS_ACTIVATED = "leads_activated"
    LEAD_DISPATCHED = "lead_dispatched"
    LEAD_DISPATCH_FAILED = "lead_dispatch_failed"

    # Profile actions
    PROFILE_UPDATED = "profile_updated"
