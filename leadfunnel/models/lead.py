"""
Lead model - a prospect moving through the qualification pipeline.
Owned by exactly one company for its whole lifetime.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from sqlalchemy.dialects.postgresql import JSONB


def json_column() -> Column:
    """JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)."""
    return Column(JSON().with_variant(JSONB(), "postgresql"))


class LeadStatus(str, Enum):
    PROSPECTABLE = "prospectable"
    IN_CONTACT = "in_contact"
    QUALIFIED = "qualified"
    AVAILABLE = "available"
    ACTIVATED = "activated"
    DISCARDED = "discarded"


# Leads that finished the qualification conversation
CONVERSATION_STAGES = [
    LeadStatus.QUALIFIED,
    LeadStatus.AVAILABLE,
    LeadStatus.ACTIVATED,
    LeadStatus.DISCARDED,
]


class Classification(str, Enum):
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Lead(SQLModel, table=True):
    """
    Lead entity - a company being prospected on behalf of a tenant company.
    Scoped to the owning company.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    company_id: uuid.UUID = Field(foreign_key="company.id", index=True)

    # Prospect info
    company_name: str = Field(index=True)
    segment: str
    city: str = Field(index=True)
    document: Optional[str] = None  # tax id

    # Contact channels
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None

    # Qualification
    status: str = Field(default=LeadStatus.PROSPECTABLE.value, index=True)
    score: Optional[int] = Field(default=None, index=True)  # 0-100
    classification: Optional[str] = None  # hot, warm, cold
    urgency: Optional[str] = None  # low, medium, high

    # Conversation output
    main_pain: Optional[str] = None
    conversation_summary: Optional[str] = None
    discard_reason: Optional[str] = None
    conversation_history: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=json_column())
    # Example: [{"direction": "sent", "message": "Hi!", "timestamp": "2024-05-01T10:00:00"}]

    # Activation (set only when status == activated)
    activated_at: Optional[datetime] = Field(default=None, index=True)
    activated_by: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
