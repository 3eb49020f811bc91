"""
Lead schemas.
"""
import uuid
from typing import Optional, List
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator

from leadfunnel.models.lead import LeadStatus, Classification, Urgency


class MessageDirection(str, Enum):
    SENT = "sent"
    RECEIVED = "received"


class ConversationMessage(BaseModel):
    """One message exchanged during qualification."""
    direction: MessageDirection
    message: str
    timestamp: datetime


class LeadIngest(BaseModel):
    """Lead pushed by the ingestion automation."""
    company_id: uuid.UUID
    company_name: str
    segment: str
    city: str
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    email: Optional[str] = None
    document: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)
    classification: Optional[Classification] = None
    urgency: Optional[Urgency] = None
    main_pain: Optional[str] = None
    conversation_summary: Optional[str] = None
    status: LeadStatus = LeadStatus.PROSPECTABLE

    @field_validator("company_name", "segment", "city")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("phone", "whatsapp", "email", "document", "main_pain", "conversation_summary")
    @classmethod
    def blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    class Config:
        json_schema_extra = {
            "example": {
                "company_id": "6f1c2a9e-8d4b-4a43-9a9e-0c3f5b1f7d21",
                "company_name": "Total Health Clinic",
                "segment": "Clinics",
                "city": "Sao Paulo",
                "whatsapp": "+5511999999999"
            }
        }


class QualificationResult(BaseModel):
    """Outcome of a qualification conversation."""
    lead_id: uuid.UUID
    company_id: uuid.UUID
    status: LeadStatus
    score: Optional[int] = Field(default=None, ge=0, le=100)
    classification: Optional[Classification] = None
    urgency: Optional[Urgency] = None
    main_pain: Optional[str] = None
    conversation_summary: Optional[str] = None
    discard_reason: Optional[str] = None
    conversation_history: Optional[List[ConversationMessage]] = None

    @field_validator("status")
    @classmethod
    def qualification_outcome(cls, value: LeadStatus) -> LeadStatus:
        if value not in (LeadStatus.QUALIFIED, LeadStatus.AVAILABLE, LeadStatus.DISCARDED):
            raise ValueError("must be one of qualified, available, discarded")
        return value


class IngestResponse(BaseModel):
    success: bool = True
    lead_id: uuid.UUID


class LeadResponse(BaseModel):
    """Lead response."""
    id: uuid.UUID
    company_id: uuid.UUID
    company_name: str
    segment: str
    city: str
    document: Optional[str]
    phone: Optional[str]
    whatsapp: Optional[str]
    email: Optional[str]
    status: LeadStatus
    score: Optional[int]
    classification: Optional[str]
    urgency: Optional[str]
    main_pain: Optional[str]
    conversation_summary: Optional[str]
    discard_reason: Optional[str]
    conversation_history: Optional[List[dict]]
    activated_at: Optional[datetime]
    activated_by: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ActivationRequest(BaseModel):
    """Claim available leads for direct outreach."""
    lead_ids: List[uuid.UUID]

    @field_validator("lead_ids")
    @classmethod
    def not_empty(cls, value: List[uuid.UUID]) -> List[uuid.UUID]:
        if not value:
            raise ValueError("at least one lead id is required")
        return value


class ActivationResult(BaseModel):
    activated: List[uuid.UUID]
    activated_at: datetime
    remaining_today: int
    message: str


class DispatchResult(BaseModel):
    """Leads handed to the contact automation in one prospecting run."""
    dispatched: List[uuid.UUID] = []
    failed: List[uuid.UUID] = []
    message: str = ""
