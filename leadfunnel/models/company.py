"""
Company and prospecting profile models.
The company is the tenant: every lead, profile and log entry is scoped to one.
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional, List

from sqlmodel import SQLModel, Field

from leadfunnel.config import settings
from leadfunnel.models.lead import json_column


class Company(SQLModel, table=True):
    """
    Company/Tenant model.
    Owns the daily activation quota.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True)
    document: Optional[str] = Field(default=None, index=True)  # tax id

    # Settings
    timezone: str = Field(default="UTC")
    daily_capacity: int = Field(default_factory=lambda: settings.DEFAULT_DAILY_CAPACITY)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ClientType(str, Enum):
    INDIVIDUAL = "individual"
    BUSINESS = "business"
    BOTH = "both"


class ProspectingProfile(SQLModel, table=True):
    """
    Ideal customer profile used when initiating contact with leads.
    One per company.
    """
    __tablename__ = "prospecting_profile"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    company_id: uuid.UUID = Field(foreign_key="company.id", unique=True, index=True)

    niche: str
    client_type: str  # individual, business, both
    cities: List[str] = Field(default=[], sa_column=json_column())
    min_ticket: float
    requires_decision_maker: bool = Field(default=False)
    min_urgency: str  # low, medium, high

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
