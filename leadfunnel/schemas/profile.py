"""
Prospecting profile schemas.
"""
import uuid
from typing import List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from leadfunnel.models.company import ClientType
from leadfunnel.models.lead import Urgency


class ProfileUpdate(BaseModel):
    """Create or replace the company's ideal customer profile."""
    niche: str
    client_type: ClientType
    cities: List[str]
    min_ticket: float = Field(gt=0)
    requires_decision_maker: bool = False
    min_urgency: Urgency

    @field_validator("niche")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("cities")
    @classmethod
    def at_least_one_city(cls, value: List[str]) -> List[str]:
        cities = [c.strip() for c in value if c and c.strip()]
        if not cities:
            raise ValueError("at least one city is required")
        return cities

    class Config:
        json_schema_extra = {
            "example": {
                "niche": "Clinics",
                "client_type": "business",
                "cities": ["Sao Paulo", "Rio de Janeiro"],
                "min_ticket": 5000,
                "requires_decision_maker": True,
                "min_urgency": "medium"
            }
        }


class ProfileResponse(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    niche: str
    client_type: str
    cities: List[str]
    min_ticket: float
    requires_decision_maker: bool
    min_urgency: str
    updated_at: datetime

    class Config:
        from_attributes = True
