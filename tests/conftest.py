"""
Shared fixtures: a throwaway SQLite database per test and seed helpers.
"""
import asyncio
from datetime import datetime
from typing import List, Optional

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from leadfunnel.core.exceptions import UpstreamDeliveryError
from leadfunnel.models import Company, ProspectingProfile, Lead, ActivityLog  # noqa: F401
from leadfunnel.models.lead import LeadStatus
from leadfunnel.services.integrations.base import ContactDispatcher


def make_session_factory(database_url: str):
    # NullPool: no connection outlives the event loop that opened it
    engine = create_async_engine(database_url, poolclass=NullPool)
    return engine, sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'leadfunnel_test.db'}"


def _run_against(database_url, scenario, with_factory):
    async def _main():
        engine, Session = make_session_factory(database_url)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            if with_factory:
                return await scenario(Session)
            async with Session() as session:
                return await scenario(session)
        finally:
            await engine.dispose()

    return asyncio.run(_main())


@pytest.fixture
def run_db(database_url):
    """Run `scenario(session)` in a fresh event loop against the test database."""
    return lambda scenario: _run_against(database_url, scenario, with_factory=False)


@pytest.fixture
def run_db_sessions(database_url):
    """Like run_db, but hands `scenario` the session factory so it can open several sessions."""
    return lambda scenario: _run_against(database_url, scenario, with_factory=True)


async def seed_company(session: AsyncSession, daily_capacity: int = 10, timezone: str = "UTC") -> Company:
    company = Company(name="Acme Sales", timezone=timezone, daily_capacity=daily_capacity)
    session.add(company)
    await session.commit()
    await session.refresh(company)
    return company


async def seed_profile(session: AsyncSession, company: Company) -> ProspectingProfile:
    profile = ProspectingProfile(
        company_id=company.id,
        niche="Clinics",
        client_type="business",
        cities=["Sao Paulo"],
        min_ticket=5000,
        requires_decision_maker=True,
        min_urgency="medium",
    )
    session.add(profile)
    await session.commit()
    await session.refresh(profile)
    return profile


async def seed_lead(
    session: AsyncSession,
    company: Company,
    status: LeadStatus = LeadStatus.PROSPECTABLE,
    name: str = "Total Health Clinic",
    score: Optional[int] = None,
    classification: Optional[str] = None,
    discard_reason: Optional[str] = None,
    activated_at: Optional[datetime] = None,
    created_at: Optional[datetime] = None,
) -> Lead:
    lead = Lead(
        company_id=company.id,
        company_name=name,
        segment="Clinics",
        city="Sao Paulo",
        whatsapp="+5511999999999",
        status=status.value,
        score=score,
        classification=classification,
        discard_reason=discard_reason,
        activated_at=activated_at,
        activated_by="seed" if activated_at else None,
    )
    if created_at:
        lead.created_at = created_at
    session.add(lead)
    await session.commit()
    await session.refresh(lead)
    return lead


async def seed_leads(session: AsyncSession, company: Company, status: LeadStatus, n: int, **fields) -> List[Lead]:
    return [await seed_lead(session, company, status, name=f"Lead {i}", **fields) for i in range(n)]


class FakeDispatcher(ContactDispatcher):
    """Records payloads; fails for the lead names listed in `fail_for`."""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.payloads = []

    async def dispatch(self, payload):
        self.payloads.append(payload)
        if payload["company_name"] in self.fail_for:
            raise UpstreamDeliveryError("Contact automation", "503 - unavailable")


@pytest.fixture
def fake_dispatcher():
    return FakeDispatcher()
