import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError

from leadfunnel.core.exceptions import ConflictError, NotFoundError, ValidationError
from leadfunnel.models.lead import Lead, LeadStatus
from leadfunnel.schemas.lead import LeadIngest, QualificationResult
from leadfunnel.services.ingestion_service import IngestionService

from conftest import seed_company, seed_lead


def test_ingest_creates_prospectable_lead(run_db):
    async def scenario(session):
        company = await seed_company(session)
        payload = LeadIngest(
            company_id=company.id,
            company_name="  Total Health Clinic ",
            segment="Clinics",
            city="Sao Paulo",
            phone="",
            whatsapp="+5511999999999",
        )
        return await IngestionService(session).ingest_lead(payload)

    lead = run_db(scenario)

    assert lead.status == LeadStatus.PROSPECTABLE
    assert lead.company_name == "Total Health Clinic"
    assert lead.phone is None
    assert lead.whatsapp == "+5511999999999"


def test_ingest_requires_core_fields():
    with pytest.raises(PydanticValidationError):
        LeadIngest(company_id=uuid.uuid4(), company_name=" ", segment="Clinics", city="Sao Paulo")
    with pytest.raises(PydanticValidationError):
        LeadIngest(company_id=uuid.uuid4(), company_name="Acme", segment="Clinics")


def test_ingest_unknown_company(run_db):
    async def scenario(session):
        payload = LeadIngest(company_id=uuid.uuid4(), company_name="Acme", segment="Retail", city="Recife")
        with pytest.raises(NotFoundError):
            await IngestionService(session).ingest_lead(payload)

    run_db(scenario)


def test_ingest_rejects_activated_status(run_db):
    async def scenario(session):
        company = await seed_company(session)
        payload = LeadIngest(
            company_id=company.id, company_name="Acme", segment="Retail", city="Recife",
            status=LeadStatus.ACTIVATED,
        )
        with pytest.raises(ValidationError):
            await IngestionService(session).ingest_lead(payload)

    run_db(scenario)


def test_qualification_updates_lead(run_db):
    async def scenario(session):
        company = await seed_company(session)
        lead = await seed_lead(session, company, LeadStatus.IN_CONTACT)
        payload = QualificationResult(
            lead_id=lead.id,
            company_id=company.id,
            status=LeadStatus.AVAILABLE,
            score=82,
            classification="hot",
            urgency="high",
            main_pain="Manual scheduling",
            conversation_history=[
                {"direction": "sent", "message": "Hi!", "timestamp": "2024-05-01T10:00:00"},
                {"direction": "received", "message": "Hello", "timestamp": "2024-05-01T10:02:00"},
            ],
        )
        await IngestionService(session).apply_qualification(payload)
        return await session.get(Lead, lead.id)

    lead = run_db(scenario)

    assert lead.status == LeadStatus.AVAILABLE
    assert lead.score == 82
    assert lead.classification == "hot"
    assert lead.main_pain == "Manual scheduling"
    assert lead.conversation_history[1]["direction"] == "received"


def test_qualification_clears_fields_sent_as_null(run_db):
    async def scenario(session):
        company = await seed_company(session)
        lead = await seed_lead(
            session, company, LeadStatus.IN_CONTACT, score=80, discard_reason="No budget this quarter"
        )
        lead.main_pain = "Manual scheduling"
        session.add(lead)
        await session.commit()

        payload = QualificationResult.model_validate({
            "lead_id": str(lead.id),
            "company_id": str(company.id),
            "status": "available",
            "score": None,
            "discard_reason": None,
        })
        await IngestionService(session).apply_qualification(payload)
        return await session.get(Lead, lead.id)

    lead = run_db(scenario)

    assert lead.status == LeadStatus.AVAILABLE
    assert lead.score is None
    assert lead.discard_reason is None
    # omitted fields keep their stored value
    assert lead.main_pain == "Manual scheduling"


def test_qualification_rejects_disallowed_transition(run_db):
    async def scenario(session):
        company = await seed_company(session)
        lead = await seed_lead(session, company, LeadStatus.DISCARDED)
        payload = QualificationResult(lead_id=lead.id, company_id=company.id, status=LeadStatus.AVAILABLE)
        with pytest.raises(ConflictError):
            await IngestionService(session).apply_qualification(payload)

    run_db(scenario)


def test_qualification_for_other_company_is_not_found(run_db):
    async def scenario(session):
        company = await seed_company(session)
        other = await seed_company(session)
        lead = await seed_lead(session, other, LeadStatus.IN_CONTACT)
        payload = QualificationResult(lead_id=lead.id, company_id=company.id, status=LeadStatus.QUALIFIED)
        with pytest.raises(NotFoundError):
            await IngestionService(session).apply_qualification(payload)

    run_db(scenario)


def test_qualification_status_must_be_an_outcome():
    with pytest.raises(PydanticValidationError):
        QualificationResult(lead_id=uuid.uuid4(), company_id=uuid.uuid4(), status=LeadStatus.ACTIVATED)
