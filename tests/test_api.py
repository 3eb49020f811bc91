import uuid
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from leadfunnel.core.security import create_access_token, create_token
from leadfunnel.database import get_session
from leadfunnel.main import app
from leadfunnel.models.lead import LeadStatus
from leadfunnel.services.integrations.contact import set_contact_dispatcher

from conftest import make_session_factory, seed_company, seed_lead, seed_leads, seed_profile


async def _schema_only(session):
    return None


@pytest.fixture
def client(database_url, run_db):
    run_db(_schema_only)
    _, Session = make_session_factory(database_url)

    async def _get_session():
        async with Session() as session:
            yield session

    # No `with` block: the lifespan would run init_db against the configured database
    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth_header(company_id, user_id: str = "operator-1") -> dict:
    token = create_access_token({"user_id": user_id, "company_id": str(company_id)})
    return {"Authorization": f"Bearer {token}"}


def _company(run_db, **fields):
    async def scenario(session):
        return await seed_company(session, **fields)
    return run_db(scenario)


def test_requires_token(client):
    response = client.get("/api/dashboard/summary")
    assert response.status_code == 401


def test_rejects_expired_token(client, run_db):
    company = _company(run_db)
    token = create_access_token(
        {"user_id": "operator-1", "company_id": str(company.id)},
        expires_delta=timedelta(minutes=-1)
    )

    response = client.get("/api/dashboard/summary", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_rejects_token_of_another_type(client, run_db):
    company = _company(run_db)
    token = create_token({"user_id": "operator-1", "company_id": str(company.id)}, token_type="refresh")

    response = client.get("/api/dashboard/summary", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_dashboard_summary_and_insights(client, run_db):
    async def scenario(session):
        company = await seed_company(session)
        await seed_leads(session, company, LeadStatus.AVAILABLE, 12)
        return company

    company = run_db(scenario)
    headers = _auth_header(company.id)

    summary = client.get("/api/dashboard/summary", headers=headers)
    assert summary.status_code == 200
    assert summary.json() == {"prospecting": 0, "in_qualification": 0, "available": 12, "activated_today": 0}

    insights = client.get("/api/dashboard/insights", headers=headers).json()
    assert [i["type"] for i in insights] == ["info", "success"]
    assert insights[1]["title"] == "12 lead(s) ready for activation"


def test_dashboard_funnel_and_report(client, run_db):
    async def scenario(session):
        company = await seed_company(session)
        await seed_leads(session, company, LeadStatus.PROSPECTABLE, 25)
        await seed_leads(session, company, LeadStatus.IN_CONTACT, 3)
        return company

    company = run_db(scenario)
    headers = _auth_header(company.id)

    funnel = client.get("/api/dashboard/funnel", headers=headers).json()
    assert funnel["drop_points"][0]["from_stage"] == "prospectable"
    assert funnel["drop_points"][0]["count"] == 25

    report = client.get("/api/dashboard/report", headers=headers).json()
    assert report["total_leads"] == 28
    assert report["ai_efficiency"] == 0
    assert report["conversations"]["total_conversations"] == 0


def test_activate_over_quota_returns_remaining(client, run_db):
    async def scenario(session):
        company = await seed_company(session, daily_capacity=2)
        leads = await seed_leads(session, company, LeadStatus.AVAILABLE, 3)
        return company, [str(lead.id) for lead in leads]

    company, ids = run_db(scenario)
    headers = _auth_header(company.id)

    rejected = client.post("/api/leads/activate", json={"lead_ids": ids}, headers=headers)
    assert rejected.status_code == 429
    assert rejected.json()["remaining"] == 2

    accepted = client.post("/api/leads/activate", json={"lead_ids": ids[:2]}, headers=headers)
    assert accepted.status_code == 200
    assert accepted.json()["remaining_today"] == 0

    lead = client.get(f"/api/leads/{ids[0]}", headers=headers).json()
    assert lead["status"] == "activated"
    assert lead["activated_by"] == "operator-1"


def test_activate_conflict_and_empty_body(client, run_db):
    async def scenario(session):
        company = await seed_company(session)
        lead = await seed_lead(session, company, LeadStatus.QUALIFIED)
        return company, str(lead.id)

    company, lead_id = run_db(scenario)
    headers = _auth_header(company.id)

    conflict = client.post("/api/leads/activate", json={"lead_ids": [lead_id]}, headers=headers)
    assert conflict.status_code == 409

    empty = client.post("/api/leads/activate", json={"lead_ids": []}, headers=headers)
    assert empty.status_code == 422


def test_list_leads_filters_and_orders_by_score(client, run_db):
    async def scenario(session):
        company = await seed_company(session)
        await seed_lead(session, company, LeadStatus.AVAILABLE, name="Unscored")
        await seed_lead(session, company, LeadStatus.AVAILABLE, name="Low", score=40)
        await seed_lead(session, company, LeadStatus.AVAILABLE, name="High", score=95)
        await seed_lead(session, company, LeadStatus.PROSPECTABLE, name="Elsewhere", score=99)
        return company

    company = run_db(scenario)

    page = client.get("/api/leads/", params={"status": "available"}, headers=_auth_header(company.id)).json()

    assert page["total"] == 3
    assert [lead["company_name"] for lead in page["items"]] == ["High", "Low", "Unscored"]


def test_lead_of_another_company_is_not_found(client, run_db):
    async def scenario(session):
        company = await seed_company(session)
        other = await seed_company(session)
        lead = await seed_lead(session, other)
        return company, lead.id

    company, lead_id = run_db(scenario)

    response = client.get(f"/api/leads/{lead_id}", headers=_auth_header(company.id))
    assert response.status_code == 404


def test_prospect_uses_contact_dispatcher(client, run_db, fake_dispatcher):
    async def scenario(session):
        company = await seed_company(session)
        await seed_profile(session, company)
        await seed_leads(session, company, LeadStatus.PROSPECTABLE, 2)
        return company

    company = run_db(scenario)
    set_contact_dispatcher(fake_dispatcher)
    try:
        response = client.post("/api/leads/prospect", headers=_auth_header(company.id))
    finally:
        set_contact_dispatcher(None)

    assert response.status_code == 200
    assert len(response.json()["dispatched"]) == 2
    assert len(fake_dispatcher.payloads) == 2


def test_profile_upsert_and_get(client, run_db):
    company = _company(run_db)
    headers = _auth_header(company.id)

    assert client.get("/api/profile/", headers=headers).status_code == 404

    body = {
        "niche": "Clinics",
        "client_type": "business",
        "cities": ["Sao Paulo", " "],
        "min_ticket": 5000,
        "requires_decision_maker": True,
        "min_urgency": "medium",
    }
    created = client.put("/api/profile/", json=body, headers=headers)
    assert created.status_code == 200
    assert created.json()["cities"] == ["Sao Paulo"]

    updated = client.put("/api/profile/", json={**body, "niche": "Dentists"}, headers=headers)
    assert updated.json()["id"] == created.json()["id"]
    assert client.get("/api/profile/", headers=headers).json()["niche"] == "Dentists"

    invalid = client.put("/api/profile/", json={**body, "min_ticket": 0}, headers=headers)
    assert invalid.status_code == 422

    activity = client.get("/api/dashboard/activity", headers=headers).json()
    assert activity["total"] == 2
    assert activity["items"][0]["action"] == "profile_updated"


def test_webhooks(client, run_db):
    company = _company(run_db)

    assert client.get("/api/webhooks/leads").json()["message"] == "Lead webhook is active"

    created = client.post("/api/webhooks/leads", json={
        "company_id": str(company.id),
        "company_name": "Total Health Clinic",
        "segment": "Clinics",
        "city": "Sao Paulo",
    })
    assert created.status_code == 200
    lead_id = created.json()["lead_id"]

    missing = client.post("/api/webhooks/leads", json={"company_id": str(company.id), "company_name": "Acme"})
    assert missing.status_code == 422

    unknown = client.post("/api/webhooks/leads", json={
        "company_id": str(uuid.uuid4()),
        "company_name": "Acme",
        "segment": "Retail",
        "city": "Recife",
    })
    assert unknown.status_code == 404

    # prospectable leads have not been contacted yet
    skipped = client.post("/api/webhooks/qualification", json={
        "lead_id": lead_id,
        "company_id": str(company.id),
        "status": "available",
    })
    assert skipped.status_code == 409
