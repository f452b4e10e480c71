"""Tests for dashboard aggregates."""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from recovery_crm.db.models import CallLog
from recovery_crm.utils.time_windows import utcnow


def cards(payload) -> dict:
    return {card["key"]: card["value"] for card in payload}


async def log_call(client: AsyncClient, status: str, customer: str = "Ramesh", **fields):
    body = {"time": "10:00 AM", "customer": customer, "phone": "9876543210", "status": status}
    body.update(fields)
    response = await client.post("/api/calllogs", json=body)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_call_stats_for_today(client: AsyncClient, db):
    for _ in range(3):
        await log_call(client, "Connected")
    await log_call(client, "Not Connected")

    # Yesterday's call stays out of today's window
    old = CallLog(time="9:00 AM", customer="Old", phone="1", status="Connected")
    old.created_at = utcnow() - timedelta(days=2)
    db.add(old)
    db.commit()

    await client.post(
        "/api/followups",
        json={"time": "11:00 AM", "name": "Lead One", "phone": "9000000001"},
    )
    await client.post(
        "/api/followups",
        json={"time": "11:30 AM", "name": "Lead Two", "phone": "9000000002", "response": "Interested"},
    )

    stats = cards((await client.get("/api/dashboard/stats")).json())
    assert stats["todays_calls"] == 4
    assert stats["responsive_calls"] == 3
    assert stats["no_response_calls"] == 1
    assert stats["pending_followups"] == 1


@pytest.mark.asyncio
async def test_telecaller_stats_scoped_to_user(client: AsyncClient, telecaller):
    await log_call(client, "Connected", created_by=str(telecaller.id))
    await log_call(client, "Not Responded")

    stats = cards((await client.get(f"/api/dashboard/telecaller/{telecaller.id}")).json())
    assert stats["todays_calls"] == 1
    assert stats["no_response_calls"] == 0


@pytest.mark.asyncio
async def test_recent_activities(client: AsyncClient):
    await log_call(client, "Connected", customer="Asha", response="Agreed to visit")
    await log_call(client, "Call Back", customer="Vikram", callback_time="5 PM")

    activities = (await client.get("/api/dashboard/activities")).json()
    assert [a["title"] for a in activities] == [
        "Callback scheduled for Vikram",
        "Call with Asha",
    ]
    assert activities[0]["details"] == "Callback at 5 PM"


@pytest.mark.asyncio
async def test_metrics(client: AsyncClient):
    await log_call(client, "Connected")
    await log_call(client, "Not Connected")
    await log_call(client, "Call Back", callback_time="5 PM")
    await client.post("/api/followups", json={"time": "1 PM", "name": "Lead", "phone": "9000000001"})

    metrics = (await client.get("/api/dashboard/metrics")).json()
    assert metrics == {
        "conversion_rate": 33.3,
        "call_completion": 66.7,
        "followup_rate": 33.3,
    }


@pytest.mark.asyncio
async def test_metrics_with_no_calls(client: AsyncClient):
    metrics = (await client.get("/api/dashboard/metrics")).json()
    assert metrics["conversion_rate"] == 0


@pytest.mark.asyncio
async def test_admin_stats(client: AsyncClient, new_customer, agent, telecaller):
    case = await new_customer()
    await client.post(
        f"/api/customers/{case['id']}/assign",
        json={"agent_id": str(agent.id), "amount": 20000},
    )
    await client.post(
        "/api/offers",
        data={
            "customer_id": case["id"],
            "agent_id": str(agent.id),
            "deal_amount": "150000",
            "advance_paid": "50000",
        },
    )
    await client.post(
        "/api/expenses",
        json={"user_id": str(telecaller.id), "date": "2026-10-01", "amount": 20000, "type": "Travel"},
    )

    body = (await client.get("/api/admin/stats")).json()
    top = cards(body["top_stats"])
    assert top["total_customers"] == 1
    assert top["active_cases"] == 1
    assert top["total_revenue"] == "₹150,000"
    assert top["advance_received"] == "₹50,000"
    assert top["pending_amount"] == "₹100,000"
    assert top["total_expense"] == "₹20,000"
    assert top["total_profit"] == "₹130,000"

    bottom = cards(body["bottom_stats"])
    assert bottom["agents"] == 1
    assert bottom["telecallers"] == 1

    transaction = body["recent_transactions"][0]
    assert transaction["case_id"] == "CASE-0001"
    assert transaction["officer"] == agent.display_name


@pytest.mark.asyncio
async def test_agent_stats(client: AsyncClient, new_customer, agent):
    first = await new_customer()
    second = await new_customer(name="Sunita Patel", phone="9123456780")
    await new_customer(name="Unassigned", phone="9000000009")
    for case in (first, second):
        await client.post(
            f"/api/customers/{case['id']}/assign",
            json={"agent_id": str(agent.id), "amount": 1000},
        )
    await client.post(
        f"/api/customers/{first['id']}/complete",
        json={"cibil_before": 600, "cibil_after": 750},
    )

    body = (await client.get(f"/api/agent/stats/{agent.id}")).json()
    stats = cards(body["stats"])
    assert stats["assigned_cases"] == 2
    assert stats["solved_cases"] == 1
    assert stats["pending_cases"] == 1
    assert len(body["recent_cases"]) == 2
    assert body["recent_cases"][0]["days_count"] == 0


@pytest.mark.asyncio
async def test_marketing_stats(client: AsyncClient, marketing):
    visits = [
        {"bank_name": "HDFC", "manager_type": "Bank Manager"},
        {"bank_name": "Bajaj", "manager_type": "NBFC Manager"},
        {"bank_name": "Maruti", "bank_area": "Car showroom, Baner"},
        {"manager_type": "Insurance"},
    ]
    for visit in visits:
        response = await client.post("/api/field-data", json={**visit, "created_by": str(marketing.id)})
        assert response.status_code == 201
    await client.post(
        "/api/expenses",
        json={"user_id": str(marketing.id), "date": "2026-10-01", "amount": 750.5, "type": "Fuel"},
    )

    body = (await client.get(f"/api/marketing/stats/{marketing.id}")).json()
    stats = cards(body["stats"])
    assert stats["bank_visits"] == 1
    assert stats["nbfc_visits"] == 1
    assert stats["car_showroom_visits"] == 1
    assert stats["other_manager_visits"] == 1
    assert stats["monthly_visits"] == 4
    assert stats["total_expenses"] == "₹750.50"
    assert len(body["visits"]) == 4
    assert body["attendance"]["login_time"] is None

    overview = (await client.get("/api/marketing/stats")).json()
    assert cards(overview["bottom_stats"])["marketing_users"] == 1
