"""Tests for expenses, referrals, field data, users, attendance and health."""
import pytest
from httpx import AsyncClient

from recovery_crm.services import attendance_service


@pytest.mark.asyncio
async def test_expenses_per_user(client: AsyncClient, marketing, agent):
    for user, amount in ((marketing, 500), (marketing, 250), (agent, 100)):
        response = await client.post(
            "/api/expenses",
            json={"user_id": str(user.id), "date": "2026-10-05", "amount": amount, "type": "Travel"},
        )
        assert response.status_code == 201

    assert len((await client.get("/api/expenses")).json()) == 3
    mine = (await client.get(f"/api/expenses/{marketing.id}")).json()
    assert sorted(e["amount"] for e in mine) == [250, 500]


@pytest.mark.asyncio
async def test_expense_for_unknown_user_rejected(client: AsyncClient):
    response = await client.post(
        "/api/expenses",
        json={
            "user_id": "00000000-0000-0000-0000-000000000000",
            "date": "2026-10-05",
            "amount": 10,
            "type": "Travel",
        },
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "User not found"


@pytest.mark.asyncio
async def test_referrals(client: AsyncClient):
    created = await client.post("/api/referrals", json={"name": "Anil Shetty", "phone": "9000000000"})
    assert created.status_code == 201
    assert created.json()["commission"] == "₹0"
    assert [r["name"] for r in (await client.get("/api/referrals")).json()] == ["Anil Shetty"]


@pytest.mark.asyncio
async def test_field_data_filter(client: AsyncClient, marketing):
    await client.post("/api/field-data", json={"bank_name": "SBI", "created_by": str(marketing.id)})
    await client.post("/api/field-data", json={"bank_name": "ICICI"})

    everyone = (await client.get("/api/field-data")).json()
    assert len(everyone) == 2
    mine = (await client.get("/api/field-data", params={"created_by": str(marketing.id)})).json()
    assert [v["bank_name"] for v in mine] == ["SBI"]


@pytest.mark.asyncio
async def test_users_filtered_by_role(client: AsyncClient, agent, telecaller):
    agents = (await client.get("/api/users", params={"role": "agent"})).json()
    assert [u["id"] for u in agents] == [str(agent.id)]


@pytest.mark.asyncio
async def test_attendance_listing(client: AsyncClient, db, marketing):
    attendance_service.open_session(db, marketing.id)
    db.commit()
    attendance_service.close_session(db, marketing.id)

    logs = (await client.get("/api/attendance")).json()
    assert len(logs) == 1
    assert logs[0]["employee"] == "Marketing Tester"
    assert logs[0]["duration"] == "0h 0m"


def test_format_duration():
    from datetime import datetime, timezone

    start = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
    end = datetime(2026, 10, 19, 11, 5, 59)
    assert attendance_service.format_duration(start, end) == "2h 5m"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
