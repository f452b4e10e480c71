"""Tests for agent-to-admin case requests."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_request_lifecycle(client: AsyncClient, new_customer, agent, agent_auth):
    customer = await new_customer()
    await client.post(
        f"/api/customers/{customer['id']}/assign",
        json={"agent_id": str(agent.id), "amount": 1000},
    )

    created = await client.post(
        f"/api/customers/{customer['id']}/request",
        json={"message": "Need bank NOC copy"},
        headers=agent_auth.headers,
    )
    assert created.status_code == 201
    request = created.json()
    assert request["status"] == "Pending"
    assert request["agent_id"] == str(agent.id)
    assert request["agent_name"] == agent.display_name
    assert request["case_id"] == "CASE-0001"

    per_case = (await client.get(f"/api/customers/{customer['id']}/requests")).json()
    assert [r["id"] for r in per_case] == [request["id"]]

    action = await client.post(
        f"/api/customers/requests/{request['id']}/action",
        json={"status": "Resolved", "admin_response": "Uploaded to documents"},
    )
    assert action.status_code == 200
    assert action.json()["status"] == "Resolved"
    assert action.json()["admin_response"] == "Uploaded to documents"

    again = await client.post(
        f"/api/customers/requests/{request['id']}/action",
        json={"status": "Rejected", "admin_response": "Too late"},
    )
    assert again.status_code == 400

    inbox = (await client.get("/api/requests")).json()
    assert len(inbox) == 1


@pytest.mark.asyncio
async def test_request_defaults_to_assigned_agent(client: AsyncClient, new_customer, agent):
    customer = await new_customer()
    await client.post(
        f"/api/customers/{customer['id']}/assign",
        json={"agent_id": str(agent.id), "amount": 1000},
    )
    created = await client.post(
        f"/api/customers/{customer['id']}/request", json={"message": "Client unreachable"}
    )
    assert created.json()["agent_id"] == str(agent.id)


@pytest.mark.asyncio
async def test_request_validation(client: AsyncClient, new_customer):
    customer = await new_customer()
    blank = await client.post(f"/api/customers/{customer['id']}/request", json={"message": "   "})
    assert blank.status_code == 400

    created = (
        await client.post(f"/api/customers/{customer['id']}/request", json={"message": "Help"})
    ).json()
    pending = await client.post(
        f"/api/customers/requests/{created['id']}/action",
        json={"status": "Pending", "admin_response": "ok"},
    )
    assert pending.status_code == 400

    unknown = await client.post(
        "/api/customers/requests/00000000-0000-0000-0000-000000000000/action",
        json={"status": "Resolved", "admin_response": "ok"},
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_deleting_customer_removes_requests(client: AsyncClient, new_customer):
    customer = await new_customer()
    await client.post(f"/api/customers/{customer['id']}/request", json={"message": "Help"})
    await client.delete(f"/api/customers/{customer['id']}")
    assert (await client.get("/api/requests")).json() == []
