"""Tests for settlement offers."""
import os

import pytest
from httpx import AsyncClient

from recovery_crm.core.config import settings
from recovery_crm.db.models import Offer


@pytest.fixture
def assigned_case(client: AsyncClient, new_customer, agent):
    async def _assigned(**fields) -> dict:
        customer = await new_customer(**fields)
        response = await client.post(
            f"/api/customers/{customer['id']}/assign",
            json={"agent_id": str(agent.id), "amount": 50000},
        )
        assert response.status_code == 200
        return response.json()["customer"]

    return _assigned


async def post_offer(client: AsyncClient, customer_id, agent_id, files=None, **fields):
    data = {
        "customer_id": str(customer_id),
        "agent_id": str(agent_id),
        "deal_amount": "100000",
        "advance_paid": "25000",
    }
    data.update(fields)
    return await client.post("/api/offers", data=data, files=files)


@pytest.mark.asyncio
async def test_create_offer_computes_pending_amount(client: AsyncClient, assigned_case, agent):
    case = await assigned_case()
    response = await post_offer(client, case["id"], agent.id)
    assert response.status_code == 201
    offer = response.json()
    assert offer["deal_amount"] == 100000
    assert offer["advance_paid"] == 25000
    assert offer["pending_amount"] == 75000
    assert offer["case_id"] == "CASE-0001"
    assert offer["case_status"] == "In Progress"
    assert offer["payment_status"] == "Pending"


@pytest.mark.asyncio
async def test_second_offer_for_case_rejected(client: AsyncClient, assigned_case, agent):
    case = await assigned_case()
    await post_offer(client, case["id"], agent.id)
    duplicate = await post_offer(client, case["id"], agent.id, deal_amount="90000")
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "An offer already exists for this case"

    offers = (await client.get("/api/offers")).json()
    assert len(offers) == 1


@pytest.mark.asyncio
async def test_offer_requires_case_assigned_to_agent(client: AsyncClient, new_customer, agent):
    customer = await new_customer()
    response = await post_offer(client, customer["id"], agent.id)
    assert response.status_code == 404
    assert response.json()["detail"] == "Case not found or not assigned to you"


@pytest.mark.asyncio
async def test_advance_cannot_exceed_deal(client: AsyncClient, assigned_case, agent):
    case = await assigned_case()
    response = await post_offer(client, case["id"], agent.id, deal_amount="1000", advance_paid="2000")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_offer_proof_recorded_on_case(client: AsyncClient, assigned_case, agent):
    case = await assigned_case()
    response = await post_offer(
        client,
        case["id"],
        agent.id,
        files={"payment_proof": ("receipt.pdf", b"%PDF-1.4 receipt", "application/pdf")},
    )
    assert response.status_code == 201
    proof = response.json()["payment_proof_url"]
    assert proof.startswith("payment_proof-") and proof.endswith(".pdf")
    assert os.path.exists(os.path.join(settings.UPLOAD_DIR, proof))

    customer = (await client.get(f"/api/customers/{case['id']}")).json()
    assert customer["documents"]["payment_proof"] == proof

    served = await client.get(f"/uploads/{proof}")
    assert served.status_code == 200
    assert served.content == b"%PDF-1.4 receipt"


@pytest.mark.asyncio
async def test_update_offer_recomputes_pending(client: AsyncClient, assigned_case, agent, db):
    case = await assigned_case()
    offer = (await post_offer(client, case["id"], agent.id)).json()

    response = await client.put(
        f"/api/offers/{offer['id']}",
        json={"agent_id": str(agent.id), "advance_paid": 60000, "case_status": "Completed"},
    )
    assert response.status_code == 200
    assert response.json()["pending_amount"] == 40000

    stored = db.query(Offer).one()
    assert stored.pending_amount == stored.deal_amount - stored.advance_paid


@pytest.mark.asyncio
async def test_update_offer_scoped_to_agent(client: AsyncClient, assigned_case, agent, telecaller):
    case = await assigned_case()
    offer = (await post_offer(client, case["id"], agent.id)).json()

    response = await client.put(
        f"/api/offers/{offer['id']}",
        json={"agent_id": str(telecaller.id), "deal_amount": 1},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_offer_stats(client: AsyncClient, assigned_case, agent):
    first = await assigned_case()
    second = await assigned_case(name="Sunita Patel", phone="9123456780")
    await post_offer(client, first["id"], agent.id, case_status="Completed")
    await post_offer(client, second["id"], agent.id, deal_amount="50000", advance_paid="0")

    stats = (await client.get("/api/offers/stats", params={"agent_id": str(agent.id)})).json()
    assert stats == {"total_offers": 2, "total_deal_value": 150000, "success_rate": 50}

    mine = (await client.get(f"/api/offers/agent/{agent.id}")).json()
    assert len(mine) == 2


@pytest.mark.asyncio
async def test_delete_offer_ownership(client: AsyncClient, assigned_case, agent, agent_auth, admin_auth, telecaller):
    case = await assigned_case()
    offer = (await post_offer(client, case["id"], agent.id)).json()
    url = f"/api/offers/{offer['id']}"

    anonymous = await client.delete(url)
    assert anonymous.status_code == 400

    stranger = await client.delete(url, params={"agent_id": str(telecaller.id)})
    assert stranger.status_code == 404

    owner = await client.delete(url, headers=agent_auth.headers)
    assert owner.status_code == 200
    assert (await client.get("/api/offers")).json() == []

    second = await assigned_case(name="Sunita Patel", phone="9123456780")
    offer = (await post_offer(client, second["id"], agent.id)).json()
    by_admin = await client.delete(f"/api/offers/{offer['id']}", headers=admin_auth.headers)
    assert by_admin.status_code == 200


@pytest.mark.asyncio
async def test_deleting_customer_removes_offer(client: AsyncClient, assigned_case, agent, db):
    case = await assigned_case()
    await post_offer(client, case["id"], agent.id)
    await client.delete(f"/api/customers/{case['id']}")
    assert db.query(Offer).count() == 0


@pytest.mark.asyncio
async def test_delete_offer_clears_case_proof(client: AsyncClient, assigned_case, agent, agent_auth):
    case = await assigned_case()
    offer = (
        await post_offer(
            client,
            case["id"],
            agent.id,
            files={"payment_proof": ("receipt.pdf", b"%PDF-1.4 receipt", "application/pdf")},
        )
    ).json()
    proof = offer["payment_proof_url"]

    response = await client.delete(f"/api/offers/{offer['id']}", headers=agent_auth.headers)
    assert response.status_code == 200
    assert not os.path.exists(os.path.join(settings.UPLOAD_DIR, proof))

    customer = (await client.get(f"/api/customers/{case['id']}")).json()
    assert "payment_proof" not in customer["documents"]
