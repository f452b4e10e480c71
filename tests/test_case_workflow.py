"""Tests for assignment, completion and the case status machine."""
import pytest
from httpx import AsyncClient

from recovery_crm.core.case_status import InvalidTransitionError, can_transition, ensure_transition
from recovery_crm.db.enums import Role

from conftest import make_user


# =============================================================================
# Transition guard
# =============================================================================

def test_allowed_transitions():
    assert can_transition("Pending", "In Progress")
    assert can_transition("Pending", "Solved")
    assert can_transition("In Progress", "Solved")
    assert not can_transition("In Progress", "Pending")
    assert not can_transition("Solved", "Pending")
    assert not can_transition("Solved", "Solved")


def test_ensure_transition_same_state_is_noop():
    assert ensure_transition("In Progress", "In Progress") is False
    assert ensure_transition("Pending", "In Progress") is True


@pytest.mark.parametrize("target", ["Pending", "In Progress", "Solved"])
def test_solved_is_terminal(target):
    with pytest.raises(InvalidTransitionError, match="already solved"):
        ensure_transition("Solved", target)


def test_unknown_status_rejected():
    with pytest.raises(InvalidTransitionError, match="Invalid status"):
        ensure_transition("Pending", "Closed")


# =============================================================================
# Assignment
# =============================================================================

@pytest.mark.asyncio
async def test_assign_case(client: AsyncClient, new_customer, agent, db):
    customer = await new_customer()
    response = await client.post(
        f"/api/customers/{customer['id']}/assign",
        json={"agent_id": str(agent.id), "amount": 150000},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["agent"]["id"] == str(agent.id)
    assigned = body["customer"]
    assert assigned["status"] == "In Progress"
    assert assigned["assigned_to"] == str(agent.id)
    assert assigned["amount"] == 150000
    assert assigned["assigned_date"] is not None
    assert "₹150,000" in assigned["notes"][-1]["content"]

    db.refresh(agent)
    assert agent.assigned_cases == 1
    assert agent.last_assignment_at is not None


@pytest.mark.asyncio
async def test_assign_validation(client: AsyncClient, new_customer, agent, telecaller):
    customer = await new_customer()
    url = f"/api/customers/{customer['id']}/assign"

    bad_id = await client.post(url, json={"agent_id": "not-a-uuid", "amount": 100})
    assert bad_id.status_code == 400
    assert bad_id.json()["detail"] == "Invalid or missing agent_id"

    not_agent = await client.post(url, json={"agent_id": str(telecaller.id), "amount": 100})
    assert not_agent.status_code == 400
    assert not_agent.json()["detail"] == "User is not a valid agent"

    zero = await client.post(url, json={"agent_id": str(agent.id), "amount": 0})
    assert zero.status_code == 400
    assert zero.json()["detail"] == "Valid amount is required"

    unknown = await client.post(
        "/api/customers/00000000-0000-0000-0000-000000000000/assign",
        json={"agent_id": str(agent.id), "amount": 100},
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_assign_already_assigned_keeps_agent(client: AsyncClient, new_customer, agent, db):
    other_agent = make_user(db, Role.AGENT)
    customer = await new_customer()
    url = f"/api/customers/{customer['id']}/assign"
    await client.post(url, json={"agent_id": str(agent.id), "amount": 5000})

    again = await client.post(url, json={"agent_id": str(other_agent.id), "amount": 7000})
    assert again.status_code == 400
    assert again.json()["detail"] == "Case is already assigned"

    current = (await client.get(f"/api/customers/{customer['id']}")).json()
    assert current["assigned_to"] == str(agent.id)
    assert current["amount"] == 5000


# =============================================================================
# Completion
# =============================================================================

@pytest.mark.asyncio
async def test_complete_requires_both_scores(client: AsyncClient, new_customer):
    customer = await new_customer()
    url = f"/api/customers/{customer['id']}/complete"

    missing = await client.post(url, json={"cibil_before": 550})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Both CIBIL scores are required"

    out_of_range = await client.post(url, json={"cibil_before": 200, "cibil_after": 750})
    assert out_of_range.status_code == 400

    current = (await client.get(f"/api/customers/{customer['id']}")).json()
    assert current["status"] == "Pending"


@pytest.mark.asyncio
async def test_complete_without_assignment(client: AsyncClient, new_customer):
    customer = await new_customer()
    response = await client.post(
        f"/api/customers/{customer['id']}/complete",
        json={"cibil_before": 550, "cibil_after": 720},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "Solved"
    assert data["cibil_before"] == 550
    assert data["cibil_after"] == 720
    assert data["resolved_date"] is not None
    assert data["notes"][-1]["content"] == (
        "Case marked as completed. CIBIL Before: 550, CIBIL After: 720"
    )


@pytest.mark.asyncio
async def test_solved_case_cannot_move_back(client: AsyncClient, new_customer, agent):
    customer = await new_customer()
    cid = customer["id"]
    await client.post(f"/api/customers/{cid}/complete", json={"cibil_before": 500, "cibil_after": 700})

    complete_again = await client.post(
        f"/api/customers/{cid}/complete", json={"cibil_before": 500, "cibil_after": 700}
    )
    assert complete_again.status_code == 400

    assign = await client.post(
        f"/api/customers/{cid}/assign", json={"agent_id": str(agent.id), "amount": 100}
    )
    assert assign.status_code == 400
    assert assign.json()["detail"] == "Cannot assign a solved case"

    via_status = await client.post(f"/api/customers/{cid}/status", json={"status": "Pending"})
    assert via_status.status_code == 400

    via_update = await client.put(f"/api/customers/{cid}", json={"status": "In Progress"})
    assert via_update.status_code == 400

    via_cases = await client.put(f"/api/cases/{cid}", json={"status": "Pending"})
    assert via_cases.status_code == 400

    current = (await client.get(f"/api/customers/{cid}")).json()
    assert current["status"] == "Solved"


@pytest.mark.asyncio
async def test_status_change_appends_note(client: AsyncClient, new_customer):
    customer = await new_customer()
    response = await client.post(
        f"/api/customers/{customer['id']}/status",
        json={"status": "In Progress", "added_by": "ops"},
    )
    assert response.status_code == 200
    note = response.json()["notes"][-1]
    assert note["content"] == "Status updated to In Progress"
    assert note["added_by"] == "ops"

    backwards = await client.post(
        f"/api/customers/{customer['id']}/status", json={"status": "Pending"}
    )
    assert backwards.status_code == 400


# =============================================================================
# Case view
# =============================================================================

@pytest.mark.asyncio
async def test_case_projection_and_officer_update(client: AsyncClient, new_customer, agent, telecaller):
    customer = await new_customer()

    cases = (await client.get("/api/cases")).json()
    assert cases[0]["case_id"] == "CASE-0001"
    assert cases[0]["customer"]["name"] == "Ramesh Kumar"
    assert cases[0]["officer"] is None

    updated = await client.put(
        f"/api/cases/{customer['id']}",
        json={"officer_id": str(agent.id), "status": "In Progress"},
    )
    assert updated.status_code == 200
    assert updated.json()["officer_id"] == str(agent.id)
    assert updated.json()["status"] == "In Progress"

    not_agent = await client.put(
        f"/api/cases/{customer['id']}", json={"officer_id": str(telecaller.id)}
    )
    assert not_agent.status_code == 400


@pytest.mark.asyncio
async def test_case_officer_follows_assignment_rules(client: AsyncClient, new_customer, agent, db):
    customer = await new_customer()

    updated = await client.put(f"/api/cases/{customer['id']}", json={"officer_id": str(agent.id)})
    assert updated.status_code == 200
    case = updated.json()
    assert case["status"] == "In Progress"
    assert case["assigned_date"] is not None
    assert case["officer_id"] == str(agent.id)

    db.refresh(agent)
    assert agent.assigned_cases == 1
    assert agent.last_assignment_at is not None

    notes = (await client.get(f"/api/customers/{customer['id']}")).json()["notes"]
    assert notes[-1]["content"].startswith("Case assigned to agent:")


@pytest.mark.asyncio
async def test_case_officer_change_moves_counters(client: AsyncClient, new_customer, agent, db):
    other = make_user(db, Role.AGENT)
    customer = await new_customer()
    await client.post(
        f"/api/customers/{customer['id']}/assign",
        json={"agent_id": str(agent.id), "amount": 1000},
    )

    moved = await client.put(f"/api/cases/{customer['id']}", json={"officer_id": str(other.id)})
    assert moved.status_code == 200
    assert moved.json()["officer_id"] == str(other.id)

    db.refresh(agent)
    db.refresh(other)
    assert agent.assigned_cases == 0
    assert other.assigned_cases == 1


@pytest.mark.asyncio
async def test_case_officer_rejected_on_solved_case(client: AsyncClient, new_customer, agent):
    customer = await new_customer()
    await client.post(
        f"/api/customers/{customer['id']}/complete",
        json={"cibil_before": 550, "cibil_after": 720},
    )

    response = await client.put(f"/api/cases/{customer['id']}", json={"officer_id": str(agent.id)})
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot reassign a solved case"

    current = (await client.get(f"/api/customers/{customer['id']}")).json()
    assert current["assigned_to"] is None
    assert current["status"] == "Solved"


@pytest.mark.asyncio
async def test_failed_case_update_writes_nothing(client: AsyncClient, new_customer, agent, db):
    customer = await new_customer()

    response = await client.put(
        f"/api/cases/{customer['id']}",
        json={"officer_id": str(agent.id), "status": "Pending"},
    )
    assert response.status_code == 400

    current = (await client.get(f"/api/customers/{customer['id']}")).json()
    assert current["assigned_to"] is None
    assert current["status"] == "Pending"
    db.refresh(agent)
    assert agent.assigned_cases == 0
