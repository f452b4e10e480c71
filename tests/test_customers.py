"""Tests for customer (case) intake, listing, updates and deletion."""
import pytest
from httpx import AsyncClient

from recovery_crm.services import customer_service


@pytest.mark.asyncio
async def test_sequential_case_ids(new_customer):
    first = await new_customer()
    second = await new_customer(name="Sunita Patel", phone="9123456780")
    third = await new_customer(name="Mahesh Verma", phone="+91 99887 76655")

    assert [c["case_id"] for c in (first, second, third)] == [
        "CASE-0001",
        "CASE-0002",
        "CASE-0003",
    ]
    assert third["phone"] == "9988776655"
    assert first["status"] == "Pending"
    assert first["payment_status"] == "pending"


def test_format_case_id_pads_to_four_digits():
    assert customer_service.format_case_id(7) == "CASE-0007"
    assert customer_service.format_case_id(12345) == "CASE-12345"


@pytest.mark.asyncio
async def test_persistent_case_id_conflict_is_400(client: AsyncClient, new_customer, monkeypatch):
    await new_customer()
    calls = []

    def always_one(db):
        calls.append(1)
        return 1

    monkeypatch.setattr(customer_service, "next_case_number", always_one)
    response = await client.post(
        "/api/customers",
        data={"name": "Sunita Patel", "phone": "9123456780", "problem": "Loan closure"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Case ID conflict, please retry"
    assert len(calls) == customer_service.CASE_ID_ATTEMPTS

    listing = await client.get("/api/customers")
    assert len(listing.json()) == 1


@pytest.mark.asyncio
async def test_create_customer_validation(client: AsyncClient):
    missing_phone = await client.post(
        "/api/customers", data={"name": "Ramesh", "problem": "Harassment"}
    )
    assert missing_phone.status_code == 400

    bad_phone = await client.post(
        "/api/customers", data={"name": "Ramesh", "phone": "12345", "problem": "Harassment"}
    )
    assert bad_phone.status_code == 400
    assert "10 digits" in bad_phone.json()["detail"]

    bad_pan = await client.post(
        "/api/customers",
        data={"name": "Ramesh", "phone": "9876543210", "problem": "x", "pan": "123"},
    )
    assert bad_pan.status_code == 400


@pytest.mark.asyncio
async def test_create_customer_other_bank_and_issues(new_customer):
    customer = await new_customer(
        bank="other",
        other_bank="Bajaj Finserv",
        issues="Harassment, CIBIL",
        pan="abcde1234f",
    )
    assert customer["bank"] == "Bajaj Finserv"
    assert customer["issues"] == ["Harassment", "CIBIL"]
    assert customer["pan"] == "ABCDE1234F"


@pytest.mark.asyncio
async def test_list_customers_newest_first_with_filters(client: AsyncClient, new_customer):
    await new_customer(name="Ramesh Kumar")
    await new_customer(name="Sunita Patel", phone="9123456780")

    everyone = (await client.get("/api/customers")).json()
    assert [c["case_id"] for c in everyone] == ["CASE-0002", "CASE-0001"]

    found = (await client.get("/api/customers", params={"q": "sunita"})).json()
    assert [c["name"] for c in found] == ["Sunita Patel"]

    pending = (await client.get("/api/customers", params={"status": "Pending"})).json()
    assert len(pending) == 2
    solved = (await client.get("/api/customers", params={"status": "Solved"})).json()
    assert solved == []


@pytest.mark.asyncio
async def test_update_customer_partial(client: AsyncClient, new_customer):
    customer = await new_customer()
    response = await client.put(
        f"/api/customers/{customer['id']}",
        json={"address": "12 MG Road, Pune", "bank": "other", "other_bank": "Axis Finance"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["address"] == "12 MG Road, Pune"
    assert data["bank"] == "Axis Finance"
    assert data["name"] == "Ramesh Kumar"


@pytest.mark.asyncio
async def test_delete_customer_twice(client: AsyncClient, new_customer):
    customer = await new_customer()
    first = await client.delete(f"/api/customers/{customer['id']}")
    assert first.status_code == 200

    listing = await client.get("/api/customers")
    assert listing.json() == []

    second = await client.delete(f"/api/customers/{customer['id']}")
    assert second.status_code == 404
    assert second.json()["detail"] == "Customer not found"


@pytest.mark.asyncio
async def test_get_unknown_customer_is_404(client: AsyncClient):
    response = await client.get("/api/customers/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_call_history_does_not_touch_status(client: AsyncClient, new_customer):
    customer = await new_customer()
    response = await client.post(
        f"/api/customers/{customer['id']}/call",
        json={"response": "Asked to call after salary", "status": "Call Back", "next_call_date": "2026-11-01"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Pending"

    history = (await client.get(f"/api/customers/{customer['id']}/call-history")).json()
    assert len(history["call_history"]) == 1
    assert history["call_history"][0]["status"] == "Call Back"

    empty = await client.post(f"/api/customers/{customer['id']}/call", json={"response": "  "})
    assert empty.status_code == 400
