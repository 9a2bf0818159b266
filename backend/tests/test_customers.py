"""
Tests for customer directory endpoints.
"""

import pytest
from httpx import AsyncClient


def customer_body(**overrides) -> dict:
    body = {
        "first_name": "Maria",
        "last_name": "Berg",
        "email": "maria.berg@konsult.se",
        "phone": "08-555 123",
        "company_name": "Berg Konsult",
        "address": "Drottninggatan 10",
        "postal_code": "11151",
        "city": "Stockholm",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_create_customer(client: AsyncClient):
    """Email is stored trimmed and lower-cased."""
    response = await client.post("/api/v1/customers/", json=customer_body(email="  Maria.Berg@Konsult.SE "))
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "maria.berg@konsult.se"
    assert data["first_name"] == "Maria"
    assert data["total_bookings"] == 0
    assert data["active_bookings"] == 0


@pytest.mark.asyncio
async def test_create_customer_duplicate_email_case_insensitive(client: AsyncClient, test_customer):
    response = await client.post("/api/v1/customers/", json=customer_body(email="ANNA@Acme.se"))
    assert response.status_code == 409
    body = response.json()
    assert body["type"] == "conflict"
    assert body["context"]["existing_id"] == test_customer.id


@pytest.mark.asyncio
async def test_create_customer_invalid_email(client: AsyncClient):
    response = await client.post("/api/v1/customers/", json=customer_body(email="not-an-email"))
    assert response.status_code == 400
    assert response.json()["type"] == "validation_error"


@pytest.mark.asyncio
async def test_create_customer_blank_name(client: AsyncClient):
    response = await client.post("/api/v1/customers/", json=customer_body(first_name="  ", last_name=""))
    assert response.status_code == 400
    assert response.json()["detail"] == "Customer name is required."


@pytest.mark.asyncio
async def test_create_customer_single_name_is_enough(client: AsyncClient):
    response = await client.post("/api/v1/customers/", json=customer_body(first_name="", last_name="Berg"))
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_customer_missing_field_is_400(client: AsyncClient):
    """Malformed bodies use the same error shape as business rule failures."""
    response = await client.post("/api/v1/customers/", json={"first_name": "Maria"})
    assert response.status_code == 400
    body = response.json()
    assert body["type"] == "validation_error"
    assert body["context"]["errors"]


@pytest.mark.asyncio
async def test_get_customer(client: AsyncClient, test_customer):
    response = await client.get(f"/api/v1/customers/{test_customer.id}")
    assert response.status_code == 200
    assert response.json()["email"] == "anna@acme.se"


@pytest.mark.asyncio
async def test_get_customer_not_found(client: AsyncClient):
    response = await client.get("/api/v1/customers/99999")
    assert response.status_code == 404
    body = response.json()
    assert body["type"] == "not_found"
    assert body["detail"] == "Customer with id=99999 was not found."


@pytest.mark.asyncio
async def test_get_customer_by_email(client: AsyncClient, test_customer):
    response = await client.get("/api/v1/customers/by-email", params={"email": " Anna@ACME.se "})
    assert response.status_code == 200
    assert response.json()["id"] == test_customer.id


@pytest.mark.asyncio
async def test_get_customer_by_email_unknown(client: AsyncClient, test_customer):
    response = await client.get("/api/v1/customers/by-email", params={"email": "nobody@acme.se"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_customer_by_email_blank(client: AsyncClient):
    response = await client.get("/api/v1/customers/by-email", params={"email": "  "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_customers(client: AsyncClient, test_customer, other_customer):
    response = await client.get("/api/v1/customers/")
    assert response.status_code == 200
    emails = {c["email"] for c in response.json()}
    assert emails == {"anna@acme.se", "erik@lind.se"}


@pytest.mark.asyncio
async def test_update_customer(client: AsyncClient, test_customer):
    response = await client.put(
        f"/api/v1/customers/{test_customer.id}",
        json=customer_body(first_name="Anna", last_name="Holm", email="anna@acme.se"),
    )
    assert response.status_code == 200
    assert response.json()["last_name"] == "Holm"


@pytest.mark.asyncio
async def test_update_customer_email_taken(client: AsyncClient, test_customer, other_customer):
    response = await client.put(
        f"/api/v1/customers/{test_customer.id}",
        json=customer_body(email="Erik@Lind.se"),
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_customer(client: AsyncClient, test_customer):
    response = await client.delete(f"/api/v1/customers/{test_customer.id}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/customers/{test_customer.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_customer_is_noop(client: AsyncClient):
    response = await client.delete("/api/v1/customers/99999")
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_delete_customer_with_active_booking(client: AsyncClient, test_customer, booking_payload):
    created = await client.post("/api/v1/bookings/", json=booking_payload())
    assert created.status_code == 201

    response = await client.delete(f"/api/v1/customers/{test_customer.id}")
    assert response.status_code == 409

    customer = await client.get(f"/api/v1/customers/{test_customer.id}")
    assert customer.json()["total_bookings"] == 1
    assert customer.json()["active_bookings"] == 1


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/v1/customers/99999", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.json()["request_id"] == "abc123"
