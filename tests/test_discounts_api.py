"""Tests for discount code administration and validation."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal


def save10(**overrides):
    payload = {"code": "save10", "type": "percentage", "value": "10", "description": "Ten off"}
    payload.update(overrides)
    return payload


async def test_create_stores_code_upper_case(client, admin_headers):
    response = await client.post("/discounts/", json=save10(), headers=admin_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "SAVE10"
    assert body["used_count"] == 0
    assert body["active"] is True


async def test_duplicate_code_is_rejected(client, admin_headers):
    await client.post("/discounts/", json=save10(), headers=admin_headers)
    response = await client.post("/discounts/", json=save10(code="SAVE10"), headers=admin_headers)
    assert response.status_code == 400


async def test_percentage_over_100_is_rejected(client, admin_headers):
    response = await client.post("/discounts/", json=save10(value="120"), headers=admin_headers)
    assert response.status_code == 400


async def test_discount_admin_requires_admin(client, staff_headers):
    assert (await client.get("/discounts/", headers=staff_headers)).status_code == 403


async def test_list_and_filter(client, admin_headers):
    await client.post("/discounts/", json=save10(), headers=admin_headers)
    await client.post("/discounts/", json=save10(code="FIVER", type="fixed", value="5"), headers=admin_headers)

    everything = (await client.get("/discounts/", headers=admin_headers)).json()
    assert {d["code"] for d in everything} == {"SAVE10", "FIVER"}

    fixed = (await client.get("/discounts/", params={"discount_type": "fixed"}, headers=admin_headers)).json()
    assert [d["code"] for d in fixed] == ["FIVER"]


async def test_update_and_deactivate(client, admin_headers):
    discount_id = (await client.post("/discounts/", json=save10(), headers=admin_headers)).json()["id"]

    response = await client.put(f"/discounts/{discount_id}", json={"value": "15"}, headers=admin_headers)
    assert response.status_code == 200
    assert Decimal(response.json()["value"]) == Decimal("15")

    response = await client.delete(f"/discounts/{discount_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["active"] is False

    assert (await client.get("/discounts/999", headers=admin_headers)).status_code == 404


async def test_validate_accepts_code_in_any_case(client, admin_headers):
    await client.post("/discounts/", json=save10(max_discount_amount="25"), headers=admin_headers)

    response = await client.post("/discount-codes/validate", json={"code": "Save10", "orderTotal": "400"})
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["code"] == "SAVE10"
    assert Decimal(body["discountAmount"]) == Decimal("25")


async def test_validate_reports_rejection_reason(client, admin_headers):
    await client.post("/discounts/", json=save10(min_order_amount="50"), headers=admin_headers)

    body = (await client.post("/discount-codes/validate", json={"code": "SAVE10", "orderTotal": "20"})).json()
    assert body["ok"] is False
    assert body["reason"] == "below_minimum"
    assert Decimal(body["discountAmount"]) == 0

    body = (await client.post("/discount-codes/validate", json={"code": "NOPE", "orderTotal": "20"})).json()
    assert body["reason"] == "not_found"


async def test_validate_rejects_expired_code(client, admin_headers):
    await client.post("/discounts/", json=save10(expires_at="2020-01-01T00:00:00Z"), headers=admin_headers)

    body = (await client.post("/discount-codes/validate", json={"code": "SAVE10", "orderTotal": "100"})).json()
    assert body["ok"] is False
    assert body["reason"] == "expired"


async def test_expiry_with_utc_offset_is_honoured(client, admin_headers):
    eastern = timezone(timedelta(hours=-5))
    expires = (datetime.now(timezone.utc) + timedelta(hours=3)).astimezone(eastern)
    response = await client.post("/discounts/", json=save10(expires_at=expires.isoformat()), headers=admin_headers)
    assert response.status_code == 201
    stored = datetime.fromisoformat(response.json()["expires_at"].replace("Z", "+00:00"))
    assert stored == expires

    body = (await client.post("/discount-codes/validate", json={"code": "SAVE10", "orderTotal": "100"})).json()
    assert body["ok"] is True


async def test_update_ignores_null_for_required_fields(client, admin_headers):
    discount_id = (await client.post(
        "/discounts/", json=save10(usage_limit=5), headers=admin_headers
    )).json()["id"]

    response = await client.put(
        f"/discounts/{discount_id}",
        json={"code": None, "type": None, "active": None, "usage_limit": None},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert (body["code"], body["type"], body["active"]) == ("SAVE10", "percentage", True)
    assert body["usage_limit"] is None
