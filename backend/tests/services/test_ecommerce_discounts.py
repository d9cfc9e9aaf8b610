"""E-commerce Discounts — the shopper validation endpoint and admin discount creation.

Invariants:
    - Unknown, disabled and deleted codes answer "Invalid discount code"
    - A valid code records one EcommerceUserDiscount for the caller
    - Single-use codes reject a second use by the same user
    - Admin-created codes are stored upper-cased
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from tradedesk.db.base import utcnow
from tradedesk.models.ecommerce import EcommerceDiscount, EcommerceUserDiscount

VALIDATE_URL = "/api/ecommerce/discount/validate"


async def _discount(test_db, **fields) -> EcommerceDiscount:
    fields.setdefault("type", "PERCENTAGE")
    fields.setdefault("percentage", 15.0)
    row = EcommerceDiscount(**fields)
    test_db.add(row)
    await test_db.commit()
    return row


async def _uses(test_db) -> int:
    return (await test_db.execute(
        select(func.count()).select_from(EcommerceUserDiscount),
    )).scalar_one()


async def test_valid_code_is_recorded(client, test_db):
    discount = await _discount(test_db, code="SPRING15")

    res = await client.post(VALIDATE_URL, json={"code": " spring15 "})

    assert res.status_code == 200
    assert res.json() == {
        "id": str(discount.id),
        "code": "SPRING15",
        "type": "PERCENTAGE",
        "value": 15.0,
        "message": "15% discount applied!",
        "is_valid": True,
    }
    assert await _uses(test_db) == 1


async def test_unknown_code(client, test_db):
    res = await client.post(VALIDATE_URL, json={"code": "NOPE"})
    assert res.json() == {"error": "Invalid discount code", "is_valid": False}
    assert await _uses(test_db) == 0


@pytest.mark.parametrize("fields", [
    {"status": False},
    {"deleted_at": utcnow()},
])
async def test_disabled_or_deleted_code(client, test_db, fields):
    await _discount(test_db, code="HIDDEN", **fields)
    res = await client.post(VALIDATE_URL, json={"code": "HIDDEN"})
    assert res.json()["error"] == "Invalid discount code"


async def test_expired_code(client, test_db):
    await _discount(test_db, code="OLD", valid_until=utcnow() - timedelta(days=1))
    res = await client.post(VALIDATE_URL, json={"code": "OLD"})
    assert res.json() == {"error": "This discount code has expired", "is_valid": False}


async def test_single_use_code_rejects_second_use(client, test_db):
    await _discount(test_db, code="ONCE", type="FIXED", percentage=None, amount=5.0, max_uses=1)

    first = await client.post(VALIDATE_URL, json={"code": "ONCE"})
    second = await client.post(VALIDATE_URL, json={"code": "ONCE"})

    assert first.json()["message"] == "$5 discount applied!"
    assert second.json() == {"error": "You have already used this discount code", "is_valid": False}
    assert await _uses(test_db) == 1


async def test_validate_requires_login(anon_client):
    res = await anon_client.post(VALIDATE_URL, json={"code": "SPRING15"})
    assert res.status_code == 401


async def test_admin_create_upper_cases_code(client):
    res = await client.post("/api/admin/ext/ecommerce/discount", json={
        "code": "summer", "type": "PERCENTAGE", "percentage": 20,
    })
    assert res.status_code == 200
    assert res.json()["record"]["code"] == "SUMMER"


async def test_admin_create_percentage_requires_value(client):
    res = await client.post("/api/admin/ext/ecommerce/discount", json={"code": "BROKEN"})
    assert res.status_code == 400
