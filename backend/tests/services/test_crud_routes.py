"""CRUD Routes — verifies the generated list/get/create/update/delete endpoints over HTTP.

Invariants:
    - Every endpoint answers with the structured error envelope on failure
    - Request validation failures are 400 VALIDATION_ERROR with field details
    - Missing token is 401, missing permission is 403
    - PUT /status is not captured by PUT /{record_id}

Design Decisions:
    - FAQ is the reference resource: soft delete, boolean status, custom create handler
"""

import json
from uuid import uuid4

import pytest

from tradedesk.api.auth import get_current_user
from tradedesk.config import get_settings
from tradedesk.core.permissions import Principal
from tradedesk.main import app
from tradedesk.models.content import Faq

FAQ_URL = "/api/admin/faq"


def _faq_body(**overrides) -> dict:
    body = {
        "question": "How long do withdrawals take?",
        "answer": "Withdrawals are processed within one business day.",
        "category": "finance",
        "page_path": "/wallet",
    }
    body.update(overrides)
    return body


@pytest.fixture
async def faqs(test_db):
    rows = [
        Faq(
            question=f"Frequently asked question {i}",
            answer="An answer that is long enough to pass validation.",
            category="general",
            page_path="/help",
            order=i,
        )
        for i in range(3)
    ]
    test_db.add_all(rows)
    await test_db.commit()
    return rows


# ─── Create ──────────────────────────────────────────────────────

async def test_create_appends_to_page(client):
    first = await client.post(FAQ_URL, json=_faq_body())
    second = await client.post(FAQ_URL, json=_faq_body(question="Are there withdrawal fees?"))
    assert first.status_code == 200
    assert first.json()["message"] == "FAQ created successfully"
    assert first.json()["record"]["order"] == 0
    assert second.json()["record"]["order"] == 1


async def test_create_validation_error(client):
    res = await client.post(FAQ_URL, json=_faq_body(question="Short?"))
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"].endswith("question") for d in error["details"])


# ─── Read ────────────────────────────────────────────────────────

async def test_list_paginates_by_order(client, faqs):
    res = await client.get(FAQ_URL, params={"per_page": 2, "sort_order": "asc"})
    assert res.status_code == 200
    body = res.json()
    assert [item["order"] for item in body["items"]] == [0, 1]
    assert body["pagination"]["total_items"] == 3
    assert body["pagination"]["total_pages"] == 2


async def test_list_filters(client, faqs):
    filters = json.dumps({"question": {"operator": "endsWith", "value": "question 2"}})
    res = await client.get(FAQ_URL, params={"filter": filters})
    assert [item["question"] for item in res.json()["items"]] == ["Frequently asked question 2"]


async def test_list_bad_filter_is_400(client):
    res = await client.get(FAQ_URL, params={"filter": "{broken"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BAD_REQUEST"


async def test_get_one(client, faqs):
    res = await client.get(f"{FAQ_URL}/{faqs[1].id}")
    assert res.status_code == 200
    assert res.json()["question"] == "Frequently asked question 1"


async def test_get_missing_is_404(client):
    res = await client.get(f"{FAQ_URL}/{uuid4()}")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["message"] == "FAQ not found"


# ─── Update ──────────────────────────────────────────────────────

async def test_update_one(client, faqs):
    res = await client.put(f"{FAQ_URL}/{faqs[0].id}", json={"category": "security"})
    assert res.status_code == 200
    assert res.json()["message"] == "FAQ updated successfully"
    assert res.json()["record"]["category"] == "security"


async def test_bulk_status_route_not_shadowed(client, faqs, test_db):
    res = await client.put(
        f"{FAQ_URL}/status", json={"ids": [str(f.id) for f in faqs], "status": False},
    )
    assert res.status_code == 200
    assert res.json()["count"] == 3
    await test_db.refresh(faqs[0])
    assert faqs[0].status is False


async def test_single_status(client, faqs):
    res = await client.put(f"{FAQ_URL}/{faqs[0].id}/status", json={"status": False})
    assert res.json() == {"message": "FAQ status updated successfully"}


# ─── Delete ──────────────────────────────────────────────────────

async def test_delete_then_restore(client, faqs):
    res = await client.delete(f"{FAQ_URL}/{faqs[0].id}")
    assert res.json()["message"] == "FAQ removed successfully"
    assert (await client.get(f"{FAQ_URL}/{faqs[0].id}")).status_code == 404

    res = await client.post(f"{FAQ_URL}/restore", json={"ids": [str(faqs[0].id)]})
    assert res.json()["count"] == 1
    assert (await client.get(f"{FAQ_URL}/{faqs[0].id}")).status_code == 200


async def test_bulk_delete_with_body(client, faqs):
    res = await client.request(
        "DELETE", FAQ_URL, json={"ids": [str(faqs[0].id), str(faqs[1].id)]},
    )
    assert res.status_code == 200
    assert res.json() == {"message": "2 FAQ records removed successfully", "count": 2}


async def test_bulk_delete_without_ids(client):
    res = await client.request("DELETE", FAQ_URL, json={"ids": []})
    assert res.status_code == 400


# ─── Auth ────────────────────────────────────────────────────────

async def test_missing_token_is_401(anon_client):
    res = await anon_client.get(FAQ_URL)
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHORIZED"


async def test_permission_checked_per_operation(anon_client, faqs):
    app.dependency_overrides[get_current_user] = lambda: Principal(
        user_id=str(uuid4()), role_name="Support", permissions=frozenset({"view.faq"}),
    )
    assert (await anon_client.get(FAQ_URL)).status_code == 200
    res = await anon_client.post(FAQ_URL, json=_faq_body())
    assert res.status_code == 403
    assert res.json()["error"]["message"] == "Permission denied: create.faq"


# ─── Presentation ────────────────────────────────────────────────

async def test_demo_mode_masks_user_fields(client, make_user, monkeypatch):
    await make_user("someone@example.com", first_name="Someone")
    monkeypatch.setattr(get_settings(), "demo_mode", True)
    res = await client.get("/api/admin/crm/user", params={"search": "someone"})
    item = res.json()["items"][0]
    assert item["email"] == "s*****e@****.com"
    assert item["first_name"] == "S*****e"


async def test_openapi_carries_permission_extensions(client):
    schema = (await client.get("/openapi.json")).json()
    list_op = schema["paths"]["/api/admin/faq"]["get"]
    assert list_op["operationId"] == "listFaq"
    assert list_op["x-permission"] == "view.faq"
    assert list_op["x-log-module"] == "faq"
