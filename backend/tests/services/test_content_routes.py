"""Content Routes — FAQ reordering and page listing, blog slugs and post tags.

Invariants:
    - A reorder leaves the destination page numbered 0..n-1
    - Moving a FAQ across pages re-homes it on the target page
    - Category, tag and post slugs default to slugify(name/title); duplicates are 409
    - Posts only reference existing tags
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from tradedesk.models.content import Faq

FAQ_URL = "/api/admin/faq"
BLOG_URL = "/api/admin/blog"


def _faq(page_path: str, order: int, question: str) -> Faq:
    return Faq(
        question=question, answer="An answer long enough to pass.", category="general",
        page_path=page_path, order=order, tags=[], related_faq_ids=[],
    )


@pytest.fixture
async def page(test_db):
    rows = [_faq("/pricing", i, f"Pricing question {i}") for i in range(3)]
    test_db.add_all(rows)
    await test_db.commit()
    return rows


async def _orders(test_db, page_path: str) -> list[tuple[str, int]]:
    result = await test_db.execute(
        select(Faq).where(Faq.page_path == page_path).order_by(Faq.order).execution_options(
            populate_existing=True,
        ),
    )
    return [(faq.question, faq.order) for faq in result.scalars()]


# ─── FAQ ─────────────────────────────────────────────────────────

async def test_reorder_before_target(client, test_db, page):
    res = await client.post(f"{FAQ_URL}/reorder", json={
        "faq_id": str(page[2].id), "target_id": str(page[0].id),
    })

    assert res.json() == {"message": "FAQs reordered successfully"}
    assert await _orders(test_db, "/pricing") == [
        ("Pricing question 2", 0), ("Pricing question 0", 1), ("Pricing question 1", 2),
    ]


async def test_reorder_to_other_page(client, test_db, page):
    other = _faq("/fees", 0, "Fees question 0")
    test_db.add(other)
    await test_db.commit()

    await client.post(f"{FAQ_URL}/reorder", json={
        "faq_id": str(page[0].id), "target_page_path": "/fees",
    })

    assert await _orders(test_db, "/fees") == [("Fees question 0", 0), ("Pricing question 0", 1)]
    assert [q for q, _ in await _orders(test_db, "/pricing")] == [
        "Pricing question 1", "Pricing question 2",
    ]


async def test_reorder_unknown_faq(client, page):
    res = await client.post(f"{FAQ_URL}/reorder", json={"faq_id": str(uuid4())})
    assert res.status_code == 404


async def test_faq_pages(client, test_db, page):
    test_db.add(_faq("/fees", 0, "Fees question 0"))
    await test_db.commit()

    res = await client.get(f"{FAQ_URL}/pages")

    assert res.json() == [{"page_path": "/fees", "count": 1}, {"page_path": "/pricing", "count": 3}]


# ─── Blog ────────────────────────────────────────────────────────

async def test_category_slug_from_name(client):
    res = await client.post(f"{BLOG_URL}/category", json={"name": "Market News"})
    assert res.status_code == 200
    assert res.json()["record"]["slug"] == "market-news"


async def test_duplicate_tag_slug_conflicts(client):
    await client.post(f"{BLOG_URL}/tag", json={"name": "Bitcoin"})
    res = await client.post(f"{BLOG_URL}/tag", json={"name": "bitcoin!"})
    assert res.status_code == 409


async def test_post_with_tags(client):
    tag = (await client.post(f"{BLOG_URL}/tag", json={"name": "Ethereum"})).json()["record"]

    res = await client.post(f"{BLOG_URL}/post", json={
        "title": "Ethereum après la fusion", "content": "Body", "tag_ids": [tag["id"]],
    })

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Blog Post created successfully"
    assert body["record"]["slug"] == "ethereum-apres-la-fusion"
    assert body["record"]["status"] == "DRAFT"
    assert [t["name"] for t in body["record"]["tags"]] == ["Ethereum"]


async def test_post_unknown_tag(client):
    res = await client.post(f"{BLOG_URL}/post", json={
        "title": "Orphan", "content": "Body", "tag_ids": [str(uuid4())],
    })
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "One or more tags do not exist"


async def test_update_post_replaces_tags(client):
    first = (await client.post(f"{BLOG_URL}/tag", json={"name": "One"})).json()["record"]
    second = (await client.post(f"{BLOG_URL}/tag", json={"name": "Two"})).json()["record"]
    post = (await client.post(f"{BLOG_URL}/post", json={
        "title": "Tagged", "content": "Body", "tag_ids": [first["id"]],
    })).json()["record"]

    res = await client.put(f"{BLOG_URL}/post/{post['id']}", json={
        "status": "PUBLISHED", "tag_ids": [second["id"]],
    })

    record = res.json()["record"]
    assert res.json()["message"] == "Blog Post updated successfully"
    assert record["status"] == "PUBLISHED"
    assert [t["name"] for t in record["tags"]] == ["Two"]
