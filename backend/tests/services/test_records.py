"""Record Helpers — verifies the generic CRUD operations behind every admin table.

Invariants:
    - Messages follow "<Label> created/updated/removed successfully"
    - Soft-deleted rows are hidden until restored; force deletes remove the row
    - password_hash never appears in serialized records
    - Unknown sort/filter columns are client errors, unknown models are server errors
"""

import pytest
from sqlalchemy import select

from tradedesk.core.errors import (
    BadRequestError, ConflictError, InternalError, ResourceNotFoundError,
)
from tradedesk.core.query_filters import CrudQuery, FilterClause
from tradedesk.models.content import Faq
from tradedesk.models.ecommerce import EcommerceCategory
from tradedesk.services import records


def _faq_data(**overrides) -> dict:
    data = {
        "question": "How do I reset my password?",
        "answer": "Use the forgot password link on the login page.",
        "category": "account",
        "page_path": "/help",
    }
    data.update(overrides)
    return data


@pytest.fixture
async def faqs(test_db):
    rows = [
        Faq(**_faq_data(question=f"Question number {i}?", order=i, status=i != 2))
        for i in range(3)
    ]
    test_db.add_all(rows)
    await test_db.commit()
    return rows


# ─── Registry ────────────────────────────────────────────────────

@pytest.mark.parametrize("model, label", [
    ("faq", "FAQ"),
    ("blogPost", "Blog Post"),
    ("ecommerceCategory", "Ecommerce Category"),
    ("icoTokenOffering", "Offering"),
    ("mlmReferral", "Referral"),
    ("user", "User"),
])
def test_model_label(model, label):
    assert records.model_label(model) == label


def test_unknown_model_is_server_error():
    with pytest.raises(InternalError):
        records.resolve_model("spaceship")


# ─── Coercion ────────────────────────────────────────────────────

def test_writable_values_skip_immutable_and_unknown():
    values = records.writable_values(Faq, {
        "id": "x", "created_at": "2020-01-01", "question": "Why?", "colour": "red",
    })
    assert values == {"question": "Why?"}


def test_coerce_value_by_column_type():
    columns = records.column_map(Faq)
    assert records.coerce_value(columns["status"], "false") is False
    assert records.coerce_value(columns["order"], "7") == 7
    with pytest.raises(BadRequestError):
        records.coerce_value(columns["order"], "seven")


# ─── Single records ──────────────────────────────────────────────

async def test_store_record(test_db):
    result = await records.store_record(test_db, "faq", _faq_data())
    assert result["message"] == "FAQ created successfully"
    assert result["record"]["question"] == "How do I reset my password?"
    assert result["record"]["deleted_at"] is None


async def test_store_user_hides_password_hash(test_db):
    result = await records.store_record(
        test_db, "user", {"email": "x@y.io", "password_hash": "hashed"},
    )
    assert "password_hash" not in result["record"]


async def test_store_duplicate_is_conflict(test_db):
    await records.store_record(test_db, "ecommerceCategory", {"name": "Books", "slug": "books"})
    with pytest.raises(ConflictError):
        await records.store_record(test_db, "ecommerceCategory", {"name": "Other", "slug": "books"})


async def test_get_missing_record(test_db):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await records.get_record(test_db, "faq", "00000000-0000-0000-0000-000000000000")
    assert exc_info.value.message == "FAQ not found"


async def test_update_record(test_db, faqs):
    result = await records.update_record(test_db, "faq", faqs[0].id, {"answer": "A brand new answer text."})
    assert result["message"] == "FAQ updated successfully"
    assert result["record"]["answer"] == "A brand new answer text."


async def test_soft_delete_and_restore(test_db, faqs):
    target = faqs[0].id
    result = await records.delete_record(test_db, "faq", target)
    assert result["message"] == "FAQ removed successfully"
    with pytest.raises(ResourceNotFoundError):
        await records.get_record(test_db, "faq", target)

    restored = await records.restore_record(test_db, "faq", target)
    assert restored["message"] == "FAQ restored successfully"
    assert (await records.get_record(test_db, "faq", target))["id"] == str(target)


async def test_force_delete_removes_row(test_db, faqs):
    await records.delete_record(test_db, "faq", faqs[1].id, force=True)
    remaining = (await test_db.execute(select(Faq.id))).scalars().all()
    assert faqs[1].id not in remaining


async def test_restore_non_soft_delete_model(test_db):
    with pytest.raises(BadRequestError, match="cannot be restored"):
        await records.restore_record(test_db, "role", "00000000-0000-0000-0000-000000000000")


# ─── Bulk ────────────────────────────────────────────────────────

async def test_bulk_delete_and_restore(test_db, faqs):
    ids = [faqs[0].id, faqs[1].id]
    result = await records.handle_bulk_delete(test_db, "faq", ids)
    assert result == {"message": "2 FAQ records removed successfully", "count": 2}

    result = await records.handle_bulk_restore(test_db, "faq", ids)
    assert result == {"message": "2 FAQ records restored successfully", "count": 2}


async def test_bulk_delete_requires_ids(test_db):
    with pytest.raises(BadRequestError, match="No ids provided"):
        await records.handle_bulk_delete(test_db, "faq", [])


async def test_update_status_single_and_many(test_db, faqs):
    single = await records.update_status(test_db, "faq", faqs[2].id, True)
    assert single == {"message": "FAQ status updated successfully"}

    many = await records.update_status(test_db, "faq", [f.id for f in faqs], False)
    assert many["count"] == 3
    assert many["message"] == "3 FAQ records updated successfully"


async def test_update_status_rejects_unknown_value(test_db, make_user):
    user = await make_user("status@x.io")
    with pytest.raises(BadRequestError, match="Invalid status"):
        await records.update_status(test_db, "user", user.id, "ASLEEP", ("ACTIVE", "BANNED"))


async def test_update_status_missing_record(test_db):
    with pytest.raises(ResourceNotFoundError):
        await records.update_status(test_db, "faq", "00000000-0000-0000-0000-000000000000", True)


# ─── Listing ─────────────────────────────────────────────────────

async def test_get_filtered_paginates(test_db, faqs):
    result = await records.get_filtered(
        test_db, "faq", CrudQuery(page=2, per_page=2, sort_field="order", sort_order="asc"),
    )
    assert [item["order"] for item in result["items"]] == [2]
    assert result["pagination"] == {
        "total_items": 3, "current_page": 2, "per_page": 2, "total_pages": 2,
    }


async def test_get_filtered_applies_filters_and_search(test_db, faqs):
    query = CrudQuery(
        sort_field="order",
        filters=(FilterClause("status", "equal", "true"),),
        search="number 1",
    )
    result = await records.get_filtered(test_db, "faq", query, searchable=("question",))
    assert [item["question"] for item in result["items"]] == ["Question number 1?"]


async def test_get_filtered_hides_soft_deleted(test_db, faqs):
    await records.delete_record(test_db, "faq", faqs[0].id)
    result = await records.get_filtered(test_db, "faq", CrudQuery(sort_field="order"))
    assert result["pagination"]["total_items"] == 2


@pytest.mark.parametrize("query", [
    CrudQuery(sort_field="nonexistent"),
    CrudQuery(filters=(FilterClause("password_hash", "equal", "x"),)),
    CrudQuery(filters=(FilterClause("colour", "equal", "red"),)),
])
async def test_get_filtered_rejects_unknown_columns(test_db, query):
    with pytest.raises(BadRequestError):
        await records.get_filtered(test_db, "user", query)


async def test_get_filtered_with_includes(test_db):
    category = EcommerceCategory(name="Books", slug="books")
    test_db.add(category)
    await test_db.commit()
    await records.store_record(test_db, "ecommerceProduct", {
        "category_id": str(category.id), "name": "Novel", "slug": "novel", "price": 9.5,
    })
    result = await records.get_filtered(
        test_db, "ecommerceProduct", CrudQuery(), includes=("category",),
    )
    assert result["items"][0]["category"]["slug"] == "books"
