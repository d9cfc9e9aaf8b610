"""Content Service — blog posts with slugs and tags, FAQ ordering.

Invariants:
    - A post slug is the given slug or slugify(title); duplicates are a 409
    - A FAQ created with order 0 goes to the end of its page
    - After a reorder the destination page is numbered 0..n-1 with no gaps
"""

import logging
from typing import Any, Mapping

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.core.errors import BadRequestError, create_error
from tradedesk.core.faq_ordering import next_order, reorder
from tradedesk.core.slugs import slugify
from tradedesk.models.content import BlogPost, BlogTag, Faq
from tradedesk.services.records import (
    commit_or_conflict, load_instance, serialize, store_record, update_record, writable_values,
)

logger = logging.getLogger(__name__)


def with_slug(data: Mapping[str, Any], source_field: str) -> dict[str, Any]:
    """Fill `slug` from `source_field` when the client sent none."""
    values = dict(data)
    if not values.get("slug") and values.get(source_field):
        values["slug"] = slugify(values[source_field])
    if "slug" in values and not values["slug"]:
        raise BadRequestError("Slug cannot be empty")
    return values


# ─── Blog posts ──────────────────────────────────────────────────

async def _tags_by_id(db: AsyncSession, tag_ids: list[Any]) -> list[BlogTag]:
    if not tag_ids:
        return []
    result = await db.execute(
        select(BlogTag).where(BlogTag.id.in_(list(tag_ids)), BlogTag.deleted_at.is_(None)),
    )
    tags = list(result.scalars().all())
    if len(tags) != len(set(tag_ids)):
        raise BadRequestError("One or more tags do not exist")
    return tags


async def create_post(db: AsyncSession, data: Mapping[str, Any], tag_ids: list[Any]) -> dict:
    values = with_slug(data, "title")
    post = BlogPost(**writable_values(BlogPost, values))
    post.tags = await _tags_by_id(db, tag_ids)
    db.add(post)
    await commit_or_conflict(db, "blogPost")
    log_step(f"Post {post.id} created with slug {post.slug}")
    return {"message": "Blog Post created successfully", "record": serialize(post, ("tags",))}


async def update_post(
    db: AsyncSession, post_id: Any, data: Mapping[str, Any], tag_ids: list[Any] | None,
) -> dict:
    post = await load_instance(db, "blogPost", post_id, ("tags",))
    values = dict(data)
    if "slug" in values and not values["slug"]:
        values["slug"] = slugify(values.get("title") or post.title)
    for key, value in writable_values(BlogPost, values).items():
        setattr(post, key, value)
    if tag_ids is not None:
        post.tags = await _tags_by_id(db, tag_ids)
    await commit_or_conflict(db, "blogPost")
    log_step(f"Post {post.id} updated")
    return {"message": "Blog Post updated successfully", "record": serialize(post, ("tags",))}


# ─── FAQ ─────────────────────────────────────────────────────────

async def _max_order(db: AsyncSession, page_path: str) -> int | None:
    return await db.scalar(
        select(func.max(Faq.order)).where(Faq.page_path == page_path, Faq.deleted_at.is_(None)),
    )


async def create_faq(db: AsyncSession, data: Mapping[str, Any]) -> dict:
    values = dict(data)
    if not values.get("order"):
        values["order"] = next_order(await _max_order(db, values["page_path"]))
        log_step(f"Assigned order {values['order']} on {values['page_path']}")
    return await store_record(db, "faq", values)


async def update_faq(db: AsyncSession, faq_id: Any, data: Mapping[str, Any]) -> dict:
    values = dict(data)
    if values.get("page_path") and values.get("order") is None:
        faq = await load_instance(db, "faq", faq_id)
        if faq.page_path != values["page_path"]:
            values["order"] = next_order(await _max_order(db, values["page_path"]))
    return await update_record(db, "faq", faq_id, values)


async def reorder_faqs(
    db: AsyncSession, faq_id: Any, target_id: Any | None, target_page_path: str | None,
) -> dict:
    dragged = await load_instance(db, "faq", faq_id)
    if target_id is not None:
        await load_instance(db, "faq", target_id)
    page_path = target_page_path or dragged.page_path

    log_step(f"Reordering FAQs on {page_path}")
    result = await db.execute(
        select(Faq)
        .where(Faq.page_path == page_path, Faq.deleted_at.is_(None))
        .order_by(Faq.order.asc()),
    )
    page = {faq.id: faq for faq in result.scalars().all()}
    page[dragged.id] = dragged
    try:
        ordered = reorder(list(page), dragged.id, target_id)
    except LookupError as e:
        raise create_error(404, str(e))

    for position, fid in enumerate(ordered):
        page[fid].order = position
        page[fid].page_path = page_path
    await commit_or_conflict(db, "faq")
    return {"message": "FAQs reordered successfully"}


async def list_faq_pages(db: AsyncSession) -> list[dict]:
    """Page paths that carry FAQs, with their entry counts."""
    result = await db.execute(
        select(Faq.page_path, func.count(Faq.id))
        .where(Faq.deleted_at.is_(None))
        .group_by(Faq.page_path)
        .order_by(Faq.page_path),
    )
    return [{"page_path": path, "count": count} for path, count in result.all()]
