"""Content Routes — blog categories, tags and posts; FAQ entries with drag-and-drop ordering.

Invariants:
    - Slugs default to slugify(name) for categories and tags, slugify(title) for posts
    - /faq/reorder and /faq/pages are registered before /faq/{record_id}
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import PostStatus, values
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, list_responses, register_endpoint, update_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.content import (
    BlogCategoryCreate, BlogCategoryUpdate, BlogTagCreate, BlogTagUpdate,
    FaqCreate, FaqReorderRequest, FaqUpdate, PostCreate, PostUpdate,
)
from tradedesk.services import content, records

logger = logging.getLogger(__name__)

BLOG_PREFIX = "/api/admin/blog"
FAQ_PREFIX = "/api/admin/faq"

REORDER_FAQS = register_endpoint(EndpointMetadata(
    summary="Move a FAQ before another entry or to the end of a page",
    operation_id="reorderFaqs",
    tags=("faq",),
    permission="edit.faq",
    log_module="faq",
    log_title="Reorder FAQs",
    responses=update_responses("FAQ"),
))
LIST_FAQ_PAGES = register_endpoint(EndpointMetadata(
    summary="List page paths that carry FAQs",
    operation_id="listFaqPages",
    tags=("faq",),
    permission="view.faq",
    log_module="faq",
    responses=list_responses("FAQ page"),
))

custom = APIRouter(prefix=FAQ_PREFIX, tags=["faq"])


@custom.post("/reorder", **REORDER_FAQS.route_kwargs())
async def reorder_faqs(
    body: FaqReorderRequest,
    request: Request,
    principal: Principal = Depends(require_permission(REORDER_FAQS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(REORDER_FAQS, principal, request):
        return await content.reorder_faqs(
            db, body.faq_id, body.target_id, body.target_page_path,
        )


@custom.get("/pages", **LIST_FAQ_PAGES.route_kwargs())
async def list_faq_pages(
    request: Request,
    principal: Principal = Depends(require_permission(LIST_FAQ_PAGES.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(LIST_FAQ_PAGES, principal, request):
        return await content.list_faq_pages(db)


# ─── Blog ────────────────────────────────────────────────────────

def _slugged(model: str, source_field: str):
    async def create(db, principal, body) -> dict:
        data = content.with_slug(body.model_dump(mode="json"), source_field)
        return await records.store_record(db, model, data)
    return create


async def _create_post(db, principal, body: PostCreate) -> dict:
    return await content.create_post(
        db, body.model_dump(mode="json", exclude={"tag_ids"}), body.tag_ids,
    )


async def _update_post(db, principal, record_id, body: PostUpdate) -> dict:
    return await content.update_post(
        db, record_id,
        body.model_dump(mode="json", exclude_unset=True, exclude={"tag_ids"}),
        body.tag_ids,
    )


CATEGORIES = CrudResource(
    model="blogCategory",
    permission="blog.category",
    name="BlogCategory",
    tag="blog",
    log_module="blog",
    create_schema=BlogCategoryCreate,
    update_schema=BlogCategoryUpdate,
    operations=frozenset({"list", "get", "create", "update", "delete", "bulk_delete", "restore"}),
    searchable=("name", "slug"),
    create_handler=_slugged("blogCategory", "name"),
)

TAGS = CrudResource(
    model="blogTag",
    permission="blog.tag",
    name="BlogTag",
    tag="blog",
    log_module="blog",
    create_schema=BlogTagCreate,
    update_schema=BlogTagUpdate,
    operations=frozenset({"list", "get", "create", "update", "delete", "bulk_delete", "restore"}),
    searchable=("name", "slug"),
    create_handler=_slugged("blogTag", "name"),
)

POSTS = CrudResource(
    model="blogPost",
    permission="blog.post",
    name="BlogPost",
    tag="blog",
    log_module="blog",
    create_schema=PostCreate,
    update_schema=PostUpdate,
    searchable=("title", "slug"),
    includes=("category", "tags"),
    statuses=values(PostStatus),
    create_handler=_create_post,
    update_handler=_update_post,
)


# ─── FAQ ─────────────────────────────────────────────────────────

async def _create_faq(db, principal, body: FaqCreate) -> dict:
    return await content.create_faq(db, body.model_dump(mode="json"))


async def _update_faq(db, principal, record_id, body: FaqUpdate) -> dict:
    return await content.update_faq(db, record_id, body.model_dump(mode="json", exclude_unset=True))


FAQS = CrudResource(
    model="faq",
    permission="faq",
    name="Faq",
    tag="faq",
    log_module="faq",
    create_schema=FaqCreate,
    update_schema=FaqUpdate,
    searchable=("question", "answer", "category"),
    default_sort="order",
    create_handler=_create_faq,
    update_handler=_update_faq,
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{BLOG_PREFIX}/category", CATEGORIES))
router.include_router(build_crud_router(f"{BLOG_PREFIX}/tag", TAGS))
router.include_router(build_crud_router(f"{BLOG_PREFIX}/post", POSTS))
router.include_router(build_crud_router(FAQ_PREFIX, FAQS))
