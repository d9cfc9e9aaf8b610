"""E-commerce Routes — catalog, orders and discounts for admins; discount validation for shoppers.

Invariants:
    - Orders are never created from the admin API
    - Category and product slugs default to slugify(name)
    - Discount validation needs an authenticated user but no admin permission
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import get_current_user
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import OrderStatus, values
from tradedesk.core.endpoint_metadata import EndpointMetadata, register_endpoint
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.ecommerce import (
    CategoryCreate, CategoryUpdate, DiscountCreate, DiscountUpdate, DiscountValidateRequest,
    OrderUpdate, ProductCreate, ProductUpdate,
)
from tradedesk.services import ecommerce, records
from tradedesk.services.content import with_slug

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/ext/ecommerce"

VALIDATE_DISCOUNT = register_endpoint(EndpointMetadata(
    summary="Validate a discount code",
    operation_id="validateEcommerceDiscount",
    tags=("ecommerce",),
    log_module="ecommerce",
    log_title="Validate discount",
    description="Checks a discount code for the current user and records its use when valid.",
    responses={200: {"description": "Validation result, with is_valid false on rejection"}},
))

shop = APIRouter(prefix="/api/ecommerce", tags=["ecommerce"])


@shop.post("/discount/validate", **VALIDATE_DISCOUNT.route_kwargs())
async def validate_discount(
    body: DiscountValidateRequest,
    request: Request,
    principal: Principal = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    async with operation(VALIDATE_DISCOUNT, principal, request):
        return await ecommerce.validate_discount(db, principal.user_id, body.code)


def _slugged_create(model: str):
    async def handler(db, principal, body) -> dict:
        values_ = with_slug(body.model_dump(mode="json"), "name")
        return await records.store_record(db, model, values_)
    return handler


CATEGORIES = CrudResource(
    model="ecommerceCategory",
    permission="ecommerce.category",
    name="EcommerceCategory",
    tag="ecommerce",
    log_module="ecommerce",
    create_schema=CategoryCreate,
    update_schema=CategoryUpdate,
    searchable=("name", "slug"),
    create_handler=_slugged_create("ecommerceCategory"),
)

PRODUCTS = CrudResource(
    model="ecommerceProduct",
    permission="ecommerce.product",
    name="EcommerceProduct",
    tag="ecommerce",
    log_module="ecommerce",
    create_schema=ProductCreate,
    update_schema=ProductUpdate,
    searchable=("name", "slug"),
    includes=("category",),
    create_handler=_slugged_create("ecommerceProduct"),
)

ORDERS = CrudResource(
    model="ecommerceOrder",
    permission="ecommerce.order",
    name="EcommerceOrder",
    tag="ecommerce",
    log_module="ecommerce",
    update_schema=OrderUpdate,
    operations=frozenset({"list", "get", "update", "delete", "bulk_delete", "restore", "status"}),
    includes=("user", "items"),
    statuses=values(OrderStatus),
    demo_mask=("user.email", "shipping_address"),
)

DISCOUNTS = CrudResource(
    model="ecommerceDiscount",
    permission="ecommerce.discount",
    name="EcommerceDiscount",
    tag="ecommerce",
    log_module="ecommerce",
    create_schema=DiscountCreate,
    update_schema=DiscountUpdate,
    searchable=("code",),
)

router = APIRouter()
router.include_router(shop)
router.include_router(build_crud_router(f"{PREFIX}/category", CATEGORIES))
router.include_router(build_crud_router(f"{PREFIX}/product", PRODUCTS))
router.include_router(build_crud_router(f"{PREFIX}/order", ORDERS))
router.include_router(build_crud_router(f"{PREFIX}/discount", DISCOUNTS))
