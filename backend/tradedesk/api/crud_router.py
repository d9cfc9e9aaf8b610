"""CRUD Router Factory — the DataTable list/create/edit/delete contract for one admin resource.

Invariants:
    - Every generated endpoint has an EndpointMetadata registered under a unique operation id
    - Every generated endpoint requires view./create./edit./delete.<resource>
    - Every generated endpoint body runs inside with_logger(log_module, title)
    - PUT /status is registered before PUT /{record_id} so "status" never parses as an id
    - POST /restore and the bulk restore are only registered for soft-delete models

Design Decisions:
    - Factory over per-resource route files: resources differ only by model name, schemas
      and metadata, so the behaviour lives once in services.records
    - Custom handlers replace a single operation (referral create, offering delete) while the
      rest of the resource keeps the generic path
    - Payloads are dumped with mode="json" and coerced back per column in services.records,
      so enum members and UUIDs reach the ORM as plain column values
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.config import get_settings
from tradedesk.core.api_context import with_logger
from tradedesk.core.demo_mask import apply_demo_mask
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, register_endpoint,
    list_responses, single_item_responses, create_responses, update_responses,
    delete_responses, bulk_delete_responses, status_update_responses,
)
from tradedesk.core.permissions import Principal, crud_permissions
from tradedesk.core.query_filters import parse_crud_query
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.common import BulkIds, BulkStatusUpdate, StatusUpdate
from tradedesk.services import records

logger = logging.getLogger(__name__)

ALL_OPERATIONS = frozenset({
    "list", "get", "create", "update", "delete", "bulk_delete", "restore", "status",
})
READ_ONLY = frozenset({"list", "get"})

CreateHandler = Callable[[AsyncSession, Principal, BaseModel], Awaitable[dict]]
UpdateHandler = Callable[[AsyncSession, Principal, UUID, BaseModel], Awaitable[dict]]
DeleteHandler = Callable[[AsyncSession, Principal, UUID, bool], Awaitable[dict]]


@dataclass(frozen=True)
class CrudResource:
    """Everything the factory needs to know about one admin table."""
    model: str
    permission: str
    name: str
    tag: str
    log_module: str
    create_schema: type[BaseModel] | None = None
    update_schema: type[BaseModel] | None = None
    operations: frozenset[str] = ALL_OPERATIONS
    searchable: tuple[str, ...] = ()
    includes: tuple[str, ...] = ()
    default_sort: str = "created_at"
    statuses: tuple[Any, ...] | None = None
    demo_mask: tuple[str, ...] = ()
    create_handler: CreateHandler | None = None
    update_handler: UpdateHandler | None = None
    delete_handler: DeleteHandler | None = None
    extra_where: Callable[[], tuple] | None = field(default=None, compare=False)

    @property
    def label(self) -> str:
        return records.model_label(self.model)


def present(metadata: EndpointMetadata, data: Any, paths: tuple[str, ...] | None = None) -> Any:
    """Apply the demo mask when the deployment runs in demo mode."""
    paths = metadata.demo_mask if paths is None else paths
    if paths and get_settings().demo_mode:
        return apply_demo_mask(data, paths)
    return data


def operation(metadata: EndpointMetadata, principal: Principal, request: Request):
    """with_logger bound to an endpoint's metadata and the calling admin."""
    return with_logger(
        metadata.log_module or "admin",
        metadata.title,
        user_id=principal.user_id,
        method=request.method,
        url=request.url.path,
    )


def _payload(body: BaseModel, partial: bool) -> dict:
    return body.model_dump(mode="json", exclude_unset=partial)


def build_crud_router(prefix: str, resource: CrudResource) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[resource.tag])
    perms = crud_permissions(resource.permission)
    label = resource.label
    ops = resource.operations
    soft_delete = "deleted_at" in records.column_map(records.resolve_model(resource.model))

    def meta(op_id: str, summary: str, action: str, responses: dict, mask=()) -> EndpointMetadata:
        return register_endpoint(EndpointMetadata(
            summary=summary,
            operation_id=op_id,
            tags=(resource.tag,),
            permission=perms[action],
            log_module=resource.log_module,
            responses=responses,
            demo_mask=tuple(mask),
        ))

    # ─── Reads ───────────────────────────────────────────────────

    if "list" in ops:
        list_meta = meta(
            f"list{resource.name}", f"List {label} records", "view", list_responses(label),
            [f"items.{path}" for path in resource.demo_mask],
        )

        @router.get("", **list_meta.route_kwargs())
        async def list_records(
            request: Request,
            principal: Principal = Depends(require_permission(list_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            settings = get_settings()
            async with operation(list_meta, principal, request):
                query = parse_crud_query(
                    request.query_params,
                    default_sort=resource.default_sort,
                    default_per_page=settings.default_per_page,
                    max_per_page=settings.max_per_page,
                )
                result = await records.get_filtered(
                    db, resource.model, query,
                    where=resource.extra_where() if resource.extra_where else (),
                    searchable=resource.searchable,
                    includes=resource.includes,
                    default_sort=resource.default_sort,
                )
            return present(list_meta, result)

    if "get" in ops:
        get_meta = meta(
            f"get{resource.name}", f"Get a {label}", "view",
            single_item_responses(label), resource.demo_mask,
        )

        @router.get("/{record_id}", **get_meta.route_kwargs())
        async def get_one(
            record_id: UUID,
            request: Request,
            principal: Principal = Depends(require_permission(get_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(get_meta, principal, request):
                result = await records.get_record(db, resource.model, record_id, resource.includes)
            return present(get_meta, result)

    # ─── Writes ──────────────────────────────────────────────────

    if "create" in ops and resource.create_schema is not None:
        create_meta = meta(
            f"create{resource.name}", f"Create a {label}", "create", create_responses(label),
        )
        create_schema = resource.create_schema

        @router.post("", **create_meta.route_kwargs())
        async def create_one(
            body: create_schema,
            request: Request,
            principal: Principal = Depends(require_permission(create_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(create_meta, principal, request):
                if resource.create_handler is not None:
                    return await resource.create_handler(db, principal, body)
                return await records.store_record(db, resource.model, _payload(body, False))

    if "status" in ops:
        bulk_status_meta = meta(
            f"bulkUpdate{resource.name}Status", f"Update {label} status in bulk", "edit",
            status_update_responses(label),
        )

        @router.put("/status", **bulk_status_meta.route_kwargs())
        async def update_status_bulk(
            body: BulkStatusUpdate,
            request: Request,
            principal: Principal = Depends(require_permission(bulk_status_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(bulk_status_meta, principal, request):
                return await records.update_status(
                    db, resource.model, list(body.ids), body.status, resource.statuses,
                )

    if "update" in ops and resource.update_schema is not None:
        update_meta = meta(
            f"update{resource.name}", f"Update a {label}", "edit", update_responses(label),
        )
        update_schema = resource.update_schema

        @router.put("/{record_id}", **update_meta.route_kwargs())
        async def update_one(
            record_id: UUID,
            body: update_schema,
            request: Request,
            principal: Principal = Depends(require_permission(update_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(update_meta, principal, request):
                if resource.update_handler is not None:
                    return await resource.update_handler(db, principal, record_id, body)
                return await records.update_record(
                    db, resource.model, record_id, _payload(body, True),
                )

    if "status" in ops:
        status_meta = meta(
            f"update{resource.name}Status", f"Update {label} status", "edit",
            status_update_responses(label),
        )

        @router.put("/{record_id}/status", **status_meta.route_kwargs())
        async def update_status_one(
            record_id: UUID,
            body: StatusUpdate,
            request: Request,
            principal: Principal = Depends(require_permission(status_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(status_meta, principal, request):
                return await records.update_status(
                    db, resource.model, record_id, body.status, resource.statuses,
                )

    # ─── Deletes ─────────────────────────────────────────────────

    if "delete" in ops:
        delete_meta = meta(
            f"delete{resource.name}", f"Delete a {label}", "delete", delete_responses(label),
        )

        @router.delete("/{record_id}", **delete_meta.route_kwargs())
        async def delete_one(
            record_id: UUID,
            request: Request,
            force: bool = Query(False),
            principal: Principal = Depends(require_permission(delete_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(delete_meta, principal, request):
                if resource.delete_handler is not None:
                    return await resource.delete_handler(db, principal, record_id, force)
                return await records.delete_record(db, resource.model, record_id, force)

    if "bulk_delete" in ops:
        bulk_delete_meta = meta(
            f"bulkDelete{resource.name}", f"Delete {label} records in bulk", "delete",
            bulk_delete_responses(label),
        )

        @router.delete("", **bulk_delete_meta.route_kwargs())
        async def delete_bulk(
            request: Request,
            body: BulkIds = Body(...),
            force: bool = Query(False),
            principal: Principal = Depends(require_permission(bulk_delete_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(bulk_delete_meta, principal, request):
                return await records.handle_bulk_delete(db, resource.model, list(body.ids), force)

    if "restore" in ops and soft_delete:
        restore_meta = meta(
            f"restore{resource.name}", f"Restore {label} records", "delete",
            bulk_delete_responses(label),
        )

        @router.post("/restore", **restore_meta.route_kwargs())
        async def restore_bulk(
            body: BulkIds,
            request: Request,
            principal: Principal = Depends(require_permission(restore_meta.permission)),
            db: AsyncSession = Depends(get_db),
        ):
            async with operation(restore_meta, principal, request):
                return await records.handle_bulk_restore(db, resource.model, list(body.ids))

    logger.debug(f"CRUD router {prefix} built for {resource.model}: {sorted(ops)}")
    return router
