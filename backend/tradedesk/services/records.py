"""Record Helpers — generic, model-name-parameterized ORM operations behind every admin table.

Invariants:
    - Models are addressed by registry name ("faq", "mlmReferral"); unknown names are a
      programming error (InternalError), never a client error
    - Soft-deletable models (deleted_at column) are hidden from get/list/update while deleted
    - Only real column attributes are written; id and timestamps are never client-settable
    - Sort and filter fields must be real columns (400 otherwise)
    - password_hash never leaves this module through serialize()
    - Every mutation commits before returning; IntegrityError becomes ConflictError (409)

Design Decisions:
    - One module for all resources: routes differ only by metadata, so the CRUD behaviour
      (and its bugs) live in a single place
    - Values are coerced to the column's python type here, so raw query-string filters and
      typed pydantic payloads take the same path
    - Bulk hard deletes load and delete ORM objects instead of issuing DELETE statements:
      relationship cascades (order items, offering phases) then behave like single deletes
"""

import enum
import logging
import re
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy import select, func, or_, inspect as sa_inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tradedesk.core.api_context import log_step
from tradedesk.core.errors import (
    BadRequestError, ConflictError, InternalError, create_error,
)
from tradedesk.core.query_filters import CrudQuery, FilterClause, build_pagination, offset_for
from tradedesk.db.base import Base, utcnow
from tradedesk.models import (
    User, Role, Permission, UserBlock, Wallet, Transaction,
    MlmReferral, MlmBinaryNode, MlmUnilevelNode, MlmReferralCondition, MlmReferralReward,
    EcommerceCategory, EcommerceProduct, EcommerceOrder, EcommerceDiscount, EcommerceUserDiscount,
    ForexAccount, ForexPlan, ForexInvestment,
    IcoTokenOffering, IcoTransaction, IcoAdminActivity,
    MailwizardTemplate, MailwizardCampaign,
    BlogCategory, BlogTag, BlogPost, Faq,
    StakingPool, StakingPosition, StakingEarningRecord, StakingAdminEarning, StakingAdminActivity,
    StakingExternalPoolPerformance,
    Setting, Notification,
)

logger = logging.getLogger(__name__)

MODEL_REGISTRY: dict[str, type[Base]] = {
    "user": User,
    "role": Role,
    "permission": Permission,
    "userBlock": UserBlock,
    "wallet": Wallet,
    "transaction": Transaction,
    "mlmReferral": MlmReferral,
    "mlmBinaryNode": MlmBinaryNode,
    "mlmUnilevelNode": MlmUnilevelNode,
    "mlmReferralCondition": MlmReferralCondition,
    "mlmReferralReward": MlmReferralReward,
    "ecommerceCategory": EcommerceCategory,
    "ecommerceProduct": EcommerceProduct,
    "ecommerceOrder": EcommerceOrder,
    "ecommerceDiscount": EcommerceDiscount,
    "ecommerceUserDiscount": EcommerceUserDiscount,
    "forexAccount": ForexAccount,
    "forexPlan": ForexPlan,
    "forexInvestment": ForexInvestment,
    "icoTokenOffering": IcoTokenOffering,
    "icoTransaction": IcoTransaction,
    "icoAdminActivity": IcoAdminActivity,
    "mailwizardTemplate": MailwizardTemplate,
    "mailwizardCampaign": MailwizardCampaign,
    "blogCategory": BlogCategory,
    "blogTag": BlogTag,
    "blogPost": BlogPost,
    "faq": Faq,
    "stakingPool": StakingPool,
    "stakingPosition": StakingPosition,
    "stakingEarningRecord": StakingEarningRecord,
    "stakingAdminEarning": StakingAdminEarning,
    "stakingAdminActivity": StakingAdminActivity,
    "stakingExternalPoolPerformance": StakingExternalPoolPerformance,
    "setting": Setting,
    "notification": Notification,
}

_LABEL_OVERRIDES = {
    "faq": "FAQ",
    "mlmReferral": "Referral",
    "mlmReferralCondition": "Referral Condition",
    "mlmReferralReward": "Referral Reward",
    "icoTokenOffering": "Offering",
    "icoTransaction": "ICO Transaction",
    "stakingEarningRecord": "Staking Earning",
    "stakingExternalPoolPerformance": "Pool Performance",
}

HIDDEN_COLUMNS = frozenset({"password_hash"})
IMMUTABLE_COLUMNS = frozenset({"id", "created_at", "updated_at", "deleted_at"})

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


# ─── Registry ────────────────────────────────────────────────────

def resolve_model(model: str) -> type[Base]:
    model_cls = MODEL_REGISTRY.get(model)
    if model_cls is None:
        raise InternalError(f"Unknown model '{model}'")
    return model_cls


def model_label(model: str) -> str:
    if model in _LABEL_OVERRIDES:
        return _LABEL_OVERRIDES[model]
    return " ".join(part.capitalize() for part in _CAMEL_BOUNDARY.split(model))


def column_map(model_cls: type[Base]) -> dict[str, Any]:
    """Attribute key -> Column for every mapped column."""
    return {
        attr.key: attr.columns[0]
        for attr in sa_inspect(model_cls).column_attrs
    }


def _is_soft_delete(model_cls: type[Base]) -> bool:
    return "deleted_at" in column_map(model_cls)


# ─── Serialization ───────────────────────────────────────────────

def _json_safe(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    return value


def serialize(obj: Base, includes: Iterable[str] = ()) -> dict:
    """JSON-safe dict of column values plus the named (already loaded) relationships."""
    data = {
        attr.key: _json_safe(getattr(obj, attr.key))
        for attr in sa_inspect(type(obj)).column_attrs
        if attr.key not in HIDDEN_COLUMNS
    }
    for name in includes:
        related = getattr(obj, name)
        if related is None:
            data[name] = None
        elif isinstance(related, list):
            data[name] = [serialize(item) for item in related]
        else:
            data[name] = serialize(related)
    return data


# ─── Value coercion ──────────────────────────────────────────────

def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        raise ValueError(value)
    return bool(value)


def coerce_value(column: Any, value: Any) -> Any:
    """Convert a raw value to the column's python type (UUID, bool, datetime, numbers)."""
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        value = value.value
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is bool:
        converter = _to_bool
    elif isinstance(value, python_type):
        return value
    elif python_type is uuid.UUID:
        converter = lambda v: uuid.UUID(str(v))  # noqa: E731
    elif python_type is datetime:
        converter = lambda v: datetime.fromisoformat(str(v).replace("Z", "+00:00"))  # noqa: E731
    elif python_type in (int, float):
        converter = python_type
    else:
        return value
    try:
        return converter(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid value for '{column.key}'")


def writable_values(model_cls: type[Base], data: Mapping[str, Any]) -> dict[str, Any]:
    columns = column_map(model_cls)
    return {
        key: coerce_value(columns[key], value)
        for key, value in data.items()
        if key in columns and key not in IMMUTABLE_COLUMNS
    }


def as_uuid(value: Any) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def _coerce_ids(model_cls: type[Base], ids: Sequence[Any]) -> list[Any]:
    id_column = column_map(model_cls)["id"]
    return [coerce_value(id_column, i) for i in ids]


# ─── Loading ─────────────────────────────────────────────────────

def _include_options(model_cls: type[Base], includes: Iterable[str]) -> list:
    relationships = sa_inspect(model_cls).relationships
    options = []
    for name in includes:
        if name not in relationships:
            raise InternalError(f"'{name}' is not a relationship of {model_cls.__name__}")
        options.append(selectinload(getattr(model_cls, name)))
    return options


async def load_instance(
    db: AsyncSession,
    model: str,
    record_id: Any,
    includes: Iterable[str] = (),
    with_deleted: bool = False,
) -> Base:
    model_cls = resolve_model(model)
    stmt = select(model_cls).where(model_cls.id == coerce_value(column_map(model_cls)["id"], record_id))
    if _is_soft_delete(model_cls) and not with_deleted:
        stmt = stmt.where(model_cls.deleted_at.is_(None))
    options = _include_options(model_cls, includes)
    if options:
        stmt = stmt.options(*options)
    obj = (await db.execute(stmt)).scalar_one_or_none()
    if obj is None:
        raise create_error(404, f"{model_label(model)} not found")
    return obj


async def _load_many(
    db: AsyncSession, model: str, ids: Sequence[Any], with_deleted: bool = False,
) -> list[Base]:
    model_cls = resolve_model(model)
    stmt = select(model_cls).where(model_cls.id.in_(_coerce_ids(model_cls, ids)))
    if _is_soft_delete(model_cls) and not with_deleted:
        stmt = stmt.where(model_cls.deleted_at.is_(None))
    return list((await db.execute(stmt)).scalars().all())


async def commit_or_conflict(db: AsyncSession, model: str) -> None:
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Integrity violation on {model}: {e.orig}")
        raise ConflictError(f"{model_label(model)} conflicts with an existing record")


# ─── Single-record operations ────────────────────────────────────

async def get_record(
    db: AsyncSession, model: str, record_id: Any, includes: Sequence[str] = (),
) -> dict:
    obj = await load_instance(db, model, record_id, includes)
    return serialize(obj, includes)


async def store_record(db: AsyncSession, model: str, data: Mapping[str, Any]) -> dict:
    model_cls = resolve_model(model)
    label = model_label(model)
    obj = model_cls(**writable_values(model_cls, data))
    db.add(obj)
    await commit_or_conflict(db, model)
    await db.refresh(obj)
    log_step(f"{label} {obj.id} created")
    return {"message": f"{label} created successfully", "record": serialize(obj)}


async def update_record(
    db: AsyncSession, model: str, record_id: Any, data: Mapping[str, Any],
) -> dict:
    obj = await load_instance(db, model, record_id)
    label = model_label(model)
    for key, value in writable_values(type(obj), data).items():
        setattr(obj, key, value)
    await commit_or_conflict(db, model)
    await db.refresh(obj)
    log_step(f"{label} {record_id} updated")
    return {"message": f"{label} updated successfully", "record": serialize(obj)}


async def delete_record(
    db: AsyncSession, model: str, record_id: Any, force: bool = False,
) -> dict:
    obj = await load_instance(db, model, record_id, with_deleted=force)
    label = model_label(model)
    if _is_soft_delete(type(obj)) and not force:
        obj.deleted_at = utcnow()
    else:
        await db.delete(obj)
    await commit_or_conflict(db, model)
    log_step(f"{label} {record_id} {'deleted' if force else 'removed'}")
    return {"message": f"{label} removed successfully"}


async def restore_record(db: AsyncSession, model: str, record_id: Any) -> dict:
    model_cls = resolve_model(model)
    label = model_label(model)
    if not _is_soft_delete(model_cls):
        raise BadRequestError(f"{label} records cannot be restored")
    obj = await load_instance(db, model, record_id, with_deleted=True)
    obj.deleted_at = None
    await commit_or_conflict(db, model)
    log_step(f"{label} {record_id} restored")
    return {"message": f"{label} restored successfully"}


# ─── Bulk operations ─────────────────────────────────────────────

async def handle_bulk_delete(
    db: AsyncSession, model: str, ids: Sequence[Any], force: bool = False,
) -> dict:
    if not ids:
        raise BadRequestError("No ids provided")
    model_cls = resolve_model(model)
    label = model_label(model)
    soft = _is_soft_delete(model_cls) and not force
    objs = await _load_many(db, model, ids, with_deleted=force)
    now = utcnow()
    for obj in objs:
        if soft:
            obj.deleted_at = now
        else:
            await db.delete(obj)
    await commit_or_conflict(db, model)
    log_step(f"{len(objs)} {label} records removed")
    return {"message": f"{len(objs)} {label} records removed successfully", "count": len(objs)}


async def handle_bulk_restore(db: AsyncSession, model: str, ids: Sequence[Any]) -> dict:
    if not ids:
        raise BadRequestError("No ids provided")
    model_cls = resolve_model(model)
    label = model_label(model)
    if not _is_soft_delete(model_cls):
        raise BadRequestError(f"{label} records cannot be restored")
    objs = await _load_many(db, model, ids, with_deleted=True)
    for obj in objs:
        obj.deleted_at = None
    await commit_or_conflict(db, model)
    log_step(f"{len(objs)} {label} records restored")
    return {"message": f"{len(objs)} {label} records restored successfully", "count": len(objs)}


async def update_status(
    db: AsyncSession,
    model: str,
    ids: Any,
    status: Any,
    allowed: Sequence[Any] | None = None,
) -> dict:
    """Set `status` on one id or a list of ids."""
    model_cls = resolve_model(model)
    label = model_label(model)
    columns = column_map(model_cls)
    if "status" not in columns:
        raise InternalError(f"{model_cls.__name__} has no status column")
    if allowed is not None and status not in allowed:
        raise BadRequestError(f"Invalid status '{status}' for {label}")
    many = isinstance(ids, (list, tuple))
    id_list = list(ids) if many else [ids]
    if not id_list:
        raise BadRequestError("No ids provided")
    objs = await _load_many(db, model, id_list)
    if not objs:
        raise create_error(404, f"{label} not found")
    value = coerce_value(columns["status"], status)
    for obj in objs:
        obj.status = value
    await commit_or_conflict(db, model)
    log_step(f"{len(objs)} {label} status set to {status}")
    if many:
        return {"message": f"{len(objs)} {label} records updated successfully", "count": len(objs)}
    return {"message": f"{label} status updated successfully"}


# ─── Listing ─────────────────────────────────────────────────────

def _filter_clause(column_attr: Any, column: Any, clause: FilterClause):
    op, value = clause.operator, clause.value
    if op in ("like", "startsWith", "endsWith"):
        text = str(value)
        pattern = {"like": f"%{text}%", "startsWith": f"{text}%", "endsWith": f"%{text}"}[op]
        return column_attr.ilike(pattern)
    if op == "in":
        return column_attr.in_([coerce_value(column, v) for v in value])
    if op == "between":
        low, high = (coerce_value(column, v) for v in value)
        return column_attr.between(low, high)
    value = coerce_value(column, value)
    if op == "equal":
        return column_attr.is_(None) if value is None else column_attr == value
    if op == "notEqual":
        return column_attr.is_not(None) if value is None else column_attr != value
    return {
        "gt": column_attr > value,
        "gte": column_attr >= value,
        "lt": column_attr < value,
        "lte": column_attr <= value,
    }[op]


async def get_filtered(
    db: AsyncSession,
    model: str,
    query: CrudQuery,
    where: Sequence[Any] = (),
    searchable: Sequence[str] = (),
    includes: Sequence[str] = (),
    default_sort: str = "created_at",
) -> dict:
    """One page of records plus pagination, for the DataTable list contract."""
    model_cls = resolve_model(model)
    columns = column_map(model_cls)
    stmt = select(model_cls)
    if _is_soft_delete(model_cls):
        stmt = stmt.where(model_cls.deleted_at.is_(None))
    for clause in where:
        stmt = stmt.where(clause)
    for clause in query.filters:
        if clause.field not in columns or clause.field in HIDDEN_COLUMNS:
            raise BadRequestError(f"Cannot filter on '{clause.field}'")
        stmt = stmt.where(
            _filter_clause(getattr(model_cls, clause.field), columns[clause.field], clause),
        )
    if query.search and searchable:
        stmt = stmt.where(or_(*(
            getattr(model_cls, name).ilike(f"%{query.search}%") for name in searchable
        )))

    sort_field = query.sort_field or default_sort
    if sort_field not in columns or sort_field in HIDDEN_COLUMNS:
        raise BadRequestError(f"Cannot sort on '{sort_field}'")
    sort_attr = getattr(model_cls, sort_field)

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    page_stmt = (
        stmt.order_by(sort_attr.asc() if query.sort_order == "asc" else sort_attr.desc())
        .offset(offset_for(query.page, query.per_page))
        .limit(query.per_page)
    )
    options = _include_options(model_cls, includes)
    if options:
        page_stmt = page_stmt.options(*options)
    rows = (await db.execute(page_stmt)).scalars().all()
    log_step(f"Fetched {len(rows)} of {total} {model_label(model)} records")
    return {
        "items": [serialize(row, includes) for row in rows],
        "pagination": build_pagination(total or 0, query.page, query.per_page),
    }
