"""Settings Store — read and upsert the key/value `settings` table.

Invariants:
    - Values are stored as text; callers decode (core.ico_limits, core.mlm)
    - upsert_settings writes every key in one commit
"""

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.models.system import Setting

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


async def get_settings_map(db: AsyncSession, keys: list[str] | None = None) -> dict[str, str | None]:
    stmt = select(Setting)
    if keys is not None:
        stmt = stmt.where(Setting.key.in_(keys))
    rows = (await db.execute(stmt)).scalars().all()
    return {row.key: row.value for row in rows}


async def get_setting(db: AsyncSession, key: str, default: str | None = None) -> str | None:
    row = await db.get(Setting, key)
    if row is None or row.value is None:
        return default
    return row.value


async def upsert_settings(
    db: AsyncSession, values: Mapping[str, Any], commit: bool = True,
) -> dict[str, str | None]:
    written = {}
    for key, value in values.items():
        text = _as_text(value)
        row = await db.get(Setting, key)
        if row is None:
            db.add(Setting(key=key, value=text))
        else:
            row.value = text
        written[key] = text
    if commit:
        await db.commit()
    log_step(f"Saved {len(written)} settings")
    logger.info(f"Settings updated: {', '.join(sorted(written))}")
    return written
