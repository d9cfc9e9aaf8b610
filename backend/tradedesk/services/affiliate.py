"""Affiliate Service — referral registration, MLM tree placement and reward processing.

Invariants:
    - The referrer of a BINARY/UNILEVEL referral always has a self-referral and a root node
    - A referred user never appears among the ancestors of the node they hang under
    - Binary nodes take at most two children (left first); a full node is a 409
    - Reward processing never pays when level percentages add up to more than 100
    - DIRECT rewards are paid once per referrer and condition

Design Decisions:
    - Settings come from the `settings` table: mlmSystem (DIRECT | BINARY | UNILEVEL),
      mlmSettings (JSON with "binary"/"unilevel" level tables) and
      referralApprovalRequired ("true" holds new referrals in PENDING)
    - Pure rules (cycle test, placement slot, level shares) live in core.mlm;
      this module only walks the tree and writes rows
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step, log_warn
from tradedesk.core.domain_types import MlmSystem, ReferralStatus
from tradedesk.core.errors import BadRequestError, ConflictError, create_error
from tradedesk.core.mlm import (
    binary_placement_field, condition_reward, creates_cycle, is_valid_transaction,
    level_rewards, parse_mlm_settings, validate_level_settings,
)
from tradedesk.models.affiliate import (
    MlmBinaryNode, MlmReferral, MlmReferralCondition, MlmReferralReward, MlmUnilevelNode,
)
from tradedesk.models.user import User
from tradedesk.services.notifications import create_admin_notification, create_notification
from tradedesk.services.records import as_uuid, commit_or_conflict, load_instance, serialize
from tradedesk.services.settings_store import get_setting

logger = logging.getLogger(__name__)

REWARD_VIEW_PERMISSION = "view.affiliate.reward"

NODE_MODELS: dict[str, type] = {
    MlmSystem.BINARY.value: MlmBinaryNode,
    MlmSystem.UNILEVEL.value: MlmUnilevelNode,
}


async def get_mlm_system(db: AsyncSession) -> str:
    value = await get_setting(db, "mlmSystem", MlmSystem.DIRECT.value)
    return value if value in {s.value for s in MlmSystem} else MlmSystem.DIRECT.value


async def _require_user(db: AsyncSession, user_id: Any, label: str) -> User:
    user = await db.get(User, as_uuid(user_id))
    if user is None or user.deleted_at is not None:
        raise create_error(404, f"{label} not found")
    return user


# ─── Tree placement ──────────────────────────────────────────────

async def _root_node(db: AsyncSession, node_model: type, referrer_id: Any):
    """Self-referral and parentless node for the referrer, created on first use."""
    result = await db.execute(
        select(MlmReferral).where(
            MlmReferral.referrer_id == referrer_id, MlmReferral.referred_id == referrer_id,
        ),
    )
    self_referral = result.scalar_one_or_none()
    if self_referral is None:
        log_step("Creating referrer self-referral")
        self_referral = MlmReferral(
            referrer_id=referrer_id, referred_id=referrer_id, status=ReferralStatus.ACTIVE.value,
        )
        db.add(self_referral)
        await db.flush()

    result = await db.execute(select(node_model).where(node_model.referral_id == self_referral.id))
    node = result.scalar_one_or_none()
    if node is None:
        log_step("Creating referrer root node")
        node = node_model(referral_id=self_referral.id, parent_id=None)
        db.add(node)
        await db.flush()
    return node


async def _ancestor_user_ids(db: AsyncSession, node_model: type, node) -> list[Any]:
    """Referred user of `node` and of every node above it."""
    user_ids = []
    seen = set()
    current = node
    while current is not None and current.id not in seen:
        seen.add(current.id)
        referral = await db.get(MlmReferral, current.referral_id)
        if referral is not None:
            user_ids.append(referral.referred_id)
        current = await db.get(node_model, current.parent_id) if current.parent_id else None
    return user_ids


async def place_node(db: AsyncSession, system: str, referrer_id: Any, referral: MlmReferral):
    """Hang the referral's node under the referrer's node; the caller commits."""
    node_model = NODE_MODELS[system]
    parent = await _root_node(db, node_model, referrer_id)

    log_step("Checking for referral cycles")
    if creates_cycle(await _ancestor_user_ids(db, node_model, parent), referral.referred_id):
        raise BadRequestError("Referral loop detected: the referred user is already an ancestor")

    slot = None
    if node_model is MlmBinaryNode:
        slot = binary_placement_field(parent.left_child_id, parent.right_child_id)
        if slot is None:
            raise ConflictError("Referrer binary node already has two children")

    node = node_model(referral_id=referral.id, parent_id=parent.id)
    db.add(node)
    await db.flush()
    if slot is not None:
        setattr(parent, slot, node.id)
    log_step(f"Placed {system.lower()} node {node.id} under {parent.id}")
    return node


async def _remove_node(db: AsyncSession, system: str, referral_id: Any) -> None:
    node_model = NODE_MODELS[system]
    result = await db.execute(select(node_model).where(node_model.referral_id == referral_id))
    node = result.scalar_one_or_none()
    if node is None:
        return
    if node_model is MlmBinaryNode and node.parent_id:
        parent = await db.get(MlmBinaryNode, node.parent_id)
        if parent is not None:
            if parent.left_child_id == node.id:
                parent.left_child_id = None
            if parent.right_child_id == node.id:
                parent.right_child_id = None
    await db.delete(node)
    await db.flush()


# ─── Referrals ───────────────────────────────────────────────────

async def register_referral(db: AsyncSession, referrer_id: Any, referred_id: Any) -> dict:
    referrer_id, referred_id = as_uuid(referrer_id), as_uuid(referred_id)
    if referrer_id == referred_id:
        raise BadRequestError("Referrer and referred user cannot be the same")
    await _require_user(db, referrer_id, "Referrer")
    await _require_user(db, referred_id, "Referred user")

    approval_required = await get_setting(db, "referralApprovalRequired") == "true"
    referral = MlmReferral(
        referrer_id=referrer_id,
        referred_id=referred_id,
        status=(ReferralStatus.PENDING if approval_required else ReferralStatus.ACTIVE).value,
    )
    db.add(referral)
    await db.flush()
    log_step(f"Referral {referral.id} created as {referral.status}")

    system = await get_mlm_system(db)
    if system != MlmSystem.DIRECT.value:
        await place_node(db, system, referrer_id, referral)
    await commit_or_conflict(db, "mlmReferral")
    return {"message": "Referral created successfully", "record": serialize(referral)}


async def update_referral(db: AsyncSession, referral_id: Any, data: dict[str, Any]) -> dict:
    referral = await load_instance(db, "mlmReferral", referral_id)
    referrer_id = as_uuid(data.get("referrer_id") or referral.referrer_id)
    referred_id = as_uuid(data.get("referred_id") or referral.referred_id)
    if referrer_id == referred_id:
        raise BadRequestError("Referrer and referred user cannot be the same")
    await _require_user(db, referrer_id, "Referrer")
    await _require_user(db, referred_id, "Referred user")

    pair_changed = (referrer_id, referred_id) != (referral.referrer_id, referral.referred_id)
    referral.referrer_id = referrer_id
    referral.referred_id = referred_id
    if data.get("status"):
        referral.status = data["status"]

    system = await get_mlm_system(db)
    if pair_changed and system != MlmSystem.DIRECT.value:
        log_step(f"Rebuilding {system.lower()} node for referral {referral.id}")
        try:
            await _remove_node(db, system, referral.id)
            await place_node(db, system, referrer_id, referral)
        except (BadRequestError, ConflictError):
            await db.rollback()
            raise
    await commit_or_conflict(db, "mlmReferral")
    return {"message": "Referral updated successfully", "record": serialize(referral)}


# ─── Rewards ─────────────────────────────────────────────────────

async def find_uplines(db: AsyncSession, system: str, user_id: Any, levels: int) -> list[Any]:
    """Referrer ids above `user_id`, nearest first, following referrals that own a node."""
    node_model = NODE_MODELS[system]
    uplines = []
    current = as_uuid(user_id)
    for _ in range(levels):
        result = await db.execute(
            select(MlmReferral)
            .join(node_model, node_model.referral_id == MlmReferral.id)
            .where(
                MlmReferral.referred_id == current,
                MlmReferral.referrer_id != MlmReferral.referred_id,
            )
            .limit(1),
        )
        referral = result.scalar_one_or_none()
        if referral is None:
            break
        uplines.append(referral.referrer_id)
        current = referral.referrer_id
    return uplines


async def _direct_rewards(
    db: AsyncSession, condition: MlmReferralCondition, user_id: Any, amount: float,
) -> list[tuple[Any, float]]:
    result = await db.execute(
        select(MlmReferral).where(
            MlmReferral.referred_id == as_uuid(user_id),
            MlmReferral.referrer_id != MlmReferral.referred_id,
        ).limit(1),
    )
    referral = result.scalar_one_or_none()
    if referral is None:
        return []
    existing = await db.execute(
        select(MlmReferralReward.id).where(
            MlmReferralReward.referrer_id == referral.referrer_id,
            MlmReferralReward.condition_id == condition.id,
        ).limit(1),
    )
    if existing.first() is not None:
        log_warn(f"Duplicate reward prevented for referrer {referral.referrer_id}")
        return []
    reward = condition_reward(condition.reward_type, condition.reward, amount)
    return [(referral.referrer_id, reward)] if reward > 0 else []


async def _level_rewards(
    db: AsyncSession, system: str, condition: MlmReferralCondition, user_id: Any, amount: float,
) -> list[tuple[Any, float]]:
    try:
        raw = parse_mlm_settings(await get_setting(db, "mlmSettings"))
        if raw is None:
            raise ValueError("MLM settings not found")
        settings = validate_level_settings(raw.get(system.lower()), system)
    except ValueError as e:
        raise BadRequestError(str(e))
    if settings.total_percentage > 100:
        log_warn(f"Total {system.lower()} level percentages exceed 100%, no rewards paid")
        return []
    uplines = await find_uplines(db, system, user_id, settings.levels)
    log_step(f"Found {len(uplines)} uplines")
    return level_rewards(uplines, settings, condition.reward_type, condition.reward, amount)


async def process_rewards(
    db: AsyncSession, user_id: Any, amount: float, condition_name: str, currency: str,
) -> dict:
    if not is_valid_transaction(condition_name, amount, currency):
        raise BadRequestError("Invalid transaction type or currency")

    result = await db.execute(
        select(MlmReferralCondition).where(
            MlmReferralCondition.name == condition_name, MlmReferralCondition.status.is_(True),
        ),
    )
    condition = result.scalar_one_or_none()
    if condition is None:
        raise create_error(404, "Referral condition not found")

    system = await get_mlm_system(db)
    log_step(f"Processing {system} rewards")
    if system == MlmSystem.DIRECT.value:
        payouts = await _direct_rewards(db, condition, user_id, amount)
    else:
        payouts = await _level_rewards(db, system, condition, user_id, amount)

    rewards = []
    for referrer_id, reward in payouts:
        row = MlmReferralReward(referrer_id=referrer_id, condition_id=condition.id, reward=reward)
        db.add(row)
        rewards.append(row)
    if rewards:
        await create_notification(
            db,
            user_id,
            title="Reward Processed",
            message=(
                f"Your reward for {condition_name} of {amount} {currency} "
                "has been successfully processed."
            ),
            related_id=str(condition.id),
            link="/mlm/rewards",
            actions=[{"label": "View Rewards", "link": "/mlm/rewards", "primary": True}],
        )
        await create_admin_notification(
            db,
            REWARD_VIEW_PERMISSION,
            title="MLM Reward Processed",
            message=(
                f"A reward for {condition_name} of {amount} {currency} "
                f"was processed for user {user_id}."
            ),
            link="/admin/affiliate/reward",
        )
    await commit_or_conflict(db, "mlmReferralReward")
    logger.info(f"{len(rewards)} {system} rewards created for {condition_name}")
    return {
        "message": f"{len(rewards)} rewards processed" if rewards else "No rewards processed",
        "rewards": [serialize(r) for r in rewards],
    }
