"""Initial schema — CRM, finance, affiliate, e-commerce, forex, ICO, mailwizard, content, staking, system.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", UUID(as_uuid=True), primary_key=True)


def _fk(name: str, target: str, nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        name, UUID(as_uuid=True), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable,
    )


def _timestamps(soft_delete: bool = False) -> list[sa.Column]:
    columns = [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if soft_delete:
        columns.append(sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True))
    return columns


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    # ─── CRM ─────────────────────────────────────────────────────
    op.create_table(
        "permissions",
        _id(),
        sa.Column("name", sa.String(191), nullable=False, unique=True),
    )
    op.create_table(
        "roles",
        _id(),
        sa.Column("name", sa.String(191), nullable=False, unique=True),
        *_timestamps(),
    )
    op.create_table(
        "role_permissions",
        sa.Column("role_id", UUID(as_uuid=True), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("permission_id", UUID(as_uuid=True), sa.ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(191), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(191), nullable=True),
        sa.Column("last_name", sa.String(191), nullable=True),
        sa.Column("avatar", sa.String(1000), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        _fk("role_id", "roles.id", nullable=True, ondelete="SET NULL"),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("email_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "user_blocks",
        _id(),
        _fk("user_id", "users.id"),
        _fk("admin_id", "users.id"),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("is_temporary", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("blocked_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        _created_at(),
    )
    op.create_index("ix_user_blocks_user_id", "user_blocks", ["user_id"])

    # ─── Finance ─────────────────────────────────────────────────
    op.create_table(
        "wallets",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("type", sa.String(20), nullable=False, server_default="SPOT"),
        sa.Column("currency", sa.String(20), nullable=False),
        sa.Column("balance", sa.Float, nullable=False, server_default="0"),
        sa.Column("in_order", sa.Float, nullable=False, server_default="0"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "currency", "type", name="uq_wallet_user_currency_type"),
    )
    op.create_index("ix_wallets_user_id", "wallets", ["user_id"])
    op.create_table(
        "transactions",
        _id(),
        _fk("user_id", "users.id"),
        _fk("wallet_id", "wallets.id", nullable=True, ondelete="SET NULL"),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("fee", sa.Float, nullable=False, server_default="0"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("reference_id", sa.String(191), nullable=True, unique=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        *_timestamps(soft_delete=True),
    )
    op.create_index("ix_transactions_user_id", "transactions", ["user_id"])
    op.create_index("ix_transactions_type", "transactions", ["type"])

    # ─── Affiliate ───────────────────────────────────────────────
    op.create_table(
        "mlm_referrals",
        _id(),
        _fk("referrer_id", "users.id"),
        _fk("referred_id", "users.id"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        *_timestamps(),
        sa.UniqueConstraint("referrer_id", "referred_id", name="uq_mlm_referral_pair"),
    )
    op.create_index("ix_mlm_referrals_referrer_id", "mlm_referrals", ["referrer_id"])
    op.create_index("ix_mlm_referrals_referred_id", "mlm_referrals", ["referred_id"])
    op.create_table(
        "mlm_binary_nodes",
        _id(),
        sa.Column(
            "referral_id", UUID(as_uuid=True),
            sa.ForeignKey("mlm_referrals.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        _fk("parent_id", "mlm_binary_nodes.id", nullable=True),
        _fk("left_child_id", "mlm_binary_nodes.id", nullable=True, ondelete="SET NULL"),
        _fk("right_child_id", "mlm_binary_nodes.id", nullable=True, ondelete="SET NULL"),
        *_timestamps(),
    )
    op.create_table(
        "mlm_unilevel_nodes",
        _id(),
        sa.Column(
            "referral_id", UUID(as_uuid=True),
            sa.ForeignKey("mlm_referrals.id", ondelete="CASCADE"), nullable=False, unique=True,
        ),
        _fk("parent_id", "mlm_unilevel_nodes.id", nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "mlm_referral_conditions",
        _id(),
        sa.Column("name", sa.String(191), nullable=False, unique=True),
        sa.Column("title", sa.String(191), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("reward", sa.Float, nullable=False),
        sa.Column("reward_type", sa.String(20), nullable=False, server_default="PERCENTAGE"),
        sa.Column("reward_wallet_type", sa.String(20), nullable=False, server_default="SPOT"),
        sa.Column("reward_currency", sa.String(20), nullable=False, server_default="USDT"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
    )
    op.create_table(
        "mlm_referral_rewards",
        _id(),
        _fk("referrer_id", "users.id"),
        _fk("condition_id", "mlm_referral_conditions.id"),
        sa.Column("reward", sa.Float, nullable=False),
        sa.Column("is_claimed", sa.Boolean, nullable=False, server_default="false"),
        _created_at(),
    )
    op.create_index("ix_mlm_referral_rewards_referrer_id", "mlm_referral_rewards", ["referrer_id"])

    # ─── E-commerce ──────────────────────────────────────────────
    op.create_table(
        "ecommerce_categories",
        _id(),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("slug", sa.String(191), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "ecommerce_products",
        _id(),
        _fk("category_id", "ecommerce_categories.id"),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("slug", sa.String(191), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("short_description", sa.String(500), nullable=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="DOWNLOADABLE"),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("currency", sa.String(20), nullable=False, server_default="USD"),
        sa.Column("wallet_type", sa.String(20), nullable=False, server_default="FIAT"),
        sa.Column("inventory_quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "ecommerce_orders",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("shipping_address", sa.Text, nullable=True),
        *_timestamps(soft_delete=True),
    )
    op.create_index("ix_ecommerce_orders_user_id", "ecommerce_orders", ["user_id"])
    op.create_table(
        "ecommerce_order_items",
        _id(),
        _fk("order_id", "ecommerce_orders.id"),
        _fk("product_id", "ecommerce_products.id"),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("key", sa.String(191), nullable=True),
    )
    op.create_table(
        "ecommerce_discounts",
        _id(),
        sa.Column("code", sa.String(191), nullable=False, unique=True),
        sa.Column("type", sa.String(20), nullable=False, server_default="PERCENTAGE"),
        sa.Column("percentage", sa.Float, nullable=True),
        sa.Column("amount", sa.Float, nullable=True),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_uses", sa.Integer, nullable=True),
        _fk("product_id", "ecommerce_products.id", nullable=True, ondelete="SET NULL"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "ecommerce_user_discounts",
        _id(),
        _fk("user_id", "users.id"),
        _fk("discount_id", "ecommerce_discounts.id"),
        _created_at(),
    )

    # ─── Forex ───────────────────────────────────────────────────
    op.create_table(
        "forex_accounts",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("account_id", sa.String(191), nullable=True),
        sa.Column("broker", sa.String(191), nullable=True),
        sa.Column("mt", sa.Integer, nullable=True),
        sa.Column("balance", sa.Float, nullable=False, server_default="0"),
        sa.Column("leverage", sa.Integer, nullable=False, server_default="1"),
        sa.Column("type", sa.String(10), nullable=False, server_default="DEMO"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(soft_delete=True),
        sa.UniqueConstraint("user_id", "type", name="uq_forex_account_user_type"),
    )
    op.create_index("ix_forex_accounts_user_id", "forex_accounts", ["user_id"])
    op.create_table(
        "forex_plans",
        _id(),
        sa.Column("name", sa.String(191), nullable=False, unique=True),
        sa.Column("title", sa.String(191), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("currency", sa.String(20), nullable=False, server_default="USDT"),
        sa.Column("wallet_type", sa.String(20), nullable=False, server_default="SPOT"),
        sa.Column("min_profit", sa.Float, nullable=False, server_default="0"),
        sa.Column("max_profit", sa.Float, nullable=False, server_default="0"),
        sa.Column("min_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("max_amount", sa.Float, nullable=True),
        sa.Column("profit_percentage", sa.Float, nullable=False, server_default="0"),
        sa.Column("default_profit", sa.Float, nullable=False, server_default="0"),
        sa.Column("default_result", sa.String(10), nullable=False, server_default="WIN"),
        sa.Column("trending", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "forex_investments",
        _id(),
        _fk("user_id", "users.id"),
        _fk("plan_id", "forex_plans.id", nullable=True, ondelete="SET NULL"),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("profit", sa.Float, nullable=True),
        sa.Column("result", sa.String(10), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        *_timestamps(soft_delete=True),
    )
    op.create_index("ix_forex_investments_user_id", "forex_investments", ["user_id"])

    # ─── ICO ─────────────────────────────────────────────────────
    op.create_table(
        "ico_token_offerings",
        _id(),
        _fk("user_id", "users.id", nullable=True, ondelete="SET NULL"),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("symbol", sa.String(20), nullable=False),
        sa.Column("icon", sa.String(1000), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("purchase_wallet_currency", sa.String(20), nullable=False, server_default="USDT"),
        sa.Column("target_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "ico_token_offering_phases",
        _id(),
        _fk("offering_id", "ico_token_offerings.id"),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("token_price", sa.Float, nullable=False),
        sa.Column("allocation", sa.Float, nullable=False),
        sa.Column("remaining", sa.Float, nullable=False),
        sa.Column("duration", sa.Integer, nullable=False, server_default="30"),
    )
    op.create_table(
        "ico_team_members",
        _id(),
        _fk("offering_id", "ico_token_offerings.id"),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("role", sa.String(191), nullable=False),
        sa.Column("bio", sa.Text, nullable=True),
    )
    op.create_table(
        "ico_roadmap_items",
        _id(),
        _fk("offering_id", "ico_token_offerings.id"),
        sa.Column("title", sa.String(191), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed", sa.Boolean, nullable=False, server_default="false"),
    )
    op.create_table(
        "ico_transactions",
        _id(),
        _fk("user_id", "users.id"),
        _fk("offering_id", "ico_token_offerings.id"),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("price", sa.Float, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("release_url", sa.String(1000), nullable=True),
        sa.Column("wallet_address", sa.String(191), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_ico_transactions_user_id", "ico_transactions", ["user_id"])
    op.create_table(
        "ico_admin_activities",
        _id(),
        sa.Column("type", sa.String(50), nullable=False),
        _fk("offering_id", "ico_token_offerings.id", nullable=True, ondelete="SET NULL"),
        sa.Column("offering_name", sa.String(191), nullable=False),
        _fk("admin_id", "users.id"),
        sa.Column("details", sa.Text, nullable=True),
        _created_at(),
    )

    # ─── Mailwizard ──────────────────────────────────────────────
    op.create_table(
        "mailwizard_templates",
        _id(),
        sa.Column("name", sa.String(191), nullable=False, unique=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("design", sa.Text, nullable=True),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "mailwizard_campaigns",
        _id(),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("subject", sa.String(191), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("speed", sa.Integer, nullable=False, server_default="1"),
        sa.Column("targets", sa.Text, nullable=True),
        _fk("template_id", "mailwizard_templates.id"),
        *_timestamps(soft_delete=True),
    )

    # ─── Content ─────────────────────────────────────────────────
    op.create_table(
        "blog_categories",
        _id(),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("slug", sa.String(191), nullable=False, unique=True),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "blog_tags",
        _id(),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("slug", sa.String(191), nullable=False, unique=True),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "blog_posts",
        _id(),
        _fk("category_id", "blog_categories.id", nullable=True, ondelete="SET NULL"),
        _fk("author_id", "users.id", nullable=True, ondelete="SET NULL"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False, unique=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("views", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(soft_delete=True),
    )
    op.create_table(
        "post_tags",
        sa.Column("post_id", UUID(as_uuid=True), sa.ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("tag_id", UUID(as_uuid=True), sa.ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "faqs",
        _id(),
        sa.Column("question", sa.Text, nullable=False),
        sa.Column("answer", sa.Text, nullable=False),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("status", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("page_path", sa.String(191), nullable=False),
        sa.Column("related_faq_ids", sa.JSON, nullable=False),
        *_timestamps(soft_delete=True),
    )
    op.create_index("ix_faqs_page_path", "faqs", ["page_path"])

    # ─── Staking ─────────────────────────────────────────────────
    op.create_table(
        "staking_pools",
        _id(),
        sa.Column("name", sa.String(191), nullable=False),
        sa.Column("token", sa.String(50), nullable=False),
        sa.Column("symbol", sa.String(20), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("icon", sa.String(1000), nullable=True),
        sa.Column("min_stake", sa.Float, nullable=False, server_default="0"),
        sa.Column("max_stake", sa.Float, nullable=True),
        sa.Column("apr", sa.Float, nullable=False, server_default="0"),
        sa.Column("lock_period", sa.Integer, nullable=False, server_default="0"),
        sa.Column("admin_fee_percentage", sa.Float, nullable=False, server_default="0"),
        sa.Column("status", sa.String(20), nullable=False, server_default="INACTIVE"),
        *_timestamps(),
    )
    op.create_table(
        "staking_positions",
        _id(),
        _fk("user_id", "users.id"),
        _fk("pool_id", "staking_pools.id"),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(30), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("ix_staking_positions_user_id", "staking_positions", ["user_id"])
    op.create_index("ix_staking_positions_pool_id", "staking_positions", ["pool_id"])
    op.create_table(
        "staking_earning_records",
        _id(),
        _fk("position_id", "staking_positions.id"),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="REGULAR"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_claimed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_staking_earning_records_position_id", "staking_earning_records", ["position_id"])
    op.create_table(
        "staking_admin_earnings",
        _id(),
        _fk("pool_id", "staking_pools.id"),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column("type", sa.String(30), nullable=False, server_default="PLATFORM_FEE"),
        sa.Column("currency", sa.String(20), nullable=False),
        sa.Column("is_claimed", sa.Boolean, nullable=False, server_default="false"),
        _created_at(),
    )
    op.create_table(
        "staking_admin_activities",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("related_id", sa.String(191), nullable=False),
        _created_at(),
    )

    # ─── System ──────────────────────────────────────────────────
    op.create_table(
        "settings",
        sa.Column("key", sa.String(191), primary_key=True),
        sa.Column("value", sa.Text, nullable=True),
    )
    op.create_table(
        "notifications",
        _id(),
        _fk("user_id", "users.id"),
        sa.Column("type", sa.String(30), nullable=False, server_default="system"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("link", sa.String(1000), nullable=True),
        sa.Column("related_id", sa.String(191), nullable=True),
        sa.Column("actions", sa.JSON, nullable=True),
        sa.Column("read", sa.Boolean, nullable=False, server_default="false"),
        _created_at(),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])


def downgrade() -> None:
    for table in (
        "notifications", "settings",
        "staking_admin_activities", "staking_admin_earnings", "staking_earning_records",
        "staking_positions", "staking_pools",
        "faqs", "post_tags", "blog_posts", "blog_tags", "blog_categories",
        "mailwizard_campaigns", "mailwizard_templates",
        "ico_admin_activities", "ico_transactions", "ico_roadmap_items", "ico_team_members",
        "ico_token_offering_phases", "ico_token_offerings",
        "forex_investments", "forex_plans", "forex_accounts",
        "ecommerce_user_discounts", "ecommerce_discounts", "ecommerce_order_items",
        "ecommerce_orders", "ecommerce_products", "ecommerce_categories",
        "mlm_referral_rewards", "mlm_referral_conditions", "mlm_unilevel_nodes",
        "mlm_binary_nodes", "mlm_referrals",
        "transactions", "wallets",
        "user_blocks", "users", "role_permissions", "roles", "permissions",
    ):
        op.drop_table(table)
