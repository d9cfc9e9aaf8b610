"""Domain Types — status and kind enums shared by models, schemas and services.

Invariants:
    - All valid states encoded as Enums — no raw string matching in services
    - Enum values are the strings stored in the DB `status` / `type` columns

Design Decisions:
    - str Enums: serialize to JSON without custom encoders and compare equal to DB strings
    - Columns stay String (not DB enums): adding a state needs no migration
"""

from enum import Enum


# ─── CRM ─────────────────────────────────────────────────────────

class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    BANNED = "BANNED"


# ─── Finance ─────────────────────────────────────────────────────

class WalletType(str, Enum):
    FIAT = "FIAT"
    SPOT = "SPOT"
    ECO = "ECO"
    FUTURES = "FUTURES"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    FOREX_DEPOSIT = "FOREX_DEPOSIT"
    FOREX_WITHDRAW = "FOREX_WITHDRAW"
    REFERRAL_REWARD = "REFERRAL_REWARD"
    STAKING_REWARD = "STAKING_REWARD"


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"
    REFUNDED = "REFUNDED"


class BalanceChange(str, Enum):
    """How a transaction moves a wallet balance."""
    WITHDRAWAL = "WITHDRAWAL"
    DEPOSIT = "DEPOSIT"
    REFUND_WITHDRAWAL = "REFUND_WITHDRAWAL"


# ─── Affiliate ───────────────────────────────────────────────────

class MlmSystem(str, Enum):
    DIRECT = "DIRECT"
    BINARY = "BINARY"
    UNILEVEL = "UNILEVEL"


class ReferralStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


class RewardType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


# ─── E-commerce ──────────────────────────────────────────────────

class ProductType(str, Enum):
    DOWNLOADABLE = "DOWNLOADABLE"
    PHYSICAL = "PHYSICAL"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"
    FREE_SHIPPING = "FREE_SHIPPING"


# ─── Forex ───────────────────────────────────────────────────────

class ForexAccountType(str, Enum):
    DEMO = "DEMO"
    LIVE = "LIVE"


class InvestmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


class InvestmentResult(str, Enum):
    WIN = "WIN"
    LOSS = "LOSS"
    DRAW = "DRAW"


# ─── ICO ─────────────────────────────────────────────────────────

class OfferingStatus(str, Enum):
    PENDING = "PENDING"
    UPCOMING = "UPCOMING"
    ACTIVE = "ACTIVE"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    REJECTED = "REJECTED"


class IcoTransactionStatus(str, Enum):
    PENDING = "PENDING"
    VERIFICATION = "VERIFICATION"
    RELEASED = "RELEASED"
    REJECTED = "REJECTED"


# ─── Mailwizard ──────────────────────────────────────────────────

class CampaignStatus(str, Enum):
    PENDING = "PENDING"
    PAUSED = "PAUSED"
    ACTIVE = "ACTIVE"
    STOPPED = "STOPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TargetStatus(str, Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


# ─── Content ─────────────────────────────────────────────────────

class PostStatus(str, Enum):
    PUBLISHED = "PUBLISHED"
    DRAFT = "DRAFT"
    TRASH = "TRASH"


# ─── Staking ─────────────────────────────────────────────────────

class PoolStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMING_SOON = "COMING_SOON"


class PositionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    PENDING_WITHDRAWAL = "PENDING_WITHDRAWAL"


class DistributionType(str, Enum):
    REGULAR = "regular"
    BONUS = "bonus"


def values(enum_cls: type[Enum]) -> tuple[str, ...]:
    return tuple(member.value for member in enum_cls)
