"""E-commerce Schemas — catalog, orders and discount codes.

Invariants:
    - Discount codes are stored trimmed and upper-cased
    - PERCENTAGE discounts need a percentage in (0, 100]; FIXED discounts need a positive amount
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from tradedesk.core.discounts import normalize_code
from tradedesk.core.domain_types import DiscountType, OrderStatus, ProductType, WalletType


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)
    description: str | None = None
    image: str | None = None
    status: bool = True


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)
    description: str | None = None
    image: str | None = None
    status: bool | None = None


class ProductCreate(BaseModel):
    category_id: UUID
    name: str = Field(..., min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)
    description: str | None = None
    short_description: str | None = Field(None, max_length=500)
    type: ProductType = ProductType.DOWNLOADABLE
    price: float = Field(..., ge=0)
    currency: str = Field("USD", max_length=20)
    wallet_type: WalletType = WalletType.FIAT
    inventory_quantity: int = Field(0, ge=0)
    image: str | None = None
    status: bool = True


class ProductUpdate(BaseModel):
    category_id: UUID | None = None
    name: str | None = Field(None, min_length=1, max_length=191)
    slug: str | None = Field(None, max_length=191)
    description: str | None = None
    short_description: str | None = Field(None, max_length=500)
    type: ProductType | None = None
    price: float | None = Field(None, ge=0)
    currency: str | None = Field(None, max_length=20)
    wallet_type: WalletType | None = None
    inventory_quantity: int | None = Field(None, ge=0)
    image: str | None = None
    status: bool | None = None


class OrderUpdate(BaseModel):
    status: OrderStatus | None = None
    shipping_address: str | None = None


class DiscountCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=191)
    type: DiscountType = DiscountType.PERCENTAGE
    percentage: float | None = Field(None, gt=0, le=100)
    amount: float | None = Field(None, gt=0)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    max_uses: int | None = Field(None, ge=0)
    product_id: UUID | None = None
    status: bool = True

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return normalize_code(v)

    @model_validator(mode="after")
    def check_value(self) -> "DiscountCreate":
        if self.type == DiscountType.PERCENTAGE and self.percentage is None:
            raise ValueError("percentage is required for PERCENTAGE discounts")
        if self.type == DiscountType.FIXED and self.amount is None:
            raise ValueError("amount is required for FIXED discounts")
        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValueError("valid_until must be after valid_from")
        return self


class DiscountUpdate(BaseModel):
    code: str | None = Field(None, min_length=1, max_length=191)
    type: DiscountType | None = None
    percentage: float | None = Field(None, gt=0, le=100)
    amount: float | None = Field(None, gt=0)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    max_uses: int | None = Field(None, ge=0)
    product_id: UUID | None = None
    status: bool | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str | None) -> str | None:
        return normalize_code(v) if v else v


class DiscountValidateRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=191)
