import uuid
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from linkwedding.constants.order_status import PaymentStatus


class PriceBreakdown(BaseModel):
    subtotal: int
    discount_amount: int = 0
    tax: int = 0
    total: int


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class OrderCreate(BaseModel):
    product_id: int
    package_index: int = Field(0, ge=0)

    customer_name: str
    customer_email: EmailStr
    customer_phone: str

    bank_account_id: Optional[int] = None
    discount_code: Optional[str] = None

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def not_blank(cls, value: str):
        return _strip_required(value)


class DiscountPreviewRequest(BaseModel):
    product_id: int
    package_index: int = Field(0, ge=0)
    code: str


class OrderStatusUpdate(BaseModel):
    status: PaymentStatus


class BulkStatusUpdate(BaseModel):
    order_ids: List[uuid.UUID] = Field(min_length=1)
    status: PaymentStatus


class BulkDelete(BaseModel):
    order_ids: List[uuid.UUID] = Field(min_length=1)


class OrderUpdate(BaseModel):
    customer_name: Optional[str] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None

    product_name: Optional[str] = None
    package_name: Optional[str] = None
    package_price: Optional[int] = Field(None, ge=0)
    package_details: Optional[dict] = None

    subtotal: Optional[int] = Field(None, ge=0)
    discount_code: Optional[str] = None
    discount_amount: Optional[int] = Field(None, ge=0)
    tax: Optional[int] = Field(None, ge=0)

    payment_bank: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None

    # omitted fields are left alone, but an explicit null would hit a NOT NULL column
    @field_validator(
        "customer_name", "customer_email", "customer_phone",
        "product_name", "package_name", "package_price", "package_details",
        "subtotal", "discount_amount", "tax", "payment_status",
    )
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    @field_validator("customer_name", "customer_phone", "product_name", "package_name")
    @classmethod
    def not_blank(cls, value: Optional[str]):
        if value is None:
            return value
        return _strip_required(value)
