import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from linkwedding.constants.order_status import PaymentStatus
from linkwedding.models.types import UTCDateTime, utc_now


class Order(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    invoice_number: str = Field(index=True, unique=True)

    # snapshots taken when the order is placed
    product_id: Optional[int] = Field(default=None, foreign_key="product.id", ondelete="SET NULL")
    product_name: str
    package_name: str
    package_price: int
    package_details: dict = Field(default_factory=dict, sa_column=Column(JSON))

    customer_name: str
    customer_email: str = Field(index=True)
    customer_phone: str

    subtotal: int
    discount_code: Optional[str] = None
    discount_amount: int = 0
    tax: int = 0
    total: int

    payment_method: str = Field(default="bank")
    payment_bank_id: Optional[int] = Field(default=None, foreign_key="bankaccount.id", ondelete="SET NULL")
    payment_bank: Optional[str] = None
    payment_status: str = Field(default=PaymentStatus.pending.value, index=True)
    payment_proof_url: Optional[str] = None
    payment_deadline: datetime = Field(sa_type=UTCDateTime)
    paid_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
