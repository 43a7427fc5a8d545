from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from linkwedding.models.types import UTCDateTime, utc_now


class BankAccount(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    bank_name: str
    account_number: str
    account_name: str
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
