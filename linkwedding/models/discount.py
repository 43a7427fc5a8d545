from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from linkwedding.models.types import UTCDateTime, utc_now


class DiscountCode(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)  # stored upper case

    percentage: Optional[int] = None
    fixed_amount: Optional[int] = None

    valid_from: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    valid_until: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    usage_limit: Optional[int] = None
    used_count: int = Field(default=0)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
