from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field

from linkwedding.models.types import UTCDateTime, utc_now


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    jenis: Optional[str] = None
    design: Optional[str] = None

    # [{"name", "price", "undangan", "foto", "video", "share"}, ...]
    packages: List[dict] = Field(default_factory=list, sa_column=Column(JSON))

    image_url: Optional[str] = None
    demo_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
