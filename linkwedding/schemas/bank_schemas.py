from pydantic import BaseModel
from typing import Optional


class BankAccountCreate(BaseModel):
    bank_name: str
    account_number: str
    account_name: str
    is_active: bool = True


class BankAccountUpdate(BaseModel):
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    is_active: Optional[bool] = None
