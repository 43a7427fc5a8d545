from datetime import datetime

from pydantic import BaseModel


class InvoiceVerifyRequest(BaseModel):
    # plain str: a malformed address is just another mismatch
    email: str


class InvoiceAccessToken(BaseModel):
    access_token: str
    token_type: str = "invoice"
    expires_at: datetime
    storage_key: str
