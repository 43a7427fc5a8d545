"""
Email-ownership guard for invoices.

A viewer proves they placed an order by typing the email it was placed
with. On success they get a short-lived signed token scoped to that one
order, which every invoice read and payment confirmation re-checks.
"""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from linkwedding.config import settings
from linkwedding.database import get_session
from linkwedding.models.order import Order
from linkwedding.models.types import utc_now
from linkwedding.schemas.invoice_schemas import InvoiceAccessToken
from linkwedding.services.order_service import get_order_or_404
from linkwedding.utils.token import decode_token, encode_token

logger = logging.getLogger(__name__)

INVOICE_SCOPE = "invoice"


def storage_key(order_id) -> str:
    return f"invoice_{order_id}_email"


def email_matches(order: Order, email: str) -> bool:
    return (email or "").strip().lower() == order.customer_email.strip().lower()


def issue_invoice_token(order: Order, now: Optional[datetime] = None) -> InvoiceAccessToken:
    now = now or utc_now()
    expires_at = now + timedelta(minutes=settings.INVOICE_TOKEN_EXPIRE_MINUTES)

    token = encode_token(
        {
            "sub": str(order.id),
            "scope": INVOICE_SCOPE,
            "email": order.customer_email.lower(),
        },
        expires_at,
    )

    return InvoiceAccessToken(
        access_token=token,
        expires_at=expires_at,
        storage_key=storage_key(order.id),
    )


def verify_invoice_email(order: Order, email: str) -> InvoiceAccessToken:
    if not email_matches(order, email):
        logger.info("Invoice email mismatch for %s", order.invoice_number)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email does not match this order",
        )

    logger.info("Invoice %s verified", order.invoice_number)
    return issue_invoice_token(order)


def check_invoice_token(order: Order, token: Optional[str]) -> bool:
    if not token:
        return False

    payload = decode_token(token)
    if payload is None:
        return False

    if payload.get("scope") != INVOICE_SCOPE:
        return False

    if payload.get("sub") != str(order.id):
        return False

    # an admin may have corrected the email since the token was issued
    return email_matches(order, payload.get("email", ""))


def require_invoice_access(
    order_id: uuid.UUID,
    x_invoice_token: Optional[str] = Header(None),
    session: Session = Depends(get_session),
) -> Order:
    order = get_order_or_404(session, order_id)

    if not check_invoice_token(order, x_invoice_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Verify the order email to view this invoice",
        )

    return order
