import logging
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from linkwedding.config import settings
from linkwedding.constants.order_status import CUSTOMER_TRANSITIONS, PaymentStatus
from linkwedding.models.order import Order
from linkwedding.models.types import utc_now
from linkwedding.services.order_email_service import send_payment_proof_notification
from linkwedding.services.order_service import (
    bank_account_to_dict,
    payment_bank_account,
)
from linkwedding.services.order_status import effective_status, expire_if_overdue
from linkwedding.services.r2_client import StorageError, upload_payment_proof
from linkwedding.utils.template import format_rupiah

logger = logging.getLogger(__name__)


def _ensure_confirmable(session: Session, order: Order, now: datetime):
    status = effective_status(order, now)

    if PaymentStatus.in_progress in CUSTOMER_TRANSITIONS[PaymentStatus(status)]:
        return

    if order.payment_status == PaymentStatus.pending.value:
        # overdue but not yet persisted
        expire_if_overdue(session, order, now)

    if status == PaymentStatus.expired.value:
        raise HTTPException(409, "Payment deadline has passed")
    if status == PaymentStatus.cancelled.value:
        raise HTTPException(409, "Order has been cancelled")

    raise HTTPException(409, "Payment already confirmed")


def _record_proof(session: Session, order: Order, proof_url: str, now: datetime) -> Order:
    """
    Store the uploaded proof on the order.

    The upload already succeeded, so a failed update is retried with the
    same URL instead of uploading again.
    """
    last_error = None

    for attempt in range(1, settings.PROOF_UPDATE_ATTEMPTS + 1):
        order.payment_proof_url = proof_url
        order.payment_status = PaymentStatus.in_progress.value
        order.updated_at = now
        session.add(order)

        try:
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            last_error = e
            logger.warning(
                "Recording proof for %s failed (attempt %s): %s",
                order.invoice_number, attempt, e,
            )
            continue

        session.refresh(order)
        return order

    logger.error(
        "Proof %s stored but order %s was not updated: %s",
        proof_url, order.id, last_error,
    )
    raise HTTPException(500, "Payment proof was received but could not be recorded, please contact us")


def confirm_payment(
    session: Session,
    order: Order,
    proof: Optional[UploadFile],
    now: Optional[datetime] = None,
) -> Order:
    now = now or utc_now()

    if proof is None or not proof.filename:
        raise HTTPException(400, "Please upload your payment proof")

    if not (proof.content_type or "").startswith("image/"):
        raise HTTPException(400, "Payment proof must be an image")

    _ensure_confirmable(session, order, now)

    try:
        proof_url = upload_payment_proof(proof, order.id)
    except StorageError as e:
        logger.error("Proof upload for %s failed: %s", order.invoice_number, e)
        raise HTTPException(502, "Could not upload payment proof, please try again")

    order = _record_proof(session, order, proof_url, now)
    logger.info("Order %s payment proof received", order.invoice_number)

    send_payment_proof_notification(order)
    return order


def whatsapp_url(order: Order) -> Optional[str]:
    if not settings.ADMIN_WHATSAPP:
        return None

    message = (
        f"Halo Admin {settings.STORE_NAME}, saya ingin konfirmasi pembayaran untuk:\n\n"
        f"Order ID: *{order.invoice_number}*\n"
        f"Total: *{format_rupiah(order.total)}*\n"
        "\nMohon dicek ya, terima kasih."
    )
    return f"https://wa.me/{settings.ADMIN_WHATSAPP}?text={quote(message)}"


def confirm_page(session: Session, order: Order, now: Optional[datetime] = None) -> dict:
    status = effective_status(order, now)
    return {
        "order_id": str(order.id),
        "invoice_number": order.invoice_number,
        "total": order.total,
        "payment_status": status,
        "already_confirmed": status != PaymentStatus.pending.value,
        "bank_account": bank_account_to_dict(payment_bank_account(session, order)),
        "whatsapp_url": whatsapp_url(order),
    }
