import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from linkwedding.database import get_session
from linkwedding.models.order import Order
from linkwedding.schemas.invoice_schemas import InvoiceAccessToken, InvoiceVerifyRequest
from linkwedding.services.invoice_access import require_invoice_access, verify_invoice_email
from linkwedding.services.order_service import get_order_or_404, invoice_to_dict
from linkwedding.services.order_status import effective_status, expire_if_overdue
from linkwedding.services.payment_confirmation import confirm_page, confirm_payment

router = APIRouter()


@router.get("/{order_id}/summary")
def invoice_summary(order_id: uuid.UUID, session: Session = Depends(get_session)):
    order = get_order_or_404(session, order_id)
    expire_if_overdue(session, order)

    return {
        "order_id": str(order.id),
        "invoice_number": order.invoice_number,
        "payment_status": effective_status(order),
        "verification_required": True,
    }


@router.post("/{order_id}/verify", response_model=InvoiceAccessToken)
def verify_invoice(
    order_id: uuid.UUID,
    payload: InvoiceVerifyRequest,
    session: Session = Depends(get_session),
):
    order = get_order_or_404(session, order_id)
    return verify_invoice_email(order, payload.email)


@router.get("/{order_id}")
def get_invoice(
    order: Order = Depends(require_invoice_access),
    session: Session = Depends(get_session),
):
    expire_if_overdue(session, order)
    return invoice_to_dict(session, order)


@router.get("/{order_id}/confirm")
def get_confirm_page(
    order: Order = Depends(require_invoice_access),
    session: Session = Depends(get_session),
):
    return confirm_page(session, order)


@router.post("/{order_id}/confirm")
def confirm_invoice_payment(
    proof: Optional[UploadFile] = File(None),
    order: Order = Depends(require_invoice_access),
    session: Session = Depends(get_session),
):
    order = confirm_payment(session, order, proof)

    return {
        "message": "Payment confirmation sent",
        "order_id": str(order.id),
        "invoice_number": order.invoice_number,
        "payment_status": order.payment_status,
        "payment_proof_url": order.payment_proof_url,
    }
