from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlmodel import Session

from linkwedding.database import get_session
from linkwedding.models.product import Product
from linkwedding.routes.products import product_to_dict
from linkwedding.schemas.order_schemas import DiscountPreviewRequest, OrderCreate
from linkwedding.services.analytics import track_initiate_checkout, track_purchase
from linkwedding.services.order_email_service import send_order_confirmation_email
from linkwedding.services.order_service import (
    active_bank_accounts,
    bank_account_to_dict,
    create_order,
)
from linkwedding.services.pricing import preview_discount

router = APIRouter()


def _get_product_or_404(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")
    return product


@router.get("/checkout")
def checkout(
    background_tasks: BackgroundTasks,
    product_id: int,
    package: int = Query(0, ge=0),
    session: Session = Depends(get_session),
):
    product = _get_product_or_404(session, product_id)

    if not product.packages:
        raise HTTPException(404, "Product has no packages")

    # out of range falls back to the first package, like the product page links
    package_index = package if package < len(product.packages) else 0
    selected = product.packages[package_index]

    background_tasks.add_task(track_initiate_checkout, product, selected)

    return {
        "product": product_to_dict(product),
        "package_index": package_index,
        "package": selected,
        "bank_accounts": [bank_account_to_dict(a) for a in active_bank_accounts(session)],
    }


@router.post("/discount/preview")
def discount_preview(
    payload: DiscountPreviewRequest,
    session: Session = Depends(get_session),
):
    product = _get_product_or_404(session, payload.product_id)
    pricing = preview_discount(session, product, payload.package_index, payload.code)

    return {
        "code": payload.code.strip().upper(),
        **pricing.model_dump(),
    }


@router.post("", status_code=201)
def place_order(
    background_tasks: BackgroundTasks,
    payload: OrderCreate,
    session: Session = Depends(get_session),
):
    order = create_order(session, payload)

    background_tasks.add_task(send_order_confirmation_email, order)
    background_tasks.add_task(track_purchase, order)

    return {
        "order_id": str(order.id),
        "invoice_number": order.invoice_number,
        "invoice_url": f"/invoice/{order.id}",
        "subtotal": order.subtotal,
        "discount_code": order.discount_code,
        "discount_amount": order.discount_amount,
        "tax": order.tax,
        "total": order.total,
        "payment_status": order.payment_status,
        "payment_deadline": order.payment_deadline,
    }
