import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from linkwedding.config import settings
from linkwedding.constants.order_status import PaymentStatus, STATUS_LABELS
from linkwedding.models.bank_account import BankAccount
from linkwedding.models.order import Order
from linkwedding.models.product import Product
from linkwedding.models.types import utc_now
from linkwedding.schemas.order_schemas import OrderCreate, OrderUpdate
from linkwedding.services.order_status import countdown, effective_status
from linkwedding.services.pricing import (
    compute_price_breakdown,
    generate_invoice_number,
    get_package,
    resolve_discount,
)

logger = logging.getLogger(__name__)

PACKAGE_FEATURES = ("undangan", "foto", "video", "share")


def _is_invoice_collision(error: IntegrityError) -> bool:
    # sqlite names the column, postgres names the ix_order_invoice_number index
    return "invoice_number" in str(error.orig)


def get_order_or_404(session: Session, order_id: uuid.UUID) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def active_bank_accounts(session: Session):
    return session.exec(
        select(BankAccount)
        .where(BankAccount.is_active == True)  # noqa: E712
        .order_by(BankAccount.created_at, BankAccount.id)
    ).all()


def payment_bank_account(session: Session, order: Order) -> Optional[BankAccount]:
    """
    Account the customer should transfer to.

    The account picked at checkout wins while it is still active; otherwise
    the oldest active account is shown.
    """
    if order.payment_bank_id:
        account = session.get(BankAccount, order.payment_bank_id)
        if account and account.is_active:
            return account

    accounts = active_bank_accounts(session)
    return accounts[0] if accounts else None


def _select_bank_account(session: Session, bank_account_id: Optional[int]) -> Optional[BankAccount]:
    accounts = active_bank_accounts(session)
    if not accounts:
        return None

    if bank_account_id is None:
        raise HTTPException(400, "Please choose a payment method")

    for account in accounts:
        if account.id == bank_account_id:
            return account

    raise HTTPException(400, "Selected bank account is not available")


def create_order(
    session: Session,
    payload: OrderCreate,
    now: Optional[datetime] = None,
) -> Order:
    now = now or utc_now()

    product = session.get(Product, payload.product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    package = get_package(product, payload.package_index)
    bank = _select_bank_account(session, payload.bank_account_id)

    discount = resolve_discount(session, payload.discount_code, now)
    if payload.discount_code and not discount:
        # unknown codes never block checkout, the order goes through at full price
        logger.warning("Ignoring invalid discount code %r", payload.discount_code)

    pricing = compute_price_breakdown(package["price"], discount)

    order_fields = dict(
        product_id=product.id,
        product_name=product.name,
        package_name=package["name"],
        package_price=package["price"],
        package_details={key: package.get(key, "") for key in PACKAGE_FEATURES},
        customer_name=payload.customer_name,
        customer_email=str(payload.customer_email),
        customer_phone=payload.customer_phone,
        subtotal=pricing.subtotal,
        discount_code=discount.code if discount else None,
        discount_amount=pricing.discount_amount,
        tax=pricing.tax,
        total=pricing.total,
        payment_method="bank",
        payment_bank_id=bank.id if bank else None,
        payment_bank=bank.bank_name if bank else "",
        payment_status=PaymentStatus.pending.value,
        payment_deadline=now + timedelta(hours=settings.PAYMENT_WINDOW_HOURS),
        created_at=now,
        updated_at=now,
    )

    # invoice numbers are random; the unique index decides, we just retry
    for attempt in range(1, settings.INVOICE_NUMBER_ATTEMPTS + 1):
        order = Order(invoice_number=generate_invoice_number(now), **order_fields)
        session.add(order)
        if discount:
            discount.used_count += 1
            session.add(discount)

        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            if not _is_invoice_collision(e):
                logger.error(
                    "Order for %s rejected by the database: %s",
                    order_fields["customer_email"], e.orig,
                )
                raise HTTPException(409, "Order could not be saved, please try again")
            logger.warning(
                "Invoice number %s already taken (attempt %s)",
                order.invoice_number, attempt,
            )
            continue

        session.refresh(order)
        logger.info(
            "Order %s created for %s (total %s)",
            order.invoice_number, order.customer_email, order.total,
        )
        return order

    raise HTTPException(500, "Could not allocate an invoice number, please try again")


def update_order(
    session: Session,
    order: Order,
    payload: OrderUpdate,
    now: Optional[datetime] = None,
) -> Order:
    """Admin edit. Pricing is recomputed so the total always adds up."""
    now = now or utc_now()
    data = payload.model_dump(exclude_unset=True)

    status = data.pop("payment_status", None)
    subtotal = data.pop("subtotal", None)
    discount_amount = data.pop("discount_amount", None)
    tax = data.pop("tax", None)

    if subtotal is None and "package_price" in data:
        subtotal = data["package_price"]

    subtotal = order.subtotal if subtotal is None else subtotal
    discount_amount = order.discount_amount if discount_amount is None else discount_amount
    tax = order.tax if tax is None else tax

    if discount_amount > subtotal:
        raise HTTPException(400, "Discount cannot be larger than the subtotal")

    if "discount_code" in data:
        data["discount_code"] = (data["discount_code"] or "").strip().upper() or None
    if "customer_email" in data:
        data["customer_email"] = str(data["customer_email"])

    for field, value in data.items():
        setattr(order, field, value)

    order.subtotal = subtotal
    order.discount_amount = discount_amount
    order.tax = tax
    order.total = subtotal - discount_amount + tax

    if status is not None:
        if status != PaymentStatus(order.payment_status) and status == PaymentStatus.paid:
            order.paid_at = now
        order.payment_status = status.value

    order.updated_at = now
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info("Order %s edited (%s)", order.invoice_number, ", ".join(payload.model_fields_set))
    return order


def order_to_dict(order: Order, now: Optional[datetime] = None) -> dict:
    status = effective_status(order, now)
    return {
        "id": str(order.id),
        "invoice_number": order.invoice_number,
        "product_id": order.product_id,
        "product_name": order.product_name,
        "package_name": order.package_name,
        "package_price": order.package_price,
        "package_details": order.package_details,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "subtotal": order.subtotal,
        "discount_code": order.discount_code,
        "discount_amount": order.discount_amount,
        "tax": order.tax,
        "total": order.total,
        "payment_method": order.payment_method,
        "payment_bank": order.payment_bank,
        "payment_status": status,
        "status_label": STATUS_LABELS[PaymentStatus(status)],
        "payment_proof_url": order.payment_proof_url,
        "payment_deadline": order.payment_deadline,
        "paid_at": order.paid_at,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def bank_account_to_dict(account: Optional[BankAccount]) -> Optional[dict]:
    if not account:
        return None
    return {
        "id": account.id,
        "bank_name": account.bank_name,
        "account_number": account.account_number,
        "account_name": account.account_name,
        "is_active": account.is_active,
    }


def invoice_to_dict(session: Session, order: Order, now: Optional[datetime] = None) -> dict:
    data = order_to_dict(order, now)
    data.update({
        "countdown": countdown(order, now),
        "bank_account": bank_account_to_dict(payment_bank_account(session, order)),
        "confirm_url": f"/invoices/{order.id}/confirm",
    })
    return data
