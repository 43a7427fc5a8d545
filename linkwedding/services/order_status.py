import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, update
from sqlmodel import Session, select

from linkwedding.constants.order_status import PaymentStatus
from linkwedding.models.order import Order
from linkwedding.models.types import utc_now
from linkwedding.services.r2_client import delete_from_r2, key_from_public_url

logger = logging.getLogger(__name__)


def effective_status(order: Order, now: Optional[datetime] = None) -> str:
    """Status as a reader should see it: overdue pending orders read as expired."""
    now = now or utc_now()
    if order.payment_status == PaymentStatus.pending.value and now > order.payment_deadline:
        return PaymentStatus.expired.value
    return order.payment_status


def countdown(order: Order, now: Optional[datetime] = None) -> dict:
    now = now or utc_now()
    remaining = int((order.payment_deadline - now).total_seconds())

    if remaining <= 0 or order.payment_status != PaymentStatus.pending.value:
        return {"hours": 0, "minutes": 0, "seconds": 0}

    return {
        "hours": remaining // 3600,
        "minutes": (remaining % 3600) // 60,
        "seconds": remaining % 60,
    }


def expire_if_overdue(
    session: Session,
    order: Order,
    now: Optional[datetime] = None,
) -> bool:
    """
    Persist ``expired`` for an overdue pending order.

    Returns True only on the call that performs the transition; once the
    order is no longer pending every later call is a no-op.
    """
    now = now or utc_now()

    if order.payment_status != PaymentStatus.pending.value:
        return False

    if now <= order.payment_deadline:
        return False

    order.payment_status = PaymentStatus.expired.value
    order.updated_at = now
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info("Order %s expired (deadline %s)", order.invoice_number, order.payment_deadline)
    return True


def expire_overdue_orders(session: Session, now: Optional[datetime] = None) -> int:
    now = now or utc_now()

    result = session.execute(
        update(Order)
        .where(Order.payment_status == PaymentStatus.pending.value)
        .where(Order.payment_deadline < now)
        .values(payment_status=PaymentStatus.expired.value, updated_at=now)
    )
    session.commit()

    expired = result.rowcount or 0
    if expired:
        logger.info("Expired %s unpaid orders", expired)
    return expired


def _status_values(status: PaymentStatus, now: datetime) -> dict:
    values = {"payment_status": status.value, "updated_at": now}
    if status == PaymentStatus.paid:
        # stamped on every "paid" action, even if the order was already paid
        values["paid_at"] = now
    return values


def set_order_status(
    session: Session,
    order: Order,
    status: PaymentStatus,
    now: Optional[datetime] = None,
) -> Order:
    """Admin quick action. Any status may be set from any status."""
    now = now or utc_now()
    previous = order.payment_status

    for field, value in _status_values(status, now).items():
        setattr(order, field, value)

    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info("Order %s status %s -> %s", order.invoice_number, previous, status.value)
    return order


def bulk_set_status(
    session: Session,
    order_ids: List[uuid.UUID],
    status: PaymentStatus,
    now: Optional[datetime] = None,
) -> int:
    now = now or utc_now()

    result = session.execute(
        update(Order)
        .where(Order.id.in_(order_ids))
        .values(**_status_values(status, now))
    )
    session.commit()

    logger.info("Bulk status %s applied to %s orders", status.value, result.rowcount)
    return result.rowcount or 0


def bulk_delete(session: Session, order_ids: List[uuid.UUID]) -> int:
    proof_urls = session.exec(
        select(Order.payment_proof_url)
        .where(Order.id.in_(order_ids))
        .where(Order.payment_proof_url != None)  # noqa: E711
    ).all()

    result = session.execute(
        delete(Order).where(Order.id.in_(order_ids))
    )
    session.commit()

    for url in proof_urls:
        key = key_from_public_url(url)
        if key:
            delete_from_r2(key)

    logger.info("Deleted %s orders", result.rowcount)
    return result.rowcount or 0
