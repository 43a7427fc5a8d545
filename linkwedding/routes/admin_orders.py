# -------- ADMIN ORDERS --------
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, or_, select

from linkwedding.config import settings
from linkwedding.constants.order_status import PaymentStatus
from linkwedding.database import get_session
from linkwedding.dependencies.admin import require_admin
from linkwedding.models.order import Order
from linkwedding.models.user import User
from linkwedding.schemas.order_schemas import (
    BulkDelete,
    BulkStatusUpdate,
    OrderStatusUpdate,
    OrderUpdate,
)
from linkwedding.services.order_service import (
    get_order_or_404,
    order_to_dict,
    update_order,
)
from linkwedding.services.order_stats import compute_order_stats, revenue_chart
from linkwedding.services.order_status import (
    bulk_delete,
    bulk_set_status,
    expire_if_overdue,
    expire_overdue_orders,
    set_order_status,
)
from linkwedding.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_orders(
    page: int = Query(1, ge=1),
    search: str | None = None,
    status: PaymentStatus | None = None,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    # status filter runs on the stored column
    expire_overdue_orders(session)

    query = select(Order)

    if search:
        s = f"%{search.strip()}%"
        query = query.where(
            or_(
                Order.invoice_number.ilike(s),
                Order.customer_name.ilike(s),
                Order.customer_email.ilike(s),
            )
        )

    if status:
        query = query.where(Order.payment_status == status.value)

    return paginate(
        session=session,
        query=query.order_by(Order.created_at.desc()),
        page=page,
        limit=settings.ORDERS_PAGE_SIZE,
        serialize=order_to_dict,
    )


@router.get("/stats")
def order_stats(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return compute_order_stats(session)


@router.get("/revenue-chart")
def order_revenue_chart(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return revenue_chart(session)


@router.post("/bulk-status")
def bulk_update_status(
    payload: BulkStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    updated = bulk_set_status(session, payload.order_ids, payload.status)

    return {
        "message": f"{updated} orders set to {payload.status.value}",
        "updated": updated,
        "stats": compute_order_stats(session),
    }


@router.post("/bulk-delete")
def bulk_delete_orders(
    payload: BulkDelete,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    deleted = bulk_delete(session, payload.order_ids)

    return {
        "message": f"{deleted} orders deleted",
        "deleted": deleted,
        "stats": compute_order_stats(session),
    }


@router.get("/{order_id}")
def order_details(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = get_order_or_404(session, order_id)
    expire_if_overdue(session, order)
    return order_to_dict(order)


@router.patch("/{order_id}")
def edit_order(
    order_id: uuid.UUID,
    payload: OrderUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = get_order_or_404(session, order_id)
    order = update_order(session, order, payload)

    return {
        "message": "Order updated",
        "order": order_to_dict(order),
        "stats": compute_order_stats(session),
    }


@router.post("/{order_id}/status")
def change_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = get_order_or_404(session, order_id)
    order = set_order_status(session, order, payload.status)

    return {
        "message": f"Order set to {payload.status.value}",
        "order": order_to_dict(order),
        "stats": compute_order_stats(session),
    }


@router.delete("/{order_id}")
def delete_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = get_order_or_404(session, order_id)
    bulk_delete(session, [order.id])

    return {
        "message": "Order deleted",
        "stats": compute_order_stats(session),
    }
