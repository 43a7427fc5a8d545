from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from linkwedding.constants.order_status import PaymentStatus
from linkwedding.models.order import Order
from linkwedding.models.product import Product
from linkwedding.models.types import utc_now
from linkwedding.services.order_status import expire_overdue_orders

CHART_DAYS = 7


def start_of_week(now: datetime) -> datetime:
    # weeks start on Sunday
    days_since_sunday = (now.weekday() + 1) % 7
    day = now - timedelta(days=days_since_sunday)
    return day.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _count(session: Session, *conditions) -> int:
    query = select(func.count(Order.id))
    for condition in conditions:
        query = query.where(condition)
    return session.exec(query).one() or 0


def _revenue(session: Session, *conditions) -> int:
    query = select(func.sum(Order.total)).where(
        Order.payment_status == PaymentStatus.paid.value
    )
    for condition in conditions:
        query = query.where(condition)
    return int(session.exec(query).one() or 0)


def compute_order_stats(session: Session, now: Optional[datetime] = None) -> dict:
    """
    Order counts and paid revenue.

    Overdue pending orders are expired first so the counts agree with the
    status each row is shown with.
    """
    now = now or utc_now()
    expire_overdue_orders(session, now)

    by_status = dict(
        session.exec(
            select(Order.payment_status, func.count(Order.id))
            .group_by(Order.payment_status)
        ).all()
    )

    return {
        "total": sum(by_status.values()),
        "pending": by_status.get(PaymentStatus.pending.value, 0),
        "in_progress": by_status.get(PaymentStatus.in_progress.value, 0),
        "paid": by_status.get(PaymentStatus.paid.value, 0),
        "revenue": _revenue(session),
        "this_week": _count(session, Order.created_at >= start_of_week(now)),
        "this_month": _count(session, Order.created_at >= start_of_month(now)),
    }


def revenue_chart(session: Session, now: Optional[datetime] = None, days: int = CHART_DAYS):
    """Paid revenue per day for the last ``days`` days, oldest first."""
    now = now or utc_now()
    first_day = (now - timedelta(days=days - 1)).date()

    buckets = {first_day + timedelta(days=i): 0 for i in range(days)}

    rows = session.exec(
        select(Order.created_at, Order.total)
        .where(Order.payment_status == PaymentStatus.paid.value)
        .where(Order.created_at >= datetime.combine(first_day, datetime.min.time(), timezone.utc))
    ).all()

    for created_at, total in rows:
        day = created_at.date()
        if day in buckets:
            buckets[day] += total or 0

    return [
        {"date": day.isoformat(), "label": day.strftime("%d %b"), "revenue": revenue}
        for day, revenue in buckets.items()
    ]


def dashboard_overview(session: Session, now: Optional[datetime] = None) -> dict:
    now = now or utc_now()
    stats = compute_order_stats(session, now)

    total_products = session.exec(select(func.count(Product.id))).one() or 0

    recent = session.exec(
        select(Order).order_by(Order.created_at.desc()).limit(5)
    ).all()

    return {
        "total_products": total_products,
        "total_orders": stats["total"],
        "pending_orders": stats["pending"],
        "paid_orders": stats["paid"],
        "total_revenue": stats["revenue"],
        "revenue_this_month": _revenue(session, Order.created_at >= start_of_month(now)),
        "orders_this_week": stats["this_week"],
        "orders_this_month": stats["this_month"],
        "status_breakdown": {
            "pending": stats["pending"],
            "in_progress": stats["in_progress"],
            "paid": stats["paid"],
        },
        "recent_orders": [
            {
                "id": str(o.id),
                "invoice_number": o.invoice_number,
                "customer_name": o.customer_name,
                "product_name": o.product_name,
                "package_name": o.package_name,
                "total": o.total,
                "payment_status": o.payment_status,
                "created_at": o.created_at,
            }
            for o in recent
        ],
        "revenue_chart": revenue_chart(session, now),
    }
