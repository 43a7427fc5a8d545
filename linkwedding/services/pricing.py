import logging
import random
import string
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlmodel import Session, select

from linkwedding.models.discount import DiscountCode
from linkwedding.models.product import Product
from linkwedding.models.types import utc_now
from linkwedding.schemas.order_schemas import PriceBreakdown

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_uppercase
TAX = 0


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """INV-<YYYYMMDD>-<5 base36 chars>, date in UTC."""
    now = now or utc_now()
    suffix = "".join(random.choices(BASE36, k=5))
    return f"INV-{now:%Y%m%d}-{suffix}"


def get_package(product: Product, package_index: int) -> dict:
    packages = product.packages or []
    if package_index < 0 or package_index >= len(packages):
        raise HTTPException(400, f"Package {package_index} not found for this product")
    return packages[package_index]


def resolve_discount(
    session: Session,
    code: Optional[str],
    now: Optional[datetime] = None,
) -> Optional[DiscountCode]:
    """Return the usable discount rule for ``code`` or None."""
    if not code or not code.strip():
        return None

    now = now or utc_now()
    normalized = code.strip().upper()

    rule = session.exec(
        select(DiscountCode).where(DiscountCode.code == normalized)
    ).first()

    if not rule or not rule.is_active:
        return None

    if rule.valid_from and now < rule.valid_from:
        return None

    if rule.valid_until and now > rule.valid_until:
        return None

    if rule.usage_limit is not None and rule.used_count >= rule.usage_limit:
        return None

    return rule


def compute_price_breakdown(
    package_price: int,
    discount: Optional[DiscountCode] = None,
) -> PriceBreakdown:
    subtotal = int(package_price)
    discount_amount = 0

    if discount:
        if discount.percentage:
            discount_amount = round(subtotal * discount.percentage / 100)
        elif discount.fixed_amount:
            discount_amount = discount.fixed_amount

    # never discount below zero
    discount_amount = min(max(discount_amount, 0), subtotal)

    return PriceBreakdown(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax=TAX,
        total=subtotal - discount_amount + TAX,
    )


def preview_discount(
    session: Session,
    product: Product,
    package_index: int,
    code: str,
) -> PriceBreakdown:
    package = get_package(product, package_index)
    rule = resolve_discount(session, code)

    if not rule:
        logger.info("Rejected discount code %r", code)
        raise HTTPException(400, "Invalid discount code")

    return compute_price_breakdown(package["price"], rule)


LAUNCH_DISCOUNTS = {"HEMAT10": 10, "HEMAT20": 20}


def seed_discount_codes(session: Session) -> int:
    """Insert the launch codes that are missing. Returns how many were added."""
    added = 0
    for code, percentage in LAUNCH_DISCOUNTS.items():
        exists = session.exec(
            select(DiscountCode).where(DiscountCode.code == code)
        ).first()
        if exists:
            continue
        session.add(DiscountCode(code=code, percentage=percentage))
        added += 1

    session.commit()
    return added
