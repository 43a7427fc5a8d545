import hashlib
import logging
import time
from typing import List, Optional

import requests

from linkwedding.config import settings

logger = logging.getLogger(__name__)

META_GRAPH_URL = "https://graph.facebook.com/v18.0/{pixel_id}/events"


def _hash(value: str) -> str:
    return hashlib.sha256(value.strip().lower().encode("utf-8")).hexdigest()


def track_event(
    event_name: str,
    *,
    content_name: str,
    content_ids: List[str],
    value: float,
    currency: str = "IDR",
    num_items: int = 1,
    email: Optional[str] = None,
) -> bool:
    """
    Report a conversion event to the Meta pixel.

    Fire and forget: nothing in the order flow depends on the result.
    """
    if not settings.META_PIXEL_ID or not settings.META_ACCESS_TOKEN:
        return False

    user_data = {}
    if email:
        user_data["em"] = [_hash(email)]

    payload = {
        "data": [
            {
                "event_name": event_name,
                "event_time": int(time.time()),
                "action_source": "website",
                "user_data": user_data,
                "custom_data": {
                    "content_name": content_name,
                    "content_ids": content_ids,
                    "content_type": "product",
                    "value": value,
                    "currency": currency,
                    "num_items": num_items,
                },
            }
        ],
        "access_token": settings.META_ACCESS_TOKEN,
    }

    try:
        response = requests.post(
            META_GRAPH_URL.format(pixel_id=settings.META_PIXEL_ID),
            json=payload,
            timeout=5,
        )
    except requests.RequestException as e:
        logger.warning("Analytics event %s failed: %s", event_name, e)
        return False

    if response.status_code >= 400:
        logger.warning(
            "Analytics event %s rejected (%s)", event_name, response.status_code
        )
        return False

    return True


def track_initiate_checkout(product, package: dict) -> bool:
    return track_event(
        "InitiateCheckout",
        content_name=f"{product.name} - {package['name']}",
        content_ids=[str(product.id)],
        value=package["price"],
    )


def track_purchase(order) -> bool:
    return track_event(
        "Purchase",
        content_name=f"{order.product_name} - {order.package_name}",
        content_ids=[str(order.product_id)],
        value=order.total,
        email=order.customer_email,
    )
