"""
Expire unpaid orders whose payment deadline has passed.

Meant for a scheduler, e.g. every five minutes from cron:

    python -m linkwedding.jobs.order_expiry
"""
import logging

from sqlmodel import Session

from linkwedding.database import engine
from linkwedding.services.order_status import expire_overdue_orders

logger = logging.getLogger(__name__)


def expire_unpaid_orders() -> int:
    with Session(engine) as session:
        expired = expire_overdue_orders(session)

    logger.info("Expired %s unpaid orders", expired)
    return expired


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    expire_unpaid_orders()
