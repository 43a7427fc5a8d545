import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from linkwedding.config import settings
from linkwedding.database import get_session
from linkwedding.models.types import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check DB ping failed: %s", e)
        db_status = "failed"

    # integrations degrade silently when unconfigured, so report them here
    return {
        "status": "ok",
        "database": db_status,
        "storage": "configured" if settings.R2_BUCKET_NAME else "missing",
        "email": "configured" if settings.BREVO_API_KEY else "missing",
        "timestamp": utc_now().isoformat(),
    }
