from fastapi import APIRouter, Depends
from sqlmodel import Session

from linkwedding.database import get_session
from linkwedding.dependencies.admin import require_admin
from linkwedding.models.user import User
from linkwedding.services.order_stats import dashboard_overview

router = APIRouter()


@router.get("")
def overview(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return dashboard_overview(session)
