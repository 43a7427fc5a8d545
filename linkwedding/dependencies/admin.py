import logging

from fastapi import Depends, HTTPException

from linkwedding.models.user import User
from linkwedding.utils.token import get_current_user

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Every dashboard route (orders, bank accounts, stats) sits behind this."""
    if current_user.role != ADMIN_ROLE:
        logger.warning("User %s denied dashboard access", current_user.email)
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
