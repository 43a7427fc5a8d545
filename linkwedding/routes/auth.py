import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from linkwedding.database import get_session
from linkwedding.models.user import User
from linkwedding.schemas.user_schemas import Token, UserLogin
from linkwedding.utils.hash import verify_password
from linkwedding.utils.token import create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(
        select(User).where(User.email == str(payload.email).lower())
    ).first()

    if not user or not verify_password(payload.password, user.password):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(401, "Invalid email or password")

    if not user.can_login:
        raise HTTPException(403, "User account is disabled")

    token = create_access_token({"user_id": user.id})
    return Token(access_token=token, token_type="bearer")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {
        "id": current_user.id,
        "email": current_user.email,
        "full_name": current_user.full_name,
        "role": current_user.role,
    }
