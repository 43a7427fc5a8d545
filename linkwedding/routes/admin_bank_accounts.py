import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from linkwedding.database import get_session
from linkwedding.dependencies.admin import require_admin
from linkwedding.models.bank_account import BankAccount
from linkwedding.models.types import utc_now
from linkwedding.models.user import User
from linkwedding.schemas.bank_schemas import BankAccountCreate, BankAccountUpdate
from linkwedding.services.order_service import bank_account_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_account_or_404(session: Session, account_id: int) -> BankAccount:
    account = session.get(BankAccount, account_id)
    if not account:
        raise HTTPException(404, "Bank account not found")
    return account


@router.get("")
def list_bank_accounts(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    accounts = session.exec(
        select(BankAccount).order_by(BankAccount.created_at, BankAccount.id)
    ).all()
    return [bank_account_to_dict(a) for a in accounts]


@router.post("", status_code=201)
def create_bank_account(
    payload: BankAccountCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    account = BankAccount(**payload.model_dump())
    session.add(account)
    session.commit()
    session.refresh(account)

    logger.info("Bank account %s (%s) added", account.id, account.bank_name)
    return bank_account_to_dict(account)


@router.put("/{account_id}")
def update_bank_account(
    account_id: int,
    payload: BankAccountUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    account = _get_account_or_404(session, account_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(account, field, value)

    account.updated_at = utc_now()
    session.add(account)
    session.commit()
    session.refresh(account)
    return bank_account_to_dict(account)


@router.patch("/{account_id}/toggle")
def toggle_bank_account(
    account_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    account = _get_account_or_404(session, account_id)
    account.is_active = not account.is_active
    account.updated_at = utc_now()
    session.add(account)
    session.commit()
    session.refresh(account)

    logger.info("Bank account %s active=%s", account.id, account.is_active)
    return bank_account_to_dict(account)


@router.delete("/{account_id}")
def delete_bank_account(
    account_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    account = _get_account_or_404(session, account_id)
    session.delete(account)
    session.commit()

    logger.info("Bank account %s deleted", account_id)
    return {"message": "Bank account deleted"}
