from fastapi import APIRouter, Depends
from sqlmodel import Session

from linkwedding.database import get_session
from linkwedding.services.order_service import active_bank_accounts, bank_account_to_dict

router = APIRouter()


@router.get("")
def list_active_bank_accounts(session: Session = Depends(get_session)):
    return [bank_account_to_dict(a) for a in active_bank_accounts(session)]
