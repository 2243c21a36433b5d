"""
Partner (supplier) API endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.api.v1.params import jalali_datetime
from inventory_backend.app.db.session import get_db
from inventory_backend.app.models.enums import AccountKind
from inventory_backend.app.schemas.account import (
    BalanceResponse,
    LedgerEntryCreate,
    LedgerEntryResponse,
    PartnerCreate,
    PartnerDetailResponse,
    PartnerResponse,
    PartnerUpdate,
)
from inventory_backend.app.services import accounts
from inventory_backend.app.services.ledger import LedgerStore

router = APIRouter(prefix="/partners", tags=["Partners"])


def _with_balance(partner, balance: float) -> PartnerResponse:
    response = PartnerResponse.model_validate(partner)
    response.current_balance = balance
    return response


@router.get("", response_model=List[PartnerResponse])
async def list_partners(
    partner_type: Optional[str] = Query(None, alias="partnerType", description="Filter by partner type"),
    db: AsyncSession = Depends(get_db)
):
    rows = await accounts.list_accounts(db, AccountKind.PARTNER, partner_type=partner_type)
    return [_with_balance(partner, balance) for partner, balance in rows]


@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(partner_data: PartnerCreate, db: AsyncSession = Depends(get_db)):
    partner = await accounts.create_account(db, AccountKind.PARTNER, partner_data.model_dump())
    return _with_balance(partner, 0.0)


@router.get("/{partner_id}", response_model=PartnerDetailResponse)
async def get_partner(partner_id: int, db: AsyncSession = Depends(get_db)):
    """Profile, current balance, ledger and the products and phones bought from the partner."""
    detail = await accounts.partner_detail(db, partner_id)
    detail["profile"] = _with_balance(detail["profile"], detail["current_balance"])
    return detail


@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: int,
    partner_data: PartnerUpdate,
    db: AsyncSession = Depends(get_db)
):
    partner = await accounts.update_account(
        db, AccountKind.PARTNER, partner_id, partner_data.model_dump(exclude_unset=True)
    )
    balance = await accounts.current_balance(db, AccountKind.PARTNER, partner_id)
    return _with_balance(partner, balance)


@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner(partner_id: int, db: AsyncSession = Depends(get_db)):
    await accounts.delete_account(db, AccountKind.PARTNER, partner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{partner_id}/ledger", response_model=LedgerEntryResponse, status_code=status.HTTP_201_CREATED)
async def add_ledger_entry(
    partner_id: int,
    entry_data: LedgerEntryCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Manual ledger entry for a partner.

    A debit records a payment made to the partner, a credit records what we owe.
    """
    return await LedgerStore.post_manual_entry(
        db,
        AccountKind.PARTNER,
        partner_id,
        entry_data.description,
        debit=entry_data.debit,
        credit=entry_data.credit,
        transaction_date=jalali_datetime(entry_data.transaction_date, required=False),
    )


@router.get("/{partner_id}/balance", response_model=BalanceResponse)
async def get_balance(partner_id: int, db: AsyncSession = Depends(get_db)):
    balance = await accounts.current_balance(db, AccountKind.PARTNER, partner_id)
    return BalanceResponse(
        account_kind=AccountKind.PARTNER.value,
        account_id=partner_id,
        current_balance=balance,
    )
