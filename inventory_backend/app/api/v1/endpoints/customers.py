"""
Customer API endpoints.

Customer CRUD, the customer ledger and balance projection.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.api.v1.params import jalali_datetime
from inventory_backend.app.db.session import get_db
from inventory_backend.app.models.enums import AccountKind
from inventory_backend.app.schemas.account import (
    BalanceResponse,
    CustomerCreate,
    CustomerDetailResponse,
    CustomerResponse,
    CustomerUpdate,
    LedgerEntryCreate,
    LedgerEntryResponse,
)
from inventory_backend.app.services import accounts
from inventory_backend.app.services.ledger import LedgerStore

router = APIRouter(prefix="/customers", tags=["Customers"])


def _with_balance(customer, balance: float) -> CustomerResponse:
    response = CustomerResponse.model_validate(customer)
    response.current_balance = balance
    return response


@router.get("", response_model=List[CustomerResponse])
async def list_customers(db: AsyncSession = Depends(get_db)):
    """All customers alphabetically, each with its current balance."""
    rows = await accounts.list_accounts(db, AccountKind.CUSTOMER)
    return [_with_balance(customer, balance) for customer, balance in rows]


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(customer_data: CustomerCreate, db: AsyncSession = Depends(get_db)):
    customer = await accounts.create_account(db, AccountKind.CUSTOMER, customer_data.model_dump())
    return _with_balance(customer, 0.0)


@router.get("/{customer_id}", response_model=CustomerDetailResponse)
async def get_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    """Profile, current balance, full ledger and purchase history."""
    detail = await accounts.customer_detail(db, customer_id)
    detail["profile"] = _with_balance(detail["profile"], detail["current_balance"])
    return detail


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: AsyncSession = Depends(get_db)
):
    customer = await accounts.update_account(
        db, AccountKind.CUSTOMER, customer_id, customer_data.model_dump(exclude_unset=True)
    )
    balance = await accounts.current_balance(db, AccountKind.CUSTOMER, customer_id)
    return _with_balance(customer, balance)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a customer with its ledger; past sales keep their snapshot."""
    await accounts.delete_account(db, AccountKind.CUSTOMER, customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{customer_id}/ledger", response_model=LedgerEntryResponse, status_code=status.HTTP_201_CREATED)
async def add_ledger_entry(
    customer_id: int,
    entry_data: LedgerEntryCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Manual ledger entry for a customer.

    A credit records a payment received, a debit adds to what the customer owes.
    """
    return await LedgerStore.post_manual_entry(
        db,
        AccountKind.CUSTOMER,
        customer_id,
        entry_data.description,
        debit=entry_data.debit,
        credit=entry_data.credit,
        transaction_date=jalali_datetime(entry_data.transaction_date, required=False),
    )


@router.get("/{customer_id}/balance", response_model=BalanceResponse)
async def get_balance(customer_id: int, db: AsyncSession = Depends(get_db)):
    balance = await accounts.current_balance(db, AccountKind.CUSTOMER, customer_id)
    return BalanceResponse(
        account_kind=AccountKind.CUSTOMER.value,
        account_id=customer_id,
        current_balance=balance,
    )
