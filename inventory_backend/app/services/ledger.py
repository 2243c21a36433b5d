"""
Ledger Entry Store.

Append-only running-balance ledgers for customers and partners. Every entry
persists the balance as of and including itself, so the current balance of an
account is a single-row read of its latest entry.

Sign conventions:
    partner:  balance = previous + credit - debit   (payable)
    customer: balance = previous + debit - credit   (receivable)
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import AccountNotFoundError, InvalidLedgerEntryError
from inventory_backend.app.models.customer import Customer
from inventory_backend.app.models.enums import AccountKind
from inventory_backend.app.models.ledger_entry import CustomerLedgerEntry, PartnerLedgerEntry
from inventory_backend.app.models.partner import Partner

logger = logging.getLogger(__name__)

LedgerEntry = Union[CustomerLedgerEntry, PartnerLedgerEntry]


@dataclass(frozen=True)
class LedgerBinding:
    account_model: Type
    entry_model: Type
    account_column: str

    def account_fk(self):
        return getattr(self.entry_model, self.account_column)


_BINDINGS = {
    AccountKind.CUSTOMER: LedgerBinding(Customer, CustomerLedgerEntry, "customer_id"),
    AccountKind.PARTNER: LedgerBinding(Partner, PartnerLedgerEntry, "partner_id"),
}


def binding_for(kind: AccountKind) -> LedgerBinding:
    return _BINDINGS[AccountKind(kind)]


def signed_delta(kind: AccountKind, debit: float, credit: float) -> float:
    """Balance movement of one entry for the given account kind."""
    if AccountKind(kind) == AccountKind.PARTNER:
        return credit - debit
    return debit - credit


class LedgerStore:

    @staticmethod
    async def account_exists(db: AsyncSession, kind: AccountKind, account_id: int) -> bool:
        model = binding_for(kind).account_model
        result = await db.execute(select(model.id).where(model.id == account_id))
        return result.first() is not None

    @staticmethod
    async def ensure_account(db: AsyncSession, kind: AccountKind, account_id: int) -> None:
        if not await LedgerStore.account_exists(db, kind, account_id):
            raise AccountNotFoundError(AccountKind(kind).value, account_id)

    @staticmethod
    async def latest_entry(db: AsyncSession, kind: AccountKind, account_id: int) -> Optional[LedgerEntry]:
        binding = binding_for(kind)
        result = await db.execute(
            select(binding.entry_model)
            .where(binding.account_fk() == account_id)
            .order_by(binding.entry_model.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def balance_as_of(db: AsyncSession, kind: AccountKind, account_id: int) -> float:
        """Balance of the latest entry, 0 when the account has no entries."""
        latest = await LedgerStore.latest_entry(db, kind, account_id)
        return latest.balance if latest else 0.0

    @staticmethod
    async def entries_for(db: AsyncSession, kind: AccountKind, account_id: int) -> List[LedgerEntry]:
        """All entries of an account in ascending sequence order."""
        binding = binding_for(kind)
        result = await db.execute(
            select(binding.entry_model)
            .where(binding.account_fk() == account_id)
            .order_by(binding.entry_model.id.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def post_entry(
        db: AsyncSession,
        kind: AccountKind,
        account_id: int,
        description: str,
        debit: float = 0.0,
        credit: float = 0.0,
        transaction_date: Optional[datetime] = None,
    ) -> LedgerEntry:
        """
        Append an entry and compute its running balance.

        Runs inside the caller's transaction: the new row is flushed, never
        committed. The caller is responsible for checking the account exists.

        Args:
            db: Database session (transaction owned by caller)
            kind: Account kind, selects ledger table and sign convention
            account_id: Customer or partner id
            description: Free text
            debit: Amount >= 0
            credit: Amount >= 0
            transaction_date: Defaults to now (UTC)

        Returns:
            The persisted ledger entry
        """
        if not (math.isfinite(debit) and math.isfinite(credit)):
            raise InvalidLedgerEntryError("Debit and credit amounts must be finite numbers")
        if debit < 0 or credit < 0:
            raise InvalidLedgerEntryError("Debit and credit amounts cannot be negative")

        binding = binding_for(kind)
        previous = await LedgerStore.balance_as_of(db, kind, account_id)
        balance = previous + signed_delta(kind, debit, credit)

        entry = binding.entry_model(
            description=description,
            debit=debit,
            credit=credit,
            balance=balance,
            transaction_date=transaction_date or datetime.utcnow(),
        )
        setattr(entry, binding.account_column, account_id)

        db.add(entry)
        await db.flush()

        logger.info(
            "Ledger entry posted",
            extra={"kind": AccountKind(kind).value, "account_id": account_id, "entry_id": entry.id, "balance": balance},
        )
        return entry

    @staticmethod
    def validate_manual_entry(description: Optional[str], debit: float, credit: float) -> None:
        """
        Rule for manual adjustments, identical for both account kinds:
        description required, amounts non-negative, exactly one of
        debit/credit non-zero.
        """
        if not description or not description.strip():
            raise InvalidLedgerEntryError("Description is required")
        if not (math.isfinite(debit) and math.isfinite(credit)):
            raise InvalidLedgerEntryError("Debit and credit amounts must be finite numbers")
        if debit < 0 or credit < 0:
            raise InvalidLedgerEntryError("Debit and credit amounts cannot be negative")
        if debit == 0 and credit == 0:
            raise InvalidLedgerEntryError("Either debit or credit must be greater than zero")
        if debit > 0 and credit > 0:
            raise InvalidLedgerEntryError("An entry cannot have both debit and credit")

    @staticmethod
    async def post_manual_entry(
        db: AsyncSession,
        kind: AccountKind,
        account_id: int,
        description: str,
        debit: float = 0.0,
        credit: float = 0.0,
        transaction_date: Optional[datetime] = None,
    ) -> LedgerEntry:
        """
        Manual ledger adjustment (payment received, payment made, correction).

        Owns its transaction: commits on success, rolls back on any failure.
        """
        LedgerStore.validate_manual_entry(description, debit, credit)
        try:
            await LedgerStore.ensure_account(db, kind, account_id)
            entry = await LedgerStore.post_entry(
                db, kind, account_id, description.strip(), debit, credit, transaction_date
            )
            await db.commit()
        except Exception:
            await rollback_quietly(db, "manual ledger entry")
            raise

        await db.refresh(entry)
        return entry


async def rollback_quietly(db: AsyncSession, operation: str) -> None:
    """Roll back after a failed operation; a failing rollback is logged, never raised."""
    logger.warning("Rolling back %s", operation)
    try:
        await db.rollback()
    except Exception:
        logger.exception("Rollback failed during %s", operation)
