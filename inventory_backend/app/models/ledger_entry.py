"""
Ledger Entry database models.

Append-only running-balance records, one table per account kind.
"""

from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from inventory_backend.app.db.session import Base


class CustomerLedgerEntry(Base):
    """
    Customer ledger entry.

    ``balance`` is the running receivable as of and including this entry:
    previous balance + debit - credit. NO updates or deletions allowed.
    """
    __tablename__ = "customer_ledger"
    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_customer_ledger_debit"),
        CheckConstraint("credit >= 0", name="ck_customer_ledger_credit"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    transaction_date = Column(DateTime, server_default=func.now(), nullable=False)
    description = Column(Text, nullable=False)

    # Financials
    debit = Column(Float, nullable=False, default=0.0)
    credit = Column(Float, nullable=False, default=0.0)
    balance = Column(Float, nullable=False)

    customer = relationship("Customer", back_populates="ledger_entries")

    def __repr__(self):
        return f"<CustomerLedgerEntry(id={self.id}, customer_id={self.customer_id}, balance={self.balance})>"


class PartnerLedgerEntry(Base):
    """
    Partner ledger entry.

    ``balance`` is the running payable as of and including this entry:
    previous balance + credit - debit. NO updates or deletions allowed.
    """
    __tablename__ = "partner_ledger"
    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_partner_ledger_debit"),
        CheckConstraint("credit >= 0", name="ck_partner_ledger_credit"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    partner_id = Column(Integer, ForeignKey("partners.id", ondelete="CASCADE"), nullable=False, index=True)

    transaction_date = Column(DateTime, server_default=func.now(), nullable=False)
    description = Column(Text, nullable=False)

    debit = Column(Float, nullable=False, default=0.0)
    credit = Column(Float, nullable=False, default=0.0)
    balance = Column(Float, nullable=False)

    partner = relationship("Partner", back_populates="ledger_entries")

    def __repr__(self):
        return f"<PartnerLedgerEntry(id={self.id}, partner_id={self.partner_id}, balance={self.balance})>"
