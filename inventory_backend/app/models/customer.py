"""
Customer database model.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from inventory_backend.app.db.session import Base


class Customer(Base):
    """
    Customer account.

    Owns a receivable ledger (``customer_ledger``); deleting the customer
    removes its ledger history while sales keep a NULL customer reference.
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(50), unique=True, nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    date_added = Column(DateTime, server_default=func.now(), nullable=False)

    ledger_entries = relationship(
        "CustomerLedgerEntry",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CustomerLedgerEntry.id",
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, full_name='{self.full_name}')>"
