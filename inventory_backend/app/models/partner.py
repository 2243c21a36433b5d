"""
Partner (supplier) database model.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from inventory_backend.app.db.session import Base


class Partner(Base):
    """
    Business partner, usually a supplier.

    Owns a payable ledger (``partner_ledger``). Products and phones bought
    from a partner keep a NULL supplier reference once the partner is gone.
    """
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    partner_name = Column(String(255), nullable=False)
    partner_type = Column(String(50), nullable=False, default="Supplier", server_default="Supplier")
    contact_person = Column(String(255), nullable=True)
    phone_number = Column(String(50), unique=True, nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    date_added = Column(DateTime, server_default=func.now(), nullable=False)

    ledger_entries = relationship(
        "PartnerLedgerEntry",
        back_populates="partner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PartnerLedgerEntry.id",
    )

    def __repr__(self):
        return f"<Partner(id={self.id}, partner_name='{self.partner_name}', type='{self.partner_type}')>"
