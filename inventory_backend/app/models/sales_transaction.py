"""
Sale transaction database model.

Immutable audit trail of completed sales; source for reporting.
"""

from sqlalchemy import Column, Integer, Float, String, Text, ForeignKey, DateTime, Enum, CheckConstraint
from sqlalchemy.orm import relationship
from inventory_backend.app.db.session import Base
from inventory_backend.app.models.enums import ItemType, PaymentMethod


class SalesTransaction(Base):
    """
    Sale transaction.

    ``item_name`` and ``price_per_item`` are snapshots taken at sale time;
    ``total_price`` is after discount. Never mutated once written.
    """
    __tablename__ = "sales_transactions"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_sales_quantity_positive"),
        CheckConstraint("discount >= 0", name="ck_sales_discount_non_negative"),
        CheckConstraint("total_price >= 0", name="ck_sales_total_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    transaction_date = Column(DateTime, nullable=False, index=True)

    item_type = Column(
        Enum(ItemType, native_enum=False, values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False,
    )
    item_id = Column(Integer, nullable=False)
    item_name = Column(String(255), nullable=False)

    quantity = Column(Integer, nullable=False)
    price_per_item = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0.0)
    total_price = Column(Float, nullable=False)

    payment_method = Column(
        Enum(PaymentMethod, native_enum=False, values_callable=lambda kinds: [k.value for k in kinds]),
        nullable=False,
        default=PaymentMethod.CASH,
    )
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    notes = Column(Text, nullable=True)

    customer = relationship("Customer", lazy="joined")

    def __repr__(self):
        return f"<SalesTransaction(id={self.id}, item='{self.item_name}', total={self.total_price})>"
