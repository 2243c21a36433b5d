"""
Bulk product database model.

Quantity-tracked sellable items.
"""

from sqlalchemy import Column, Integer, Float, String, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from inventory_backend.app.db.session import Base


class Product(Base):
    """
    Bulk product.

    Stock is decremented by sales and never goes below zero; ``sale_count``
    accumulates every unit ever sold.
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    purchase_price = Column(Float, nullable=False, default=0.0)
    selling_price = Column(Float, nullable=False, default=0.0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    sale_count = Column(Integer, nullable=False, default=0)

    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    supplier_id = Column(Integer, ForeignKey("partners.id", ondelete="SET NULL"), nullable=True, index=True)

    date_added = Column(DateTime, server_default=func.now(), nullable=False)

    category = relationship("Category", lazy="joined")
    supplier = relationship("Partner", lazy="joined")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock_quantity})>"
