"""
Serialized phone unit database model.
"""

from sqlalchemy import Column, Integer, Float, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from inventory_backend.app.db.session import Base
from inventory_backend.app.models.enums import PhoneStatus


class Phone(Base):
    """
    Single phone unit identified by its IMEI.

    Lifecycle: ``in stock`` -> ``sold`` (or ``sold (installment)``). The
    status column also accepts free text entered by staff (e.g. repairs);
    only ``in stock`` units can be sold.
    """
    __tablename__ = "phones"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    model = Column(String(255), nullable=False)
    color = Column(String(100), nullable=True)
    storage = Column(String(50), nullable=True)
    ram = Column(String(50), nullable=True)
    imei = Column(String(16), unique=True, index=True, nullable=False)
    battery_health = Column(Integer, nullable=True)
    condition = Column(String(100), nullable=True)

    purchase_price = Column(Float, nullable=False, default=0.0)
    sale_price = Column(Float, nullable=True)
    seller_name = Column(String(255), nullable=True)

    purchase_date = Column(DateTime, nullable=True)
    sale_date = Column(DateTime, nullable=True)
    register_date = Column(DateTime, server_default=func.now(), nullable=False)

    status = Column(String(100), nullable=False, default=PhoneStatus.IN_STOCK.value)
    notes = Column(Text, nullable=True)

    supplier_id = Column(Integer, ForeignKey("partners.id", ondelete="SET NULL"), nullable=True, index=True)
    supplier = relationship("Partner", lazy="joined")

    @property
    def display_name(self) -> str:
        return f"{self.model} (IMEI: {self.imei})"

    def __repr__(self):
        return f"<Phone(id={self.id}, imei='{self.imei}', status='{self.status}')>"
