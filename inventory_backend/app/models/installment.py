"""
Installment sale database models.

An installment sale ties one phone unit to a customer with a down payment,
a monthly payment schedule and optional post-dated checks.
"""

from sqlalchemy import Column, Integer, Float, String, Text, ForeignKey, Date, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from inventory_backend.app.db.session import Base
from inventory_backend.app.models.enums import PaymentStatus, CheckStatus


def _values(enum_cls):
    return [member.value for member in enum_cls]


class InstallmentSale(Base):
    __tablename__ = "installment_sales"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    phone_id = Column(Integer, ForeignKey("phones.id", ondelete="CASCADE"), nullable=False, index=True)

    actual_sale_price = Column(Float, nullable=False)
    down_payment = Column(Float, nullable=False, default=0.0)
    number_of_installments = Column(Integer, nullable=False)
    installment_amount = Column(Float, nullable=False)
    installments_start_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    date_created = Column(DateTime, server_default=func.now(), nullable=False)

    customer = relationship("Customer", lazy="joined")
    phone = relationship("Phone", lazy="joined")
    payments = relationship(
        "InstallmentPayment",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="InstallmentPayment.installment_number",
        lazy="selectin",
    )
    checks = relationship(
        "InstallmentCheck",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="InstallmentCheck.due_date",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<InstallmentSale(id={self.id}, customer_id={self.customer_id}, phone_id={self.phone_id})>"


class InstallmentPayment(Base):
    __tablename__ = "installment_payments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("installment_sales.id", ondelete="CASCADE"), nullable=False, index=True)
    installment_number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount_due = Column(Float, nullable=False)
    payment_date = Column(Date, nullable=True)
    status = Column(
        Enum(PaymentStatus, native_enum=False, values_callable=_values),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )

    sale = relationship("InstallmentSale", back_populates="payments")


class InstallmentCheck(Base):
    __tablename__ = "installment_checks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sale_id = Column(Integer, ForeignKey("installment_sales.id", ondelete="CASCADE"), nullable=False, index=True)
    check_number = Column(String(100), nullable=False)
    bank_name = Column(String(255), nullable=False)
    due_date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(
        Enum(CheckStatus, native_enum=False, values_callable=_values),
        nullable=False,
        default=CheckStatus.WITH_CUSTOMER,
    )

    sale = relationship("InstallmentSale", back_populates="checks")
