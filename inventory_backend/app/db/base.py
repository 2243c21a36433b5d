"""
Model registry.

Import all models here so they are registered with Base before
``create_all`` runs or any relationship is resolved.
"""

from inventory_backend.app.db.session import Base  # noqa: F401
from inventory_backend.app.models.category import Category  # noqa: F401
from inventory_backend.app.models.customer import Customer  # noqa: F401
from inventory_backend.app.models.partner import Partner  # noqa: F401
from inventory_backend.app.models.ledger_entry import CustomerLedgerEntry, PartnerLedgerEntry  # noqa: F401
from inventory_backend.app.models.product import Product  # noqa: F401
from inventory_backend.app.models.phone import Phone  # noqa: F401
from inventory_backend.app.models.sales_transaction import SalesTransaction  # noqa: F401
from inventory_backend.app.models.setting import Setting  # noqa: F401
from inventory_backend.app.models.user import Role, User  # noqa: F401
from inventory_backend.app.models.installment import (  # noqa: F401
    InstallmentSale,
    InstallmentPayment,
    InstallmentCheck,
)
