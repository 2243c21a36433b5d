"""
Domain enumerations.

Shared by models, schemas and services of the shop ledger.
"""

import enum


class AccountKind(str, enum.Enum):
    """
    Ledger-bearing account kinds.

    Kinds:
        CUSTOMER: receivable side, balance grows with debits
        PARTNER: payable side (suppliers), balance grows with credits
    """
    CUSTOMER = "customer"
    PARTNER = "partner"


class ItemType(str, enum.Enum):
    """Sellable item variants as stored on sale transactions."""
    INVENTORY = "inventory"
    PHONE = "phone"


class PaymentMethod(str, enum.Enum):
    """How the customer settled a sale. Informational; does not drive ledger posting."""
    CASH = "cash"
    CREDIT = "credit"


class PhoneStatus(str, enum.Enum):
    """
    Well-known phone unit statuses.

    The status column is free text; only IN_STOCK units are sellable.
    """
    IN_STOCK = "in stock"
    SOLD = "sold"
    SOLD_INSTALLMENT = "sold (installment)"


class PaymentStatus(str, enum.Enum):
    PAID = "paid"
    UNPAID = "unpaid"


class CheckStatus(str, enum.Enum):
    IN_COLLECTION = "in collection"
    COLLECTED = "collected"
    BOUNCED = "bounced"
    WITH_CUSTOMER = "with customer"
    VOID = "void"


class InstallmentSaleStatus(str, enum.Enum):
    PAYING = "paying"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class RoleName(str, enum.Enum):
    """
    Seeded role names.

    Roles:
        ADMIN: manages users, settings, backup/restore
        SALESPERSON: day to day sales and bookkeeping
    """
    ADMIN = "Admin"
    SALESPERSON = "Salesperson"
