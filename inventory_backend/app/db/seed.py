"""
Reference data seeding.

Idempotent: every row is inserted only when missing, so the same routine runs
after a destructive boot and after a restore.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.security import get_password_hash
from inventory_backend.app.models.category import Category
from inventory_backend.app.models.enums import RoleName
from inventory_backend.app.models.partner import Partner
from inventory_backend.app.models.setting import Setting
from inventory_backend.app.models.user import Role, User

logger = logging.getLogger(__name__)

MOBILE_PHONE_CATEGORY = "Mobile Phones"
DEFAULT_CATEGORIES = [MOBILE_PHONE_CATEGORY, "Accessories", "Parts"]
DEFAULT_SUPPLIER_NAME = "Default Supplier"

DEFAULT_SETTINGS = {
    "store_name": "My Shop",
    "store_address_line1": "",
    "store_address_line2": "",
    "store_city_state_zip": "",
    "store_phone": "",
    "store_email": "",
    "store_logo_path": "",
}


async def seed_reference_data(db: AsyncSession, admin_username: str, admin_password: str) -> None:
    """Insert default categories, supplier, roles, admin user and settings."""
    existing = set((await db.execute(select(Category.name))).scalars().all())
    for name in DEFAULT_CATEGORIES:
        if name not in existing:
            db.add(Category(name=name))
            logger.info("Default category '%s' created", name)

    supplier = await db.execute(
        select(Partner.id).where(Partner.partner_name == DEFAULT_SUPPLIER_NAME, Partner.partner_type == "Supplier")
    )
    if supplier.first() is None:
        db.add(Partner(partner_name=DEFAULT_SUPPLIER_NAME, partner_type="Supplier"))

    roles = {role.name: role for role in (await db.execute(select(Role))).scalars().all()}
    for role_name in RoleName:
        if role_name.value not in roles:
            role = Role(name=role_name.value)
            db.add(role)
            roles[role_name.value] = role
    await db.flush()

    admin = await db.execute(select(User.id).where(User.username == admin_username))
    if admin.first() is None:
        db.add(User(
            username=admin_username,
            password_hash=get_password_hash(admin_password),
            role_id=roles[RoleName.ADMIN.value].id,
        ))
        logger.info("Default admin user '%s' created", admin_username)

    present = set((await db.execute(select(Setting.key))).scalars().all())
    for key, value in DEFAULT_SETTINGS.items():
        if key not in present:
            db.add(Setting(key=key, value=value))

    await db.commit()
