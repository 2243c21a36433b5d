"""
Business settings, logo storage and database backup/restore.
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.exceptions import ValidationFailedError
from inventory_backend.app.db.session import SQLITE_HEADER, Database
from inventory_backend.app.models.setting import Setting
from inventory_backend.app.services.ledger import rollback_quietly

logger = logging.getLogger(__name__)

ALLOWED_LOGO_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg"}
LOGO_SETTING_KEY = "store_logo_path"


async def get_settings(db: AsyncSession) -> Dict[str, str]:
    result = await db.execute(select(Setting))
    return {setting.key: setting.value for setting in result.scalars().all()}


async def update_settings(db: AsyncSession, values: Dict[str, str]) -> Dict[str, str]:
    """Upsert every key in one transaction."""
    try:
        for key, value in values.items():
            await db.merge(Setting(key=key, value=None if value is None else str(value)))
        await db.commit()
    except Exception:
        await rollback_quietly(db, "settings update")
        raise
    return await get_settings(db)


def validate_logo(filename: str, content: bytes, max_bytes: int) -> str:
    """Return the normalized extension of an acceptable logo upload."""
    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_LOGO_EXTENSIONS:
        raise ValidationFailedError(
            "Only image files are allowed for the logo",
            details={"allowed": sorted(ALLOWED_LOGO_EXTENSIONS)},
        )
    if not content:
        raise ValidationFailedError("Logo file is empty")
    if len(content) > max_bytes:
        raise ValidationFailedError(
            "Logo file is too large",
            details={"max_bytes": max_bytes, "size": len(content)},
        )
    return extension


async def store_logo(
    db: AsyncSession,
    filename: str,
    content: bytes,
    uploads_dir: str,
    max_bytes: int,
) -> str:
    """Write the logo under ``uploads_dir`` and point the logo setting at it."""
    extension = validate_logo(filename, content, max_bytes)

    directory = Path(uploads_dir)
    directory.mkdir(parents=True, exist_ok=True)
    stored_name = f"logo-{uuid.uuid4().hex}{extension}"
    await asyncio.to_thread((directory / stored_name).write_bytes, content)

    public_path = f"/uploads/{stored_name}"
    await update_settings(db, {LOGO_SETTING_KEY: public_path})
    logger.info("Store logo updated", extra={"path": public_path})
    return public_path


def validate_backup(content: bytes, max_bytes: int) -> None:
    if not content:
        raise ValidationFailedError("No database file was uploaded")
    if len(content) > max_bytes:
        raise ValidationFailedError("Database file is too large", details={"max_bytes": max_bytes})
    if not content.startswith(SQLITE_HEADER):
        raise ValidationFailedError("Uploaded file is not a valid SQLite database")


async def restore_database(
    database: Database,
    content: bytes,
    max_bytes: int,
    admin_username: str,
    admin_password: str,
) -> None:
    """Replace the whole store; validated before the maintenance window opens."""
    validate_backup(content, max_bytes)
    await database.restore_from(content, admin_username, admin_password)
