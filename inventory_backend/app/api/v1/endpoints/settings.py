"""
Business settings, logo upload and database backup/restore endpoints.

Uploads arrive as the raw request body.
"""

from typing import Dict

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from inventory_backend.app.core.config import settings
from inventory_backend.app.db.session import get_db
from inventory_backend.app.schemas.settings import LogoUploadResponse, MessageResponse
from inventory_backend.app.services import settings_service
from inventory_backend.app.utils.calendar import jalali_today

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=Dict[str, str])
async def get_settings(db: AsyncSession = Depends(get_db)):
    values = await settings_service.get_settings(db)
    return {key: value or "" for key, value in values.items()}


@router.post("", response_model=Dict[str, str])
async def update_settings(values: Dict[str, str], db: AsyncSession = Depends(get_db)):
    """Upsert every given key in a single transaction."""
    updated = await settings_service.update_settings(db, values)
    return {key: value or "" for key, value in updated.items()}


@router.post("/upload-logo", response_model=LogoUploadResponse)
async def upload_logo(
    request: Request,
    filename: str = Query(..., description="Original file name, used for the extension"),
    db: AsyncSession = Depends(get_db)
):
    content = await request.body()
    path = await settings_service.store_logo(
        db, filename, content, settings.uploads_dir, settings.max_logo_bytes
    )
    return LogoUploadResponse(message="Logo uploaded successfully", file_path=path)


@router.get("/backup")
async def download_backup(request: Request):
    """Download a consistent copy of the SQLite database file."""
    data = await request.app.state.database.read_backup()
    name = f"shop-backup-{jalali_today().strftime('%Y-%m-%d')}.db"
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )


@router.post("/restore", response_model=MessageResponse)
async def restore_backup(request: Request):
    """
    Replace the whole database with an uploaded backup.

    The body must be a SQLite database file. Restoring waits for in-flight
    requests and holds new ones until the new file is open.
    """
    content = await request.body()
    await settings_service.restore_database(
        request.app.state.database,
        content,
        settings.max_backup_bytes,
        settings.default_admin_username,
        settings.default_admin_password,
    )
    return MessageResponse(message="Database restored successfully")
