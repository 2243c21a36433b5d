"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from inventory_backend.app.api.v1.endpoints import (
    auth, users, sales, customers, partners, catalog,
    installments, reports, dashboard, settings,
)

router = APIRouter()

# Authentication and staff accounts
router.include_router(auth.router)
router.include_router(users.router)

# Sales and catalogue
router.include_router(sales.router)
router.include_router(catalog.router)
router.include_router(installments.router)

# Accounts and their ledgers
router.include_router(customers.router)
router.include_router(partners.router)

# Reporting
router.include_router(reports.router)
router.include_router(dashboard.router)

# Business settings, logo, backup and restore
router.include_router(settings.router)
