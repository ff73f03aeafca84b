"""API version 1 routes."""

from fastapi import APIRouter

from ledgerwise.api.v1 import analytics, budgets, imports, settings, transactions

router = APIRouter(prefix="/api/v1")

router.include_router(imports.router)
router.include_router(transactions.router)
router.include_router(analytics.router)
router.include_router(settings.router)
router.include_router(budgets.router)
