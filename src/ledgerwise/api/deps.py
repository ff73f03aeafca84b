"""FastAPI dependency injection for the database and services."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.categorization.ai import AIClassifier
from ledgerwise.db.session import get_db
from ledgerwise.services.analytics import AnalyticsService
from ledgerwise.services.budgets import BudgetService
from ledgerwise.services.categorization import CategorizationService
from ledgerwise.services.cleanup import CleanupService
from ledgerwise.services.importer import ImportService
from ledgerwise.services.keyword_state import KeywordState
from ledgerwise.services.recurring import RecurringService
from ledgerwise.services.settings import SettingsService


def get_keyword_state(request: Request) -> KeywordState:
    """The process-wide keyword state created at startup."""
    return request.app.state.keyword_state


def get_classifier() -> AIClassifier:
    return AIClassifier()


async def get_import_service(
    db: AsyncSession = Depends(get_db),
    state: KeywordState = Depends(get_keyword_state),
) -> ImportService:
    return ImportService(db, state)


async def get_categorization_service(
    db: AsyncSession = Depends(get_db),
    state: KeywordState = Depends(get_keyword_state),
    classifier: AIClassifier = Depends(get_classifier),
) -> CategorizationService:
    return CategorizationService(db, state, classifier)


async def get_recurring_service(
    db: AsyncSession = Depends(get_db),
    state: KeywordState = Depends(get_keyword_state),
) -> RecurringService:
    return RecurringService(db, state)


async def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


async def get_settings_service(db: AsyncSession = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


async def get_cleanup_service(db: AsyncSession = Depends(get_db)) -> CleanupService:
    return CleanupService(db)


async def get_budget_service(db: AsyncSession = Depends(get_db)) -> BudgetService:
    return BudgetService(db)
