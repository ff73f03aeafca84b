from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from ledgerwise.api.middleware.error_handler import (
    handle_generic_error,
    handle_integrity_error,
    handle_ledger_error,
    handle_validation_error,
)
from ledgerwise.api.middleware.logging import RequestLoggingMiddleware
from ledgerwise.api.v1 import router as v1_router
from ledgerwise.api.v1.health import router as health_router
from ledgerwise.config import settings
from ledgerwise.core.exceptions import LedgerError
from ledgerwise.core.logging import setup_logging
from ledgerwise.db.session import init_db
from ledgerwise.services.keyword_state import KeywordState


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_json)
    if settings.db_create_tables:
        await init_db()
    # Loaded lazily by the first request that categorizes.
    app.state.keyword_state = KeywordState()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Ledgerwise API",
        description="Household ledger import, categorization and period analytics",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Most specific first
    app.add_exception_handler(LedgerError, handle_ledger_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
