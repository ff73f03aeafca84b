from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledgerwise.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(request: Request, db: AsyncSession = Depends(get_db)):
    """Readiness: database reachable; reports whether keyword tables are loaded yet."""
    state = getattr(request.app.state, "keyword_state", None)
    keywords = {
        "category_keywords_loaded": bool(state and state.table.is_loaded),
        "recurring_keywords_loaded": bool(state and state.recurring.is_loaded),
    }
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "database": "disconnected", "error": type(e).__name__, **keywords},
        )
    return {"status": "ready", "database": "connected", **keywords}
