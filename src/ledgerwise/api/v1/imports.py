"""Statement import endpoint."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ledgerwise.api.deps import get_import_service
from ledgerwise.schemas.importing import ImportRequest, ImportResult
from ledgerwise.services.importer import ImportService

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post(
    "/{account_id}",
    response_model=ImportResult,
    status_code=status.HTTP_201_CREATED,
    summary="Import parsed statement rows into an account",
    description="""
    Rows already stored for the account (same reference, or same date, amount
    and description) are skipped as duplicates. Rows that fail to parse are
    reported individually and do not abort the batch. Every new row is
    categorized from the keyword table and flagged recurring when its
    description contains a recurring keyword.
    """,
)
async def import_statement(
    account_id: UUID,
    payload: ImportRequest,
    service: ImportService = Depends(get_import_service),
) -> ImportResult:
    return await service.import_rows(account_id, payload.rows)
