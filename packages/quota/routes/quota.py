from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.db.session import get_db
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.quota.models.schemas.quota import (
    QuotaLedgerEntrySchema,
    QuotaLedgerResponse,
    QuotaResponse,
    QuotaSchema,
)
from packages.quota.services.quota_service import QuotaService

router = APIRouter()


@router.get("", response_model=QuotaResponse)
@trace_span
async def get_quota(
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    """Current quota; the first call creates the free allowance."""
    quota = await QuotaService(db_session).get_quota(current_user.user_id)
    return QuotaResponse(quota=QuotaSchema.model_validate(quota))


@router.get("/ledger", response_model=QuotaLedgerResponse)
@trace_span
async def list_quota_ledger(
    limit: int = Query(50, ge=1, le=200),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    entries = await QuotaService(db_session).list_entries(
        current_user.user_id, limit=limit
    )
    return QuotaLedgerResponse(
        entries=[QuotaLedgerEntrySchema.model_validate(entry) for entry in entries]
    )
