"""
Generation history API routes.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import trace_span
from common.db.session import get_db, get_db_readonly
from common.models.pagination import Pagination
from packages.auth.dependencies import get_current_active_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.generations.models.domain.generation import (
    DEFAULT_COLOR_TONE,
    GenerationCreateModel,
)
from packages.generations.models.schemas.generation import (
    ClearHistoryResponse,
    CreateGenerationRequest,
    CreateGenerationResponse,
    DeleteGenerationResponse,
    GenerationListResponse,
    GenerationResponse,
    GenerationSchema,
)
from packages.generations.services.generation_service import GenerationService

router = APIRouter()


# ============================================================================
# Collection
# ============================================================================


@router.get("", response_model=GenerationListResponse)
@trace_span
async def list_history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db_readonly),
):
    generations, total = await GenerationService(db_session).list_generations(
        current_user.user_id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return GenerationListResponse(
        generations=[GenerationSchema.model_validate(g) for g in generations],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "", response_model=CreateGenerationResponse, status_code=status.HTTP_201_CREATED
)
@trace_span
async def create_history_record(
    request: CreateGenerationRequest,
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    """Record a completed generation; debits one unit of quota on a best-effort basis."""
    generation = await GenerationService(db_session).record_generation(
        GenerationCreateModel(
            user_id=current_user.user_id,
            model_image=request.model_image,
            outfit_images=request.outfit_images or [],
            pose=request.pose,
            style=request.style,
            lighting=request.lighting,
            background=request.background,
            color_tone=request.color_tone or DEFAULT_COLOR_TONE,
            count=request.count or 1,
            generated_images=request.generated_images or [],
            time=request.time or "0",
        )
    )
    return CreateGenerationResponse(
        message="Record created", generation=GenerationSchema.model_validate(generation)
    )


@router.delete("/clear", response_model=ClearHistoryResponse)
@trace_span
async def clear_history(
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    deleted_count = await GenerationService(db_session).clear_history(
        current_user.user_id
    )
    return ClearHistoryResponse(
        message="History cleared", deleted_count=deleted_count
    )


# ============================================================================
# Single record
# ============================================================================


@router.get("/{generation_id}", response_model=GenerationResponse)
@trace_span
async def get_history_record(
    generation_id: int,
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db_readonly),
):
    generation = await GenerationService(db_session).get_generation(
        current_user.user_id, generation_id
    )
    return GenerationResponse(generation=GenerationSchema.model_validate(generation))


@router.delete("/{generation_id}", response_model=DeleteGenerationResponse)
@trace_span
async def delete_history_record(
    generation_id: int,
    current_user: AuthenticatedUser = Depends(get_current_active_user),
    db_session: AsyncSession = Depends(get_db),
):
    await GenerationService(db_session).delete_generation(
        current_user.user_id, generation_id
    )
    return DeleteGenerationResponse(message="Record deleted")
