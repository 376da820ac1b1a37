"""
Service for generation history.
"""

from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import NotFoundError, ValidationError
from common.core.telemetry import trace_span, get_logger
from common.core.timeutils import utcnow
from common.models.pagination import page_offset
from packages.generations.models.domain.enums import HistorySortField, SortOrder
from packages.generations.models.domain.generation import (
    Generation,
    GenerationCreateModel,
)
from packages.generations.repositories.generation_repository import (
    GenerationRepository,
)
from packages.quota.services.quota_service import QuotaService

logger = get_logger(__name__)


class GenerationService:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.generation_repo = GenerationRepository(db_session)
        self.quota_service = QuotaService(db_session)

    @trace_span
    async def list_generations(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        sort_by: str = HistorySortField.CREATED_AT.value,
        sort_order: str = SortOrder.DESC.value,
    ) -> Tuple[List[Generation], int]:
        try:
            sort_field = HistorySortField(sort_by)
            direction = SortOrder(sort_order)
        except ValueError:
            raise ValidationError("Invalid sort parameters")

        return await self.generation_repo.list_for_user(
            user_id,
            offset=page_offset(page, limit),
            limit=limit,
            sort_by=sort_field,
            sort_order=direction,
        )

    @trace_span
    async def get_generation(self, user_id: int, generation_id: int) -> Generation:
        generation = await self.generation_repo.get(generation_id, user_id=user_id)
        if not generation:
            raise NotFoundError("Record not found")
        return generation

    @trace_span
    async def record_generation(self, create_model: GenerationCreateModel) -> Generation:
        """
        Store a completed generation and debit one unit of quota.

        The record is kept even if the debit fails; the failure is only logged.
        """
        if create_model.completed_at is None:
            create_model = create_model.model_copy(update={"completed_at": utcnow()})
        generation = await self.generation_repo.create(create_model)
        logger.info(
            "Generation recorded",
            extra={"user_id": generation.user_id, "generation_id": generation.id},
        )

        try:
            await self.quota_service.consume(
                generation.user_id, amount=1, generation_id=generation.id
            )
        except Exception as e:
            logger.warning(
                "Quota debit failed for recorded generation",
                extra={
                    "user_id": generation.user_id,
                    "generation_id": generation.id,
                    "error": str(e),
                },
            )
        return generation

    @trace_span
    async def delete_generation(self, user_id: int, generation_id: int) -> None:
        generation = await self.get_generation(user_id, generation_id)
        await self.generation_repo.delete(generation.id)

    @trace_span
    async def clear_history(self, user_id: int) -> int:
        deleted_count = await self.generation_repo.delete_for_user(user_id)
        logger.info(
            "Cleared generation history",
            extra={"user_id": user_id, "deleted_count": deleted_count},
        )
        return deleted_count
