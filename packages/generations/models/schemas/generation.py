"""
API schemas for generation history.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from common.models.pagination import Pagination
from packages.generations.models.domain.enums import GenerationStatus


class CreateGenerationRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    model_image: Optional[str] = None
    outfit_images: Optional[List[str]] = None
    pose: Optional[str] = None
    style: Optional[str] = None
    lighting: Optional[str] = None
    background: Optional[str] = None
    color_tone: Optional[str] = None
    count: Optional[int] = None
    generated_images: Optional[List[str]] = None
    time: Optional[str] = None


class GenerationSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    user_id: int
    model_image: Optional[str] = None
    outfit_images: List[str]
    pose: Optional[str] = None
    style: Optional[str] = None
    lighting: Optional[str] = None
    background: Optional[str] = None
    color_tone: str
    count: int
    generated_images: List[str]
    time: str
    status: GenerationStatus
    completed_at: Optional[datetime] = None
    created_at: datetime


class GenerationListResponse(BaseModel):
    generations: List[GenerationSchema]
    pagination: Pagination


class GenerationResponse(BaseModel):
    generation: GenerationSchema


class CreateGenerationResponse(BaseModel):
    message: str
    generation: GenerationSchema


class DeleteGenerationResponse(BaseModel):
    message: str


class ClearHistoryResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    deleted_count: int
