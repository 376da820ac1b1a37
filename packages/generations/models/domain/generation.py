"""
Domain models for generation history.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator

from packages.generations.models.domain.enums import GenerationStatus

DEFAULT_COLOR_TONE = "冷暖平衡"


class Generation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    model_image: Optional[str] = None
    outfit_images: List[str] = []
    pose: Optional[str] = None
    style: Optional[str] = None
    lighting: Optional[str] = None
    background: Optional[str] = None
    color_tone: str = DEFAULT_COLOR_TONE
    count: int = 1
    generated_images: List[str] = []
    time: str = "0"
    status: GenerationStatus
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("outfit_images", "generated_images", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class GenerationCreateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    user_id: int
    model_image: Optional[str] = None
    outfit_images: List[str] = []
    pose: Optional[str] = None
    style: Optional[str] = None
    lighting: Optional[str] = None
    background: Optional[str] = None
    color_tone: str = DEFAULT_COLOR_TONE
    count: int = 1
    generated_images: List[str] = []
    time: str = "0"
    status: GenerationStatus = GenerationStatus.COMPLETED
    completed_at: Optional[datetime] = None
