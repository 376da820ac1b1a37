"""
Domain models for the membership catalog.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator

from common.core.telemetry import get_logger

logger = get_logger(__name__)


class MembershipLevel(BaseModel):
    """A priced tier granting a monthly quota and a feature set."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    level: str
    name: str
    price: Decimal
    yearly_price: Decimal
    monthly_quota: int
    max_resolution: str
    priority: int = 0
    commercial_use: bool = False
    watermark: bool = True
    features: List[str] = []
    is_active: bool = True
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("features", mode="before")
    @classmethod
    def parse_features(cls, v):
        # Stored as JSON text; a corrupt row must not break the catalog
        if v is None:
            return []
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError:
                logger.warning("Membership level has malformed features JSON")
                return []
        if not isinstance(v, list):
            return []
        return [str(item) for item in v]

    def price_for(self, duration_months: int) -> Decimal:
        """Order amount for a membership purchase.

        Twelve months is billed at the yearly bundle price.
        """
        if duration_months == 12:
            return self.yearly_price
        return self.price * duration_months


class MembershipLevelCreateModel(BaseModel):
    """Catalog row as written by the seed."""

    level: str
    name: str
    price: Decimal
    yearly_price: Decimal
    monthly_quota: int
    max_resolution: str
    priority: int = 0
    commercial_use: bool = False
    watermark: bool = True
    features: str = "[]"
    is_active: bool = True
    sort_order: int = 0

    @field_validator("features", mode="before")
    @classmethod
    def encode_features(cls, v):
        if isinstance(v, (list, tuple)):
            return json.dumps(list(v), ensure_ascii=False)
        return v


class MembershipLevelUpdateModel(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = None
    yearly_price: Optional[Decimal] = None
    monthly_quota: Optional[int] = None
    max_resolution: Optional[str] = None
    priority: Optional[int] = None
    commercial_use: Optional[bool] = None
    watermark: Optional[bool] = None
    features: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("features", mode="before")
    @classmethod
    def encode_features(cls, v):
        if isinstance(v, (list, tuple)):
            return json.dumps(list(v), ensure_ascii=False)
        return v
