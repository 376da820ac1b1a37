"""
Seed the membership level catalog.

    python -m packages.membership.seed [--deactivate-missing]
"""

import argparse
import asyncio
from decimal import Decimal
from typing import List

from common.core.telemetry import get_logger
from common.db.scoped import transaction
from packages.membership.models.domain.membership_level import (
    MembershipLevel,
    MembershipLevelCreateModel,
)
from packages.membership.services.membership_service import MembershipService

logger = get_logger(__name__)


DEFAULT_MEMBERSHIP_LEVELS: List[MembershipLevelCreateModel] = [
    MembershipLevelCreateModel(
        level="BRONZE",
        name="青铜会员",
        price=Decimal("29.90"),
        yearly_price=Decimal("299.00"),
        monthly_quota=50,
        max_resolution="1024x1024",
        priority=1,
        commercial_use=False,
        watermark=True,
        features=["每月50次生成额度", "1024x1024分辨率", "标准生成速度", "带水印图片"],
        sort_order=1,
    ),
    MembershipLevelCreateModel(
        level="SILVER",
        name="白银会员",
        price=Decimal("59.90"),
        yearly_price=Decimal("599.00"),
        monthly_quota=150,
        max_resolution="1024x1024",
        priority=2,
        commercial_use=False,
        watermark=False,
        features=[
            "每月150次生成额度",
            "1024x1024分辨率",
            "优先生成速度",
            "无水印图片",
            "历史记录永久保存",
        ],
        sort_order=2,
    ),
    MembershipLevelCreateModel(
        level="GOLD",
        name="黄金会员",
        price=Decimal("99.90"),
        yearly_price=Decimal("999.00"),
        monthly_quota=500,
        max_resolution="2048x2048",
        priority=3,
        commercial_use=True,
        watermark=False,
        features=[
            "每月500次生成额度",
            "2048x2048高分辨率",
            "极速生成",
            "无水印图片",
            "商业使用授权",
            "专属客服支持",
        ],
        sort_order=3,
    ),
    MembershipLevelCreateModel(
        level="PLATINUM",
        name="铂金会员",
        price=Decimal("199.90"),
        yearly_price=Decimal("1999.00"),
        monthly_quota=2000,
        max_resolution="2048x2048",
        priority=4,
        commercial_use=True,
        watermark=False,
        features=[
            "每月2000次生成额度",
            "2048x2048高分辨率",
            "极速生成",
            "无水印图片",
            "商业使用授权",
            "优先客服支持",
            "API接口访问",
        ],
        sort_order=4,
    ),
    MembershipLevelCreateModel(
        level="DIAMOND",
        name="钻石会员",
        price=Decimal("499.90"),
        yearly_price=Decimal("4999.00"),
        monthly_quota=10000,
        max_resolution="4096x4096",
        priority=5,
        commercial_use=True,
        watermark=False,
        features=[
            "每月10000次生成额度",
            "4096x4096超高分辨率",
            "极速生成",
            "无水印图片",
            "商业使用授权",
            "专属客服经理",
            "API接口访问",
            "定制化服务",
        ],
        sort_order=5,
    ),
]


async def seed_membership_levels(
    levels: List[MembershipLevelCreateModel] = DEFAULT_MEMBERSHIP_LEVELS,
    deactivate_missing: bool = False,
) -> List[MembershipLevel]:
    async with transaction():
        seeded = await MembershipService().seed_levels(
            levels, deactivate_missing=deactivate_missing
        )

    for level in seeded:
        logger.info(
            f"{level.name} ({level.level}): {level.price}/month, "
            f"{level.yearly_price}/year, {level.monthly_quota} generations/month"
        )
    return seeded


def main():
    parser = argparse.ArgumentParser(description="Seed membership levels")
    parser.add_argument(
        "--deactivate-missing",
        action="store_true",
        help="Deactivate active levels that are not in the default catalog",
    )
    args = parser.parse_args()
    asyncio.run(seed_membership_levels(deactivate_missing=args.deactivate_missing))


if __name__ == "__main__":
    main()
