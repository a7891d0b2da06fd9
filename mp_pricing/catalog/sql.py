"""
SQL 기반 요금표 / 할인 규칙 제공자

SQLAlchemy 비동기 세션으로 rates, discount_rules 테이블을 조회합니다.
"""

import logging
from datetime import datetime
from typing import Optional, List
from sqlalchemy import select, or_

from ..core.database import DatabaseManager
from ..core.models import RateRecord, DiscountRuleRecord
from ..core.schemas import Rate, DiscountRule, DiscountKind, Product, ANY_PRODUCT
from .base import RateTableProvider, DiscountRuleProvider

logger = logging.getLogger(__name__)


class SqlCatalog(RateTableProvider, DiscountRuleProvider):
    """
    SQL 카탈로그

    Example:
        db = DatabaseManager("postgresql+asyncpg://localhost/mp_pricing")
        catalog = SqlCatalog(db)

        rate = await catalog.get_active_rate(Product.BOX_ADVERTISING, utcnow())
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    async def fetch_active_rate(self, product: Product, as_of: datetime) -> Optional[Rate]:
        """유효 요금 조회"""
        async with self.db.get_session() as session:
            result = await session.execute(
                select(RateRecord)
                .where(RateRecord.product == product)
                .where(RateRecord.effective_from <= as_of)
                .where(or_(RateRecord.effective_to.is_(None), RateRecord.effective_to > as_of))
                .order_by(RateRecord.effective_from.desc())
            )
            records = list(result.scalars().all())

        if not records:
            return None
        if len(records) > 1:
            logger.warning(
                f"{len(records)} active rates for {product.value} at {as_of.isoformat()}, "
                f"using {records[0].id}"
            )
        return records[0].to_rate()

    async def fetch_active_rules(self, product: Product, as_of: datetime) -> List[DiscountRule]:
        """유효 할인 규칙 조회"""
        async with self.db.get_session() as session:
            result = await session.execute(
                select(DiscountRuleRecord)
                .where(DiscountRuleRecord.product.in_([product.value, ANY_PRODUCT]))
                .where(DiscountRuleRecord.is_active == True)
                .where(DiscountRuleRecord.valid_from <= as_of)
                .where(or_(DiscountRuleRecord.valid_to.is_(None), DiscountRuleRecord.valid_to > as_of))
            )
            return [record.to_rule() for record in result.scalars().all()]

    async def find_promo_rules(self, code: str) -> List[DiscountRule]:
        """코드가 일치하는 프로모 규칙 조회"""
        async with self.db.get_session() as session:
            result = await session.execute(
                select(DiscountRuleRecord)
                .where(DiscountRuleRecord.kind == DiscountKind.PROMO_CODE)
                .where(DiscountRuleRecord.code == code)
            )
            return [record.to_rule() for record in result.scalars().all()]
