"""
요금표 / 할인 규칙 제공자 인터페이스

저장소 구현체는 이 클래스를 상속받아 fetch_* 메서드를 구현합니다.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from ..core.errors import RateNotFoundError
from ..core.schemas import Rate, DiscountRule, Product, normalize_timestamp


class RateTableProvider(ABC):
    """
    기준 요금 제공자

    Example:
        class MyRates(RateTableProvider):
            async def fetch_active_rate(self, product, as_of):
                row = await self.db.find_rate(product, as_of)
                return Rate.model_validate(row) if row else None
    """

    @abstractmethod
    async def fetch_active_rate(self, product: Product, as_of: datetime) -> Optional[Rate]:
        """
        as_of 시점에 유효한 요금 조회

        Returns:
            Rate 또는 None (해당 시점을 덮는 요금이 없음)
        """
        pass

    async def get_active_rate(self, product: Product, as_of: datetime) -> Rate:
        """
        유효 요금 조회

        Raises:
            RateNotFoundError: 해당 시점의 요금이 없음 (카탈로그 무결성 오류)
        """
        as_of = normalize_timestamp(as_of)
        rate = await self.fetch_active_rate(product, as_of)
        if rate is None or not rate.is_active(as_of):
            raise RateNotFoundError(product.value, as_of)
        return rate


class DiscountRuleProvider(ABC):
    """할인 규칙 제공자"""

    @abstractmethod
    async def fetch_active_rules(self, product: Product, as_of: datetime) -> List[DiscountRule]:
        """as_of 시점에 유효하고 product 또는 'any' 에 해당하는 규칙 조회"""
        pass

    @abstractmethod
    async def find_promo_rules(self, code: str) -> List[DiscountRule]:
        """기간과 무관하게 코드가 일치하는 프로모 규칙 조회 (코드 확인용)"""
        pass

    async def get_active_rules(self, product: Product, as_of: datetime) -> List[DiscountRule]:
        """
        유효 할인 규칙 조회

        저장소 구현과 무관하게 기간/상품/활성 여부를 한 번 더 필터링합니다.
        해당 규칙이 없으면 빈 리스트 (정상)
        """
        as_of = normalize_timestamp(as_of)
        rules = await self.fetch_active_rules(product, as_of)
        return [
            rule for rule in rules
            if rule.is_active and rule.is_valid_at(as_of) and rule.applies_to(product)
        ]
