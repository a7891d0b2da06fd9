"""
메모리 카탈로그

요금/할인 규칙 스냅샷을 메모리에 보관하는 제공자 (테스트, 파일 카탈로그용)
"""

from datetime import datetime
from typing import Optional, List, Iterable

from ..core.schemas import Rate, DiscountRule, DiscountKind, Product
from .base import RateTableProvider, DiscountRuleProvider


class InMemoryCatalog(RateTableProvider, DiscountRuleProvider):
    """
    메모리 카탈로그

    Example:
        catalog = InMemoryCatalog(
            rates=[Rate(product=Product.BOX_ADVERTISING, unit_amount=10000, effective_from=...)],
            rules=[DiscountRule(id="qty-5", kind=DiscountKind.QUANTITY_TIER, threshold=5, ...)],
        )
    """

    def __init__(
        self,
        rates: Optional[Iterable[Rate]] = None,
        rules: Optional[Iterable[DiscountRule]] = None,
    ):
        self._rates: List[Rate] = list(rates or [])
        self._rules: List[DiscountRule] = list(rules or [])

    @property
    def rates(self) -> List[Rate]:
        return list(self._rates)

    @property
    def rules(self) -> List[DiscountRule]:
        return list(self._rules)

    async def fetch_active_rate(self, product: Product, as_of: datetime) -> Optional[Rate]:
        active = [
            rate for rate in self._rates
            if rate.product == product and rate.is_active(as_of)
        ]
        if not active:
            return None
        return max(active, key=lambda rate: rate.effective_from)

    async def fetch_active_rules(self, product: Product, as_of: datetime) -> List[DiscountRule]:
        return [
            rule for rule in self._rules
            if rule.is_active and rule.is_valid_at(as_of) and rule.applies_to(product)
        ]

    async def find_promo_rules(self, code: str) -> List[DiscountRule]:
        return [
            rule for rule in self._rules
            if rule.kind == DiscountKind.PROMO_CODE and rule.code == code
        ]
