"""
가격 계산기

기준 요금과 할인 규칙을 조합하여 가격 내역을 계산합니다.
"""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional, List, Union, Sequence, Collection, TYPE_CHECKING

from .errors import PricingError, InvalidRequestError
from .resolver import DiscountResolver
from .schemas import (
    Rate,
    DiscountRule,
    Product,
    AppliedDiscount,
    PriceBreakdown,
    PriceItem,
    normalize_timestamp,
)

if TYPE_CHECKING:
    from ..catalog.base import RateTableProvider, DiscountRuleProvider

logger = logging.getLogger(__name__)


PromoCodeInput = Optional[Union[str, Sequence[str]]]


def effect_amount(rule: DiscountRule, base_amount: int) -> int:
    """
    규칙 하나의 할인 금액 (항상 원래 기준 금액에 대해 계산)

    - 퍼센트: round_half_even(base × percent / 100), max_discount 로 상한
    - 정액: amount_off, 기준 금액으로 상한
    """
    if rule.percent_off is not None:
        raw = Decimal(base_amount) * rule.percent_off / Decimal(100)
        amount = int(raw.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))
        if rule.max_discount is not None:
            amount = min(amount, rule.max_discount)
    else:
        amount = rule.amount_off or 0
    return min(amount, base_amount)


def parse_product(product: Union[Product, str]) -> Product:
    """상품 식별자 검증"""
    try:
        return Product(product)
    except ValueError:
        raise InvalidRequestError(f"Unknown product: {product}")


def normalize_promo_code(promo_code: PromoCodeInput) -> Optional[str]:
    """
    프로모 코드 입력 정리

    요청당 코드는 하나만 허용됩니다. 서로 다른 코드가 둘 이상이면 거부합니다.
    """
    if promo_code is None:
        return None
    if isinstance(promo_code, str):
        codes = [promo_code]
    else:
        codes = list(promo_code)

    distinct = []
    for code in codes:
        code = code.strip()
        if code and code not in distinct:
            distinct.append(code)

    if len(distinct) > 1:
        raise InvalidRequestError("Only one promo code may be supplied per request")
    return distinct[0] if distinct else None


def validate_request(quantity: int, duration_days: int) -> None:
    if quantity <= 0:
        raise InvalidRequestError(f"quantity must be positive, got {quantity}")
    if duration_days <= 0:
        raise InvalidRequestError(f"duration_days must be positive, got {duration_days}")


class PriceCalculator:
    """
    가격 계산기

    Example:
        calculator = PriceCalculator(rates=catalog, rules=catalog)

        breakdown = await calculator.compute_price(
            product=Product.BOX_ADVERTISING,
            quantity=5,
            duration_days=30,
            as_of=utcnow(),
            promo_code="SOMMER",
        )
        print(breakdown.final_amount)
    """

    def __init__(
        self,
        rates: "RateTableProvider",
        rules: "DiscountRuleProvider",
        resolver: Optional[DiscountResolver] = None,
    ):
        self.rates = rates
        self.rules = rules
        self.resolver = resolver or DiscountResolver()

    def price(
        self,
        rate: Rate,
        rules: List[DiscountRule],
        quantity: int,
        duration_days: int,
        as_of: datetime,
        promo_code: Optional[str] = None,
        campaigns: Optional[Collection[str]] = None,
    ) -> PriceBreakdown:
        """주어진 요금/규칙 스냅샷으로 가격 계산 (부수효과 없음)"""
        base_amount = rate.base_amount(quantity, duration_days)
        selected = self.resolver.resolve(
            rules,
            quantity=quantity,
            duration_days=duration_days,
            promo_code=promo_code,
            base_amount=base_amount,
            campaigns=campaigns,
        )

        applied = [
            AppliedDiscount(rule_id=rule.id, kind=rule.kind, amount=effect_amount(rule, base_amount))
            for rule in selected
        ]
        total = sum(item.amount for item in applied)

        return PriceBreakdown(
            product=rate.product,
            quantity=quantity,
            duration_days=duration_days,
            as_of=as_of,
            rate_id=rate.id,
            base_amount=base_amount,
            applied=applied,
            final_amount=max(0, base_amount - total),
        )

    async def compute_price(
        self,
        product: Union[Product, str],
        quantity: int,
        duration_days: int,
        as_of: datetime,
        promo_code: PromoCodeInput = None,
        campaigns: Optional[Collection[str]] = None,
    ) -> PriceBreakdown:
        """
        가격 계산

        요청 검증 후 요금과 할인 규칙을 조회하여 계산합니다.

        Raises:
            InvalidRequestError: 수량/기간이 0 이하, 알 수 없는 상품, 프로모 코드 여러 개
            RateNotFoundError: 유효한 기준 요금 없음 (그대로 전파)
            UpstreamUnavailableError: 저장소 조회 실패
        """
        product = parse_product(product)
        validate_request(quantity, duration_days)
        code = normalize_promo_code(promo_code)
        as_of = normalize_timestamp(as_of)

        rate = await self.rates.get_active_rate(product, as_of)
        rules = await self.rules.get_active_rules(product, as_of)

        breakdown = self.price(
            rate,
            rules,
            quantity=quantity,
            duration_days=duration_days,
            as_of=as_of,
            promo_code=code,
            campaigns=campaigns,
        )
        logger.debug(
            f"Priced {product.value} x{quantity}/{duration_days}d: "
            f"{breakdown.base_amount} -> {breakdown.final_amount}"
        )
        return breakdown

    async def compute_batch(
        self,
        items: Sequence[PriceItem],
        as_of: datetime,
        campaigns: Optional[Collection[str]] = None,
    ) -> List[Union[PriceBreakdown, PricingError]]:
        """
        배치 가격 계산 (순차)

        항목 간 상호작용이 없으며, 실패한 항목은 예외 객체로 해당 위치에 담깁니다.
        동시 실행은 PricingService.compute_batch_price 를 사용하세요.
        """
        results: List[Union[PriceBreakdown, PricingError]] = []
        for item in items:
            try:
                results.append(await self.compute_price(
                    item.product,
                    item.quantity,
                    item.duration_days,
                    as_of,
                    promo_code=item.promo_code,
                    campaigns=campaigns,
                ))
            except PricingError as e:
                results.append(e)
        return results
