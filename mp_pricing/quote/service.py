"""
가격 서비스

라우트 핸들러 등 외부 호출자에게 노출되는 진입점
- compute_price: 단건 견적
- compute_batch_price: 배치 견적 (항목별 성공/실패)
- check_promo_code: 프로모 코드 확인 (가격 계산과 별개)
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, List, Union, Sequence, Collection, Dict, Any

from ..core.calculator import PriceCalculator, PromoCodeInput, parse_product
from ..core.errors import PricingError, InvalidRequestError
from ..core.schemas import PriceItem, normalize_timestamp, utcnow
from .assembler import to_quote, to_quote_error
from .models import Quote, QuoteError, QuoteResult, PromoCodeCheck

logger = logging.getLogger(__name__)


class PricingService:
    """
    가격 서비스

    Example:
        catalog = GuardedCatalog(rates=SqlCatalog(db), rules=SqlCatalog(db))
        service = PricingService(PriceCalculator(rates=catalog, rules=catalog))

        quote = await service.compute_price("box-advertising", quantity=5, duration_days=30)

        results = await service.compute_batch_price([
            {"product": "box-advertising", "quantity": 5, "duration_days": 30},
            {"product": "sponsored-placement", "quantity": 1, "duration_days": 7},
        ])
    """

    def __init__(
        self,
        calculator: PriceCalculator,
        max_batch_size: int = 100,
        max_concurrency: int = 10,
        enabled_campaigns: Optional[Collection[str]] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

        self.calculator = calculator
        self.max_batch_size = max_batch_size
        self.max_concurrency = max_concurrency
        self.enabled_campaigns = frozenset(enabled_campaigns or ())

    def _campaigns(self, campaigns: Optional[Collection[str]]) -> Collection[str]:
        return self.enabled_campaigns if campaigns is None else frozenset(campaigns)

    # =========================================================================
    # 견적
    # =========================================================================

    async def compute_price(
        self,
        product: str,
        quantity: int,
        duration_days: int,
        as_of: Optional[datetime] = None,
        promo_code: PromoCodeInput = None,
        campaigns: Optional[Collection[str]] = None,
    ) -> Quote:
        """
        단건 견적

        Args:
            product: 상품 (box-advertising, sponsored-placement, service)
            quantity: 수량
            duration_days: 기간 (일)
            as_of: 기준 시각 (None 이면 현재 UTC)
            promo_code: 프로모 코드 (하나만)
            campaigns: 켜져 있는 캠페인 (None 이면 설정값)

        Raises:
            InvalidRequestError, RateNotFoundError, UpstreamUnavailableError
        """
        breakdown = await self.calculator.compute_price(
            product,
            quantity,
            duration_days,
            as_of or utcnow(),
            promo_code=promo_code,
            campaigns=self._campaigns(campaigns),
        )
        return to_quote(breakdown)

    async def compute_batch_price(
        self,
        items: Sequence[Union[PriceItem, Dict[str, Any]]],
        as_of: Optional[datetime] = None,
        campaigns: Optional[Collection[str]] = None,
    ) -> List[QuoteResult]:
        """
        배치 견적

        모든 항목은 같은 기준 시각으로 계산되며, 결과는 입력 순서를 유지합니다.
        한 항목의 실패는 다른 항목에 영향을 주지 않습니다.

        Raises:
            InvalidRequestError: 배치 크기 초과
        """
        if len(items) > self.max_batch_size:
            raise InvalidRequestError(
                f"Batch of {len(items)} items exceeds limit of {self.max_batch_size}"
            )

        as_of = normalize_timestamp(as_of or utcnow())
        enabled = self._campaigns(campaigns)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def price_item(index: int, item: Union[PriceItem, Dict[str, Any]]) -> QuoteResult:
            async with semaphore:
                try:
                    if not isinstance(item, PriceItem):
                        item = PriceItem.model_validate(item)
                    breakdown = await self.calculator.compute_price(
                        item.product,
                        item.quantity,
                        item.duration_days,
                        as_of,
                        promo_code=item.promo_code,
                        campaigns=enabled,
                    )
                    return to_quote(breakdown)
                except PricingError as e:
                    logger.info(f"Batch item {index} failed: {e.code} {e}")
                    return to_quote_error(e, index=index)
                except ValueError as e:
                    return to_quote_error(InvalidRequestError(str(e)), index=index)
                except Exception as e:
                    logger.exception(f"Batch item {index} crashed: {e}")
                    return QuoteError(error=PricingError.code, message=str(e), index=index)

        return list(await asyncio.gather(
            *(price_item(index, item) for index, item in enumerate(items))
        ))

    # =========================================================================
    # 프로모 코드 확인
    # =========================================================================

    async def check_promo_code(
        self,
        code: str,
        product: str,
        as_of: Optional[datetime] = None,
        base_amount: Optional[int] = None,
        campaigns: Optional[Collection[str]] = None,
    ) -> PromoCodeCheck:
        """
        프로모 코드 확인

        가격 계산과 별개로, 코드가 왜 적용되지 않는지 사유를 알려줍니다.
        """
        product = parse_product(product)
        code = code.strip()
        as_of = normalize_timestamp(as_of or utcnow())
        enabled = self._campaigns(campaigns)

        candidates = await self.calculator.rules.find_promo_rules(code)
        if not candidates:
            return PromoCodeCheck(code=code, valid=False, reason="not_found")

        candidates = [rule for rule in candidates if rule.is_active]
        if not candidates:
            return PromoCodeCheck(code=code, valid=False, reason="inactive")

        current = [rule for rule in candidates if rule.is_valid_at(as_of)]
        if not current:
            if all(as_of < rule.valid_from for rule in candidates):
                return PromoCodeCheck(code=code, valid=False, reason="not_yet_valid")
            return PromoCodeCheck(code=code, valid=False, reason="expired")

        current = [rule for rule in current if rule.applies_to(product)]
        if not current:
            return PromoCodeCheck(code=code, valid=False, reason="not_applicable")

        current = [rule for rule in current if rule.campaign is None or rule.campaign in enabled]
        if not current:
            return PromoCodeCheck(code=code, valid=False, reason="campaign_inactive")

        current.sort(key=lambda rule: rule.id)
        if base_amount is not None:
            affordable = [
                rule for rule in current
                if rule.min_order_amount is None or base_amount >= rule.min_order_amount
            ]
            if not affordable:
                return PromoCodeCheck(code=code, valid=False, reason="below_minimum", rule_id=current[0].id)
            current = affordable

        return PromoCodeCheck(code=code, valid=True, rule_id=current[0].id)
