"""
견적 조립기

내부 PriceBreakdown 을 외부 Quote 형식으로 변환합니다. 비즈니스 로직 없음.
"""

from typing import Optional

from ..core.errors import PricingError
from ..core.schemas import PriceBreakdown
from .models import Quote, QuoteDiscount, QuoteError


def to_quote(breakdown: PriceBreakdown) -> Quote:
    return Quote(
        product=breakdown.product.value,
        quantity=breakdown.quantity,
        duration_days=breakdown.duration_days,
        base_amount=breakdown.base_amount,
        discounts=[
            QuoteDiscount(rule_id=item.rule_id, kind=item.kind.value, amount=item.amount)
            for item in breakdown.applied
        ],
        final_amount=breakdown.final_amount,
    )


def to_quote_error(error: PricingError, index: Optional[int] = None) -> QuoteError:
    return QuoteError(error=error.code, message=str(error), index=index)
