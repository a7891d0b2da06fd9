"""
견적 모듈

가격 계산 결과를 외부 계약(Quote)으로 제공하는 서비스
"""

from .service import PricingService
from .assembler import to_quote, to_quote_error
from .models import Quote, QuoteDiscount, QuoteError, QuoteResult, PromoCodeCheck

__all__ = [
    "PricingService",
    "to_quote",
    "to_quote_error",
    "Quote",
    "QuoteDiscount",
    "QuoteError",
    "QuoteResult",
    "PromoCodeCheck",
]
