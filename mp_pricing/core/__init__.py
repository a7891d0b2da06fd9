"""
Core 모듈 - 가격 계산 핵심 기능

- PriceCalculator: 기준 요금 + 할인으로 가격 내역 계산
- DiscountResolver: 적용할 할인 규칙 선택
- DatabaseManager: DB 연결 관리
- Rate, DiscountRule, PriceBreakdown: 스키마
"""
from .schemas import (
    Product,
    DiscountKind,
    RateBasis,
    Rate,
    DiscountRule,
    AppliedDiscount,
    PriceBreakdown,
    PriceItem,
    ANY_PRODUCT,
    utcnow,
)
from .errors import (
    ErrorCodes,
    PricingError,
    RateNotFoundError,
    InvalidRequestError,
    UpstreamUnavailableError,
)
from .resolver import DiscountResolver
from .calculator import PriceCalculator, effect_amount
from .database import DatabaseManager
from .models import RateRecord, DiscountRuleRecord

__all__ = [
    # Calculator
    "PriceCalculator",
    "DiscountResolver",
    "effect_amount",
    # Schemas
    "Product",
    "DiscountKind",
    "RateBasis",
    "Rate",
    "DiscountRule",
    "AppliedDiscount",
    "PriceBreakdown",
    "PriceItem",
    "ANY_PRODUCT",
    "utcnow",
    # Errors
    "ErrorCodes",
    "PricingError",
    "RateNotFoundError",
    "InvalidRequestError",
    "UpstreamUnavailableError",
    # Database
    "DatabaseManager",
    "RateRecord",
    "DiscountRuleRecord",
]
