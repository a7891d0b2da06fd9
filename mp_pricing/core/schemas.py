"""
가격 엔진 도메인 스키마

요금(Rate), 할인 규칙(DiscountRule), 가격 내역(PriceBreakdown) 정의
"""

import math
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, List, Union
from pydantic import BaseModel, Field, field_validator, model_validator


ANY_PRODUCT = "any"
DAYS_PER_MONTH = 30


def utcnow() -> datetime:
    """현재 UTC 시각 (naive)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_timestamp(value: datetime) -> datetime:
    """timezone 정보가 있으면 UTC naive 로 변환"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class Product(str, Enum):
    """가격이 매겨지는 상품"""
    BOX_ADVERTISING = "box-advertising"          # 마구간 박스 광고
    SPONSORED_PLACEMENT = "sponsored-placement"  # 스폰서(부스트) 노출
    SERVICE = "service"                          # 마켓플레이스 서비스


class DiscountKind(str, Enum):
    """할인 규칙 종류"""
    QUANTITY_TIER = "quantity-tier"
    DURATION_TIER = "duration-tier"
    PROMO_CODE = "promo-code"


class RateBasis(str, Enum):
    """기준 금액 산정 방식"""
    FLAT = "flat"                      # 단가 그대로
    PER_ITEM = "per_item"              # 단가 × 수량
    PER_ITEM_DAY = "per_item_day"      # 단가 × 수량 × 일수
    PER_ITEM_MONTH = "per_item_month"  # 단가 × 수량 × 개월수 (30일 단위 올림)


class Rate(BaseModel):
    """상품별 기준 요금"""
    id: Optional[str] = None
    product: Product
    unit_amount: int = Field(..., ge=0, description="최소 화폐 단위 금액")
    effective_from: datetime
    effective_to: Optional[datetime] = Field(default=None, description="None 이면 무기한")
    basis: RateBasis = RateBasis.FLAT

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("effective_from", "effective_to")
    @classmethod
    def _normalize(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value) if value is not None else None

    def is_active(self, as_of: datetime) -> bool:
        as_of = normalize_timestamp(as_of)
        if as_of < self.effective_from:
            return False
        return self.effective_to is None or as_of < self.effective_to

    def base_amount(self, quantity: int, duration_days: int) -> int:
        """요청 수량/기간에 대한 할인 전 금액"""
        if self.basis == RateBasis.PER_ITEM:
            return self.unit_amount * quantity
        if self.basis == RateBasis.PER_ITEM_DAY:
            return self.unit_amount * quantity * duration_days
        if self.basis == RateBasis.PER_ITEM_MONTH:
            months = math.ceil(duration_days / DAYS_PER_MONTH)
            return self.unit_amount * quantity * months
        return self.unit_amount


class DiscountRule(BaseModel):
    """
    할인 규칙

    percent_off 와 amount_off 중 정확히 하나만 설정되어야 하며,
    code 는 promo-code 규칙에만 존재합니다.
    """
    id: str
    product: Union[Product, str] = Field(default=ANY_PRODUCT, description="상품 또는 'any'")
    kind: DiscountKind
    threshold: int = Field(default=0, ge=0, description="최소 수량 또는 최소 일수")
    max_threshold: Optional[int] = Field(default=None, ge=0, description="티어 상한 (포함)")
    percent_off: Optional[Decimal] = Field(default=None, ge=0, le=100)
    amount_off: Optional[int] = Field(default=None, ge=0)
    max_discount: Optional[int] = Field(default=None, ge=0, description="퍼센트 할인 상한")
    min_order_amount: Optional[int] = Field(default=None, ge=0, description="프로모 최소 주문 금액")
    valid_from: datetime
    valid_to: Optional[datetime] = None
    code: Optional[str] = None
    campaign: Optional[str] = Field(default=None, description="캠페인이 켜져 있을 때만 적용")
    is_active: bool = True

    class Config:
        frozen = True
        from_attributes = True

    @field_validator("product", mode="before")
    @classmethod
    def _check_product(cls, value):
        if isinstance(value, Product) or value == ANY_PRODUCT:
            return value
        return Product(value)

    @field_validator("valid_from", "valid_to")
    @classmethod
    def _normalize(cls, value: Optional[datetime]) -> Optional[datetime]:
        return normalize_timestamp(value) if value is not None else None

    @model_validator(mode="after")
    def _check_invariants(self) -> "DiscountRule":
        if (self.percent_off is None) == (self.amount_off is None):
            raise ValueError(f"rule {self.id}: exactly one of percent_off / amount_off must be set")
        if self.kind == DiscountKind.PROMO_CODE and not self.code:
            raise ValueError(f"rule {self.id}: promo-code rules require a code")
        if self.kind != DiscountKind.PROMO_CODE and self.code is not None:
            raise ValueError(f"rule {self.id}: only promo-code rules may carry a code")
        if self.max_threshold is not None and self.max_threshold < self.threshold:
            raise ValueError(f"rule {self.id}: max_threshold below threshold")
        return self

    def is_valid_at(self, as_of: datetime) -> bool:
        as_of = normalize_timestamp(as_of)
        if as_of < self.valid_from:
            return False
        return self.valid_to is None or as_of < self.valid_to

    def applies_to(self, product: Product) -> bool:
        return self.product == ANY_PRODUCT or self.product == product

    def covers(self, value: int) -> bool:
        """티어 규칙이 주어진 수량/일수에 해당하는지"""
        if value < self.threshold:
            return False
        return self.max_threshold is None or value <= self.max_threshold


class AppliedDiscount(BaseModel):
    """적용된 할인 한 건"""
    rule_id: str
    kind: DiscountKind
    amount: int

    class Config:
        frozen = True


class PriceBreakdown(BaseModel):
    """
    가격 내역 (요청마다 새로 생성, 저장하지 않음)

    final_amount = max(0, base_amount - sum(applied.amount))
    """
    product: Product
    quantity: int
    duration_days: int
    as_of: datetime
    rate_id: Optional[str] = None
    base_amount: int
    applied: List[AppliedDiscount] = Field(default_factory=list)
    final_amount: int

    class Config:
        frozen = True

    @property
    def discount_total(self) -> int:
        return sum(item.amount for item in self.applied)


class PriceItem(BaseModel):
    """배치 계산의 한 항목"""
    product: str
    quantity: int
    duration_days: int
    promo_code: Optional[Union[str, List[str]]] = None
