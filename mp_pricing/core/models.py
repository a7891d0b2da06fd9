"""
요금표 / 할인 규칙 테이블 정의

외부 관리 화면에서 관리되는 참조 데이터이며, 엔진은 읽기만 합니다.
"""
from sqlalchemy import (
    Column, String, Integer, DateTime, Text, Boolean, Numeric,
    Enum as SQLEnum, Index
)
from sqlalchemy.orm import declarative_base
import uuid

from .schemas import Rate, DiscountRule, DiscountKind, Product, RateBasis, utcnow

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class RateRecord(Base):
    """
    기준 요금 모델

    상품별로 어느 시점이든 유효한 요금은 하나뿐이어야 합니다.
    """
    __tablename__ = "rates"

    id = Column(String(50), primary_key=True, default=_new_id)
    product = Column(SQLEnum(Product), nullable=False)

    # 금액 (최소 화폐 단위)
    unit_amount = Column(Integer, nullable=False)
    basis = Column(SQLEnum(RateBasis), nullable=False, default=RateBasis.FLAT)

    # 유효 기간 [effective_from, effective_to)
    effective_from = Column(DateTime, nullable=False)
    effective_to = Column(DateTime, nullable=True)

    description = Column(Text)

    # 타임스탬프
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_rate_product_window', 'product', 'effective_from', 'effective_to'),
    )

    def __repr__(self):
        return f"<RateRecord(id={self.id}, product={self.product}, unit_amount={self.unit_amount})>"

    def to_rate(self) -> Rate:
        return Rate(
            id=self.id,
            product=self.product,
            unit_amount=self.unit_amount,
            basis=self.basis or RateBasis.FLAT,
            effective_from=self.effective_from,
            effective_to=self.effective_to,
        )


class DiscountRuleRecord(Base):
    """
    할인 규칙 모델

    수량 티어, 기간 티어, 프로모 코드 할인을 한 테이블에서 관리합니다.
    """
    __tablename__ = "discount_rules"

    id = Column(String(50), primary_key=True, default=_new_id)

    # 적용 대상 (상품 값 또는 'any')
    product = Column(String(50), nullable=False, default="any")
    kind = Column(SQLEnum(DiscountKind), nullable=False)

    # 티어 기준
    threshold = Column(Integer, nullable=False, default=0)
    max_threshold = Column(Integer, nullable=True)

    # 효과 (둘 중 하나만)
    percent_off = Column(Numeric(5, 2), nullable=True)
    amount_off = Column(Integer, nullable=True)
    max_discount = Column(Integer, nullable=True)
    min_order_amount = Column(Integer, nullable=True)

    # 프로모 코드 / 캠페인
    code = Column(String(50), nullable=True, index=True)
    campaign = Column(String(50), nullable=True)

    # 상태 및 기간
    is_active = Column(Boolean, default=True)
    valid_from = Column(DateTime, nullable=False)
    valid_to = Column(DateTime, nullable=True)

    description = Column(Text)

    # 타임스탬프
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('idx_rule_product_kind', 'product', 'kind'),
        Index('idx_rule_window', 'valid_from', 'valid_to'),
    )

    def __repr__(self):
        return f"<DiscountRuleRecord(id={self.id}, kind={self.kind}, product={self.product})>"

    def to_rule(self) -> DiscountRule:
        return DiscountRule(
            id=self.id,
            product=self.product,
            kind=self.kind,
            threshold=self.threshold or 0,
            max_threshold=self.max_threshold,
            percent_off=self.percent_off,
            amount_off=self.amount_off,
            max_discount=self.max_discount,
            min_order_amount=self.min_order_amount,
            code=self.code,
            campaign=self.campaign,
            is_active=bool(self.is_active),
            valid_from=self.valid_from,
            valid_to=self.valid_to,
        )
