"""
견적(Quote) 외부 계약 모델

API 핸들러와 가격 미리보기 UI 가 받는 형식
"""

from typing import Optional, List, Union
from pydantic import BaseModel, Field


class QuoteDiscount(BaseModel):
    """적용된 할인"""
    rule_id: str = Field(..., description="할인 규칙 ID")
    kind: str = Field(..., description="quantity-tier, duration-tier, promo-code")
    amount: int = Field(..., description="할인 금액 (최소 화폐 단위)")


class Quote(BaseModel):
    """견적"""
    success: bool = Field(default=True, description="항상 True")
    product: str
    quantity: int
    duration_days: int
    base_amount: int = Field(..., description="할인 전 금액")
    discounts: List[QuoteDiscount] = Field(default_factory=list)
    final_amount: int = Field(..., description="최종 금액")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "product": "box-advertising",
                "quantity": 5,
                "duration_days": 30,
                "base_amount": 10000,
                "discounts": [
                    {"rule_id": "qty-5", "kind": "quantity-tier", "amount": 1000}
                ],
                "final_amount": 9000
            }
        }


class QuoteError(BaseModel):
    """견적 실패 (배치 항목 단위)"""
    success: bool = Field(default=False, description="항상 False")
    error: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    index: Optional[int] = Field(default=None, description="배치 내 항목 위치")

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "RATE_NOT_FOUND",
                "message": "No active rate for service at 2026-05-01T00:00:00",
                "index": 1
            }
        }


QuoteResult = Union[Quote, QuoteError]


class PromoCodeCheck(BaseModel):
    """프로모 코드 확인 결과"""
    code: str
    valid: bool
    reason: Optional[str] = Field(
        default=None,
        description="not_found, inactive, not_yet_valid, expired, not_applicable, below_minimum, campaign_inactive"
    )
    rule_id: Optional[str] = None
