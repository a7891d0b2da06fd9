"""
가격 API 요청/응답 모델
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Union
from pydantic import BaseModel, Field

from ..core.errors import ErrorCodes
from ..quote.models import Quote, QuoteError


# =============================================================================
# Health Check
# =============================================================================

class HealthResponse(BaseModel):
    """헬스체크 응답"""
    status: str = Field(..., description="healthy")
    version: str = Field(..., description="서비스 버전")
    timestamp: str = Field(..., description="ISO 8601 형식")


# =============================================================================
# Quote API
# =============================================================================

class QuoteRequest(BaseModel):
    """견적 요청"""
    product: str = Field(..., description="box-advertising, sponsored-placement, service")
    quantity: int = Field(..., description="수량 (박스 수 등)")
    duration_days: int = Field(..., description="기간 (일)")
    promo_code: Optional[Union[str, List[str]]] = Field(default=None, description="프로모 코드 (하나만)")
    as_of: Optional[datetime] = Field(default=None, description="기준 시각 (기본: 현재)")

    class Config:
        json_schema_extra = {
            "example": {
                "product": "box-advertising",
                "quantity": 5,
                "duration_days": 90,
                "promo_code": "SOMMER"
            }
        }


class BatchItem(BaseModel):
    """배치 견적 항목"""
    product: str
    quantity: int
    duration_days: int
    promo_code: Optional[Union[str, List[str]]] = None


class BatchQuoteRequest(BaseModel):
    """배치 견적 요청"""
    items: List[BatchItem] = Field(..., description="견적 항목 (순서 유지)")
    as_of: Optional[datetime] = Field(default=None, description="모든 항목의 기준 시각")


class BatchQuoteResponse(BaseModel):
    """배치 견적 응답"""
    results: List[Union[Quote, QuoteError]] = Field(..., description="입력 순서와 동일")


# =============================================================================
# Promo Code API
# =============================================================================

class PromoCodeCheckRequest(BaseModel):
    """프로모 코드 확인 요청"""
    code: str
    product: str
    base_amount: Optional[int] = Field(default=None, description="최소 주문 금액 확인용")
    as_of: Optional[datetime] = None


# =============================================================================
# Error Response
# =============================================================================

class ErrorResponse(BaseModel):
    """에러 응답"""
    success: bool = Field(default=False, description="항상 False")
    error: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="추가 에러 정보"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": ErrorCodes.RATE_NOT_FOUND,
                "message": "No active rate for service at 2026-05-01T00:00:00",
                "details": None
            }
        }
