"""
가격 API

- create_pricing_router: FastAPI 라우터 생성
- 요청/응답 모델
"""

from .router import create_pricing_router
from .models import (
    HealthResponse,
    QuoteRequest,
    BatchItem,
    BatchQuoteRequest,
    BatchQuoteResponse,
    PromoCodeCheckRequest,
    ErrorResponse,
)

__all__ = [
    "create_pricing_router",
    "HealthResponse",
    "QuoteRequest",
    "BatchItem",
    "BatchQuoteRequest",
    "BatchQuoteResponse",
    "PromoCodeCheckRequest",
    "ErrorResponse",
]
