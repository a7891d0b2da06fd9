"""
가격 엔진 예외 정의

가격 계산 중 발생할 수 있는 오류와 표준 에러 코드
"""

from datetime import datetime
from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """표준 에러 코드"""
    INVALID_REQUEST = "INVALID_REQUEST"
    RATE_NOT_FOUND = "RATE_NOT_FOUND"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Custom Exceptions
# =============================================================================

class PricingError(Exception):
    """가격 계산 오류 기본 클래스"""
    code = ErrorCodes.INTERNAL_ERROR


class RateNotFoundError(PricingError):
    """기준 요금(Rate)을 찾을 수 없을 때 발생"""
    code = ErrorCodes.RATE_NOT_FOUND

    def __init__(self, product: str, as_of: datetime):
        self.product = product
        self.as_of = as_of
        super().__init__(f"No active rate for {product} at {as_of.isoformat()}")


class InvalidRequestError(PricingError):
    """조회 전에 거부되는 잘못된 요청"""
    code = ErrorCodes.INVALID_REQUEST


class UpstreamUnavailableError(PricingError):
    """요금/할인 저장소 호출 실패 또는 타임아웃"""
    code = ErrorCodes.UPSTREAM_UNAVAILABLE

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        message = f"{source} lookup unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
