"""
가격 API 라우터 생성기

PricingService 를 감싸는 얇은 FastAPI 어댑터
"""

import logging
from typing import Optional
from fastapi import APIRouter, Header, HTTPException, Query, Depends

from ..core.errors import (
    ErrorCodes,
    PricingError,
    InvalidRequestError,
    RateNotFoundError,
    UpstreamUnavailableError,
)
from ..core.schemas import utcnow
from ..quote.models import Quote, PromoCodeCheck
from ..quote.service import PricingService
from .models import (
    HealthResponse,
    QuoteRequest,
    BatchQuoteRequest,
    BatchQuoteResponse,
    PromoCodeCheckRequest,
    ErrorResponse,
)

logger = logging.getLogger(__name__)


ERROR_STATUS = {
    InvalidRequestError: 400,
    RateNotFoundError: 404,
    UpstreamUnavailableError: 503,
}


def _http_error(error: PricingError) -> HTTPException:
    """PricingError -> HTTPException"""
    status_code = ERROR_STATUS.get(type(error), 500)
    return HTTPException(
        status_code=status_code,
        detail={
            "success": False,
            "error": error.code,
            "message": str(error)
        }
    )


def _internal_error(error: Exception) -> HTTPException:
    logger.exception(f"Pricing request failed: {error}")
    return HTTPException(
        status_code=500,
        detail={
            "success": False,
            "error": ErrorCodes.INTERNAL_ERROR,
            "message": str(error)
        }
    )


def create_pricing_router(
    service: PricingService,
    prefix: str = "/pricing",
    version: str = "0.1.0",
    api_key: Optional[str] = None,
    api_key_header: str = "X-Pricing-API-Key",
) -> APIRouter:
    """
    가격 API 라우터 생성

    Args:
        service: PricingService 인스턴스
        prefix: API 경로 prefix (기본: /pricing)
        version: 헬스체크에 표시할 버전
        api_key: 설정하면 api_key_header 검사
        api_key_header: API 키 헤더 이름

    Returns:
        APIRouter: FastAPI 라우터

    Example:
        service = PricingService(PriceCalculator(rates=catalog, rules=catalog))
        app.include_router(create_pricing_router(service))
    """

    router = APIRouter(prefix=prefix, tags=["Pricing"])

    # =========================================================================
    # API Key 검증 의존성
    # =========================================================================

    async def verify_api_key(
        provided: Optional[str] = Header(None, alias=api_key_header)
    ) -> str:
        """API 키 검증"""
        if api_key is None:
            return "no-auth"

        if not provided:
            raise HTTPException(
                status_code=401,
                detail={
                    "success": False,
                    "error": ErrorCodes.UNAUTHORIZED,
                    "message": f"Missing {api_key_header} header"
                }
            )

        if provided != api_key:
            raise HTTPException(
                status_code=401,
                detail={
                    "success": False,
                    "error": ErrorCodes.UNAUTHORIZED,
                    "message": "Invalid API key"
                }
            )

        return provided

    # =========================================================================
    # Health Check
    # =========================================================================

    @router.get(
        "/health",
        response_model=HealthResponse,
        summary="헬스체크",
    )
    async def health_check() -> HealthResponse:
        """헬스체크 - 인증 불필요"""
        return HealthResponse(
            status="healthy",
            version=version,
            timestamp=utcnow().strftime("%Y-%m-%dT%H:%M:%SZ")
        )

    # =========================================================================
    # Quote
    # =========================================================================

    @router.post(
        "/quote",
        response_model=Quote,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid request"},
            404: {"model": ErrorResponse, "description": "No active rate"},
            503: {"model": ErrorResponse, "description": "Catalog unavailable"},
        },
        summary="견적 계산",
        description="기준 요금과 할인을 적용한 견적을 계산합니다."
    )
    async def quote(
        request: QuoteRequest,
        _: str = Depends(verify_api_key)
    ) -> Quote:
        """견적 계산"""
        try:
            return await service.compute_price(
                request.product,
                request.quantity,
                request.duration_days,
                as_of=request.as_of,
                promo_code=request.promo_code,
            )
        except PricingError as e:
            raise _http_error(e)
        except Exception as e:
            raise _internal_error(e)

    @router.get(
        "/preview",
        response_model=Quote,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid request"},
            404: {"model": ErrorResponse, "description": "No active rate"},
        },
        summary="가격 미리보기",
        description="UI 가격 미리보기용 GET 견적"
    )
    async def preview(
        product: str = Query(..., description="상품"),
        quantity: int = Query(1, description="수량"),
        days: int = Query(30, description="기간 (일)"),
        code: Optional[str] = Query(None, description="프로모 코드"),
        _: str = Depends(verify_api_key)
    ) -> Quote:
        """가격 미리보기"""
        try:
            return await service.compute_price(product, quantity, days, promo_code=code)
        except PricingError as e:
            raise _http_error(e)
        except Exception as e:
            raise _internal_error(e)

    @router.post(
        "/quote/batch",
        response_model=BatchQuoteResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Batch too large"},
        },
        summary="배치 견적",
        description="여러 항목의 견적을 계산합니다. 항목별 성공/실패가 입력 순서대로 반환됩니다."
    )
    async def quote_batch(
        request: BatchQuoteRequest,
        _: str = Depends(verify_api_key)
    ) -> BatchQuoteResponse:
        """배치 견적"""
        try:
            results = await service.compute_batch_price(
                [item.model_dump() for item in request.items],
                as_of=request.as_of,
            )
            return BatchQuoteResponse(results=results)
        except PricingError as e:
            raise _http_error(e)
        except Exception as e:
            raise _internal_error(e)

    # =========================================================================
    # Promo Code
    # =========================================================================

    @router.post(
        "/promo-codes/check",
        response_model=PromoCodeCheck,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid request"},
            503: {"model": ErrorResponse, "description": "Catalog unavailable"},
        },
        summary="프로모 코드 확인",
    )
    async def check_promo_code(
        request: PromoCodeCheckRequest,
        _: str = Depends(verify_api_key)
    ) -> PromoCodeCheck:
        """프로모 코드 확인"""
        try:
            return await service.check_promo_code(
                request.code,
                request.product,
                as_of=request.as_of,
                base_amount=request.base_amount,
            )
        except PricingError as e:
            raise _http_error(e)
        except Exception as e:
            raise _internal_error(e)

    return router
