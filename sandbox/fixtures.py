"""
MP Pricing - Pytest Fixtures

pytest에서 사용할 수 있는 샘플 카탈로그와 서비스 fixture를 제공합니다.

Usage:
    # tests/conftest.py에서 import
    from sandbox.fixtures import *

    # 테스트에서 사용
    @pytest.mark.asyncio
    async def test_quote(pricing_service, as_of):
        quote = await pricing_service.compute_price("box-advertising", 5, 30, as_of=as_of)
        assert quote.final_amount == 9000
"""

import pytest
from datetime import datetime
from decimal import Decimal
from typing import List

from mp_pricing.core.calculator import PriceCalculator
from mp_pricing.core.schemas import Rate, DiscountRule, DiscountKind, Product, RateBasis
from mp_pricing.catalog.memory import InMemoryCatalog
from mp_pricing.quote.service import PricingService


# 기준 시각 (모든 샘플 데이터가 유효한 시점)
SAMPLE_AS_OF = datetime(2026, 5, 1, 12, 0, 0)

CATALOG_START = datetime(2025, 1, 1)


def make_rate(
    product: Product = Product.BOX_ADVERTISING,
    unit_amount: int = 10000,
    rate_id: str = "box-flat",
    effective_from: datetime = CATALOG_START,
    effective_to: datetime = None,
    basis: RateBasis = RateBasis.FLAT,
) -> Rate:
    """테스트용 Rate 생성"""
    return Rate(
        id=rate_id,
        product=product,
        unit_amount=unit_amount,
        effective_from=effective_from,
        effective_to=effective_to,
        basis=basis,
    )


def make_rule(rule_id: str, kind: DiscountKind, **overrides) -> DiscountRule:
    """테스트용 DiscountRule 생성 (기본: box-advertising, 2025-01-01 부터 유효)"""
    data = {
        "id": rule_id,
        "product": Product.BOX_ADVERTISING,
        "kind": kind,
        "valid_from": CATALOG_START,
    }
    data.update(overrides)
    return DiscountRule(**data)


def sample_rates() -> List[Rate]:
    """
    샘플 요금표

    service 상품은 의도적으로 요금이 없습니다 (RateNotFound 확인용).
    """
    return [
        make_rate(),
        make_rate(
            product=Product.SPONSORED_PLACEMENT,
            unit_amount=500,
            rate_id="boost-daily",
            basis=RateBasis.PER_ITEM_DAY,
        ),
    ]


def sample_rules() -> List[DiscountRule]:
    """샘플 할인 규칙"""
    return [
        make_rule("qty-5", DiscountKind.QUANTITY_TIER, threshold=5, percent_off=Decimal("10")),
        make_rule("qty-10", DiscountKind.QUANTITY_TIER, threshold=10, percent_off=Decimal("15")),
        make_rule("dur-90", DiscountKind.DURATION_TIER, threshold=90, percent_off=Decimal("5")),
        make_rule(
            "promo-sommer", DiscountKind.PROMO_CODE,
            product="any", code="SOMMER", amount_off=2000,
        ),
        make_rule(
            "promo-vinter", DiscountKind.PROMO_CODE,
            code="VINTER", amount_off=1500, valid_to=datetime(2026, 3, 1),
        ),
        make_rule(
            "promo-stall", DiscountKind.PROMO_CODE,
            code="STALL20", percent_off=Decimal("20"), min_order_amount=50000,
        ),
        make_rule(
            "promo-jul", DiscountKind.PROMO_CODE,
            code="JUL", amount_off=1000, campaign="jul",
        ),
    ]


@pytest.fixture
def as_of() -> datetime:
    """샘플 데이터 기준 시각"""
    return SAMPLE_AS_OF


@pytest.fixture
def sample_catalog() -> InMemoryCatalog:
    """
    샘플 InMemoryCatalog fixture

    - box-advertising: 10000 (flat)
    - sponsored-placement: 500 / 개 / 일
    - 수량 티어 5개 10%, 10개 15% / 기간 티어 90일 5%
    - 프로모 코드 SOMMER (2000 정액), VINTER (만료), STALL20 (최소 50000), JUL (캠페인)
    """
    return InMemoryCatalog(rates=sample_rates(), rules=sample_rules())


@pytest.fixture
def calculator(sample_catalog: InMemoryCatalog) -> PriceCalculator:
    """샘플 카탈로그를 쓰는 PriceCalculator"""
    return PriceCalculator(rates=sample_catalog, rules=sample_catalog)


@pytest.fixture
def pricing_service(calculator: PriceCalculator) -> PricingService:
    """
    PricingService fixture

    Usage:
        async def test_batch(pricing_service, as_of):
            results = await pricing_service.compute_batch_price([...], as_of=as_of)
    """
    return PricingService(calculator, max_batch_size=10, max_concurrency=4)
