"""
Marketplace Pricing (mp_pricing)
================================

마구간 박스 대여 마켓플레이스의 가격 및 할인 엔진

사용법:
    from mp_pricing import setup_pricing
    from mp_pricing.core import PriceCalculator, DiscountResolver
    from mp_pricing.catalog import SqlCatalog, RestCatalog, InMemoryCatalog, GuardedCatalog
    from mp_pricing.quote import PricingService
    from mp_pricing.config import MPPricingConfig

Example:
    from fastapi import FastAPI
    from mp_pricing import setup_pricing

    app = FastAPI()
    pricing = setup_pricing(app)

    @app.on_event("startup")
    async def startup():
        await pricing.init()
"""

from .core.calculator import PriceCalculator
from .core.resolver import DiscountResolver
from .core.database import DatabaseManager
from .core.schemas import (
    Product,
    DiscountKind,
    RateBasis,
    Rate,
    DiscountRule,
    PriceBreakdown,
)
from .core.errors import (
    ErrorCodes,
    PricingError,
    RateNotFoundError,
    InvalidRequestError,
    UpstreamUnavailableError,
)
from .catalog import InMemoryCatalog, SqlCatalog, RestCatalog, GuardedCatalog, load_catalog_file
from .quote import PricingService, Quote, QuoteError, PromoCodeCheck
from .setup import setup_pricing, MPPricing, get_pricing
from .config import MPPricingConfig, get_config

__version__ = "0.1.0"
__all__ = [
    # Setup
    "setup_pricing",
    "MPPricing",
    "get_pricing",
    # Config
    "MPPricingConfig",
    "get_config",
    # Core
    "PriceCalculator",
    "DiscountResolver",
    "DatabaseManager",
    "Product",
    "DiscountKind",
    "RateBasis",
    "Rate",
    "DiscountRule",
    "PriceBreakdown",
    # Errors
    "ErrorCodes",
    "PricingError",
    "RateNotFoundError",
    "InvalidRequestError",
    "UpstreamUnavailableError",
    # Catalog
    "InMemoryCatalog",
    "SqlCatalog",
    "RestCatalog",
    "GuardedCatalog",
    "load_catalog_file",
    # Quote
    "PricingService",
    "Quote",
    "QuoteError",
    "PromoCodeCheck",
]
