"""
FastAPI 앱에 가격 엔진을 한 번에 설정하는 헬퍼 함수
"""
import logging
from typing import Optional, Union
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mp_pricing.core.calculator import PriceCalculator
from mp_pricing.core.database import DatabaseManager
from mp_pricing.catalog.sql import SqlCatalog
from mp_pricing.catalog.rest import RestCatalog
from mp_pricing.catalog.memory import InMemoryCatalog
from mp_pricing.catalog.guarded import GuardedCatalog
from mp_pricing.catalog.loader import load_catalog_file
from mp_pricing.quote.service import PricingService
from mp_pricing.api.router import create_pricing_router
from mp_pricing.config import MPPricingConfig, EngineConfig, get_config

logger = logging.getLogger(__name__)

Catalog = Union[SqlCatalog, RestCatalog, InMemoryCatalog]


def build_service(catalog: Catalog, engine: EngineConfig) -> PricingService:
    """카탈로그를 GuardedCatalog 로 감싸 PricingService 구성"""
    guarded = GuardedCatalog(
        rates=catalog,
        rules=catalog,
        timeout=engine.lookup_timeout,
        retry_attempts=engine.retry_attempts,
        retry_backoff=engine.retry_backoff,
        rules_fail_open=engine.rules_fail_open,
    )
    return PricingService(
        PriceCalculator(rates=guarded, rules=guarded),
        max_batch_size=engine.max_batch_size,
        max_concurrency=engine.max_concurrency,
        enabled_campaigns=engine.enabled_campaigns,
    )


class MPPricing:
    """
    MP Pricing 통합 객체

    카탈로그, 계산기, 서비스에 대한 단일 진입점을 제공합니다.

    Example:
        from mp_pricing import setup_pricing

        pricing = setup_pricing(app)

        quote = await pricing.service.compute_price("box-advertising", 5, 30)
    """

    def __init__(
        self,
        app: FastAPI,
        config: MPPricingConfig,
        catalog: Catalog,
        db_manager: Optional[DatabaseManager] = None,
    ):
        self.app = app
        self.config = config
        self.catalog = catalog
        self.db = db_manager

        self.service = build_service(catalog, config.engine)
        self.calculator = self.service.calculator

    async def init(self) -> None:
        """초기화 (DB 연결 등)"""
        if self.db is not None:
            await self.db.init()
        logger.info(f"MP Pricing initialized ({self.config.catalog_backend} catalog)")

    async def close(self) -> None:
        """리소스 정리"""
        if isinstance(self.catalog, RestCatalog):
            await self.catalog.close()
        if self.db is not None:
            await self.db.close()
        logger.info("MP Pricing closed")


def create_catalog(config: MPPricingConfig) -> tuple:
    """
    설정에 맞는 카탈로그 생성

    Returns:
        (catalog, db_manager) - SQL 이외의 저장소는 db_manager 가 None
    """
    backend = config.catalog_backend

    if backend == "sql":
        db_manager = DatabaseManager(config.database.url)
        return SqlCatalog(db_manager), db_manager

    if backend == "rest":
        if not config.rest.url:
            raise ValueError("MP_REST_URL is required for the rest catalog backend")
        catalog = RestCatalog(
            base_url=config.rest.url,
            api_key=config.rest.api_key,
            rates_table=config.rest.rates_table,
            rules_table=config.rest.rules_table,
            timeout=config.rest.timeout,
        )
        return catalog, None

    if backend == "file":
        if not config.catalog_file:
            raise ValueError("MP_CATALOG_FILE is required for the file catalog backend")
        return load_catalog_file(config.catalog_file), None

    raise ValueError(f"Unknown catalog backend: {backend}")


def setup_pricing(
    app: FastAPI,
    config: Optional[MPPricingConfig] = None,
    catalog: Optional[Catalog] = None,
    prefix: str = "/pricing",
) -> MPPricing:
    """
    FastAPI 앱에 가격 엔진을 설정합니다.

    Args:
        app: FastAPI 앱 인스턴스
        config: MP Pricing 설정 (None이면 환경변수에서 로드)
        catalog: 직접 만든 카탈로그 (None이면 설정의 catalog_backend 사용)
        prefix: API 경로 prefix

    Returns:
        MPPricing: MP Pricing 통합 객체

    Example:
        ```python
        from fastapi import FastAPI
        from mp_pricing import setup_pricing

        app = FastAPI()
        pricing = setup_pricing(app)

        @app.on_event("startup")
        async def startup():
            await pricing.init()

        @app.on_event("shutdown")
        async def shutdown():
            await pricing.close()
        ```
    """
    cfg = config or get_config()

    db_manager = None
    if catalog is None:
        catalog, db_manager = create_catalog(cfg)

    pricing = MPPricing(app, cfg, catalog, db_manager)

    app.include_router(
        create_pricing_router(
            pricing.service,
            prefix=prefix,
            version=cfg.version,
            api_key=cfg.api_key,
        )
    )

    # 앱 상태에 저장
    app.state.mp_pricing = pricing
    app.state.pricing_service = pricing.service

    logger.info(f"MP Pricing setup complete (prefix: {prefix}, backend: {cfg.catalog_backend})")
    return pricing


def create_app(config: Optional[MPPricingConfig] = None) -> FastAPI:
    """
    단독 실행용 FastAPI 앱 생성

    Example:
        uvicorn.run(create_app(), host="0.0.0.0", port=8000)
    """
    cfg = config or get_config()

    app = FastAPI(
        title="Marketplace Pricing",
        description="마구간 박스 광고 / 스폰서 노출 / 서비스 가격 계산 API",
        version=cfg.version,
        debug=cfg.debug,
    )

    # 가격 미리보기 UI 에서 직접 호출
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    pricing = setup_pricing(app, config=cfg)

    @app.on_event("startup")
    async def startup():
        await pricing.init()

    @app.on_event("shutdown")
    async def shutdown():
        await pricing.close()

    return app


def get_pricing(app: FastAPI) -> Optional[MPPricing]:
    """FastAPI 앱에서 MP Pricing 객체 가져오기"""
    return getattr(app.state, "mp_pricing", None)
