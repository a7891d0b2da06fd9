"""
MP Pricing 설정

데이터베이스, 호스팅 DB(REST), 엔진 동작 설정 관리
"""

import os
from dataclasses import dataclass, field
from typing import Optional, List


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class DatabaseConfig:
    """데이터베이스 설정"""
    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: str = ""
    database: str = "mp_pricing"

    @property
    def url(self) -> str:
        """SQLAlchemy 연결 URL"""
        return f"postgresql+asyncpg://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """환경변수에서 설정 로드"""
        return cls(
            host=os.getenv("MP_DB_HOST", "localhost"),
            port=int(os.getenv("MP_DB_PORT", "5432")),
            username=os.getenv("MP_DB_USER", "postgres"),
            password=os.getenv("MP_DB_PASSWORD", ""),
            database=os.getenv("MP_DB_NAME", "mp_pricing"),
        )


@dataclass
class RestCatalogConfig:
    """호스팅 DB REST 설정 (Supabase 등)"""
    url: Optional[str] = None
    api_key: Optional[str] = None
    rates_table: str = "rates"
    rules_table: str = "discount_rules"
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "RestCatalogConfig":
        """환경변수에서 설정 로드"""
        return cls(
            url=os.getenv("MP_REST_URL"),
            api_key=os.getenv("MP_REST_API_KEY"),
            rates_table=os.getenv("MP_REST_RATES_TABLE", "rates"),
            rules_table=os.getenv("MP_REST_RULES_TABLE", "discount_rules"),
            timeout=float(os.getenv("MP_REST_TIMEOUT", "10.0")),
        )


@dataclass
class EngineConfig:
    """가격 엔진 동작 설정"""

    # 저장소 호출 (호출당 타임아웃, 재시도 1회 + 백오프)
    lookup_timeout: float = 2.0
    retry_attempts: int = 1
    retry_backoff: float = 0.2

    # True 면 할인 규칙 조회 실패 시 할인 없이 계산
    rules_fail_open: bool = False

    # 배치
    max_batch_size: int = 100
    max_concurrency: int = 10

    # 켜져 있는 프로모션 캠페인
    enabled_campaigns: List[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """환경변수에서 설정 로드"""
        return cls(
            lookup_timeout=float(os.getenv("MP_LOOKUP_TIMEOUT", "2.0")),
            retry_attempts=int(os.getenv("MP_RETRY_ATTEMPTS", "1")),
            retry_backoff=float(os.getenv("MP_RETRY_BACKOFF", "0.2")),
            rules_fail_open=os.getenv("MP_RULES_FAIL_OPEN", "false").lower() == "true",
            max_batch_size=int(os.getenv("MP_MAX_BATCH_SIZE", "100")),
            max_concurrency=int(os.getenv("MP_MAX_CONCURRENCY", "10")),
            enabled_campaigns=_split(os.getenv("MP_ENABLED_CAMPAIGNS", "")),
        )


@dataclass
class MPPricingConfig:
    """MP Pricing 전체 설정"""

    # 서비스 정보
    service_name: str = "mp_pricing"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True

    # 카탈로그 저장소: sql, rest, file
    catalog_backend: str = "sql"
    catalog_file: Optional[str] = None

    # 하위 설정
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    rest: RestCatalogConfig = field(default_factory=RestCatalogConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)

    # 보안 (None 이면 API 키 검사 안 함)
    api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "MPPricingConfig":
        """환경변수에서 전체 설정 로드"""
        return cls(
            service_name=os.getenv("MP_SERVICE_NAME", "mp_pricing"),
            version=os.getenv("MP_VERSION", "0.1.0"),
            environment=os.getenv("MP_ENVIRONMENT", "development"),
            debug=os.getenv("MP_DEBUG", "true").lower() == "true",
            catalog_backend=os.getenv("MP_CATALOG_BACKEND", "sql"),
            catalog_file=os.getenv("MP_CATALOG_FILE"),
            database=DatabaseConfig.from_env(),
            rest=RestCatalogConfig.from_env(),
            engine=EngineConfig.from_env(),
            api_key=os.getenv("MP_API_KEY"),
        )


# 전역 설정 인스턴스
_config: Optional[MPPricingConfig] = None


def get_config() -> MPPricingConfig:
    """전역 설정 반환"""
    global _config
    if _config is None:
        _config = MPPricingConfig.from_env()
    return _config


def set_config(config: MPPricingConfig) -> None:
    """전역 설정 지정"""
    global _config
    _config = config
