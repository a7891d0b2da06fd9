"""
카탈로그 모듈 - 요금표 / 할인 규칙 제공자

- RateTableProvider, DiscountRuleProvider: 제공자 인터페이스
- InMemoryCatalog: 메모리 스냅샷
- SqlCatalog: SQLAlchemy 비동기 조회
- RestCatalog: 호스팅 DB REST 조회
- GuardedCatalog: 타임아웃 / 재시도 래퍼
- CatalogLoader: YAML 카탈로그 파일 로더
"""

from .base import RateTableProvider, DiscountRuleProvider
from .memory import InMemoryCatalog
from .sql import SqlCatalog
from .rest import RestCatalog
from .guarded import GuardedCatalog
from .loader import CatalogLoader, ValidationResult, load_catalog_file

__all__ = [
    "RateTableProvider",
    "DiscountRuleProvider",
    "InMemoryCatalog",
    "SqlCatalog",
    "RestCatalog",
    "GuardedCatalog",
    "CatalogLoader",
    "ValidationResult",
    "load_catalog_file",
]
