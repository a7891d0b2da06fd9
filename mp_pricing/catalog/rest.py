"""
호스팅 DB(REST) 기반 요금표 / 할인 규칙 제공자

Supabase 등 PostgREST 호환 엔드포인트에서 rates, discount_rules 테이블을 읽습니다.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any, List
import httpx

from ..core.schemas import Rate, DiscountRule, DiscountKind, Product, ANY_PRODUCT
from .base import RateTableProvider, DiscountRuleProvider

logger = logging.getLogger(__name__)


class RestCatalog(RateTableProvider, DiscountRuleProvider):
    """
    REST 카탈로그

    Example:
        catalog = RestCatalog(
            base_url="https://xyz.supabase.co/rest/v1",
            api_key="service-role-key",
        )

        rate = await catalog.get_active_rate(Product.BOX_ADVERTISING, utcnow())
        await catalog.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        rates_table: str = "rates",
        rules_table: str = "discount_rules",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.rates_table = rates_table
        self.rules_table = rules_table
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환"""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["apikey"] = self.api_key
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers=headers,
            )
        return self._client

    async def close(self):
        """클라이언트 종료"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _url(self, table: str) -> str:
        return f"{self.base_url}/{table}"

    async def _select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        client = await self._get_client()
        try:
            response = await client.get(self._url(table), params={"select": "*", **params})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Catalog query on {table} failed: {e.response.status_code} {e.response.text}")
            raise
        except Exception as e:
            logger.error(f"Catalog query on {table} failed: {e}")
            raise

    # =========================================================================
    # 조회 API
    # =========================================================================

    async def fetch_active_rate(self, product: Product, as_of: datetime) -> Optional[Rate]:
        """유효 요금 조회"""
        stamp = as_of.isoformat()
        rows = await self._select(self.rates_table, {
            "product": f"eq.{product.value}",
            "effective_from": f"lte.{stamp}",
            "or": f"(effective_to.is.null,effective_to.gt.{stamp})",
            "order": "effective_from.desc",
        })
        if not rows:
            return None
        if len(rows) > 1:
            logger.warning(f"{len(rows)} active rates for {product.value} at {stamp}, using {rows[0].get('id')}")
        return Rate.model_validate(rows[0])

    async def fetch_active_rules(self, product: Product, as_of: datetime) -> List[DiscountRule]:
        """유효 할인 규칙 조회"""
        stamp = as_of.isoformat()
        rows = await self._select(self.rules_table, {
            "product": f"in.({product.value},{ANY_PRODUCT})",
            "is_active": "is.true",
            "valid_from": f"lte.{stamp}",
            "or": f"(valid_to.is.null,valid_to.gt.{stamp})",
        })
        return [DiscountRule.model_validate(row) for row in rows]

    async def find_promo_rules(self, code: str) -> List[DiscountRule]:
        """코드가 일치하는 프로모 규칙 조회"""
        rows = await self._select(self.rules_table, {
            "kind": f"eq.{DiscountKind.PROMO_CODE.value}",
            "code": f"eq.{code}",
        })
        return [DiscountRule.model_validate(row) for row in rows]
