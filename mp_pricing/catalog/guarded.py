"""
타임아웃 / 재시도 래퍼

저장소 호출마다 타임아웃을 걸고, 실패하면 한 번 재시도한 뒤
UpstreamUnavailableError 로 전환합니다.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, List, Callable, Awaitable, TypeVar

from ..core.errors import UpstreamUnavailableError
from ..core.schemas import Rate, DiscountRule, Product
from .base import RateTableProvider, DiscountRuleProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardedCatalog(RateTableProvider, DiscountRuleProvider):
    """
    보호된 카탈로그

    Example:
        catalog = GuardedCatalog(
            rates=SqlCatalog(db),
            rules=SqlCatalog(db),
            timeout=2.0,
            retry_attempts=1,
        )
    """

    def __init__(
        self,
        rates: RateTableProvider,
        rules: DiscountRuleProvider,
        timeout: float = 2.0,
        retry_attempts: int = 1,
        retry_backoff: float = 0.2,
        rules_fail_open: bool = False,
    ):
        self.rates = rates
        self.rules = rules
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff
        self.rules_fail_open = rules_fail_open

    async def _call(self, source: str, call: Callable[[], Awaitable[T]]) -> T:
        """타임아웃 + 재시도 (백오프 2배씩 증가)"""
        last_error: Optional[str] = None
        for attempt in range(self.retry_attempts + 1):
            if attempt:
                await asyncio.sleep(self.retry_backoff * (2 ** (attempt - 1)))
            try:
                return await asyncio.wait_for(call(), timeout=self.timeout)
            except asyncio.TimeoutError:
                last_error = f"timed out after {self.timeout}s"
            except Exception as e:
                last_error = str(e) or e.__class__.__name__
            logger.warning(f"{source} lookup failed (attempt {attempt + 1}): {last_error}")

        logger.error(f"{source} lookup unavailable after {self.retry_attempts + 1} attempts")
        raise UpstreamUnavailableError(source, last_error)

    async def fetch_active_rate(self, product: Product, as_of: datetime) -> Optional[Rate]:
        return await self._call("rate", lambda: self.rates.fetch_active_rate(product, as_of))

    async def fetch_active_rules(self, product: Product, as_of: datetime) -> List[DiscountRule]:
        try:
            return await self._call("discount rule", lambda: self.rules.fetch_active_rules(product, as_of))
        except UpstreamUnavailableError:
            if not self.rules_fail_open:
                raise
            logger.warning(f"Pricing {product.value} without discounts: rule lookup unavailable")
            return []

    async def find_promo_rules(self, code: str) -> List[DiscountRule]:
        return await self._call("promo code", lambda: self.rules.find_promo_rules(code))
