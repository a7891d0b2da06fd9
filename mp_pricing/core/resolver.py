"""
할인 규칙 선택기

요청된 수량/기간/프로모 코드에 적용할 할인 규칙을 고릅니다.
- 종류(kind)가 다른 할인은 합산
- 같은 종류의 티어 할인은 가장 높은 기준치 하나만 적용
"""

from typing import Optional, List, Dict, Iterable, Collection

from .schemas import DiscountRule, DiscountKind


class DiscountResolver:
    """
    할인 규칙 선택기

    Example:
        resolver = DiscountResolver()
        selected = resolver.resolve(rules, quantity=5, duration_days=30, promo_code="SOMMER")
        # [quantity-tier 규칙, duration-tier 규칙, promo-code 규칙] 순서
    """

    KIND_ORDER = (
        DiscountKind.QUANTITY_TIER,
        DiscountKind.DURATION_TIER,
        DiscountKind.PROMO_CODE,
    )

    def resolve(
        self,
        rules: Iterable[DiscountRule],
        quantity: int,
        duration_days: int,
        promo_code: Optional[str] = None,
        base_amount: Optional[int] = None,
        campaigns: Optional[Collection[str]] = None,
    ) -> List[DiscountRule]:
        """
        적용할 규칙 선택

        Args:
            rules: 후보 규칙 (이미 기간/상품으로 필터링된 것)
            quantity: 요청 수량
            duration_days: 요청 기간 (일)
            promo_code: 프로모 코드 (대소문자 구분)
            base_amount: 기준 금액 (프로모 최소 주문 금액 확인용)
            campaigns: 켜져 있는 캠페인 이름

        Returns:
            종류 순서(수량, 기간, 프로모)로 정렬된 규칙 목록
        """
        enabled = set(campaigns or ())
        by_kind: Dict[DiscountKind, List[DiscountRule]] = {kind: [] for kind in self.KIND_ORDER}
        for rule in rules:
            if rule.campaign is not None and rule.campaign not in enabled:
                continue
            by_kind[rule.kind].append(rule)

        selected = [
            self._best_tier(by_kind[DiscountKind.QUANTITY_TIER], quantity),
            self._best_tier(by_kind[DiscountKind.DURATION_TIER], duration_days),
            self._match_code(by_kind[DiscountKind.PROMO_CODE], promo_code, base_amount),
        ]
        return [rule for rule in selected if rule is not None]

    @staticmethod
    def _best_tier(rules: List[DiscountRule], value: int) -> Optional[DiscountRule]:
        """기준치 이하 중 가장 높은 티어 (동률이면 id 오름차순 첫 번째)"""
        candidates = [rule for rule in rules if rule.covers(value)]
        if not candidates:
            return None
        candidates.sort(key=lambda rule: rule.id)
        return max(candidates, key=lambda rule: rule.threshold)

    @staticmethod
    def _match_code(
        rules: List[DiscountRule],
        promo_code: Optional[str],
        base_amount: Optional[int],
    ) -> Optional[DiscountRule]:
        if not promo_code:
            return None
        for rule in sorted(rules, key=lambda rule: rule.id):
            if rule.code != promo_code:
                continue
            if rule.min_order_amount is not None and base_amount is not None:
                if base_amount < rule.min_order_amount:
                    continue
            return rule
        return None
