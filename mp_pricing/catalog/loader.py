"""
카탈로그 파일 로더 / 검증기

YAML 로 작성된 요금표/할인 규칙 파일을 읽어 InMemoryCatalog 로 만듭니다.

파일 형식:
    rates:
      - id: box-monthly
        product: box-advertising
        unit_amount: 10000
        basis: per_item_month
        effective_from: 2025-01-01T00:00:00

    discount_rules:
      - id: qty-5
        product: box-advertising
        kind: quantity-tier
        threshold: 5
        percent_off: 10
        valid_from: 2025-01-01T00:00:00
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, List, Dict, Any
from pathlib import Path
from pydantic import ValidationError as SchemaError
import yaml

from ..core.schemas import Rate, DiscountRule, DiscountKind
from .memory import InMemoryCatalog


@dataclass
class ValidationError:
    """검증 오류"""
    path: str
    message: str
    severity: str = "error"  # error, warning


@dataclass
class ValidationResult:
    """검증 결과"""
    is_valid: bool
    catalog: Optional[InMemoryCatalog] = None
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)

    def add_error(self, path: str, message: str):
        self.errors.append(ValidationError(path, message, "error"))
        self.is_valid = False

    def add_warning(self, path: str, message: str):
        self.warnings.append(ValidationError(path, message, "warning"))


def _coerce_dates(row: Dict[str, Any]) -> Dict[str, Any]:
    """YAML 날짜(date)를 자정 datetime 으로 변환"""
    return {
        key: datetime.combine(value, datetime.min.time())
        if isinstance(value, date) and not isinstance(value, datetime) else value
        for key, value in row.items()
    }


def _overlaps(
    start_a: datetime, end_a: Optional[datetime],
    start_b: datetime, end_b: Optional[datetime],
) -> bool:
    return (end_b is None or start_a < end_b) and (end_a is None or start_b < end_a)


class CatalogLoader:
    """
    카탈로그 파일 로더

    Example:
        loader = CatalogLoader()
        result = loader.load_file("catalog.yaml")
        if result.is_valid:
            catalog = result.catalog
        else:
            for error in result.errors:
                print(f"Error at {error.path}: {error.message}")
    """

    def load_file(self, file_path: str) -> ValidationResult:
        """파일 로드"""
        result = ValidationResult(is_valid=True)

        path = Path(file_path)
        if not path.exists():
            result.add_error("file", f"File not found: {file_path}")
            return result

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            result.add_error("yaml", f"YAML parse error: {e}")
            return result

        return self.load_dict(data, result)

    def load_string(self, yaml_string: str) -> ValidationResult:
        """YAML 문자열 로드"""
        result = ValidationResult(is_valid=True)

        try:
            data = yaml.safe_load(yaml_string)
        except yaml.YAMLError as e:
            result.add_error("yaml", f"YAML parse error: {e}")
            return result

        return self.load_dict(data, result)

    def load_dict(
        self,
        data: Dict[str, Any],
        result: Optional[ValidationResult] = None
    ) -> ValidationResult:
        """딕셔너리 로드"""
        if result is None:
            result = ValidationResult(is_valid=True)

        if not isinstance(data, dict):
            result.add_error("root", "Catalog must be a dictionary")
            return result

        rates = self._parse_rates(data.get("rates") or [], result)
        rules = self._parse_rules(data.get("discount_rules") or [], result)

        if not rates:
            result.add_warning("rates", "No rates defined. Every product lookup will fail.")

        self._check_rate_overlaps(rates, result)
        self._check_tier_duplicates(rules, result)

        if result.is_valid:
            result.catalog = InMemoryCatalog(rates=rates, rules=rules)

        return result

    def _parse_rates(self, rows: List, result: ValidationResult) -> List[Rate]:
        """rates 섹션 파싱"""
        rates = []
        seen = set()
        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                result.add_error(f"rates[{i}]", "Rate must be a dictionary")
                continue
            try:
                rate = Rate.model_validate(_coerce_dates(row))
            except SchemaError as e:
                result.add_error(f"rates[{i}]", f"Invalid rate: {e.errors()[0]['msg']}")
                continue
            if rate.id is not None:
                if rate.id in seen:
                    result.add_error(f"rates[{i}].id", f"Duplicate rate id: {rate.id}")
                    continue
                seen.add(rate.id)
            rates.append(rate)
        return rates

    def _parse_rules(self, rows: List, result: ValidationResult) -> List[DiscountRule]:
        """discount_rules 섹션 파싱"""
        rules = []
        seen = set()
        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                result.add_error(f"discount_rules[{i}]", "Rule must be a dictionary")
                continue
            try:
                rule = DiscountRule.model_validate(_coerce_dates(row))
            except SchemaError as e:
                result.add_error(f"discount_rules[{i}]", f"Invalid rule: {e.errors()[0]['msg']}")
                continue
            if rule.id in seen:
                result.add_error(f"discount_rules[{i}].id", f"Duplicate rule id: {rule.id}")
                continue
            seen.add(rule.id)
            rules.append(rule)
        return rules

    def _check_rate_overlaps(self, rates: List[Rate], result: ValidationResult):
        """같은 상품의 유효 기간이 겹치는 요금 경고"""
        for i, first in enumerate(rates):
            for second in rates[i + 1:]:
                if first.product != second.product:
                    continue
                if _overlaps(first.effective_from, first.effective_to,
                             second.effective_from, second.effective_to):
                    result.add_warning(
                        f"rates.{first.product.value}",
                        f"Overlapping active rates: {first.id} and {second.id}"
                    )

    def _check_tier_duplicates(self, rules: List[DiscountRule], result: ValidationResult):
        """같은 기준치의 티어 규칙이 동시에 유효하면 경고"""
        tiers = [rule for rule in rules if rule.kind != DiscountKind.PROMO_CODE]
        for i, first in enumerate(tiers):
            for second in tiers[i + 1:]:
                if (first.kind, first.product, first.threshold, first.campaign) != \
                        (second.kind, second.product, second.threshold, second.campaign):
                    continue
                if _overlaps(first.valid_from, first.valid_to, second.valid_from, second.valid_to):
                    result.add_warning(
                        f"discount_rules.{first.id}",
                        f"Tier rules {first.id} and {second.id} share threshold {first.threshold}"
                    )


def load_catalog_file(file_path: str) -> InMemoryCatalog:
    """
    카탈로그 파일 로드 (편의 함수)

    Raises:
        ValueError: 파일이 유효하지 않음
    """
    result = CatalogLoader().load_file(file_path)
    if not result.is_valid:
        details = "; ".join(f"{error.path}: {error.message}" for error in result.errors)
        raise ValueError(f"Invalid catalog file {file_path}: {details}")
    return result.catalog
