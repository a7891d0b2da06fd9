#!/usr/bin/env python3
"""
MP Pricing CLI

가격 엔진을 커맨드라인에서 사용할 수 있습니다.

Usage:
    # 견적 계산 (카탈로그 파일 사용)
    mp-pricing quote --catalog catalog.yaml \
        --product box-advertising --quantity 5 --days 90 --code SOMMER

    # 배치 견적
    mp-pricing batch --catalog catalog.yaml --items items.yaml

    # 프로모 코드 확인
    mp-pricing check-code --catalog catalog.yaml --code SOMMER --product box-advertising

    # 카탈로그 파일 검증
    mp-pricing validate catalog.yaml
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import Optional

import yaml

from .catalog.loader import CatalogLoader, load_catalog_file
from .catalog.rest import RestCatalog
from .config import get_config
from .core.errors import PricingError
from .quote.models import Quote
from .setup import create_catalog, build_service


def print_json(data: dict, indent: int = 2):
    """JSON 출력"""
    print(json.dumps(data, ensure_ascii=False, indent=indent, default=str))


def print_table(headers: list, rows: list, widths: Optional[list] = None):
    """간단한 테이블 출력"""
    if not widths:
        widths = [max(len(str(row[i])) for row in [headers] + rows) + 2 for i in range(len(headers))]

    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, widths)))


def print_quote(quote: Quote):
    """견적 출력"""
    print(f"{quote.product}  x{quote.quantity}  {quote.duration_days} days")
    print(f"  Base:  {quote.base_amount}")
    for discount in quote.discounts:
        print(f"  - {discount.rule_id} ({discount.kind}): -{discount.amount}")
    print(f"  Final: {quote.final_amount}")


def parse_as_of(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def prepare(args) -> tuple:
    """
    카탈로그 + 계산기 + 서비스 구성

    --catalog 가 없으면 환경변수 설정의 저장소를 사용합니다.

    Returns:
        (service, catalog, db_manager)
    """
    config = get_config()
    if args.catalog:
        catalog, db_manager = load_catalog_file(args.catalog), None
    else:
        catalog, db_manager = create_catalog(config)

    return build_service(catalog, config.engine), catalog, db_manager


async def _release(catalog, db_manager):
    if isinstance(catalog, RestCatalog):
        await catalog.close()
    if db_manager is not None:
        await db_manager.close()


def cmd_quote(args) -> int:
    """단건 견적"""
    service, catalog, db_manager = prepare(args)

    async def run():
        try:
            return await service.compute_price(
                args.product,
                args.quantity,
                args.days,
                as_of=parse_as_of(args.as_of),
                promo_code=args.code,
                campaigns=args.campaign,
            )
        finally:
            await _release(catalog, db_manager)

    try:
        quote = asyncio.run(run())
    except PricingError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    if args.json:
        print_json(quote.model_dump())
    else:
        print_quote(quote)
    return 0


def cmd_batch(args) -> int:
    """배치 견적"""
    with open(args.items, "r", encoding="utf-8") as f:
        items = yaml.safe_load(f)

    if isinstance(items, dict):
        items = items.get("items", [])
    if not isinstance(items, list):
        print("Error: items file must contain a list of items", file=sys.stderr)
        return 1

    service, catalog, db_manager = prepare(args)

    async def run():
        try:
            return await service.compute_batch_price(
                items,
                as_of=parse_as_of(args.as_of),
                campaigns=args.campaign,
            )
        finally:
            await _release(catalog, db_manager)

    try:
        results = asyncio.run(run())
    except PricingError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    if args.json:
        print_json({"results": [result.model_dump() for result in results]})
        return 0

    rows = []
    for index, result in enumerate(results):
        if isinstance(result, Quote):
            rows.append([index, result.product, result.quantity, result.duration_days,
                         result.base_amount, result.final_amount, "ok"])
        else:
            rows.append([index, "-", "-", "-", "-", "-", result.error])
    print_table(["#", "Product", "Qty", "Days", "Base", "Final", "Status"], rows)

    failed = sum(1 for result in results if not result.success)
    print(f"\n{len(results) - failed} priced, {failed} failed")
    return 0


def cmd_check_code(args) -> int:
    """프로모 코드 확인"""
    service, catalog, db_manager = prepare(args)

    async def run():
        try:
            return await service.check_promo_code(
                args.code,
                args.product,
                as_of=parse_as_of(args.as_of),
                base_amount=args.base_amount,
                campaigns=args.campaign,
            )
        finally:
            await _release(catalog, db_manager)

    try:
        check = asyncio.run(run())
    except PricingError as e:
        print(f"Error [{e.code}]: {e}", file=sys.stderr)
        return 1

    if args.json:
        print_json(check.model_dump())
    elif check.valid:
        print(f"{check.code}: valid (rule {check.rule_id})")
    else:
        print(f"{check.code}: invalid ({check.reason})")
    return 0 if check.valid else 2


def cmd_serve(args) -> int:
    """API 서버 실행"""
    import uvicorn
    from .setup import create_app

    config = get_config()
    if args.catalog:
        config.catalog_backend = "file"
        config.catalog_file = args.catalog

    app = create_app(config)
    print(f"Starting Marketplace Pricing on http://{args.host}:{args.port}")
    print(f"Catalog: {config.catalog_backend}")
    print(f"API Docs: http://{args.host}:{args.port}/docs")
    print()

    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def cmd_validate(args) -> int:
    """카탈로그 파일 검증"""
    result = CatalogLoader().load_file(args.path)

    for error in result.errors:
        print(f"ERROR   {error.path}: {error.message}")
    for warning in result.warnings:
        print(f"WARNING {warning.path}: {warning.message}")

    if result.is_valid:
        catalog = result.catalog
        print(f"OK: {len(catalog.rates)} rates, {len(catalog.rules)} discount rules")
        return 0
    return 1


def main():
    parser = argparse.ArgumentParser(
        description="Marketplace Pricing CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Quote five boxes for 90 days with a promo code
  mp-pricing quote --catalog catalog.yaml \\
      --product box-advertising --quantity 5 --days 90 --code SOMMER

  # Validate a catalog file
  mp-pricing validate catalog.yaml
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_catalog_options(sub):
        sub.add_argument("--catalog", help="Catalog YAML file (default: configured backend)")
        sub.add_argument("--as-of", help="Pricing timestamp, ISO 8601 UTC (default: now)")
        sub.add_argument("--campaign", action="append", help="Enabled campaign (repeatable)")
        sub.add_argument("--json", action="store_true", help="Output as JSON")

    # quote command
    quote_parser = subparsers.add_parser("quote", help="Compute a price quote")
    add_catalog_options(quote_parser)
    quote_parser.add_argument("--product", required=True, help="box-advertising, sponsored-placement, service")
    quote_parser.add_argument("--quantity", type=int, default=1, help="Quantity (default: 1)")
    quote_parser.add_argument("--days", type=int, default=30, help="Duration in days (default: 30)")
    quote_parser.add_argument("--code", help="Promo code")

    # batch command
    batch_parser = subparsers.add_parser("batch", help="Compute quotes for a list of items")
    add_catalog_options(batch_parser)
    batch_parser.add_argument("--items", required=True, help="YAML or JSON file with items")

    # check-code command
    check_parser = subparsers.add_parser("check-code", help="Check a promo code")
    add_catalog_options(check_parser)
    check_parser.add_argument("--code", required=True, help="Promo code")
    check_parser.add_argument("--product", required=True, help="Product")
    check_parser.add_argument("--base-amount", type=int, help="Order amount for minimum checks")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a catalog file")
    validate_parser.add_argument("path", help="Catalog YAML file")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the pricing API server")
    serve_parser.add_argument("--catalog", help="Catalog YAML file (default: configured backend)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Server port (default: 8000)")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Server host (default: 0.0.0.0)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "quote": cmd_quote,
        "batch": cmd_batch,
        "check-code": cmd_check_code,
        "validate": cmd_validate,
        "serve": cmd_serve,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(handler(args))
    except ValueError as e:
        # 카탈로그 파일 / 저장소 설정 오류
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
