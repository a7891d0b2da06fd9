"""
CLI 테스트

샘플 카탈로그 파일(sandbox/catalog.yaml)로 명령을 실행합니다.
"""

import json
import sys
import pytest

from mp_pricing.cli import main

from sandbox import SAMPLE_CATALOG_PATH


def run_cli(monkeypatch, *args) -> int:
    monkeypatch.setattr(sys, "argv", ["mp-pricing", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


class TestCli:
    """mp-pricing 명령"""

    def test_quote_json(self, monkeypatch, capsys):
        code = run_cli(
            monkeypatch, "quote",
            "--catalog", str(SAMPLE_CATALOG_PATH),
            "--product", "box-advertising",
            "--quantity", "5",
            "--days", "90",
            "--code", "SOMMER",
            "--as-of", "2026-06-15T00:00:00",
            "--json",
        )

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["base_amount"] == 12000
        assert data["final_amount"] == 8200

    def test_quote_text(self, monkeypatch, capsys):
        code = run_cli(
            monkeypatch, "quote",
            "--catalog", str(SAMPLE_CATALOG_PATH),
            "--product", "sponsored-placement",
            "--quantity", "2",
            "--days", "7",
            "--as-of", "2026-06-15T00:00:00",
        )

        assert code == 0
        out = capsys.readouterr().out
        assert "Base:  7000" in out
        assert "Final: 7000" in out

    def test_quote_rate_not_found(self, monkeypatch, capsys):
        code = run_cli(
            monkeypatch, "quote",
            "--catalog", str(SAMPLE_CATALOG_PATH),
            "--product", "service",
            "--as-of", "2025-01-15T00:00:00",
        )

        assert code == 1
        assert "RATE_NOT_FOUND" in capsys.readouterr().err

    def test_batch(self, monkeypatch, capsys, tmp_path):
        items_file = tmp_path / "items.json"
        items_file.write_text(json.dumps([
            {"product": "box-advertising", "quantity": 10, "duration_days": 365},
            {"product": "service", "quantity": 1, "duration_days": 45},
            {"product": "box-advertising", "quantity": 0, "duration_days": 30},
        ]))

        code = run_cli(
            monkeypatch, "batch",
            "--catalog", str(SAMPLE_CATALOG_PATH),
            "--items", str(items_file),
            "--as-of", "2026-06-15T00:00:00",
            "--json",
        )

        assert code == 0
        results = json.loads(capsys.readouterr().out)["results"]
        # 12000 - 15% (1800, 상한 5000) - 12% (1440)
        assert results[0]["final_amount"] == 8760
        # 4900 x 1 x 2개월
        assert results[1]["base_amount"] == 9800
        assert results[2]["error"] == "INVALID_REQUEST"

    def test_check_code(self, monkeypatch, capsys):
        code = run_cli(
            monkeypatch, "check-code",
            "--catalog", str(SAMPLE_CATALOG_PATH),
            "--code", "JUL",
            "--product", "box-advertising",
            "--as-of", "2025-12-24T18:00:00",
            "--campaign", "jul",
        )

        assert code == 0
        assert "valid (rule promo-jul)" in capsys.readouterr().out

    def test_check_code_invalid(self, monkeypatch, capsys):
        code = run_cli(
            monkeypatch, "check-code",
            "--catalog", str(SAMPLE_CATALOG_PATH),
            "--code", "JUL",
            "--product", "box-advertising",
            "--as-of", "2025-12-24T18:00:00",
        )

        assert code == 2
        assert "campaign_inactive" in capsys.readouterr().out

    def test_validate(self, monkeypatch, capsys):
        code = run_cli(monkeypatch, "validate", str(SAMPLE_CATALOG_PATH))

        assert code == 0
        assert "OK: 4 rates" in capsys.readouterr().out

    def test_validate_invalid(self, monkeypatch, capsys, tmp_path):
        catalog_file = tmp_path / "bad.yaml"
        catalog_file.write_text("rates:\n  - product: box-advertising\n    unit_amount: -5\n")

        code = run_cli(monkeypatch, "validate", str(catalog_file))

        assert code == 1
        assert "ERROR   rates[0]" in capsys.readouterr().out

    def test_quote_with_invalid_catalog(self, monkeypatch, capsys, tmp_path):
        catalog_file = tmp_path / "bad.yaml"
        catalog_file.write_text("rates:\n  - product: box-advertising\n    unit_amount: -5\n")

        code = run_cli(
            monkeypatch, "quote",
            "--catalog", str(catalog_file),
            "--product", "box-advertising",
        )

        assert code == 1
        assert "Invalid catalog file" in capsys.readouterr().err
